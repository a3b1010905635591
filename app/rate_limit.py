"""Rate limiting global / Global rate limiter.

Utilise slowapi ; cle = agent du JWT si present, sinon IP (plusieurs mobiles derriere un meme NAT).
Uses slowapi; key = JWT user when present, else client IP (many phones share one carrier NAT).
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.utils.auth import decode_token


def user_or_ip_key(request: Request) -> str:
    """Cle de limitation / Rate limit key."""
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        payload = decode_token(auth[7:])
        if payload and payload.get("sub"):
            return f"user:{payload['sub']}"
    return get_remote_address(request)


limiter = Limiter(key_func=user_or_ip_key)
