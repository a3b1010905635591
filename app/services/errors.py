"""Erreurs metier / Service-level errors.

Les routes les traduisent en statuts HTTP (voir main.py).
Routes translate them into HTTP statuses (see main.py).
"""


class ServiceError(Exception):
    """Erreur de base / Base error."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Entree absente ou malformee, rejetee avant tout effet / Missing or malformed input, rejected before any side effect."""

    status_code = 400


class NotFoundError(ServiceError):
    """Identifiant reference inconnu / Referenced id does not exist."""

    status_code = 404


class DependencyFailure(ServiceError):
    """Stockage ou base indisponible / Storage or repository call failed."""

    status_code = 503


class ForbiddenError(ServiceError):
    """Ressource d'un autre agent / Resource owned by another user."""

    status_code = 403
