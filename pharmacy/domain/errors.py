# pharmacy/domain/errors.py


class ServiceError(Exception):
    """Bazowy blad use case'a, routery tlumacza go na HTTPException."""

    status_code = 500


class ValidationError(ServiceError, ValueError):
    status_code = 400


class NotFoundError(ServiceError, LookupError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError, PermissionError):
    status_code = 403


class ServiceUnavailableError(ServiceError):
    status_code = 503
