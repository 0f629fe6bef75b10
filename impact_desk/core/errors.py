"""Application errors and their HTTP status codes."""


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested ticket or referenced service is missing."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, status_code=404)


class InvalidRequestError(AppError):
    """Raised when a request is well-formed but not acceptable."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=400)


class ConflictError(AppError):
    """Raised on invalid state transitions and uniqueness clashes."""

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, status_code=409)
