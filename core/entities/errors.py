from dataclasses import dataclass


@dataclass(frozen=True)
class AppError:
    """Domain failure carried back to the web layer as a value."""
    message: str
    status_code: int = 500


@dataclass(frozen=True)
class BadRequest(AppError):
    message: str = "Bad request"
    status_code: int = 400


@dataclass(frozen=True)
class Unauthorized(AppError):
    message: str = "Not authorized"
    status_code: int = 401


@dataclass(frozen=True)
class NotFound(AppError):
    message: str = "Not found"
    status_code: int = 404


@dataclass(frozen=True)
class Conflict(AppError):
    message: str = "Conflict"
    status_code: int = 409
