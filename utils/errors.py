"""Application errors. The API renders each as {"error": message} with its status code."""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    default_message = "Bad request"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class UpstreamError(AppError):
    """Codeforces unreachable or answered with a non-OK status."""

    status_code = 500
    default_message = "Failed to fetch Codeforces data"


class StorageError(AppError):
    status_code = 500
    default_message = "Database operation failed"
