"""Application error taxonomy.

Errors are raised close to the repository / media adapter boundary and
translated into JSON responses by the handlers registered in ``main.py``.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(AppError):
    """Missing or malformed fields. ``errors`` maps field name to message."""

    status_code = 400

    def __init__(self, errors: dict[str, str], message: str = "Validation error"):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class BadRequestError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class UnauthorizedError(AppError):
    status_code = 401


class UpstreamError(AppError):
    """A collaborator (database, media store) failed."""

    status_code = 500


class MediaStoreNotConfigured(UpstreamError):
    def __init__(self, message: str = "Cloudinary credentials are not configured"):
        super().__init__(message)
