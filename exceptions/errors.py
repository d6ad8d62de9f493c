"""
Application errors.

Each error knows the HTTP status the routes answer with and a stable
machine-readable code; route handlers serialize them with to_dict().
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base for every error the API reports to callers.

    Subclasses set status_code and default_code; a raise site may still
    pass a more specific code.
    """

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    status_code = 404
    default_code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str, code: Optional[str] = None):
        super().__init__(
            f"{resource} not found",
            code=code or f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            details={"id": identifier}
        )


class ValidationError(AppError):
    status_code = 422
    default_code = "VALIDATION_ERROR"


class ConflictError(AppError):
    status_code = 409
    default_code = "CONFLICT"


class DatabaseError(AppError):
    """A Supabase call failed."""

    default_code = "DATABASE_ERROR"

    def __init__(self, operation: str, message: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            details={"operation": operation}
        )


# ===================
# UPLOAD FILE ERRORS
# ===================

class UploadParseError(ValidationError):
    """Uploaded file could not be read. Ends the upload."""

    default_code = "UPLOAD_PARSE_ERROR"


class UnsupportedFileTypeError(AppError):
    status_code = 400
    default_code = "INVALID_FILE_TYPE"

    def __init__(self, filename: str, allowed: tuple[str, ...]):
        super().__init__(
            "Unsupported file format. Please upload CSV or Excel files only.",
            details={"filename": filename, "allowed": list(allowed)}
        )


class FileTooLargeError(AppError):
    status_code = 413
    default_code = "FILE_TOO_LARGE"

    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            f"File exceeds the {max_bytes // (1024 * 1024)}MB upload limit",
            details={"size_bytes": size_bytes, "max_bytes": max_bytes}
        )


# ===================
# BULK UPLOAD ERRORS
# ===================

class ColumnMappingError(ValidationError):
    """Column mapping has unresolved violations. All are reported together."""

    def __init__(self, errors: list[str]):
        super().__init__(
            code="COLUMN_MAPPING_INVALID",
            message=f"Column mapping has {len(errors)} problem(s)",
            details={"errors": errors}
        )
        self.errors = errors


class UploadSessionNotFoundError(NotFoundError):
    """Upload session missing, discarded or expired."""

    def __init__(self, session_id: str):
        super().__init__(
            resource="Upload session",
            identifier=session_id,
            code="UPLOAD_SESSION_NOT_FOUND"
        )


class PreviewNotReadyError(ConflictError):
    """Commit requested before a preview was generated."""

    def __init__(self, session_id: str):
        super().__init__(
            code="PREVIEW_NOT_READY",
            message="Generate a preview before saving rows",
            details={"session_id": session_id}
        )


# ===================
# ENTITY ERRORS
# ===================

class ClientNotFoundError(NotFoundError):
    """Client not found."""

    def __init__(self, client_id: str):
        super().__init__(
            resource="Client",
            identifier=client_id,
            code="CLIENT_NOT_FOUND"
        )


class GuestBlogSiteNotFoundError(NotFoundError):
    """Guest blog site not found."""

    def __init__(self, site_id: str):
        super().__init__(
            resource="Guest blog site",
            identifier=site_id,
            code="GUEST_BLOG_SITE_NOT_FOUND"
        )


class GuestBlogSiteURLExistsError(ConflictError):
    """A guest blog site with this URL already exists."""

    def __init__(self, site_url: str):
        super().__init__(
            code="GUEST_BLOG_SITE_URL_EXISTS",
            message=f'Site "{site_url}" already exists',
            details={"site_url": site_url}
        )
