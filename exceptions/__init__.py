"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DatabaseError,

    # Upload parser
    UploadParseError,
    UnsupportedFileTypeError,
    FileTooLargeError,

    # Bulk upload
    ColumnMappingError,
    UploadSessionNotFoundError,
    PreviewNotReadyError,

    # Entities
    ClientNotFoundError,
    GuestBlogSiteNotFoundError,
    GuestBlogSiteURLExistsError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DatabaseError",

    # Upload parser
    "UploadParseError",
    "UnsupportedFileTypeError",
    "FileTooLargeError",

    # Bulk upload
    "ColumnMappingError",
    "UploadSessionNotFoundError",
    "PreviewNotReadyError",

    # Entities
    "ClientNotFoundError",
    "GuestBlogSiteNotFoundError",
    "GuestBlogSiteURLExistsError",
]
