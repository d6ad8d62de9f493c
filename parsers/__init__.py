"""
Upload file parsers.
"""

from parsers.upload_parser import (
    parse_upload,
    get_extension,
    ParsedRow,
    ParsedUpload,
)

__all__ = [
    "parse_upload",
    "get_extension",
    "ParsedRow",
    "ParsedUpload",
]
