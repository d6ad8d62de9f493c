"""
In-memory upload sessions.

Holds everything between the parse step and the commit step: parsed
rows, the column mapping, the pricing context and the last preview.
Sessions expire after a TTL and are dropped on commit or cancel.
Single-process only.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
import structlog

from config import settings
from exceptions import PreviewNotReadyError, UploadSessionNotFoundError
from models.bulk_upload import PreviewRow
from parsers.upload_parser import ParsedUpload
from services.column_mapping_service import ColumnMappingSet
from services.pricing_service import PricingContext

logger = structlog.get_logger(__name__)


@dataclass
class UploadSession:
    """
    State of one operator upload.

    Changing the mapping or the pricing drops the preview, so a commit
    always works on a preview built from the current settings.
    """
    session_id: str
    filename: str
    parsed: ParsedUpload
    mapping: ColumnMappingSet
    pricing: PricingContext
    preview: Optional[list[PreviewRow]] = None
    created_at: datetime = field(default_factory=datetime.now)
    expires_at: Optional[datetime] = None

    def replace_mapping(self, mapping: ColumnMappingSet) -> None:
        self.mapping = mapping
        self.preview = None

    def set_mapping(self, field_key: str, column: Optional[str]) -> None:
        # Any edit attempt ends the preview, even one that is rejected
        try:
            self.mapping.set_mapping(field_key, column)
        finally:
            self.preview = None

    def set_pricing(self, pricing: PricingContext) -> None:
        if pricing != self.pricing:
            self.pricing = pricing
            self.preview = None

    def require_preview(self) -> list[PreviewRow]:
        """
        Raises:
            PreviewNotReadyError: No preview for the current mapping/pricing
        """
        if self.preview is None:
            raise PreviewNotReadyError(self.session_id)
        return self.preview


class UploadSessionStore:
    """TTL-bound session storage keyed by session id."""

    def __init__(self, ttl_minutes: Optional[int] = None):
        self.ttl_minutes = ttl_minutes or settings.upload_session_ttl_minutes
        self._sessions: dict[str, UploadSession] = {}

    def create(
        self,
        parsed: ParsedUpload,
        mapping: ColumnMappingSet,
        pricing: PricingContext,
    ) -> UploadSession:
        """Store a new session and return it."""
        self._cleanup_expired()

        now = datetime.now()
        session = UploadSession(
            session_id=str(uuid.uuid4()),
            filename=parsed.filename,
            parsed=parsed,
            mapping=mapping,
            pricing=pricing,
            created_at=now,
            expires_at=now + timedelta(minutes=self.ttl_minutes),
        )
        self._sessions[session.session_id] = session

        logger.info(
            "upload_session_created",
            session_id=session.session_id,
            filename=session.filename,
            rows=parsed.total_rows
        )

        return session

    def get(self, session_id: str) -> UploadSession:
        """
        Raises:
            UploadSessionNotFoundError: Unknown, discarded or expired
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise UploadSessionNotFoundError(session_id)

        if session.expires_at and datetime.now() > session.expires_at:
            del self._sessions[session_id]
            logger.info("upload_session_expired", session_id=session_id)
            raise UploadSessionNotFoundError(session_id)

        return session

    def discard(self, session_id: str) -> bool:
        """Drop a session. Returns False if it was already gone."""
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("upload_session_discarded", session_id=session_id)
        return removed

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def _cleanup_expired(self) -> None:
        """Remove all expired entries."""
        now = datetime.now()
        expired = [
            k for k, s in self._sessions.items()
            if s.expires_at and now > s.expires_at
        ]
        for k in expired:
            del self._sessions[k]


# Module-level store (one process, one store)
_upload_session_store: Optional[UploadSessionStore] = None

def get_upload_session_store() -> UploadSessionStore:
    """Get or create the UploadSessionStore instance."""
    global _upload_session_store
    if _upload_session_store is None:
        _upload_session_store = UploadSessionStore()
    return _upload_session_store
