"""
Publisher service.

Bulk upload rows name their publisher by email or name; the directory
built here resolves either to a publisher id.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.publisher import PublisherResponse
from exceptions import DatabaseError
from utils.text_utils import normalize_lookup_key

logger = structlog.get_logger(__name__)


class PublisherDirectory:
    """
    Case-insensitive publisher lookup by email or name.

    Email matches win over name matches. Callable, so it can be passed
    straight to the row validator as the publisher resolver.
    """

    def __init__(self, publishers: list[PublisherResponse]):
        self._by_email: dict[str, str] = {}
        self._by_name: dict[str, str] = {}
        for publisher in publishers:
            email = normalize_lookup_key(publisher.email)
            if email:
                self._by_email.setdefault(email, publisher.id)
            name = normalize_lookup_key(publisher.name)
            if name:
                self._by_name.setdefault(name, publisher.id)

    def resolve(self, value: Optional[str]) -> Optional[str]:
        """Publisher id for an email or name, None if unknown."""
        key = normalize_lookup_key(value)
        if key is None:
            return None
        return self._by_email.get(key) or self._by_name.get(key)

    def __call__(self, value: Optional[str]) -> Optional[str]:
        return self.resolve(value)

    def __len__(self) -> int:
        return len(set(self._by_email.values()) | set(self._by_name.values()))


class PublisherService:
    """Publisher lookups."""

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "publishers"

    def list_all(self) -> list[PublisherResponse]:
        """
        Get all publishers.

        Returns:
            List of PublisherResponse ordered by name
        """
        logger.debug("getting_publishers")

        try:
            result = (
                self.db.table(self.table)
                .select("id, name, email, is_active")
                .order("name")
                .execute()
            )

            publishers = [PublisherResponse(**row) for row in result.data]

            logger.info("publishers_retrieved", count=len(publishers))

            return publishers

        except Exception as e:
            logger.error("get_publishers_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def build_directory(self) -> PublisherDirectory:
        """Snapshot of all publishers for row-by-row resolution."""
        return PublisherDirectory(self.list_all())


# Singleton instance for convenience
_publisher_service: Optional[PublisherService] = None

def get_publisher_service() -> PublisherService:
    """Get or create PublisherService instance."""
    global _publisher_service
    if _publisher_service is None:
        _publisher_service = PublisherService()
    return _publisher_service
