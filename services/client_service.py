"""
Client service.

Read-only access to clients: markup percentage and per-site price
overrides.
"""

from decimal import Decimal
from typing import Optional
import structlog

from config import get_supabase_client
from models.client import ClientResponse
from exceptions import ClientNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)


class ClientService:
    """Client lookups."""

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "clients"
        self.overrides_table = "client_site_price_overrides"

    def get_by_id(self, client_id: str) -> ClientResponse:
        """
        Get a client by ID.

        Args:
            client_id: Client UUID

        Returns:
            ClientResponse

        Raises:
            ClientNotFoundError: If client doesn't exist
        """
        logger.debug("getting_client", client_id=client_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", client_id)
                .execute()
            )

            if not result.data:
                raise ClientNotFoundError(client_id)

            return ClientResponse(**result.data[0])

        except ClientNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "get_client_failed",
                client_id=client_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def get_price_overrides(
        self,
        client_id: str,
        site_ids: Optional[list[str]] = None
    ) -> dict[str, Decimal]:
        """
        Client-specific site prices that replace the markup calculation.

        Args:
            client_id: Client UUID
            site_ids: Restrict to these sites (all when None)

        Returns:
            Dict of site_id → override price
        """
        if site_ids is not None and not site_ids:
            return {}

        try:
            query = (
                self.db.table(self.overrides_table)
                .select("site_id, override_price")
                .eq("client_id", client_id)
            )
            if site_ids is not None:
                query = query.in_("site_id", site_ids)

            result = query.execute()

            return {
                row["site_id"]: Decimal(str(row["override_price"]))
                for row in result.data
                if row.get("override_price") is not None
            }

        except Exception as e:
            logger.error(
                "get_price_overrides_failed",
                client_id=client_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))


# Singleton instance for convenience
_client_service: Optional[ClientService] = None

def get_client_service() -> ClientService:
    """Get or create ClientService instance."""
    global _client_service
    if _client_service is None:
        _client_service = ClientService()
    return _client_service
