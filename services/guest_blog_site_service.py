"""
Guest blog site service for business logic operations.

Reads and inserts against the guest_blog_sites table. Site URLs are
unique; create() checks before inserting.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.guest_blog_site import (
    GuestBlogSiteCreate,
    GuestBlogSiteResponse,
    GuestBlogSiteCategory,
    GuestBlogSiteStatus,
)
from exceptions import (
    GuestBlogSiteNotFoundError,
    GuestBlogSiteURLExistsError,
    DatabaseError
)

logger = structlog.get_logger(__name__)


class GuestBlogSiteService:
    """
    Guest blog site business logic.

    Handles reads and creation of guest blog sites.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "guest_blog_sites"

    # ===================
    # READ OPERATIONS
    # ===================

    def list_sites(
        self,
        page: int = 1,
        page_size: int = 20,
        category: Optional[GuestBlogSiteCategory] = None,
        status: Optional[GuestBlogSiteStatus] = None
    ) -> tuple[list[GuestBlogSiteResponse], int]:
        """
        Get guest blog sites with optional filters.

        Args:
            page: Page number (1-indexed)
            page_size: Items per page
            category: Filter by category
            status: Filter by status

        Returns:
            Tuple of (sites list, total count)
        """
        logger.info(
            "getting_guest_blog_sites",
            page=page,
            page_size=page_size,
            category=category,
            status=status
        )

        try:
            query = self.db.table(self.table).select("*", count="exact")

            if category:
                query = query.eq("category", category.value)
            if status:
                query = query.eq("status", status.value)

            offset = (page - 1) * page_size
            query = query.range(offset, offset + page_size - 1)
            query = query.order("site_url")

            result = query.execute()

            sites = [GuestBlogSiteResponse(**row) for row in result.data]
            total = result.count or 0

            logger.info(
                "guest_blog_sites_retrieved",
                count=len(sites),
                total=total
            )

            return sites, total

        except Exception as e:
            logger.error("get_guest_blog_sites_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, site_id: str) -> GuestBlogSiteResponse:
        """
        Get a single guest blog site by ID.

        Raises:
            GuestBlogSiteNotFoundError: If site doesn't exist
        """
        logger.debug("getting_guest_blog_site", site_id=site_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", site_id)
                .execute()
            )

            if not result.data:
                raise GuestBlogSiteNotFoundError(site_id)

            return GuestBlogSiteResponse(**result.data[0])

        except GuestBlogSiteNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "get_guest_blog_site_failed",
                site_id=site_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def get_by_url(self, site_url: str) -> Optional[GuestBlogSiteResponse]:
        """
        Get a guest blog site by its (normalized) URL.

        Returns:
            GuestBlogSiteResponse or None if not found
        """
        logger.debug("getting_guest_blog_site_by_url", site_url=site_url)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("site_url", site_url)
                .limit(1)
                .execute()
            )

            if not result.data:
                return None

            return GuestBlogSiteResponse(**result.data[0])

        except Exception as e:
            logger.error(
                "get_guest_blog_site_by_url_failed",
                site_url=site_url,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: GuestBlogSiteCreate) -> GuestBlogSiteResponse:
        """
        Create a new guest blog site.

        Args:
            data: Typed site payload

        Returns:
            Created GuestBlogSiteResponse

        Raises:
            GuestBlogSiteURLExistsError: If the URL already exists
        """
        logger.info("creating_guest_blog_site", site_url=data.site_url)

        if self.get_by_url(data.site_url):
            raise GuestBlogSiteURLExistsError(data.site_url)

        try:
            insert_data = {
                "site_url": data.site_url,
                "da": data.da,
                "dr": data.dr,
                "ahrefs_traffic": data.ahrefs_traffic,
                "ss": data.ss,
                "tat": data.tat,
                "category": data.category.value,
                "status": data.status.value,
                "base_price": str(data.base_price),
                "country": data.country,
                "publisher_id": data.publisher_id,
                "site_language": data.site_language,
            }

            result = (
                self.db.table(self.table)
                .insert(insert_data)
                .execute()
            )

            site = GuestBlogSiteResponse(**result.data[0])

            logger.info(
                "guest_blog_site_created",
                site_id=site.id,
                site_url=site.site_url
            )

            return site

        except Exception as e:
            logger.error(
                "create_guest_blog_site_failed",
                site_url=data.site_url,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))


# Singleton instance for convenience
_guest_blog_site_service: Optional[GuestBlogSiteService] = None

def get_guest_blog_site_service() -> GuestBlogSiteService:
    """Get or create GuestBlogSiteService instance."""
    global _guest_blog_site_service
    if _guest_blog_site_service is None:
        _guest_blog_site_service = GuestBlogSiteService()
    return _guest_blog_site_service
