"""
Selective commit of previewed bulk upload rows.

Saves only rows the operator selected that passed validation. Each row
is persisted on its own: a failed row is reported and the batch carries
on. There is no batch-wide transaction.
"""

from typing import Iterable, Optional, Sequence
import structlog

from pydantic import ValidationError as PydanticValidationError

from exceptions import AppError
from models.bulk_upload import CommitReport, PreviewRow
from models.guest_blog_site import GuestBlogSiteCreate
from services.guest_blog_site_service import GuestBlogSiteService, get_guest_blog_site_service
from services.publisher_service import PublisherDirectory, PublisherService, get_publisher_service

logger = structlog.get_logger(__name__)


class BulkCommitService:
    """Persists selected preview rows one by one."""

    def __init__(
        self,
        site_service: Optional[GuestBlogSiteService] = None,
        publisher_service: Optional[PublisherService] = None
    ):
        self.site_service = site_service or get_guest_blog_site_service()
        self.publisher_service = publisher_service or get_publisher_service()

    def commit(
        self,
        preview_rows: Sequence[PreviewRow],
        selected_row_indexes: Iterable[int],
    ) -> CommitReport:
        """
        Save the selected valid rows.

        Unknown or repeated indexes are ignored; selected invalid rows
        are skipped without an error. Rows are attempted in row_index
        order.

        Args:
            preview_rows: Rows from the current preview
            selected_row_indexes: row_index values chosen by the operator

        Returns:
            CommitReport with the number saved and one "Row N: ..." entry
            per failed row
        """
        selected = set(selected_row_indexes)
        eligible = sorted(
            (r for r in preview_rows if r.row_index in selected and r.is_valid),
            key=lambda r: r.row_index
        )

        logger.info(
            "bulk_commit_started",
            selected=len(selected),
            eligible=len(eligible)
        )

        saved = 0
        errors: list[str] = []

        # Publishers may have changed since the preview was built
        directory = None
        lookup_error = None
        if any(r.publisher for r in eligible):
            try:
                directory = self.publisher_service.build_directory()
            except AppError as e:
                lookup_error = f"Publisher lookup failed: {e.message}"
                logger.error("bulk_commit_publisher_lookup_failed", error=e.message)

        for row in eligible:
            error = self._save_row(row, directory, lookup_error)
            if error is None:
                saved += 1
            else:
                errors.append(f"Row {row.row_index}: {error}")
                logger.warning(
                    "bulk_commit_row_failed",
                    row_index=row.row_index,
                    site_url=row.site_url,
                    error=error
                )

        report = CommitReport(
            saved=saved,
            errors=errors,
            message=f"Saved {saved} guest blog sites. {len(errors)} errors occurred."
        )

        logger.info(
            "bulk_commit_completed",
            saved=saved,
            failed=len(errors)
        )

        return report

    def _save_row(
        self,
        row: PreviewRow,
        directory: Optional[PublisherDirectory],
        lookup_error: Optional[str] = None
    ) -> Optional[str]:
        """
        Persist one row. Returns an error message, or None on success.

        Rows naming a publisher fail with lookup_error when the
        publisher directory could not be loaded.
        """
        publisher_id = None
        if row.publisher:
            if directory is None:
                return lookup_error
            publisher_id = directory.resolve(row.publisher)
            if publisher_id is None:
                return f'Publisher "{row.publisher}" not found'

        try:
            payload = GuestBlogSiteCreate(
                site_url=row.site_url,
                da=row.da,
                dr=row.dr,
                ahrefs_traffic=row.ahrefs_traffic,
                ss=row.ss,
                tat=row.tat,
                category=row.category,
                status=row.status,
                base_price=row.base_price,
                country=row.country,
                publisher_id=publisher_id,
                site_language=row.site_language,
            )
        except PydanticValidationError as e:
            return "; ".join(err["msg"] for err in e.errors())

        try:
            self.site_service.create(payload)
        except AppError as e:
            return e.message
        except Exception as e:
            logger.error(
                "bulk_commit_row_error",
                row_index=row.row_index,
                error=str(e)
            )
            return str(e)

        return None


# Singleton instance for convenience
_bulk_commit_service: Optional[BulkCommitService] = None

def get_bulk_commit_service() -> BulkCommitService:
    """Get or create BulkCommitService instance."""
    global _bulk_commit_service
    if _bulk_commit_service is None:
        _bulk_commit_service = BulkCommitService()
    return _bulk_commit_service
