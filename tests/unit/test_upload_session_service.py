"""
Unit tests for upload sessions.

Run: pytest tests/unit/test_upload_session_service.py -v
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from exceptions import PreviewNotReadyError, UploadSessionNotFoundError, ValidationError
from parsers.upload_parser import ParsedUpload
from services.column_mapping_service import ColumnMappingSet
from services.pricing_service import PricingContext
from services.upload_session_service import UploadSessionStore, get_upload_session_store
from tests.factories import ParsedRowFactory, PreviewRowFactory


@pytest.fixture
def store() -> UploadSessionStore:
    return UploadSessionStore(ttl_minutes=30)


def _create(store: UploadSessionStore):
    headers = ParsedRowFactory.headers()
    parsed = ParsedUpload(filename="sites.csv", headers=headers, rows=[ParsedRowFactory.create(1)])
    return store.create(parsed, ColumnMappingSet(headers), PricingContext())


class TestUploadSessionStore:
    """Tests for create / get / discard / expiry."""

    def test_create_and_get(self, store):
        session = _create(store)

        assert store.get(session.session_id) is session
        assert session.filename == "sites.csv"
        assert len(store) == 1

    def test_unknown_session_raises(self, store):
        with pytest.raises(UploadSessionNotFoundError) as exc_info:
            store.get("nope")

        assert exc_info.value.status_code == 404

    def test_discard(self, store):
        session = _create(store)

        assert store.discard(session.session_id) is True
        assert store.discard(session.session_id) is False
        with pytest.raises(UploadSessionNotFoundError):
            store.get(session.session_id)

    def test_expired_session_raises(self, store):
        session = _create(store)
        session.expires_at = datetime.now() - timedelta(seconds=1)

        with pytest.raises(UploadSessionNotFoundError):
            store.get(session.session_id)
        assert len(store) == 0

    def test_expired_sessions_cleaned_on_create(self, store):
        old = _create(store)
        old.expires_at = datetime.now() - timedelta(minutes=1)

        _create(store)

        assert len(store) == 1

    def test_module_store_is_shared(self):
        assert get_upload_session_store() is get_upload_session_store()


class TestUploadSessionPreview:
    """Preview is dropped when its inputs change."""

    def test_require_preview_without_preview_raises(self, store):
        session = _create(store)

        with pytest.raises(PreviewNotReadyError):
            session.require_preview()

    def test_mapping_change_drops_preview(self, store):
        session = _create(store)
        session.preview = [PreviewRowFactory.create(1)]

        session.set_mapping("site_url", "Site URL")

        assert session.preview is None

    def test_rejected_mapping_edit_drops_preview(self, store):
        session = _create(store)
        session.preview = [PreviewRowFactory.create(1)]

        with pytest.raises(ValidationError):
            session.set_mapping("site_url", "Not A Column")

        assert session.preview is None
        with pytest.raises(PreviewNotReadyError):
            session.require_preview()

    def test_replace_mapping_drops_preview(self, store):
        session = _create(store)
        session.preview = [PreviewRowFactory.create(1)]

        session.replace_mapping(ColumnMappingSet(session.parsed.headers))

        assert session.preview is None

    def test_pricing_change_drops_preview(self, store):
        session = _create(store)
        session.preview = [PreviewRowFactory.create(1)]

        session.set_pricing(PricingContext("c-1", Decimal("40")))

        assert session.preview is None

    def test_same_pricing_keeps_preview(self, store):
        session = _create(store)
        rows = [PreviewRowFactory.create(1)]
        session.preview = rows

        session.set_pricing(PricingContext())

        assert session.require_preview() is rows
