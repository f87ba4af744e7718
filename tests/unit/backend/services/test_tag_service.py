"""
Unit Tests for Tag Service.

Reconciliation and listing with a mocked TagRepository.
"""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, call

import pytest
from sqlalchemy.exc import OperationalError

from modules.backend.core.exceptions import DatabaseError, ValidationError
from modules.backend.services.tag import TAG_NAME_MAX_LENGTH, TagService


@pytest.fixture
def service():
    service = TagService(AsyncMock())
    service.repo = AsyncMock()
    existing = {"work": SimpleNamespace(id="tag-work", name="work")}
    service.repo.get_by_name.side_effect = lambda user_id, name: existing.get(name)
    service.repo.create.side_effect = lambda **fields: SimpleNamespace(
        id=f"tag-{fields['name']}", **fields
    )
    return service


class TestReconcile:
    async def test_reuses_existing_and_creates_missing(self, service):
        applied = await service.reconcile("user-1", "note-1", ["work", "home"])

        assert applied == ["work", "home"]
        service.repo.create.assert_awaited_once_with(user_id="user-1", name="home")
        assert service.repo.add_note_tag.await_args_list == [
            call("note-1", "tag-work", position=0),
            call("note-1", "tag-home", position=1),
        ]

    async def test_clears_before_inserting(self, service):
        order = []
        service.repo.clear_note_tags.side_effect = lambda note_id: order.append("clear")
        service.repo.add_note_tag.side_effect = lambda *a, **k: order.append("add")

        await service.reconcile("user-1", "note-1", ["work"])

        assert order == ["clear", "add"]

    async def test_repeated_names_are_kept_once(self, service):
        applied = await service.reconcile("user-1", "note-1", ["a", "b", "a"])

        assert applied == ["a", "b"]
        assert service.repo.add_note_tag.await_count == 2

    async def test_matching_is_case_sensitive(self, service):
        applied = await service.reconcile("user-1", "note-1", ["Work"])

        assert applied == ["Work"]
        service.repo.create.assert_awaited_once_with(user_id="user-1", name="Work")

    async def test_empty_list_clears_tags(self, service):
        applied = await service.reconcile("user-1", "note-1", [])

        assert applied == []
        service.repo.clear_note_tags.assert_awaited_once_with("note-1")
        service.repo.add_note_tag.assert_not_called()

    async def test_invalid_name_rejected_before_any_write(self, service):
        with pytest.raises(ValidationError):
            await service.reconcile("user-1", "note-1", ["ok", ""])
        service.repo.clear_note_tags.assert_not_called()

    async def test_store_failure_becomes_database_error(self, service):
        service.repo.clear_note_tags.side_effect = OperationalError("DELETE", {}, Exception("locked"))

        with pytest.raises(DatabaseError):
            await service.reconcile("user-1", "note-1", ["work"])


class TestValidateNames:
    def test_accepts_max_length(self, service):
        service.validate_names(["x" * TAG_NAME_MAX_LENGTH])

    def test_rejects_too_long(self, service):
        with pytest.raises(ValidationError):
            service.validate_names(["x" * (TAG_NAME_MAX_LENGTH + 1)])


class TestListTags:
    async def test_includes_counts_and_orphans(self, service):
        stamp = datetime(2026, 1, 1)
        service.repo.list_with_counts.return_value = [
            (SimpleNamespace(id="t1", name="home", created_at=stamp, updated_at=stamp), 2),
            (SimpleNamespace(id="t2", name="old", created_at=stamp, updated_at=stamp), 0),
        ]

        result = await service.list_tags("user-1")

        assert result.total == 2
        assert [(t.name, t.note_count) for t in result.tags] == [("home", 2), ("old", 0)]
