"""Tests for the enrolment chatflow backfill."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from backfill_enrolment_chatflows import main, plan_student_update, run_backfill


def test_updates_every_enrolment():
    student = {
        "_id": 1,
        "chatflowId": "old",
        "enrolments": [{"subject": "Maths"}, {"subject": "Physics", "chatflowId": "flow-x"}],
    }

    enrolments, changed = plan_student_update(student, "flow-1")

    assert changed is True
    assert enrolments == [
        {"subject": "Maths", "chatflowId": "flow-1"},
        {"subject": "Physics", "chatflowId": "flow-1"},
    ]


def test_already_up_to_date():
    student = {"_id": 1, "chatflowId": "flow-1", "enrolments": [{"chatflowId": "flow-1"}]}

    _, changed = plan_student_update(student, "flow-1")

    assert changed is False


def test_student_without_enrolments():
    enrolments, changed = plan_student_update({"_id": 1, "chatflowId": "old"}, "flow-1")

    assert enrolments == []
    assert changed is True


@pytest.fixture
def mock_db():
    """Database double that never touches MongoDB."""
    with patch("backfill_enrolment_chatflows.db") as database:
        database.connect = AsyncMock()
        database.disconnect = AsyncMock()
        database.get_database = MagicMock()
        yield database


@pytest.fixture
def mock_repository():
    repository = AsyncMock()
    repository.list_chatflow_fields.return_value = [
        {"_id": 1, "chatflowId": "flow-a", "enrolments": [{"subject": "Maths"}]},
        {"_id": 2, "chatflowId": "flow-1", "enrolments": [{"chatflowId": "flow-1"}]},
        {"_id": 3, "enrolments": [{"subject": "Art"}, {"subject": "Music"}]},
    ]
    with patch("backfill_enrolment_chatflows.StudentRepository", return_value=repository):
        yield repository


class TestRunBackfill:
    """Test the backfill run against a mocked repository."""

    @pytest.mark.asyncio
    async def test_updates_only_changed_students(self, mock_db, mock_repository):
        stats = await run_backfill("flow-1")

        assert stats.total_students == 3
        assert stats.updated_students == 2
        assert stats.enrolments_touched == 3
        assert mock_repository.set_chatflow.await_count == 2
        mock_repository.set_chatflow.assert_any_await(
            1, "flow-1", [{"subject": "Maths", "chatflowId": "flow-1"}]
        )
        mock_db.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dry_run_does_not_write(self, mock_db, mock_repository):
        stats = await run_backfill("flow-1", dry_run=True)

        assert stats.updated_students == 2
        mock_repository.set_chatflow.assert_not_awaited()
        mock_db.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chatflow_id", ["", "   ", None])
    async def test_empty_chatflow_id_rejected(self, mock_db, mock_repository, chatflow_id):
        """Test a missing chatflow id never overwrites existing values."""
        with pytest.raises(ValueError):
            await run_backfill(chatflow_id)

        mock_db.connect.assert_not_awaited()
        mock_repository.set_chatflow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disconnects_when_listing_fails(self, mock_db, mock_repository):
        mock_repository.list_chatflow_fields.side_effect = RuntimeError("cursor died")

        with pytest.raises(RuntimeError):
            await run_backfill("flow-1")

        mock_db.disconnect.assert_awaited_once()


def test_main_exits_on_empty_chatflow_id(mock_db, mock_repository):
    argv = ["backfill_enrolment_chatflows.py", "--chatflow-id", " "]
    with patch("sys.argv", argv), patch("backfill_enrolment_chatflows.setup_logging"):
        with pytest.raises(SystemExit) as exc_info:
            main()

    assert exc_info.value.code == 1
    mock_repository.set_chatflow.assert_not_awaited()
