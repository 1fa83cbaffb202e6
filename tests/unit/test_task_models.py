"""Unit tests for task domain models."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from src.core.errors import TaskValidationError
from src.domain.create_models import TaskCreate, add_tag, remove_tag
from src.domain.filters import FilterCriteria, StatusTab
from src.domain.task import Task, TaskPriority, TaskStatus
from tests.unit.conftest import NOW, make_task


@pytest.mark.unit
class TestTask:
    """Tests for the Task model."""

    def test_defaults(self):
        task = make_task("1", "Water plants")

        assert task.completed is False
        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.MEDIUM
        assert task.category == "general"
        assert task.tags == []
        assert task.completed_at is None

    def test_parses_wire_payload_with_naive_timestamps(self):
        task = Task.model_validate(
            {
                "id": "abc",
                "title": "Ship release",
                "priority": "high",
                "status": "in_progress",
                "created_at": "2026-03-01T09:00:00",
                "updated_at": "2026-03-02T09:00:00Z",
                "tags": ["Work", "work", " release "],
            }
        )

        assert task.created_at.tzinfo is not None
        assert task.created_at == datetime(2026, 3, 1, 9, 0, tzinfo=UTC)
        assert task.tags == ["work", "release"]

    def test_rejects_unknown_priority(self):
        with pytest.raises(ValidationError):
            make_task("1", "Bad", priority="whenever")

    def test_display_status_follows_completed_flag(self):
        assert make_task("1", "a", completed=True, status="todo").display_status == TaskStatus.COMPLETED
        assert make_task("2", "b", completed=False, status="completed").display_status == TaskStatus.TODO
        assert make_task("3", "c", status="in_progress").display_status == TaskStatus.IN_PROGRESS

    def test_with_completion_sets_and_clears_completed_at(self):
        task = make_task("1", "Stretch")

        done = task.with_completion(completed=True, now=NOW)
        undone = done.with_completion(completed=False, now=NOW + timedelta(minutes=5))

        assert done.completed is True
        assert done.completed_at == NOW
        assert undone.completed is False
        assert undone.completed_at is None
        assert undone.updated_at == NOW + timedelta(minutes=5)

    def test_with_completion_never_moves_updated_at_backwards(self):
        task = make_task("1", "Stretch", updated_at=NOW)

        result = task.with_completion(completed=True, now=NOW - timedelta(hours=1))

        assert result.updated_at == NOW
        assert result.updated_at >= result.created_at


@pytest.mark.unit
class TestTaskCreate:
    """Tests for the create draft."""

    def test_trims_and_normalizes(self):
        draft = TaskCreate(title="  Buy milk  ", description=" 2 litres ", tags=["Dairy", "dairy", ""], category="  ")

        assert draft.title == "Buy milk"
        assert draft.description == "2 litres"
        assert draft.tags == ["dairy"]
        assert draft.category == "general"

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError, match="Please enter a task title"):
            TaskCreate(title="   ")

    def test_title_length_limit(self):
        TaskCreate(title="x" * 200)
        with pytest.raises(ValidationError, match="at most 200"):
            TaskCreate(title="x" * 201)

    def test_description_length_limit(self):
        with pytest.raises(ValidationError, match="at most 1000"):
            TaskCreate(title="ok", description="d" * 1001)

    def test_tag_limit(self):
        TaskCreate(title="ok", tags=[f"t{n}" for n in range(10)])
        with pytest.raises(ValidationError, match="at most 10 tags"):
            TaskCreate(title="ok", tags=[f"t{n}" for n in range(11)])

    def test_from_form_raises_task_validation_error(self):
        with pytest.raises(TaskValidationError, match="Please enter a task title"):
            TaskCreate.from_form(title="")

    def test_task_validation_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            TaskCreate.from_form(title="ok", tags=[str(n) for n in range(20)])

    def test_serializes_request_body(self):
        draft = TaskCreate(title="Pay rent", priority="urgent", category="finance", tags=["home"])

        body = draft.model_dump(mode="json", exclude_none=True)

        assert body == {
            "title": "Pay rent",
            "description": "",
            "priority": "urgent",
            "category": "finance",
            "tags": ["home"],
        }


@pytest.mark.unit
class TestTagHelpers:
    """Tests for add_tag/remove_tag."""

    def test_add_tag_lowercases_and_appends(self):
        assert add_tag(["home"], "  Garden ") == ["home", "garden"]

    def test_add_tag_ignores_blank_and_duplicates(self):
        assert add_tag(["home"], "   ") == ["home"]
        assert add_tag(["home"], "HOME") == ["home"]

    def test_add_tag_ignores_eleventh_tag(self):
        tags = [f"t{n}" for n in range(10)]

        assert add_tag(tags, "extra") == tags

    def test_add_tag_does_not_mutate_input(self):
        tags = ["home"]
        add_tag(tags, "garden")

        assert tags == ["home"]

    def test_remove_tag(self):
        assert remove_tag(["home", "garden"], "home") == ["garden"]


@pytest.mark.unit
class TestFilterCriteria:
    """Tests for FilterCriteria."""

    def test_default_is_unscoped(self):
        assert FilterCriteria().is_unscoped is True

    @pytest.mark.parametrize(
        "criteria",
        [
            FilterCriteria(search="milk"),
            FilterCriteria(priority="low"),
            FilterCriteria(category="work"),
            FilterCriteria(status=StatusTab.PENDING),
        ],
    )
    def test_any_constraint_makes_it_scoped(self, criteria):
        assert criteria.is_unscoped is False

    def test_unknown_priority_rejected(self):
        with pytest.raises(ValidationError):
            FilterCriteria(priority="critical")
