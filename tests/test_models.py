"""
Tests for Home Tracker

Test strategy:
1. Unit tests for individual components (models, validators, summaries)
2. Integration tests for flows (with a fake Supabase client)
3. No real API calls in tests
"""

import pytest
from datetime import date, datetime, timezone
from uuid import uuid4

from pydantic import ValidationError

from hometrack.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Contractor,
    Estimate,
    Home,
    HomeHistoryEntry,
    Photo,
    PhotoType,
    Project,
    ProjectStatus,
    Receipt,
    ResultStatus,
    StorageResult,
    Task,
    TaskStatus,
)


class TestProjectModels:
    """Tests for project-related Pydantic models."""

    def test_project_defaults(self):
        """A new project starts in planning with empty collections."""
        project = Project(name="Deck", budget=8000)
        assert project.id is None
        assert project.status == ProjectStatus.PLANNING
        assert project.tasks == []
        assert project.notes == []
        assert project.created_date.tzinfo is not None

    def test_project_strips_whitespace(self):
        """Whitespace is stripped from the project name."""
        project = Project(name="  Deck  ", budget=0)
        assert project.name == "Deck"

    def test_project_requires_name(self):
        """An empty name is rejected."""
        with pytest.raises(ValidationError):
            Project(name="", budget=100)

    def test_project_rejects_negative_budget(self):
        """Budget cannot be negative."""
        with pytest.raises(ValidationError):
            Project(name="Deck", budget=-1)

    def test_status_values_use_hyphens(self):
        """Stored status strings match the database values."""
        assert ProjectStatus.IN_PROGRESS.value == "in-progress"
        assert ProjectStatus.ON_HOLD.value == "on-hold"
        assert TaskStatus.IN_PROGRESS.value == "in-progress"

    def test_is_active(self):
        """Planning and in-progress projects are active."""
        assert Project(name="a", budget=0, status=ProjectStatus.PLANNING).is_active
        assert Project(name="b", budget=0, status=ProjectStatus.IN_PROGRESS).is_active
        assert not Project(name="c", budget=0, status=ProjectStatus.ON_HOLD).is_active
        assert not Project(name="d", budget=0, status=ProjectStatus.COMPLETED).is_active

    def test_tasks_by_status_has_every_column(self):
        """Grouping always returns all three status columns."""
        project = Project(
            name="Deck",
            budget=0,
            tasks=[
                Task(name="Plan", status=TaskStatus.COMPLETED),
                Task(name="Build", status=TaskStatus.PENDING),
            ],
        )
        grouped = project.tasks_by_status()
        assert set(grouped) == set(TaskStatus)
        assert [t.name for t in grouped[TaskStatus.COMPLETED]] == ["Plan"]
        assert grouped[TaskStatus.IN_PROGRESS] == []

    def test_photos_of_type(self):
        """Photos are filtered by type."""
        project = Project(
            name="Deck",
            budget=0,
            photos=[
                Photo(url="https://x/1.jpg", type=PhotoType.BEFORE),
                Photo(url="https://x/2.jpg", type=PhotoType.AFTER),
            ],
        )
        assert [p.url for p in project.photos_of_type(PhotoType.BEFORE)] == ["https://x/1.jpg"]
        assert PhotoType.INSPIRATIONAL.label == "Ideas"

    def test_selected_estimates(self):
        """Only estimates explicitly marked selected are returned."""
        project = Project(
            name="Deck",
            budget=0,
            estimates=[
                Estimate(contractor="A", amount=100, selected=True),
                Estimate(contractor="B", amount=200),
                Estimate(contractor="C", amount=300, selected=True),
            ],
        )
        assert [e.contractor for e in project.selected_estimates()] == ["A", "C"]

    def test_find_task(self):
        """Tasks can be looked up by id."""
        project = Project(name="Deck", budget=0, tasks=[Task(id="t1", name="Plan")])
        assert project.find_task("t1").name == "Plan"
        assert project.find_task("missing") is None

    def test_money_fields_reject_negative(self):
        """Estimate and receipt amounts cannot be negative."""
        with pytest.raises(ValidationError):
            Estimate(contractor="A", amount=-5)
        with pytest.raises(ValidationError):
            Receipt(vendor="Store", amount=-5)

    def test_contractor_rating_optional(self):
        """Contractors may have no rating."""
        assert Contractor(name="Joe").rating is None


class TestTaskStatus:
    """Tests for the completed-date rule."""

    def test_completing_sets_completed_date(self):
        """Moving to completed stamps the completion time."""
        now = datetime(2024, 3, 5, tzinfo=timezone.utc)
        task = Task(name="Paint").with_status(TaskStatus.COMPLETED, now=now)
        assert task.status == TaskStatus.COMPLETED
        assert task.completed_date == now

    def test_reopening_clears_completed_date(self):
        """Leaving completed clears the completion time."""
        done = Task(
            name="Paint",
            status=TaskStatus.COMPLETED,
            completed_date=datetime(2024, 3, 5, tzinfo=timezone.utc),
        )
        task = done.with_status(TaskStatus.IN_PROGRESS)
        assert task.completed_date is None

    def test_with_status_returns_copy(self):
        """The original task is not changed."""
        task = Task(name="Paint")
        task.with_status(TaskStatus.COMPLETED)
        assert task.status == TaskStatus.PENDING


class TestProjectEdits:
    """Tests for the copy-returning task and photo edits."""

    def _project(self) -> Project:
        return Project(
            name="Kitchen",
            budget=1000,
            tasks=[Task(id="t1", name="Demo"), Task(id="t2", name="Tile")],
            photos=[Photo(id="ph1", url="https://x/1.jpg")],
        )

    def test_any_status_can_be_set(self):
        """Tasks can move backwards as well as forwards."""
        now = datetime(2024, 3, 5, tzinfo=timezone.utc)
        project = self._project().with_task_status("t2", TaskStatus.COMPLETED, now=now)
        reopened = project.with_task_status("t2", TaskStatus.PENDING)

        assert project.find_task("t2").completed_date == now
        assert reopened.find_task("t2").status == TaskStatus.PENDING
        assert reopened.find_task("t2").completed_date is None
        assert reopened.find_task("t1").status == TaskStatus.PENDING

    def test_without_task(self):
        project = self._project()
        trimmed = project.without_task("t1")
        assert [t.id for t in trimmed.tasks] == ["t2"]
        assert len(project.tasks) == 2

    def test_with_photo_appends(self):
        project = self._project().with_photo(
            Photo(url="https://x/2.jpg", type=PhotoType.AFTER, caption="Done")
        )
        assert [p.url for p in project.photos] == ["https://x/1.jpg", "https://x/2.jpg"]
        assert project.photos_of_type(PhotoType.AFTER)[0].caption == "Done"

    def test_without_photo(self):
        assert self._project().without_photo("ph1").photos == []


class TestHomeModels:
    """Tests for Home and HomeHistoryEntry."""

    def test_home_creation(self):
        """Home with required fields only."""
        home = Home(address="1 Main St", purchase_price=100000, current_value=120000)
        assert home.id is None
        assert home.photos == []

    def test_realized_value_prefers_actual(self):
        """Actual value wins over projected; both missing counts as 0."""
        entry = HomeHistoryEntry(
            project_name="Roof",
            completion_date=date(2023, 5, 1),
            projected_value=1000,
            actual_value=1500,
        )
        assert entry.realized_value == 1500
        assert entry.model_copy(update={"actual_value": None}).realized_value == 1000
        assert HomeHistoryEntry(
            project_name="Roof", completion_date=date(2023, 5, 1)
        ).realized_value == 0

    def test_history_entry_from_project(self):
        """A completed project becomes a tracked history entry."""
        project = Project(
            id="p1",
            name="Bathroom",
            budget=20000,
            status=ProjectStatus.COMPLETED,
            actual_completion_date=datetime(2024, 6, 1, 12, tzinfo=timezone.utc),
            projected_value=25000,
            actual_value=27000,
            photos=[
                Photo(url="https://x/before.jpg", type=PhotoType.BEFORE),
                Photo(url="https://x/after.jpg", type=PhotoType.AFTER),
            ],
        )
        entry = HomeHistoryEntry.from_project(project)
        assert entry.project_name == "Bathroom"
        assert entry.completion_date == date(2024, 6, 1)
        assert entry.before_photo == "https://x/before.jpg"
        assert entry.after_photo == "https://x/after.jpg"
        assert entry.was_tracked_project is True
        assert entry.original_project_id == "p1"
        assert entry.actual_value == 27000


class TestStorageResult:
    """Tests for the three-way storage result."""

    def test_ok(self):
        result = StorageResult.ok([1, 2])
        assert result.status == ResultStatus.OK
        assert result.is_ok
        assert result.unwrap_or([]) == [1, 2]

    def test_not_found_is_not_failure(self):
        """Not-found and failed are distinct outcomes."""
        result = StorageResult.not_found("Project not found: p1")
        assert result.is_not_found
        assert not result.is_failure
        assert result.unwrap_or("default") == "default"

    def test_failure_carries_cause(self):
        result = StorageResult.failure("connection refused")
        assert result.is_failure
        assert result.error == "connection refused"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.PROJECT_CREATED,
            description="Project created",
        )
        assert event.event_type == AuditEventType.PROJECT_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            description="Loaded",
            details={"project_count": 2},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "data_loaded"
        assert log_dict["details"]["project_count"] == 2

    def test_entity_saved_maps_event_type(self):
        """Saves of each entity and action map to their own event type."""
        correlation_id = uuid4()
        event = AuditEventBuilder.entity_saved(
            "history_entry", "create", "h1", correlation_id=correlation_id
        )
        assert event.event_type == AuditEventType.HISTORY_ENTRY_CREATED
        assert event.entity_id == "h1"
        assert event.correlation_id == correlation_id
        assert event.description == "History entry created"

    def test_save_failed_is_error(self):
        """Failed saves are logged as errors with the cause."""
        event = AuditEventBuilder.save_failed("project", "update", "timeout", "p1")
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "timeout"
        assert event.details == {"action": "update"}
