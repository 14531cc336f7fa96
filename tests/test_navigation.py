"""Tests for the view state machine."""

from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from hometrack.identity import Identity
from hometrack.models import Project
from hometrack.navigation import (
    NAVIGABLE_VIEWS,
    Navigator,
    View,
    ViewState,
)
from hometrack.orchestrator import DataOperationError, HomeDataFlow
from hometrack.services.storage import InMemoryHomeStorage


@pytest.fixture
def projects():
    return [
        Project(id="p1", name="Deck", budget=1000),
        Project(id="p2", name="Fence", budget=500),
    ]


class TestViewState:
    """Tests for the state invariants."""

    def test_initial_state_is_home(self):
        navigator = Navigator()
        assert navigator.current_view == View.HOME
        assert navigator.state.selected_project_id is None
        assert navigator.state.editing_project is None

    def test_edit_view_requires_target(self):
        """An edit view without a project cannot be constructed."""
        with pytest.raises(ValidationError):
            ViewState(current_view=View.EDIT_PROJECT)

    def test_editing_target_outside_edit_view_rejected(self):
        with pytest.raises(ValidationError):
            ViewState(current_view=View.HOME, editing_project=Project(name="x", budget=0))

    def test_view_values(self):
        assert View.CREATE_PROJECT.value == "create-project"
        assert View.PROJECT_DETAIL.value == "project-detail"
        assert View.EDIT_PROJECT not in NAVIGABLE_VIEWS


class TestTransitions:
    """Tests for caller-driven transitions."""

    def test_view_project_selects(self, projects):
        navigator = Navigator()
        navigator.view_project("p2")
        assert navigator.current_view == View.PROJECT_DETAIL
        assert navigator.current_project(projects).name == "Fence"

    def test_leaving_detail_clears_selection(self, projects):
        """Going to projects and back to detail shows "not found"."""
        navigator = Navigator()
        navigator.view_project("p1")

        navigator.change_view(View.PROJECTS)
        assert navigator.state.selected_project_id is None

        navigator.change_view(View.PROJECT_DETAIL)
        assert navigator.current_view == View.PROJECT_DETAIL
        assert navigator.current_project(projects) is None

    def test_deleted_selection_resolves_to_none(self, projects):
        navigator = Navigator()
        navigator.view_project("gone")
        assert navigator.current_project(projects) is None

    def test_cannot_navigate_directly_to_edit(self):
        with pytest.raises(ValueError):
            Navigator().change_view(View.EDIT_PROJECT)

    def test_change_view_accepts_string(self):
        navigator = Navigator()
        navigator.change_view("history")
        assert navigator.current_view == View.HISTORY

    def test_create_project_clears_editing(self, projects):
        navigator = Navigator()
        navigator.edit_project(projects[0])
        navigator.create_project()
        assert navigator.current_view == View.CREATE_PROJECT
        assert navigator.state.editing_project is None

    def test_cancel_edit_returns_to_selected_project(self, projects):
        navigator = Navigator()
        navigator.view_project("p1")
        navigator.edit_project(projects[0])

        navigator.cancel_edit()

        assert navigator.current_view == View.PROJECT_DETAIL
        assert navigator.state.selected_project_id == "p1"
        assert navigator.state.editing_project is None

    def test_cancel_edit_without_selection_goes_home(self, projects):
        navigator = Navigator()
        navigator.create_project()
        navigator.cancel_edit()
        assert navigator.current_view == View.HOME

    @pytest.mark.asyncio
    async def test_cancel_create_goes_home_despite_old_selection(self):
        """A selection kept after saving an edit does not send a cancelled create to detail."""
        flow = HomeDataFlow(InMemoryHomeStorage.with_sample_data(), Identity.guest())
        await flow.load()
        project = flow.state.projects[0]
        navigator = Navigator()
        navigator.view_project(project.id)
        navigator.edit_project(project)
        assert await navigator.save_project({"budget": 50000}, flow)
        navigator.create_project()

        navigator.cancel_edit()

        assert navigator.current_view == View.HOME
        assert navigator.state.selected_project_id is None

    def test_transitions_are_logged(self):
        navigator = Navigator()
        with patch("hometrack.navigation.logger") as logger:
            navigator.view_project("p1")
            navigator.change_view(View.HISTORY)

        logger.debug.assert_any_call(
            "view_changed", nav_event="view_project", view="project-detail"
        )
        logger.debug.assert_any_call(
            "view_changed", nav_event="change_view", view="history"
        )

    def test_every_transition_runs_with_real_logger(self, projects):
        navigator = Navigator()
        navigator.view_project("p1")
        navigator.edit_project(projects[0])
        navigator.cancel_edit()
        navigator.create_project()
        for view in sorted(NAVIGABLE_VIEWS, key=lambda v: v.value):
            navigator.change_view(view)
        assert navigator.current_view == View.SETUP

    def test_reset(self):
        navigator = Navigator()
        navigator.view_project("p1")
        navigator.reset()
        assert navigator.state == ViewState()


class TestSaveProject:
    """Tests for saving the project form."""

    @pytest.mark.asyncio
    async def test_create_success_goes_home(self):
        flow = HomeDataFlow(InMemoryHomeStorage.with_sample_data(), Identity.guest())
        await flow.load()
        navigator = Navigator()
        navigator.create_project()

        saved = await navigator.save_project({"name": "Shed", "budget": 3000}, flow)

        assert saved is True
        assert navigator.current_view == View.HOME
        assert flow.state.projects[-1].name == "Shed"

    @pytest.mark.asyncio
    async def test_edit_merges_form_over_project(self):
        flow = HomeDataFlow(InMemoryHomeStorage.with_sample_data(), Identity.guest())
        await flow.load()
        original = flow.state.projects[0]
        navigator = Navigator()
        navigator.edit_project(original)

        saved = await navigator.save_project({"budget": 50000}, flow)

        assert saved is True
        updated = flow.state.projects[0]
        assert updated.budget == 50000
        assert updated.name == original.name
        assert len(updated.tasks) == len(original.tasks)
        assert navigator.state.editing_project is None
        assert navigator.current_view == View.HOME

    @pytest.mark.asyncio
    async def test_failed_save_stays_on_form(self, projects):
        flow = AsyncMock()
        flow.update_project.side_effect = DataOperationError(
            "Failed to update project. Please try again."
        )
        navigator = Navigator()
        navigator.edit_project(projects[0])

        saved = await navigator.save_project({"budget": 5}, flow)

        assert saved is False
        assert navigator.current_view == View.EDIT_PROJECT
        assert navigator.state.editing_project.id == "p1"
