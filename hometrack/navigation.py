"""
View State Machine

Which screen is showing, which project is selected and which project is
being edited. Transitions are driven by the UI; nothing here is persisted.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, model_validator

from hometrack.models.project import Project

if TYPE_CHECKING:
    from hometrack.orchestrator import HomeDataFlow


logger = structlog.get_logger(__name__)


class View(str, Enum):
    HOME = "home"
    PROJECTS = "projects"
    CREATE_PROJECT = "create-project"
    EDIT_PROJECT = "edit-project"
    PROJECT_DETAIL = "project-detail"
    HISTORY = "history"
    SETUP = "setup"


class NavigationEvent(str, Enum):
    VIEW_PROJECT = "view_project"
    CREATE_PROJECT = "create_project"
    EDIT_PROJECT = "edit_project"
    PROJECT_SAVED = "project_saved"


# Event → view it lands on.
TRANSITIONS: dict[NavigationEvent, View] = {
    NavigationEvent.VIEW_PROJECT: View.PROJECT_DETAIL,
    NavigationEvent.CREATE_PROJECT: View.CREATE_PROJECT,
    NavigationEvent.EDIT_PROJECT: View.EDIT_PROJECT,
    NavigationEvent.PROJECT_SAVED: View.HOME,
}

# Views reachable directly from the navigation bar. Editing needs a target,
# so it is only reachable through edit_project().
NAVIGABLE_VIEWS = frozenset(View) - {View.EDIT_PROJECT}


class ViewState(BaseModel):
    """Immutable view state; an edit view always carries its target."""

    model_config = ConfigDict(frozen=True)

    current_view: View = View.HOME
    selected_project_id: Optional[str] = None
    editing_project: Optional[Project] = None

    @model_validator(mode="after")
    def editing_matches_view(self) -> "ViewState":
        editing = self.current_view == View.EDIT_PROJECT
        if editing != (self.editing_project is not None):
            raise ValueError("editing_project must be set exactly when editing")
        return self


class Navigator:
    """Owns the ViewState and applies transitions to it."""

    def __init__(self, state: Optional[ViewState] = None):
        self.state = state or ViewState()

    @property
    def current_view(self) -> View:
        return self.state.current_view

    def _apply(self, event: NavigationEvent, **changes) -> ViewState:
        values = {
            "selected_project_id": self.state.selected_project_id,
            "editing_project": self.state.editing_project,
        }
        values.update(changes)
        self.state = ViewState(current_view=TRANSITIONS[event], **values)
        logger.debug("view_changed", nav_event=event.value, view=self.state.current_view.value)
        return self.state

    def reset(self) -> None:
        self.state = ViewState()

    def view_project(self, project_id: str) -> ViewState:
        return self._apply(
            NavigationEvent.VIEW_PROJECT,
            selected_project_id=project_id,
            editing_project=None,
        )

    def create_project(self) -> ViewState:
        return self._apply(NavigationEvent.CREATE_PROJECT, editing_project=None)

    def edit_project(self, project: Project) -> ViewState:
        return self._apply(NavigationEvent.EDIT_PROJECT, editing_project=project)

    def change_view(self, view: View) -> ViewState:
        """
        Navigation-bar transition. Leaving the detail view drops the selection,
        so coming back to it without picking a project shows "not found".
        """
        view = View(view)
        if view not in NAVIGABLE_VIEWS:
            raise ValueError(f"Cannot navigate directly to {view.value}")
        selected = self.state.selected_project_id
        if view != View.PROJECT_DETAIL:
            selected = None
        self.state = ViewState(current_view=view, selected_project_id=selected)
        logger.debug("view_changed", nav_event="change_view", view=view.value)
        return self.state

    def cancel_edit(self) -> ViewState:
        """
        Leave the form without saving. Cancelling an edit returns to the
        selected project; cancelling the create form always returns home.
        """
        editing = self.state.current_view == View.EDIT_PROJECT
        if editing and self.state.selected_project_id:
            self.state = ViewState(
                current_view=View.PROJECT_DETAIL,
                selected_project_id=self.state.selected_project_id,
            )
        else:
            self.state = ViewState(current_view=View.HOME)
        return self.state

    async def save_project(
        self,
        data: dict[str, Any],
        flow: "HomeDataFlow",
    ) -> bool:
        """
        Save the project form.

        Updates the project being edited (form fields merged over it) or
        creates a new one. On success the form closes and the home view
        shows; on failure the form stays open and False is returned.
        """
        from hometrack.orchestrator import DataOperationError

        editing = self.state.editing_project
        try:
            if editing is not None:
                await flow.update_project(Project(**{**editing.model_dump(), **data}))
            else:
                await flow.create_project(Project(**data))
        except DataOperationError as e:
            logger.error(
                "project_save_failed",
                project_id=editing.id if editing else None,
                error=e.message,
            )
            return False

        self._apply(NavigationEvent.PROJECT_SAVED, editing_project=None)
        return True

    def current_project(self, projects: list[Project]) -> Optional[Project]:
        """The selected project, or None when nothing (or something deleted) is selected."""
        project_id = self.state.selected_project_id
        if project_id is None:
            return None
        for project in projects:
            if project.id == project_id:
                return project
        return None
