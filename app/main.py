"""
Streamlit Frontend for Home Tracker

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every save goes through the data flow; the screen only shows what
   storage confirmed
3. Clear error messages in simple language
4. Guest mode to look around without an account

The screen being shown is owned by the session's Navigator; the sidebar
and buttons only ask it to change.
"""

import asyncio
from datetime import date, datetime, time, timezone
from typing import Optional

import streamlit as st

from hometrack.config import get_settings, validate_all_settings
from hometrack.finance import (
    HomeSummary,
    average_value_per_improvement,
    format_currency,
    history_value_added,
    project_progress,
    total_spent,
)
from hometrack.identity import (
    AuthenticationError,
    GuestIdentityProvider,
    Identity,
    SupabaseIdentityProvider,
)
from hometrack.models import (
    Contractor,
    Home,
    HomeHistoryEntry,
    Photo,
    PhotoType,
    Project,
    ProjectStatus,
    PropertyType,
    Task,
    TaskStatus,
)
from hometrack.navigation import View
from hometrack.orchestrator import DataOperationError, HomeSession, create_session
from hometrack.validation import FormValidator


st.set_page_config(
    page_title="Home Tracker",
    page_icon="🏠",
    layout="wide",
    initial_sidebar_state="expanded",
)

validator = FormValidator()

NAV_ITEMS = [
    ("🏠 Dashboard", View.HOME),
    ("🔨 Projects", View.PROJECTS),
    ("📜 History", View.HISTORY),
    ("⚙️ Setup", View.SETUP),
]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def start_session(identity: Identity, provider) -> None:
    session = create_session(identity, identity_provider=provider)
    with st.spinner("Loading your home..."):
        run_async(session.start())
    st.session_state.session = session


def get_session() -> Optional[HomeSession]:
    return st.session_state.get("session")


def main():
    """Main application entry point."""
    session = get_session()
    if session is None or not session.active:
        render_sign_in_page()
        return

    st.sidebar.title("🏠 Home Tracker")
    if session.is_guest:
        st.sidebar.info("Demo mode: changes are not saved.")
    st.sidebar.markdown("---")

    for label, view in NAV_ITEMS:
        if st.sidebar.button(label, key=f"nav-{view.value}"):
            session.navigator.change_view(view)
            st.rerun()

    st.sidebar.markdown("---")
    if not session.is_guest and st.sidebar.button("🔄 Refresh"):
        run_async(session.flow.refresh_data())
        st.rerun()
    if st.sidebar.button("🚪 Sign out"):
        run_async(session.sign_out())
        del st.session_state["session"]
        st.rerun()

    state = session.state
    if state.error:
        st.error(state.error)

    view = session.navigator.current_view
    if view == View.HOME:
        render_home_page(session)
    elif view == View.PROJECTS:
        render_projects_page(session)
    elif view in (View.CREATE_PROJECT, View.EDIT_PROJECT):
        render_project_form(session)
    elif view == View.PROJECT_DETAIL:
        render_project_detail(session)
    elif view == View.HISTORY:
        render_history_page(session)
    elif view == View.SETUP:
        render_setup_page()


def render_sign_in_page():
    st.title("🏠 Home Tracker")
    st.markdown("Track what your home is worth and the projects that change it.")

    settings = get_settings()
    if settings.supabase.is_configured:
        with st.form("sign-in"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            col1, col2 = st.columns(2)
            sign_in = col1.form_submit_button("Sign in", type="primary")
            sign_up = col2.form_submit_button("Create account")

        if sign_in or sign_up:
            provider = SupabaseIdentityProvider()
            try:
                action = provider.sign_in if sign_in else provider.sign_up
                identity = run_async(action(email, password))
            except AuthenticationError as e:
                st.error(f"Could not sign in: {e}")
            else:
                start_session(identity, provider)
                st.rerun()
    else:
        st.warning("Supabase is not configured yet. See the Setup page in demo mode.")

    if settings.app.guest_mode_enabled:
        st.markdown("---")
        if st.button("👀 Try the demo"):
            start_session(Identity.guest(), GuestIdentityProvider())
            st.rerun()


# =============================================================================
# Home dashboard
# =============================================================================

def render_home_page(session: HomeSession):
    state = session.state
    if state.home is None:
        render_home_form(session, None)
        return

    home = state.home
    summary = HomeSummary.build(home, state.projects, state.home_history)

    st.title(f"🏠 {home.address}")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Current value", format_currency(summary.current_value))
    col2.metric("Projected value", format_currency(summary.projected_home_value),
                delta=format_currency(summary.projected_value_increase))
    col3.metric("Value added", format_currency(summary.actual_value_added))
    col4.metric("Total gain", format_currency(summary.total_value_gain))

    st.markdown("### Active projects")
    active = [p for p in state.projects if p.is_active]
    if not active:
        st.info("No active projects. Start one from the Projects page.")
    for project in active:
        render_project_card(session, project)

    if st.button("➕ New project", type="primary"):
        session.navigator.create_project()
        st.rerun()

    with st.expander("✏️ Edit home details"):
        render_home_form(session, home)


def render_home_form(session: HomeSession, home: Optional[Home]):
    if home is None:
        st.title("🏠 Set up your home")

    with st.form(f"home-{home.id if home else 'new'}"):
        address = st.text_input("Address", value=home.address if home else "")
        col1, col2 = st.columns(2)
        purchase_price = col1.number_input(
            "Purchase price", min_value=0, step=1000,
            value=home.purchase_price if home else 0,
        )
        current_value = col2.number_input(
            "Current value", min_value=0, step=1000,
            value=home.current_value if home else 0,
        )
        property_type = st.selectbox(
            "Property type",
            options=list(PropertyType),
            index=list(PropertyType).index(home.property_type) if home else 0,
            format_func=lambda t: t.value.replace("-", " ").title(),
        )
        submitted = st.form_submit_button("Save home", type="primary")

    if not submitted:
        return

    data = {
        "address": address,
        "purchase_price": purchase_price,
        "current_value": current_value,
        "property_type": property_type,
    }
    result = validator.validate_home(data)
    if not result.is_valid:
        st.error(validator.get_user_friendly_summary(result))
        return

    try:
        if home is None:
            run_async(session.flow.create_home(Home(**data)))
        else:
            run_async(session.flow.update_home(home.model_copy(update=data)))
    except DataOperationError as e:
        st.error(e.message)
        return
    st.rerun()


# =============================================================================
# Projects
# =============================================================================

def render_project_card(session: HomeSession, project: Project):
    with st.container(border=True):
        col1, col2 = st.columns([3, 1])
        col1.markdown(f"**{project.name}** · {project.status.value.replace('-', ' ')}")
        col1.progress(project_progress(project) / 100)
        col1.caption(
            f"Budget {format_currency(project.budget)} · "
            f"Spent {format_currency(total_spent(project))}"
        )
        if col2.button("Open", key=f"open-{project.id}"):
            session.navigator.view_project(project.id)
            st.rerun()


def render_projects_page(session: HomeSession):
    st.title("🔨 Projects")
    if st.button("➕ New project", type="primary"):
        session.navigator.create_project()
        st.rerun()

    if not session.state.projects:
        st.info("No projects yet.")
    for project in session.state.projects:
        render_project_card(session, project)


def render_project_form(session: HomeSession):
    navigator = session.navigator
    editing = navigator.state.editing_project
    st.title("✏️ Edit project" if editing else "➕ New project")

    with st.form("project-form"):
        name = st.text_input("Name", value=editing.name if editing else "")
        description = st.text_area(
            "Description", value=(editing.description or "") if editing else ""
        )
        status = st.selectbox(
            "Status",
            options=list(ProjectStatus),
            index=list(ProjectStatus).index(editing.status) if editing else 0,
            format_func=lambda s: s.value.replace("-", " ").title(),
        )
        col1, col2, col3 = st.columns(3)
        budget = col1.number_input(
            "Budget", min_value=0, step=500, value=editing.budget if editing else 0
        )
        projected_value = col2.number_input(
            "Projected value", min_value=0, step=500,
            value=(editing.projected_value or 0) if editing else 0,
        )
        actual_value = col3.number_input(
            "Actual value", min_value=0, step=500,
            value=(editing.actual_value or 0) if editing else 0,
        )
        col1, col2 = st.columns(2)
        save = col1.form_submit_button("Save", type="primary")
        cancel = col2.form_submit_button("Cancel")

    if cancel:
        navigator.cancel_edit()
        st.rerun()
    if not save:
        return

    data = {
        "name": name,
        "description": description or None,
        "status": status,
        "budget": budget,
        "projected_value": projected_value or None,
        "actual_value": actual_value or None,
    }
    result = validator.validate_project(data)
    if not result.is_valid:
        st.error(validator.get_user_friendly_summary(result))
        return

    if run_async(navigator.save_project(data, session.flow)):
        st.rerun()
    else:
        st.error(session.state.error or "Failed to save project. Please try again.")


def _save(session: HomeSession, project: Project) -> None:
    try:
        run_async(session.flow.update_project(project))
    except DataOperationError as e:
        st.error(e.message)
        return
    st.rerun()


def render_project_detail(session: HomeSession):
    navigator = session.navigator
    project = navigator.current_project(session.state.projects)
    if project is None:
        st.warning("Project not found")
        if st.button("Back to projects"):
            navigator.change_view(View.PROJECTS)
            st.rerun()
        return

    st.title(project.name)
    if project.description:
        st.markdown(project.description)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Progress", f"{project_progress(project):.0f}%")
    col2.metric("Budget", format_currency(project.budget))
    col3.metric("Spent", format_currency(total_spent(project)))
    col4.metric("Projected value", format_currency(project.projected_value or 0))

    col1, col2, col3 = st.columns(3)
    if col1.button("✏️ Edit"):
        navigator.edit_project(project)
        st.rerun()
    if project.status == ProjectStatus.COMPLETED and col2.button("📜 Add to history"):
        try:
            run_async(session.flow.create_home_history_entry(
                HomeHistoryEntry.from_project(project)
            ))
        except DataOperationError as e:
            st.error(e.message)
        else:
            st.success("Added to your home history.")
    if col3.button("🗑️ Delete"):
        try:
            run_async(session.flow.delete_project(project.id))
        except DataOperationError as e:
            st.error(e.message)
        else:
            navigator.change_view(View.PROJECTS)
            st.rerun()

    tabs = st.tabs(["Tasks", "Photos", "Notes", "Estimates", "Receipts", "Contractors"])

    with tabs[0]:
        status_options = list(TaskStatus)
        columns = st.columns(len(TaskStatus))
        for column, (status, tasks) in zip(columns, project.tasks_by_status().items()):
            column.markdown(f"**{status.value.replace('-', ' ').title()}**")
            for task in tasks:
                column.markdown(f"- {task.name}")
                if task.assigned_to:
                    column.caption(f"Assigned to {task.assigned_to}")
                new_status = column.selectbox(
                    "Status",
                    status_options,
                    index=status_options.index(task.status),
                    format_func=lambda s: s.value.replace("-", " ").title(),
                    key=f"task-status-{task.id}",
                    label_visibility="collapsed",
                )
                if new_status != task.status:
                    _save(session, project.with_task_status(task.id, new_status))
                if column.button("🗑️", key=f"task-delete-{task.id}"):
                    _save(session, project.without_task(task.id))
        with st.form("add-task", clear_on_submit=True):
            task_name = st.text_input("New task")
            task_description = st.text_input("Description")
            assigned_to = st.text_input("Assigned to")
            due_date = st.date_input("Due date", value=None)
            if st.form_submit_button("Add task") and task_name.strip():
                task = Task(
                    name=task_name,
                    description=task_description or None,
                    assigned_to=assigned_to or None,
                    due_date=(
                        datetime.combine(due_date, time.min, tzinfo=timezone.utc)
                        if due_date else None
                    ),
                )
                _save(session, project.model_copy(update={"tasks": project.tasks + [task]}))

    with tabs[1]:
        for photo_type in PhotoType:
            photos = project.photos_of_type(photo_type)
            if not photos:
                continue
            st.markdown(f"**{photo_type.label}**")
            columns = st.columns(min(len(photos), 4))
            for idx, photo in enumerate(photos):
                column = columns[idx % len(columns)]
                column.image(photo.url, caption=photo.caption or None, width=200)
                if column.button("🗑️ Remove", key=f"photo-delete-{photo.id}"):
                    _save(session, project.without_photo(photo.id))
        with st.form("add-photo", clear_on_submit=True):
            url = st.text_input("Photo URL")
            photo_type = st.selectbox(
                "Type",
                list(PhotoType),
                index=list(PhotoType).index(PhotoType.DOCUMENTARY),
                format_func=lambda t: t.label,
            )
            caption = st.text_input("Caption")
            if st.form_submit_button("Add photo"):
                result = validator.validate_photo({"url": url})
                if not result.is_valid:
                    st.error(validator.get_user_friendly_summary(result))
                else:
                    if result.warnings:
                        st.warning(validator.get_user_friendly_summary(result))
                    photo = Photo(url=url, type=photo_type, caption=caption or None)
                    _save(session, project.with_photo(photo))

    with tabs[2]:
        for note in project.notes:
            st.markdown(f"- {note}")
        with st.form("add-note", clear_on_submit=True):
            note = st.text_area("New note")
            if st.form_submit_button("Add note") and note.strip():
                _save(session, project.model_copy(update={"notes": project.notes + [note]}))

    with tabs[3]:
        for estimate in project.estimates:
            marker = "✅ " if estimate.selected else ""
            st.markdown(
                f"{marker}**{estimate.contractor}** · {format_currency(estimate.amount)} "
                f"· {estimate.description}"
            )

    with tabs[4]:
        for receipt in project.receipts:
            st.markdown(
                f"**{receipt.vendor}** · {format_currency(receipt.amount)} · {receipt.category}"
            )
        st.markdown(f"**Total spent:** {format_currency(total_spent(project))}")

    with tabs[5]:
        for contractor in project.contractors:
            stars = "⭐" * (contractor.rating or 0)
            st.markdown(f"**{contractor.name}** {contractor.company or ''} {stars}")
        with st.form("add-contractor", clear_on_submit=True):
            contractor_name = st.text_input("Name")
            company = st.text_input("Company")
            rating = st.number_input("Rating", min_value=0, max_value=5, value=0)
            if st.form_submit_button("Add contractor"):
                data = {"name": contractor_name, "rating": rating or None}
                result = validator.validate_contractor(data)
                if not result.is_valid:
                    st.error(validator.get_user_friendly_summary(result))
                else:
                    contractor = Contractor(company=company or None, **data)
                    _save(session, project.model_copy(
                        update={"contractors": project.contractors + [contractor]}
                    ))


# =============================================================================
# History
# =============================================================================

def render_history_page(session: HomeSession):
    history = session.state.home_history
    st.title("📜 Home history")

    col1, col2, col3 = st.columns(3)
    col1.metric("Improvements", len(history))
    col2.metric("Value added", format_currency(history_value_added(history)))
    col3.metric("Average per improvement",
                format_currency(average_value_per_improvement(history)))

    for entry in history:
        with st.container(border=True):
            st.markdown(f"**{entry.project_name}** · {entry.completion_date.isoformat()}")
            if entry.description:
                st.caption(entry.description)
            st.markdown(f"Value added: {format_currency(entry.realized_value)}")

    with st.expander("➕ Add past improvement"):
        with st.form("history-form", clear_on_submit=True):
            project_name = st.text_input("Project name")
            completion_date = st.date_input("Completed on", value=date.today())
            description = st.text_area("Description")
            col1, col2 = st.columns(2)
            projected_value = col1.number_input("Projected value", min_value=0, step=500)
            actual_value = col2.number_input("Actual value", min_value=0, step=500)
            submitted = st.form_submit_button("Save", type="primary")

        if submitted:
            data = {
                "project_name": project_name,
                "completion_date": completion_date,
                "description": description or None,
                "projected_value": projected_value or None,
                "actual_value": actual_value or None,
            }
            result = validator.validate_history_entry(data)
            if not result.is_valid:
                st.error(validator.get_user_friendly_summary(result))
            else:
                try:
                    run_async(session.flow.create_home_history_entry(HomeHistoryEntry(**data)))
                except DataOperationError as e:
                    st.error(e.message)
                else:
                    st.rerun()


def render_setup_page():
    """Render the setup page."""
    st.title("⚙️ Setup")

    st.markdown("### Connection Status")
    status = validate_all_settings()
    if status.get("supabase", False):
        st.success("✅ Supabase - Configured")
    else:
        st.error(f"❌ Supabase - {status.get('supabase_error', 'Not configured')}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "1. Create a Supabase project.\n"
        "2. Run `sql/schema.sql` in the SQL editor.\n"
        "3. Put `SUPABASE_URL` and `SUPABASE_ANON_KEY` in a `.env` file "
        "(see `.env.example`) and restart the app."
    )


if __name__ == "__main__":
    main()
