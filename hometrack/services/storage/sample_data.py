"""Built-in sample dataset shown in guest/demo mode."""

from datetime import date, datetime, timezone

from hometrack.models.home import Home, HomeHistoryEntry, PropertyType
from hometrack.models.project import (
    Contractor,
    Estimate,
    Photo,
    PhotoType,
    Project,
    ProjectStatus,
    Receipt,
    Task,
    TaskStatus,
)


def _ts(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def sample_home() -> Home:
    return Home(
        id="home-1",
        address="123 Oak Street, Springfield, CA 90210",
        purchase_date=_ts(2020, 6, 15),
        purchase_price=485000,
        current_value=625000,
        last_updated=_ts(2024, 3, 1),
        bedrooms=4,
        bathrooms=3,
        square_footage=2400,
        year_built=2015,
        property_type=PropertyType.SINGLE_FAMILY,
        photos=[
            "https://images.unsplash.com/photo-1570129477492-45c003edd2be?w=800",
        ],
    )


def sample_projects() -> list[Project]:
    kitchen = Project(
        id="project-1",
        name="Kitchen Renovation",
        description=(
            "Complete kitchen remodel including new cabinets, countertops, "
            "appliances, and flooring. Adding an island and improving the "
            "layout for better functionality."
        ),
        status=ProjectStatus.IN_PROGRESS,
        target_start_date=_ts(2024, 3, 1),
        estimated_completion_date=_ts(2024, 5, 15),
        budget=45000,
        projected_value=60000,
        tasks=[
            Task(
                id="task-1",
                name="Demolition",
                description="Remove old cabinets, countertops, and flooring",
                status=TaskStatus.COMPLETED,
                assigned_to="Demo Crew",
                completed_date=_ts(2024, 3, 5),
            ),
            Task(
                id="task-2",
                name="Electrical Work",
                description="Install new outlets and lighting",
                status=TaskStatus.COMPLETED,
                assigned_to="Mike's Electric",
                completed_date=_ts(2024, 3, 12),
            ),
            Task(
                id="task-3",
                name="Plumbing",
                description="Install new sink and dishwasher connections",
                status=TaskStatus.IN_PROGRESS,
                assigned_to="ABC Plumbing",
                due_date=_ts(2024, 3, 20),
            ),
            Task(
                id="task-4",
                name="Cabinet Installation",
                description="Install new kitchen cabinets and island",
                status=TaskStatus.PENDING,
                assigned_to="Custom Cabinets Inc",
                due_date=_ts(2024, 4, 1),
            ),
            Task(
                id="task-5",
                name="Countertop Installation",
                description="Install quartz countertops",
                status=TaskStatus.PENDING,
                due_date=_ts(2024, 4, 15),
            ),
        ],
        photos=[
            Photo(
                id="photo-1",
                url="https://images.unsplash.com/photo-1556909114-f6e7ad7d3136?w=800",
                type=PhotoType.BEFORE,
                caption="Original kitchen before renovation",
                uploaded_date=_ts(2024, 2, 15),
            ),
            Photo(
                id="photo-2",
                url="https://images.unsplash.com/photo-1560448204-e2d5b17e2b07?w=800",
                type=PhotoType.INSPIRATIONAL,
                caption="Modern kitchen inspiration with island",
                uploaded_date=_ts(2024, 2, 10),
            ),
            Photo(
                id="photo-3",
                url="https://images.unsplash.com/photo-1564540583246-934409427776?w=800",
                type=PhotoType.DOCUMENTARY,
                caption="Demolition in progress",
                uploaded_date=_ts(2024, 3, 5),
            ),
        ],
        notes=[
            "Remember to order appliances 2 weeks before installation",
            "Check with HOA about dumpster placement",
        ],
        estimates=[
            Estimate(
                id="est-1",
                contractor="Custom Cabinets Inc",
                amount=25000,
                description="Custom kitchen cabinets and island",
                date=_ts(2024, 2, 1),
                selected=True,
            ),
            Estimate(
                id="est-2",
                contractor="Budget Cabinets LLC",
                amount=18000,
                description="Semi-custom kitchen cabinets",
                date=_ts(2024, 2, 3),
            ),
        ],
        receipts=[
            Receipt(
                id="receipt-1",
                vendor="Home Depot",
                amount=450,
                category="Demolition supplies",
                date=_ts(2024, 2, 28),
            ),
            Receipt(
                id="receipt-2",
                vendor="Mike's Electric",
                amount=2800,
                category="Electrical work",
                date=_ts(2024, 3, 12),
            ),
        ],
        contractors=[
            Contractor(
                id="contractor-1",
                name="Mike Johnson",
                company="Mike's Electric",
                phone="(555) 123-4567",
                email="mike@mikeselectric.com",
                specialty="Electrical",
                rating=5,
            ),
            Contractor(
                id="contractor-2",
                name="Sarah Wilson",
                company="ABC Plumbing",
                phone="(555) 987-6543",
                email="sarah@abcplumbing.com",
                specialty="Plumbing",
                rating=4,
            ),
        ],
        created_date=_ts(2024, 2, 1),
        updated_date=_ts(2024, 3, 15),
    )

    bathroom = Project(
        id="project-2",
        name="Master Bathroom Remodel",
        description="Update master bathroom with new tile, vanity, and shower.",
        status=ProjectStatus.PLANNING,
        target_start_date=_ts(2024, 6, 1),
        estimated_completion_date=_ts(2024, 7, 15),
        budget=25000,
        projected_value=30000,
        tasks=[
            Task(
                id="task-6",
                name="Design Planning",
                description="Finalize bathroom layout and material selections",
                status=TaskStatus.IN_PROGRESS,
                assigned_to="Design Team",
                due_date=_ts(2024, 5, 15),
            ),
            Task(
                id="task-7",
                name="Permit Application",
                description="Submit building permits for plumbing changes",
                status=TaskStatus.PENDING,
                due_date=_ts(2024, 5, 20),
            ),
        ],
        photos=[
            Photo(
                id="photo-4",
                url="https://images.unsplash.com/photo-1584622650111-993a426fbf0a?w=800",
                type=PhotoType.INSPIRATIONAL,
                caption="Modern bathroom with walk-in shower",
                uploaded_date=_ts(2024, 3, 1),
            ),
        ],
        created_date=_ts(2024, 2, 15),
        updated_date=_ts(2024, 3, 1),
    )

    return [kitchen, bathroom]


def sample_home_history() -> list[HomeHistoryEntry]:
    return [
        HomeHistoryEntry(
            id="history-1",
            project_name="Living Room Flooring",
            completion_date=date(2023, 11, 15),
            description=(
                "Replaced old carpet with hardwood flooring throughout the "
                "living room and dining area."
            ),
            before_photo="https://images.unsplash.com/photo-1586023492125-27b2c045efd7?w=800",
            after_photo="https://images.unsplash.com/photo-1583847268964-b28dc8f51f92?w=800",
            projected_value=15000,
            actual_value=18000,
        ),
        HomeHistoryEntry(
            id="history-2",
            project_name="Front Yard Landscaping",
            completion_date=date(2023, 8, 30),
            description=(
                "Complete front yard makeover with new plants, sprinkler "
                "system, and walkway."
            ),
            after_photo="https://images.unsplash.com/photo-1558618666-fcd25c85cd64?w=800",
            projected_value=8000,
            actual_value=7500,
        ),
    ]
