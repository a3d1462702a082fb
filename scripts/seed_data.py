"""
Data Seeder for Time Ledger.
Populates the database with realistic data for testing and demo purposes.

Every entry goes through the TimeEntryService, so the seeded ledger obeys
the same daily cap as real bookings.
"""

import asyncio
import sys
import random
from datetime import timedelta, date
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from timeledger.infra.config import get_settings
from timeledger.infra.db import get_engine
from timeledger.services import ProjectService, TaskService, TimeEntryService


async def reset_database():
    """Drop and recreate all tables to ensure a fresh seed"""
    engine = get_engine(get_settings().get_db_url())
    print(f"Resetting database at: {engine.engine.url}")
    await engine.drop_tables()
    await engine.create_tables()


async def seed():
    await reset_database()
    print("Starting data seeding...")

    projects = ProjectService()
    tasks = TaskService()
    entries = TimeEntryService(work_hours_per_day=get_settings().preferences.work_hours_per_day)

    # 1. Create Projects and Tasks
    layout = {
        ("INT", "Internal"): ["General Admin", "Meetings"],
        ("ACME", "Acme Portal"): ["Software Development", "Code Review"],
    }
    task_ids = {}
    for (code, name), task_names in layout.items():
        project = (await projects.create_project(code=code, name=name)).data
        print(f"Created project: {project.code}")
        for task_name in task_names:
            task = (await tasks.create_task(name=task_name, project_id=project.id)).data
            task_ids[task_name] = task.id
            print(f"  Created task: {task_name}")

    # 2. Generate Time Entries for January 2026, Mon-Fri
    # - Morning: Development (3-4h)
    # - Midday: Meetings or Admin (1h)
    # - Afternoon: Development or Review (3-4h)
    current = date(2026, 1, 1)
    end_date = date(2026, 1, 31)

    while current <= end_date:
        if current.weekday() >= 5:  # Sat=5, Sun=6
            current += timedelta(days=1)
            continue

        bookings = [
            ("Software Development", Decimal(random.choice(["3", "3.5", "4"])), "Morning session"),
            (random.choice(["Meetings", "General Admin"]), Decimal("1"), "Sync"),
            (random.choice(["Software Development", "Code Review"]),
             Decimal(random.choice(["3", "3.5", "4"])), "Feature work"),
        ]
        for task_name, hours, description in bookings:
            response = await entries.create_time_entry(
                task_id=task_ids[task_name], date=current, hours=hours, description=description
            )
            if not response.is_success:
                print(f"  Skipped {task_name} on {current}: {response.message}")

        print(f"Generated entries for {current}")
        current += timedelta(days=1)

    print("Seeding complete.")


if __name__ == "__main__":
    asyncio.run(seed())
