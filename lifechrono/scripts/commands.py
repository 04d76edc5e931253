"""CLI commands for snapshots and demo data.

Usage:
    flask roll-snapshots                  # Roll the current week
    flask roll-snapshots --weeks-back 1   # Roll last week
    flask seed-demo                       # Demo user with a week of entries and moods
"""

from __future__ import annotations

from datetime import datetime, time, timedelta

import click
from flask.cli import with_appcontext

DEMO_EMAIL = "demo@lifechrono.test"
DEMO_PASSWORD = "demo12345"

# (title, category, start hour, duration minutes) for each demo day
DEMO_DAY = (
    ("Sleep", "restoration", 0, 420),
    ("Deep work", "productive", 9, 180),
    ("Lunch", "neutral", 12, 45),
    ("Meetings", "productive", 14, 120),
    ("Reading", "leisure", 20, 60),
)


@click.command("roll-snapshots")
@click.option("--weeks-back", "-w", type=int, default=0, show_default=True, help="How many weeks before the current one")
@with_appcontext
def roll_snapshots_command(weeks_back: int):
    """Compute weekly snapshots for every user."""
    from lifechrono.domains.snapshots.services import roll_weekly_snapshots

    if weeks_back < 0:
        raise click.BadParameter("must be >= 0", param_hint="--weeks-back")
    click.echo(f"Rolling snapshots (weeks back: {weeks_back})...")
    result = roll_weekly_snapshots(weeks_back)
    click.echo(
        f"  ✓ {result['weekStart']} to {result['weekEnd']}: "
        f"{result['successCount']} succeeded, {result['failedCount']} failed"
    )


@click.command("seed-demo")
@click.option("--days", "-d", type=int, default=7, show_default=True, help="Days of history to create")
@with_appcontext
def seed_demo_command(days: int):
    """Create a demo user with entries and mood logs for recent days."""
    from lifechrono.core.auth.password import hash_password
    from lifechrono.core.errors import ValidationError
    from lifechrono.core.users.models import User
    from lifechrono.core.utils.dates import utc_today
    from lifechrono.domains.entries.services import create_entry
    from lifechrono.domains.mood.services import log_mood
    from lifechrono.extensions import db

    user = User.query.filter_by(email=DEMO_EMAIL).first()
    if not user:
        user = User(email=DEMO_EMAIL, name="Demo User", password_hash=hash_password(DEMO_PASSWORD))
        db.session.add(user)
        db.session.commit()

    today = utc_today()
    created = skipped = 0
    for offset in range(days):
        day = today - timedelta(days=offset)
        for title, category, hour, minutes in DEMO_DAY:
            start = datetime.combine(day, time(hour))
            try:
                create_entry(
                    user.id,
                    title=title,
                    category=category,
                    start_time=start,
                    end_time=start + timedelta(minutes=minutes),
                )
                created += 1
            except ValidationError:
                skipped += 1
        log_mood(user.id, 3 + offset % 3, today=day)

    click.echo(f"  ✓ {DEMO_EMAIL}: {created} entries created, {skipped} already present")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(roll_snapshots_command)
    app.cli.add_command(seed_demo_command)
