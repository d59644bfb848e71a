"""Flask CLI commands for TrackItAll."""

from __future__ import annotations

from pathlib import Path

import click
from flask import current_app


def _services():
    from .extensions import get_services

    return get_services()


def _user_or_fail(email: str):
    user = _services().users.get_by_email(email)
    if user is None:
        raise click.ClickException(f"No account for {email}")
    return user


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("trackitall-init-db")
    def trackitall_init_db() -> None:
        """Create database tables."""

        from .infra.database import init_database

        init_database(_services().engine)
        click.echo(f"Database ready: {current_app.config['TRACKITALL_CONFIG'].DATABASE_URL}")

    @app.cli.command("trackitall-export")
    @click.option("--email", required=True, help="Account email")
    @click.option(
        "--output",
        type=click.Path(dir_okay=False, path_type=Path),
        default=Path("habit-progress.csv"),
        show_default=True,
    )
    def trackitall_export(email: str, output: Path) -> None:
        """Write an account's habit logs to CSV."""

        from .services.export_csv import export_logs_csv

        user = _user_or_fail(email)
        rows = _services().habits.list_logs(user_id=user.id)
        path = export_logs_csv(rows=rows, output_path=output)
        click.echo(f"Exported {len(rows)} logs to {path}")

    @app.cli.command("trackitall-stats")
    @click.option("--email", required=True, help="Account email")
    @click.option("--month", required=True, help="Month as YYYY-MM")
    def trackitall_stats(email: str, month: str) -> None:
        """Print the month's consistency summary for an account."""

        from .errors import ValidationError
        from .services.stats import month_stats_for_user

        user = _user_or_fail(email)
        try:
            stats = month_stats_for_user(_services().habits, user_id=user.id, month=month)
        except ValidationError as exc:
            raise click.BadParameter(exc.message, param_hint="--month") from exc

        click.echo(
            f"{stats.month}: {stats.overall_completion}% "
            f"({stats.total_completed}/{stats.total_possible} check-ins)"
        )
        for item in stats.per_habit:
            click.echo(f"  {item.name}: {item.percent}% ({item.completed_days}d)")
        for week in stats.weekly:
            click.echo(f"  {week.label} [{week.start}-{week.end}]: {week.percent}%")
