"""
Command-line interface for thinkscore.

Provides commands to run the API server, check dependencies and run
the maintenance jobs that are scheduled outside the server.

Usage:
    thinkscore serve                   # Run the API server
    thinkscore health                  # Check service health
    thinkscore cleanup-logs --days 90  # Delete old usage logs
    thinkscore publish-daily-question  # Publish today's question
    thinkscore seed-questions FILE     # Replace questions from a JSON file
    thinkscore usage-stats             # Print usage statistics
"""

import asyncio
import sys
from typing import Any

import click
import structlog

from thinkscore.config.settings import get_settings
from thinkscore.observability.logging import setup_logging

logger = structlog.get_logger(__name__)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """ThinkScore - philosophical answer evaluation backend."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--host", default=None, help="Bind host (default: API_HOST)")
@click.option("--port", default=None, type=int, help="Bind port (default: API_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "thinkscore.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command()
def health() -> None:
    """Check health of all dependencies."""
    from thinkscore.evaluation.config import EvaluationConfig

    async def check():
        results: dict[str, bool] = {}

        # Check PostgreSQL
        try:
            from thinkscore.storage.database import Database
            db = Database()
            await db.connect()
            results["postgres"] = await db.health_check()
            await db.close()
        except Exception as e:
            results["postgres"] = False
            logger.error("Postgres health check failed", error=str(e))

        results["openai_configured"] = EvaluationConfig().openai_api_key is not None

        click.echo("\nHealth Check Results:")
        click.echo("-" * 40)

        for name, ok in results.items():
            icon = "✓" if ok else "✗"
            color = "green" if ok else "red"
            click.echo(click.style(f"  {icon} {name}: {ok}", fg=color))

        click.echo("-" * 40)

        if results["postgres"]:
            click.echo(click.style("All core services healthy!", fg="green"))
            sys.exit(0)
        else:
            click.echo(click.style("Some services unhealthy!", fg="red"))
            sys.exit(1)

    asyncio.run(check())


@main.command("cleanup-logs")
@click.option("--days", default=None, type=int, help="Delete logs older than this many days")
@click.option("--dry-run", is_flag=True, help="Show count without deleting")
def cleanup_logs(days: int | None, dry_run: bool) -> None:
    """Remove usage logs older than the given number of days.

    Example:
        thinkscore cleanup-logs --days 30             # Delete logs older than 30 days
        thinkscore cleanup-logs --days 30 --dry-run   # Preview without deleting
    """
    from thinkscore.errors import ThinkScoreError
    from thinkscore.storage.database import Database
    from thinkscore.storage.gateway import TableGateway
    from thinkscore.usage_logs.config import UsageLogConfig
    from thinkscore.usage_logs.repository import UsageLogRepository

    days = days if days is not None else UsageLogConfig().default_retention_days

    async def run():
        db = Database()
        await db.connect()

        try:
            repo = UsageLogRepository(TableGateway(db))

            if dry_run:
                count = await repo.count_older_than(days)
                click.echo(f"\nDry run - would delete {count} usage logs older than {days} days")
                click.echo("\nRun without --dry-run to actually delete.")
            else:
                deleted = await repo.cleanup_old_logs(days)
                click.echo(f"\nDeleted {deleted} usage logs older than {days} days")
        except ThinkScoreError as e:
            click.echo(click.style(f"Cleanup failed: {e}", fg="red"))
            sys.exit(1)
        finally:
            await db.close()

    asyncio.run(run())


@main.command("publish-daily-question")
@click.option("--date", "target_date", default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Date to publish for (default: today UTC)")
def publish_daily_question(target_date: Any) -> None:
    """Publish the question of the day.

    Safe to run repeatedly: a date that was already published is skipped.

    Designed for cron scheduling: 5 0 * * * thinkscore publish-daily-question

    Example:
        thinkscore publish-daily-question                    # Publish for today
        thinkscore publish-daily-question --date 2026-03-01  # Publish for a specific date
    """
    from thinkscore.questions.daily import run_daily_publish
    from thinkscore.storage.database import Database
    from thinkscore.storage.gateway import TableGateway

    async def run():
        db = Database()
        await db.connect()

        try:
            d = target_date.date() if target_date else None
            result = await run_daily_publish(TableGateway(db), target_date=d)

            click.echo(f"\nDaily Publish Results ({result.date}):")
            click.echo(f"  Question:  {result.question_id if result.question_id is not None else '-'}")
            click.echo(f"  Published: {result.published}")
            click.echo(f"  Skipped:   {result.skipped}")
            click.echo(f"  Errors:    {len(result.errors)}")
            click.echo(f"  Elapsed:   {result.elapsed_seconds:.2f}s")

            if result.errors:
                click.echo("\nErrors:")
                for err in result.errors:
                    click.echo(click.style(f"  - {err}", fg="red"))
                sys.exit(1)
        finally:
            await db.close()

    asyncio.run(run())


@main.command("seed-questions")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def seed_questions(path: str) -> None:
    """Replace all questions with the entries of a JSON file.

    The file holds a list of objects with at least ``title`` and ``content``.
    """
    from thinkscore.errors import ThinkScoreError
    from thinkscore.questions.repository import QuestionRepository, load_seed_file
    from thinkscore.storage.database import Database
    from thinkscore.storage.gateway import TableGateway

    try:
        records = load_seed_file(path)
    except ThinkScoreError as e:
        click.echo(click.style(str(e), fg="red"))
        sys.exit(1)

    async def run():
        db = Database()
        await db.connect()

        try:
            inserted = await QuestionRepository(TableGateway(db)).seed(records)
            click.echo(f"Seeded {inserted} questions from {path}")
        except ThinkScoreError as e:
            click.echo(click.style(f"Seeding failed: {e}", fg="red"))
            sys.exit(1)
        finally:
            await db.close()

    asyncio.run(run())


@main.command("usage-stats")
@click.option("--user", "user_id", default=None, help="Restrict to one user id")
@click.option("--start", default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Inclusive start date")
@click.option("--end", default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Inclusive end date")
def usage_stats(user_id: str | None, start: Any, end: Any) -> None:
    """Print LLM usage statistics."""
    from datetime import timezone

    from thinkscore.storage.database import Database
    from thinkscore.storage.gateway import TableGateway
    from thinkscore.usage_logs.repository import UsageLogRepository

    start = start.replace(tzinfo=timezone.utc) if start else None
    # --end names a whole day
    end = end.replace(hour=23, minute=59, second=59, tzinfo=timezone.utc) if end else None

    async def run():
        db = Database()
        await db.connect()

        try:
            stats = await UsageLogRepository(TableGateway(db)).get_usage_stats(user_id, start, end)
        finally:
            await db.close()

        click.echo(f"\nUsage Statistics ({user_id or 'all users'}):")
        click.echo(f"  Total calls:       {stats.total_calls}")
        click.echo(f"  Successful:        {stats.success_calls}")
        click.echo(f"  Errors:            {stats.error_calls}")
        click.echo(f"  Total tokens:      {stats.total_tokens}")
        click.echo(f"  Avg response time: {stats.avg_response_time} ms")
        click.echo(f"  Avg score:         {stats.avg_score}")

    asyncio.run(run())


if __name__ == "__main__":
    main()
