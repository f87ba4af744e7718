#!/usr/bin/env python3
"""
Notes Service CLI.

Operator entry point for the backend: serve the API, verify that the
deployment is usable, inspect settings, run migrations and the test suite.
End-user note and tag commands live in `python -m modules.cli`.

Usage:
    python cli.py --help
    python cli.py --service server --reload
    python cli.py --service health
    python cli.py --service migrate --migrate-action upgrade
    python cli.py --service seed
"""

import asyncio
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import click
import structlog

from modules.backend.core.logging import get_logger, setup_logging

PROJECT_ROOT = Path(__file__).parent
ALEMBIC_INI = PROJECT_ROOT / "modules" / "backend" / "migrations" / "alembic.ini"

# --migrate-action -> alembic arguments (revision appended where it applies)
MIGRATE_COMMANDS: dict[str, list[str]] = {
    "upgrade": ["upgrade"],
    "downgrade": ["downgrade"],
    "current": ["current"],
    "history": ["history", "--verbose"],
    "autogenerate": ["revision", "--autogenerate", "-m"],
}

TEST_PATHS = {
    "unit": "tests/unit",
    "integration": "tests/integration",
    "all": "tests",
}


def _fail(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["server", "health", "config", "test", "info", "migrate", "seed"]),
    default="info",
    help="What to run.",
)
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Bind host (server).")
@click.option("--port", default=None, type=int, help="Bind port (server).")
@click.option("--reload", is_flag=True, help="Reload on code changes (server).")
@click.option(
    "--test-type",
    type=click.Choice(sorted(TEST_PATHS)),
    default="all",
    help="Which tests to run.",
)
@click.option("--coverage", is_flag=True, help="Collect coverage for modules/.")
@click.option(
    "--migrate-action",
    type=click.Choice(list(MIGRATE_COMMANDS)),
    default="current",
    help="Alembic operation.",
)
@click.option("--revision", default="head", help="Target revision for upgrade/downgrade.")
@click.option("-m", "--message", default=None, help="Revision message (autogenerate).")
def main(
    service: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
    coverage: bool,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """
    Notes Service operator CLI.

    \b
    Examples:
        python cli.py --service server --port 8099 --reload
        python cli.py --service health --debug
        python cli.py --service config
        python cli.py --service test --test-type unit --coverage
        python cli.py --service migrate --migrate-action autogenerate -m "add pinned flag"
    """
    if not (PROJECT_ROOT / ".project_root").exists():
        _fail(".project_root not found. Run from the project root.")

    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)
    logger.debug("CLI invoked", extra={"service": service, "log_level": log_level})

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "health":
        check_health(logger)
    elif service == "config":
        show_config(logger)
    elif service == "test":
        run_tests(logger, test_type, coverage)
    elif service == "migrate":
        run_migrations(logger, migrate_action, revision, message)
    elif service == "seed":
        seed_database(logger)
    else:
        show_info(logger)


def _load_app_config(logger):
    from modules.backend.core.config import get_app_config

    try:
        return get_app_config()
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Configuration could not be loaded", extra={"error": str(e)})
        _fail(f"Could not load config/settings: {e}")


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Serve the API with uvicorn in a child process."""
    server = _load_app_config(logger).application.server
    bind_host = host or server.host
    bind_port = port or server.port

    cmd = [
        sys.executable, "-m", "uvicorn",
        "modules.backend.main:app",
        "--host", bind_host,
        "--port", str(bind_port),
    ]
    if reload:
        cmd.append("--reload")

    logger.info("Starting server", extra={"host": bind_host, "port": bind_port, "reload": reload})
    click.echo(f"Notes API at http://{bind_host}:{bind_port} (Ctrl+C to stop)\n")

    try:
        subprocess.run(cmd, check=True, cwd=PROJECT_ROOT)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


# =============================================================================
# Health
# =============================================================================


def _check_settings() -> str:
    from modules.backend.core.config import get_app_config

    return get_app_config().application.name


def _check_secrets() -> str:
    from modules.backend.core.config import get_settings

    get_settings()
    return "JWT_SECRET set"


def _check_tables() -> str:
    from modules.backend.models import Base

    return ", ".join(sorted(Base.metadata.tables))


def _check_database() -> str:
    from modules.backend.api.health import check_database
    from modules.backend.core.database import Database

    async def ping() -> dict:
        database = Database.from_config()
        try:
            return await check_database(database)
        finally:
            await database.dispose()

    result = asyncio.run(ping())
    if result["status"] != "healthy":
        raise ConnectionError(result.get("error", "unreachable"))
    return f"{result['latency_ms']}ms"


def _check_app() -> str:
    from modules.backend.main import get_app

    app = get_app()
    return f"{app.title}, {len(app.routes)} routes"


HEALTH_CHECKS: list[tuple[str, Callable[[], str]]] = [
    ("Settings (config/settings)", _check_settings),
    ("Secrets (config/.env)", _check_secrets),
    ("Models", _check_tables),
    ("Database connection", _check_database),
    ("FastAPI application", _check_app),
]


def check_health(logger) -> None:
    """Run every deployment check and exit 1 if any fails."""
    click.echo("Notes Service health\n" + "-" * 50)

    failed = 0
    for name, check in HEALTH_CHECKS:
        try:
            detail = check()
        except Exception as e:
            failed += 1
            logger.error("Health check failed", extra={"check": name, "error": str(e)})
            click.echo(f"  {click.style('FAIL', fg='red')}  {name} ({e})")
        else:
            logger.debug("Health check passed", extra={"check": name})
            click.echo(f"  {click.style('PASS', fg='green')}  {name} ({detail})")

    click.echo("-" * 50)
    if failed:
        _fail(f"{failed} of {len(HEALTH_CHECKS)} checks failed.")
    click.echo(click.style("All checks passed.", fg="green"))


# =============================================================================
# Config and info
# =============================================================================


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    if title:
        click.echo(f"\n{title}:")
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_section("", value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Print every settings file as loaded. Secrets are never printed."""
    config = _load_app_config(logger)
    for filename, section in (
        ("application.yaml", config.application),
        ("database.yaml", config.database),
        ("logging.yaml", config.logging),
        ("features.yaml", config.features),
        ("security.yaml", config.security),
        ("observability.yaml", config.observability),
    ):
        _echo_section(filename, section.model_dump())
    logger.debug("Configuration displayed")


def show_info(logger) -> None:
    application = _load_app_config(logger).application
    click.echo(f"{application.name} {application.version}")
    click.echo(application.description)
    click.echo()
    click.echo("Services (--service): server, health, config, test, migrate, seed, info")
    click.echo("Note commands:        python -m modules.cli --help")


# =============================================================================
# Tests and migrations
# =============================================================================


def run_tests(logger, test_type: str, coverage: bool) -> None:
    """Run pytest on the selected suite and exit with its status."""
    cmd = [sys.executable, "-m", "pytest", TEST_PATHS[test_type], "-v"]
    if coverage:
        cmd.extend(["--cov=modules", "--cov-report=term-missing"])

    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})
    click.echo(f"Running: {' '.join(cmd)}\n")
    sys.exit(subprocess.run(cmd, cwd=PROJECT_ROOT).returncode)


def run_migrations(logger, migrate_action: str, revision: str, message: str | None) -> None:
    """Run an Alembic command against the configured database."""
    if not ALEMBIC_INI.exists():
        _fail(f"{ALEMBIC_INI.relative_to(PROJECT_ROOT)} not found.")

    args = list(MIGRATE_COMMANDS[migrate_action])
    if migrate_action in ("upgrade", "downgrade"):
        args.append(revision)
    elif migrate_action == "autogenerate":
        if not message:
            _fail("--message/-m is required for autogenerate.")
        args.append(message)

    cmd = [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), *args]
    logger.info("Running migration", extra={"action": migrate_action, "args": args})

    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)
    logger.info("Migration completed")


# =============================================================================
# Seed
# =============================================================================


async def _seed():
    from modules.backend.core.database import Database
    from modules.backend.services.seed import SeedService

    database = Database.from_config()
    try:
        if database.engine.dialect.name == "sqlite":
            await database.create_all()
        async with database.session() as session:
            try:
                summary = await SeedService(session).seed()
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        return summary
    finally:
        await database.dispose()


def seed_database(logger) -> None:
    """Create the demo accounts and notes. Existing accounts are left alone."""
    from modules.backend.core.exceptions import ApplicationError

    _load_app_config(logger)
    try:
        summary = asyncio.run(_seed())
    except ApplicationError as e:
        logger.error("Seeding failed", extra={"code": e.code, "error": e.message})
        _fail(f"Seeding failed: {e.message}")

    click.echo(f"Users created: {summary.users_created} (skipped {summary.users_skipped})")
    click.echo(f"Notes created: {summary.notes_created}")
    click.echo("Demo logins: demo@example.com / password123, john@example.com / password456")


if __name__ == "__main__":
    main()
