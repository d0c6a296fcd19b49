"""Main entry point for the bus system server using Typer and Pydantic Settings."""

import typer
import uvicorn
from loguru import logger
from rich.console import Console

from bus_system.logging import setup_logging
from bus_system.settings import get_settings

app = typer.Typer(
    name="bus-system",
    help="Bus system server - run the API or manage its database",
    no_args_is_help=True,
)
console = Console()


HOST_OPTION = typer.Option(
    None,
    help="Host to bind the server to (overrides BUS_SYSTEM_HOST)",
    metavar="<server>",
)  # fmt: skip
PORT_OPTION = typer.Option(
    None,
    help="Port to bind the server to (overrides BUS_SYSTEM_PORT)",
    metavar="<port>",
)  # fmt: skip
RELOAD_OPTION = typer.Option(
    None,
    help="Enable/disable auto-reload (overrides BUS_SYSTEM_RELOAD)",
)  # fmt: skip
LOG_LEVEL_OPTION = typer.Option(
    None,
    help="Log level (overrides BUS_SYSTEM_LOG_LEVEL)",
    metavar="<level>",
    case_sensitive=False,
)  # fmt: skip
SQL_LOG_OPTION = typer.Option(
    None,
    help="Enable/disable SQL query logging (overrides BUS_SYSTEM_SQL_LOG)",
)  # fmt: skip
DATABASE_URL_OPTION = typer.Option(
    None,
    help="Database URL (overrides BUS_SYSTEM_DATABASE_URL)",
    metavar="<dsn>",
)  # fmt: skip
CREATE_TABLES_OPTION = typer.Option(
    None,
    help="Create missing tables on startup (overrides BUS_SYSTEM_CREATE_TABLES)",
)  # fmt: skip


def _update_settings(
    host: str | None = None,
    port: int | None = None,
    log_level: str | None = None,
    reload: bool | None = None,
    sql_log: bool | None = None,
    database_url: str | None = None,
    create_tables: bool | None = None,
) -> None:
    """Apply CLI overrides to the cached settings."""
    settings = get_settings()

    overrides = {
        "host": host,
        "port": port,
        "log_level": log_level.upper() if log_level else None,
        "reload": reload,
        "sql_log": sql_log,
        "database_url": database_url,
        "create_tables": create_tables,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(settings, name, value)


@app.command()
def run(
    host: str = HOST_OPTION,
    port: int = PORT_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    reload: bool = RELOAD_OPTION,
    sql_log: bool = SQL_LOG_OPTION,
    database_url: str = DATABASE_URL_OPTION,
    create_tables: bool = CREATE_TABLES_OPTION,
) -> None:
    """Run the bus system server."""
    _update_settings(host, port, log_level, reload, sql_log, database_url, create_tables)
    settings = get_settings()

    setup_logging(settings.log_level)

    logger.info(f"Starting bus system server on {settings.host}:{settings.port}")
    logger.info(f"Reload: {settings.reload}")

    # Run the app - use import string for reload mode
    if settings.reload:
        uvicorn.run(
            "bus_system.app:app",
            host=settings.host,
            port=settings.port,
            reload=True,
            log_level=settings.log_level.lower(),
        )
    else:
        from bus_system.app import app as fastapi_app

        uvicorn.run(
            fastapi_app,
            host=settings.host,
            port=settings.port,
            reload=False,
            log_level=settings.log_level.lower(),
        )


@app.command("create-tables")
def create_tables_command(
    database_url: str = DATABASE_URL_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Create all missing tables on the configured database."""
    _update_settings(log_level=log_level, database_url=database_url)
    settings = get_settings()
    setup_logging(settings.log_level)

    from bus_system.database import create_all_tables, dispose_db

    console.print("[bold]Creating database tables...[/bold]")
    try:
        create_all_tables()
    except Exception as e:
        console.print(f"[red]Table creation failed: {e!s}[/red]")
        raise typer.Exit(1) from None
    finally:
        dispose_db()
    console.print("[green]Database tables are in place[/green]")


if __name__ == "__main__":
    app()
