"""Main entry point for the recogate application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

from recogate.core.command_handler import CommandHandler
from recogate.core.services.gateway import RecommendationGateway
from recogate.domain.errors import ConfigurationError
from recogate.domain.interfaces.transport import Transport
from recogate.domain.models.common import RetryPolicy
from recogate.domain.models.recommendation import SubjectKind
from recogate.infrastructure.cli.display import ConsoleDisplay
from recogate.infrastructure.config.settings import (
    GatewaySettings,
    get_config,
    load_configuration,
    load_gateway_settings,
)
from recogate.infrastructure.http.httpx_transport import HttpxTransport
from recogate.infrastructure.monitoring.logger_setup import resolve_log_level, setup_logging

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10

# --- Dependency Injection (Manual) ---

def build_transport(settings: GatewaySettings) -> Transport:
    return HttpxTransport(
        base_url=settings.api_base_url,
        api_key=settings.api_key,
        timeout_s=settings.request_timeout_s,
    )


def build_gateway(settings: GatewaySettings, transport: Transport) -> RecommendationGateway:
    return RecommendationGateway(
        transport=transport,
        retry_policy=RetryPolicy(
            max_attempts=settings.max_attempts,
            initial_delay=settings.initial_backoff_s,
            multiplier=settings.backoff_multiplier,
        ),
        max_limit=settings.max_limit,
    )


def create_dependencies(settings: Optional[GatewaySettings] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one command.

    This acts as the Composition Root.

    Raises:
        ConfigurationError: If the gateway settings are missing or invalid.
    """
    logger.debug("Initializing application dependencies...")
    dependencies: Dict[str, Any] = {}
    dependencies['ui'] = ConsoleDisplay()
    dependencies['settings'] = settings or load_gateway_settings()
    dependencies['transport'] = build_transport(dependencies['settings'])
    dependencies['gateway'] = build_gateway(dependencies['settings'], dependencies['transport'])
    dependencies['command_handler'] = CommandHandler(
        gateway=dependencies['gateway'],
        ui=dependencies['ui'],
    )
    dependencies['gateway'].event_listener = dependencies['command_handler'].on_gateway_event
    logger.debug("All dependencies initialized successfully.")
    return dependencies


def _create_or_exit() -> Dict[str, Any]:
    try:
        return create_dependencies()
    except (ConfigurationError, ValueError) as e:
        logger.error(f"Fatal Error during application initialization: {e}")
        ConsoleDisplay().display_error(f"Application Initialization Failed: {e}")
        raise typer.Exit(code=1)


# --- Typer App Definition ---
app = typer.Typer(
    name="recogate",
    help="recogate: fetch user- and product-based recommendations with retries and graceful fallback.",
    add_completion=False,
)

LimitOption = Annotated[
    int,
    typer.Option("--limit", "-n", help="Maximum number of recommendations to return."),
]

DeadlineOption = Annotated[
    Optional[float],
    typer.Option("--deadline", "-d", help="Total time budget in seconds, retries included."),
]


def _run_recommendations(kind: SubjectKind, subject_id: str, limit: int, deadline: Optional[float]) -> None:
    dependencies = _create_or_exit()
    handler: CommandHandler = dependencies['command_handler']
    transport: Transport = dependencies['transport']

    async def run() -> Any:
        try:
            return await handler.handle_recommendations(kind, subject_id, limit, deadline=deadline)
        finally:
            await transport.aclose()

    result = asyncio.run(run())
    if result is None:
        raise typer.Exit(code=2)


@app.command()
def user(
    user_id: Annotated[str, typer.Argument(help="User to get personalized recommendations for.")],
    limit: LimitOption = DEFAULT_LIMIT,
    deadline: DeadlineOption = None,
):
    """Get personalized recommendations for a user."""
    _run_recommendations(SubjectKind.USER, user_id, limit, deadline)


@app.command()
def product(
    product_id: Annotated[str, typer.Argument(help="Product to get related recommendations for.")],
    limit: LimitOption = DEFAULT_LIMIT,
    deadline: DeadlineOption = None,
):
    """Get recommendations related to a product."""
    _run_recommendations(SubjectKind.PRODUCT, product_id, limit, deadline)


@app.command(name="config")
def show_config():
    """Show the effective gateway settings (API key masked)."""
    dependencies = _create_or_exit()
    handler: CommandHandler = dependencies['command_handler']
    try:
        handler.handle_show_config(dependencies['settings'].as_display_dict())
    finally:
        asyncio.run(dependencies['transport'].aclose())


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
):
    """Load configuration and set up logging before any command runs."""
    try:
        load_configuration()
    except ConfigurationError as e:
        ConsoleDisplay().display_error(str(e))
        raise typer.Exit(code=1)

    log_level = logging.DEBUG if verbose else resolve_log_level(get_config('logging.level'), logging.WARNING)
    setup_logging(
        log_level=log_level,
        log_file=get_config('logging.file'),
        log_format=get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
    )
    logger.debug("Configuration and logging initialized.")


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
