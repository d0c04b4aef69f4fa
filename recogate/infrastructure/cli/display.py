import json
import logging
from typing import Any, Dict, Optional

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from recogate.domain.interfaces.user_interface import UserInterface
from recogate.domain.models.recommendation import RecommendationResult

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_recommendations(self, result: RecommendationResult, **kwargs: Any) -> None:
        """Renders recommendations as a ranked table.

        Args:
            result: Recommendations in service order.
            **kwargs: Additional arguments including:
                - title: Table title (default: "Recommendations")
        """
        title = kwargs.get("title", "Recommendations")
        logger.debug(f"display_recommendations called: title={title}, count={len(result)}")

        table = Table(title=title, box=ROUNDED, title_justify="left")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Product", style="bold cyan")
        table.add_column("Score", justify="right", style="green")
        table.add_column("Details", style="white")

        for rank, item in enumerate(result, start=1):
            score = f"{item.score:.3f}" if item.score is not None else "-"
            details = json.dumps(item.metadata, sort_keys=True, default=str) if item.metadata else ""
            table.add_row(str(rank), item.product_id, score, details)

        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_settings(self, settings: Dict[str, Any]) -> None:
        table = Table(title="Gateway settings", box=SIMPLE, show_header=False, title_justify="left")
        table.add_column("Setting", style="bold")
        table.add_column("Value")
        for name, value in settings.items():
            table.add_row(name, str(value))
        self.console.print(table)
