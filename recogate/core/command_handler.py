"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), turns them into
recommendation requests for the gateway and hands the outcome to the user
interface.
"""

import logging
from typing import Any, Dict, Optional

from recogate.core.services.gateway import RecommendationGateway
from recogate.domain.errors import InvalidRequestError
from recogate.domain.events.api_events import DomainEvent, FallbackReturned
from recogate.domain.interfaces.user_interface import UserInterface
from recogate.domain.models.recommendation import (
    RecommendationRequest,
    RecommendationResult,
    SubjectKind,
)

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to the gateway."""

    def __init__(self, gateway: RecommendationGateway, ui: UserInterface):
        self.gateway = gateway
        self.ui = ui
        self._last_fallback: Optional[FallbackReturned] = None

    def on_gateway_event(self, event: DomainEvent) -> None:
        """Gateway event listener; remembers why the last call fell back."""
        if isinstance(event, FallbackReturned):
            self._last_fallback = event

    async def handle_recommendations(
        self,
        kind: SubjectKind,
        subject_id: str,
        limit: int,
        deadline: Optional[float] = None,
    ) -> Optional[RecommendationResult]:
        """Fetches and displays recommendations for a user or a product.

        Returns:
            The result that was displayed, or None if the request was rejected.
        """
        logger.info(f"Handling {kind.value} recommendations command for id={subject_id}, limit={limit}")
        request = RecommendationRequest(kind=kind, subject_id=subject_id, limit=limit)
        self._last_fallback = None
        try:
            result = await self.gateway.fetch(request, deadline=deadline)
        except InvalidRequestError as e:
            logger.warning(f"Rejected invalid request: {e}")
            self.ui.display_error(f"Invalid request: {e}")
            return None

        fallback = self._last_fallback
        if not result and fallback is not None:
            self.ui.display_warning(
                f"No recommendations available for {kind.value} '{subject_id}': "
                f"the recommendation service call failed ({fallback.reason.replace('_', ' ')}"
                f" after {fallback.attempts} attempt(s))."
            )
        elif not result:
            self.ui.display_info(f"No recommendations available for {kind.value} '{subject_id}'.")
        else:
            self.ui.display_recommendations(
                result, title=f"Recommendations for {kind.value} '{subject_id}'"
            )
        return result

    def handle_show_config(self, settings: Dict[str, Any]) -> None:
        """Displays the effective gateway settings."""
        self.ui.display_settings(settings)
