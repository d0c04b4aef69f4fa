"""Interface for presenting recommendation results to the user.

Defines the contract for displaying results, information, warnings and
errors, allowing different UI implementations (e.g., console, JSON output).
"""

import abc
from typing import Any, Dict

from recogate.domain.models.recommendation import RecommendationResult


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_recommendations(self, result: RecommendationResult, **kwargs: Any) -> None:
        """Displays a (non-empty) list of recommendations.

        Args:
            result: The recommendations, in the order returned by the service.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user.

        Args:
            warning_message: The warning message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user.

        Args:
            info_message: The informational message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    def display_settings(self, settings: Dict[str, Any]) -> None:
        """Displays effective configuration values. Secrets must already be masked.

        Args:
            settings: Mapping of setting name to value.
        """
        pass
