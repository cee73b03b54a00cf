"""
Console navigator adapter - Implements Navigator protocol.

This module provides a console-based implementation of the domain's
navigator port, logging screen transitions for demo purposes and
remembering the current screen so the API can report it.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNavigator:
    """
    Implements Navigator protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, initial_screen: str | None = None) -> None:
        self.current_screen = initial_screen
        self.history: list[str] = [initial_screen] if initial_screen else []

    def replace(self, screen_id: str) -> None:
        """
        Replace the current screen.

        Args:
            screen_id: Target screen identifier
        """
        logger.info("[NAVIGATION] replace: %s -> %s", self.current_screen, screen_id)
        if self.history:
            self.history[-1] = screen_id
        else:
            self.history.append(screen_id)
        self.current_screen = screen_id

    def navigate(self, screen_id: str) -> None:
        """
        Push a screen on top of the current one.

        Args:
            screen_id: Target screen identifier
        """
        logger.info("[NAVIGATION] navigate: %s -> %s", self.current_screen, screen_id)
        self.history.append(screen_id)
        self.current_screen = screen_id
