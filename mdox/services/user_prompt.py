"""
Non-interactive user prompt used by the command line and headless runs.
"""

import logging

from mdox.interfaces.service_interfaces import IUserPrompt

logger = logging.getLogger(__name__)


class StaticUserPrompt(IUserPrompt):
    """Answers every confirmation with a fixed value and logs alerts."""

    def __init__(self, answer: bool = False):
        self.answer = answer
        self.alerts: list[str] = []

    async def confirm(self, message: str) -> bool:
        logger.info(f"Confirmation requested ({'accepted' if self.answer else 'declined'}): {message}")
        return self.answer

    async def alert(self, message: str) -> None:
        self.alerts.append(message)
        logger.warning(f"Alert: {message}")
