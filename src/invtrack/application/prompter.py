"""Port for blocking user interaction (warnings and confirmations)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Prompter(ABC):

    @abstractmethod
    def warn(self, message: str) -> None:
        """Show a warning the user has to acknowledge."""

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; True means the user agreed."""
