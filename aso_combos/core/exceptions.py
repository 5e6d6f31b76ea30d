"""Custom exception classes for the combo engine."""

from typing import Any


class ComboEngineError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Configuration Errors
class RuleSetLoadError(ComboEngineError):
    """Semantic rule configuration could not be loaded."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            f"Failed to load combo rule set from {source}: {reason}",
            details={"source": source, "reason": reason},
        )


# Data Errors
class InvalidComboError(ComboEngineError):
    """Combo is outside the contract of the called function."""

    def __init__(self, combo: str, reason: str) -> None:
        super().__init__(
            f"Invalid combo '{combo}': {reason}",
            details={"combo": combo, "reason": reason},
        )
