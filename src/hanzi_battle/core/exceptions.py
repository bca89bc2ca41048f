"""Custom exception hierarchy for the Hanzi Battle engine.

All exceptions inherit from HanziBattleError, so an embedding UI can catch
one type at its boundary. Each carries a ``details`` mapping with the
context that was known when it was raised.

Expected user-input conditions (unknown character, missing item) are
reported through result objects, not exceptions. The classes here cover
caller-sequencing bugs, rejected imports, bad configuration and storage
failures.

Example:
    >>> from hanzi_battle.core.exceptions import InvalidGameStateError
    >>> raise InvalidGameStateError("Phrase has no characters", current_state="idle")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from hanzi_battle.data.importer import ImportViolation


def _with_context(details: dict[str, Any] | None, **context: Any) -> dict[str, Any]:
    """Merge the non-None context values into a copy of ``details``."""
    merged = dict(details or {})
    merged.update({key: value for key, value in context.items() if value is not None})
    return merged


class HanziBattleError(Exception):
    """Root of every error raised by the engine.

    Attributes:
        message: Text shown to the player or developer.
        details: Extra context, rendered after the message in ``str()``.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{context}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Engine
# =============================================================================


class GameEngineError(HanziBattleError):
    """Practice, progression or battle was driven incorrectly."""


class InvalidGameStateError(GameEngineError):
    """An operation was invoked while the game was in the wrong state.

    For example completing a practice that was never started, or starting
    a phrase sequence on a phrase without constituents.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(
                details,
                current_state=current_state or None,
                expected_states=expected_states or None,
            ),
        )


class CombatError(GameEngineError):
    """A battle action arrived out of sequence.

    Attacking with no opponent, switching to a fainted or absent party
    member, or acting once the battle is over.
    """

    def __init__(
        self,
        message: str,
        *,
        combatant: str | None = None,
        turn_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(details, combatant=combatant or None, turn_number=turn_number),
        )


# =============================================================================
# Configuration and data
# =============================================================================


class ConfigurationError(HanziBattleError):
    """Settings could not be loaded or are inconsistent."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, config_key=config_key or None))


class ValidationError(HanziBattleError):
    """A value supplied by the caller is not acceptable."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(details, field_name=field_name or None, invalid_value=invalid_value),
        )


class DataImportError(ValidationError):
    """A custom character/phrase import was rejected as a whole.

    ``violations`` lists every problem found so they can be shown at once.
    """

    def __init__(
        self,
        message: str,
        *,
        violations: list[ImportViolation],
        details: dict[str, Any] | None = None,
    ) -> None:
        self.violations = list(violations)
        super().__init__(
            message,
            details=_with_context(details, violation_count=len(self.violations)),
        )


# =============================================================================
# Storage
# =============================================================================


class PersistenceError(HanziBattleError):
    """The save database could not be opened, read or written."""

    def __init__(
        self,
        message: str,
        *,
        slot: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, slot=slot or None))


__all__ = [
    "HanziBattleError",
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "ConfigurationError",
    "ValidationError",
    "DataImportError",
    "PersistenceError",
]
