"""
Outcome model for a single store protocol call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from assetsync.core.store.errors import StoreRejectedError


class OutcomeKind(str, Enum):
    """How a store call ended."""

    SUCCESS = "success"
    REJECTED = "rejected"
    NO_RESULT = "no_result"


@dataclass(frozen=True)
class StoreOutcome:
    """
    Parsed result of one protocol invocation.

    Attributes:
        kind: Which decisive line was found, if any.
        verb: Protocol verb that was invoked.
        args: Arguments passed with the verb.
        line: The decisive line ("" when there was none).
        message: Error text extracted from a ``-`` line.
        lines: Every output line, in order.
    """

    kind: OutcomeKind
    verb: str
    args: tuple[str, ...] = ()
    line: str = ""
    message: str = ""
    lines: tuple[str, ...] = field(default=(), repr=False)

    @property
    def succeeded(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def command(self) -> list[str]:
        return [self.verb, *self.args]

    def raise_for_rejection(self) -> None:
        """Raise StoreRejectedError if the store answered with a ``-`` line."""
        if self.kind == OutcomeKind.REJECTED:
            raise StoreRejectedError(self.message, command=self.command, line=self.line)
