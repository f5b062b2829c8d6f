"""
Line protocol spoken by the store's command-line utility.

The utility writes one message per line. Only the first line starting
with ``+`` (success) or ``-`` (failure) matters; anything after it is
ignored. Typical output:

    - <kuid:123:456>: Asset is not installed
    + <kuid:123:456>: C:\\Trainz\\UserData\\editing\\my_asset
"""

from __future__ import annotations

from collections.abc import Sequence

from assetsync.core.store.models import OutcomeKind, StoreOutcome

SUCCESS_PREFIX = "+"
FAILURE_PREFIX = "-"


def split_lines(output: str) -> list[str]:
    """Split raw stdout into lines without line terminators."""
    return output.splitlines()


def parse_message(line: str) -> str:
    """
    Extract the message from a result line.

    The message is the text after the first ``:`` that follows the first
    ``>``, trimmed. Without a ``>`` the search for ``:`` starts at the
    beginning of the line; without a ``:`` the whole remainder is used.
    """
    remainder = line[line.find(">") + 1 :]
    return remainder[remainder.find(":") + 1 :].strip()


def parse_bracketed(line: str) -> str | None:
    """Return the text between the first ``<`` and the ``>`` after it."""
    start = line.find("<")
    if start < 0:
        return None
    end = line.find(">", start + 1)
    if end < 0:
        return None
    return line[start + 1 : end]


def parse_outcome(verb: str, args: Sequence[str], output: str) -> StoreOutcome:
    """
    Scan protocol output for the first decisive line.

    Args:
        verb: Protocol verb that produced the output.
        args: Arguments passed with the verb.
        output: Captured standard output.

    Returns:
        StoreOutcome describing the first ``+``/``-`` line, or NO_RESULT.
    """
    lines = tuple(split_lines(output))

    for line in lines:
        if line.startswith(FAILURE_PREFIX):
            return StoreOutcome(
                kind=OutcomeKind.REJECTED,
                verb=verb,
                args=tuple(args),
                line=line,
                message=parse_message(line),
                lines=lines,
            )
        if line.startswith(SUCCESS_PREFIX):
            return StoreOutcome(
                kind=OutcomeKind.SUCCESS,
                verb=verb,
                args=tuple(args),
                line=line,
                lines=lines,
            )

    return StoreOutcome(kind=OutcomeKind.NO_RESULT, verb=verb, args=tuple(args), lines=lines)
