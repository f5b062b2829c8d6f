"""
Typed client for the store's command-line protocol.

StoreClient turns the store's verbs into Python calls. Rejections raise
StoreRejectedError; a call without any decisive output line returns
None (or False) rather than raising.

Example:
    >>> client = StoreClient(SubprocessTransport(install / "bin" / "TrainzUtil.exe"))
    >>> edit_dir = client.open_for_edit("kuid:123:456")
    >>> client.commit("kuid:123:456")
    True
"""

from __future__ import annotations

import logging
from pathlib import Path

from assetsync.core.store.models import OutcomeKind, StoreOutcome
from assetsync.core.store.protocol import parse_bracketed, parse_message, parse_outcome
from assetsync.core.store.transport import StoreTransport

logger = logging.getLogger(__name__)

VERB_INSTALL = "installfrompath"
VERB_EDIT = "edit"
VERB_COMMIT = "commit"
VERB_REVERT = "revert"
VERB_ECHO = "echo"


class StoreClient:
    """
    Client for the store protocol.

    Issues one transport call per operation and never more than one at a
    time. Holds no state between calls.
    """

    def __init__(self, transport: StoreTransport) -> None:
        self.transport = transport

    def invoke(self, verb: str, *args: str) -> StoreOutcome:
        """
        Run a verb and parse its output.

        Raises:
            StoreTimeoutError: If the call exceeds the transport timeout.
            ProcessLaunchError: If the executable cannot be started.
        """
        output = self.transport.run(verb, *args)
        outcome = parse_outcome(verb, args, output)
        if outcome.kind == OutcomeKind.REJECTED:
            logger.debug("Store rejected %s %s: %s", verb, " ".join(args), outcome.message)
        return outcome

    def install_from_path(self, path: Path) -> str | None:
        """
        Install an asset bundle from a directory.

        Returns:
            Identifier of the installed asset, or None without a result line.

        Raises:
            StoreRejectedError: If the store refused the install.
        """
        outcome = self.invoke(VERB_INSTALL, str(path))
        outcome.raise_for_rejection()
        if not outcome.succeeded:
            return None
        return parse_bracketed(outcome.line)

    def open_for_edit(self, identifier: str) -> Path | None:
        """
        Open an installed asset for editing.

        Returns:
            Directory the store opened the asset into, or None.

        Raises:
            StoreRejectedError: If the store does not know the asset.
        """
        outcome = self.invoke(VERB_EDIT, identifier)
        outcome.raise_for_rejection()
        if not outcome.succeeded:
            return None
        edit_path = parse_message(outcome.line)
        return Path(edit_path) if edit_path else None

    def commit(self, identifier: str) -> bool:
        """
        Commit an asset that is open for editing.

        Returns:
            True on a success line, False without a result line.

        Raises:
            StoreRejectedError: If the store refused the commit.
        """
        outcome = self.invoke(VERB_COMMIT, identifier)
        outcome.raise_for_rejection()
        return outcome.succeeded

    def revert(self, identifier: str) -> None:
        """
        Discard pending edits of an asset.

        Raises:
            StoreRejectedError: If the store refused the revert.
        """
        self.invoke(VERB_REVERT, identifier).raise_for_rejection()

    def echo(self, text: str) -> bool:
        """Round-trip text through the store; True iff it came back verbatim."""
        outcome = self.invoke(VERB_ECHO, text)
        return text in outcome.lines
