"""
Commit history.

The log is an append-only sequence of :class:`LogEntry` records kept in
``log.txt``, newest entry first. Each entry is rendered as a block::

    commit <fingerprint>
    Author: <username>
    <message>

followed by one blank line. The whole record is rewritten on every
append, which keeps the file readable top-down as "most recent first".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from .fs import atomic_write_text, read_text


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


_COMMIT_LINE = re.compile(r"commit ([0-9a-f]+)")
_AUTHOR_PREFIX = "Author: "


@dataclass(frozen=True)
class LogEntry:
    """A single commit in the log."""

    fingerprint: str
    author: str
    message: str

    def render(self) -> str:
        """Return the block for this entry, without the trailing blank line."""
        return f"commit {self.fingerprint}\n{_AUTHOR_PREFIX}{self.author}\n{self.message}\n"


def _is_header(lines: List[str], i: int) -> bool:
    # A block header is a "commit" line directly followed by an "Author:"
    # line, at the start of the record or after the blank separator line.
    if not _COMMIT_LINE.fullmatch(lines[i]):
        return False
    if i + 1 >= len(lines) or not lines[i + 1].startswith(_AUTHOR_PREFIX):
        return False
    return i == 0 or lines[i - 1] == ""


def is_recordable_message(message: str) -> bool:
    """Return False if ``message`` would be read back as several entries.

    A message line after a blank line that looks like a ``commit`` header
    followed by an ``Author:`` line cannot be told apart from the start of
    another block.
    """
    lines = message.split("\n")
    # The first line follows the author line, so it never starts a block.
    return not any(_is_header(lines, i) for i in range(1, len(lines)))


def parse_log(text: str) -> Iterator[LogEntry]:
    """Yield the entries of a log record in file order (newest first)."""
    lines = text.split("\n")
    starts = [i for i in range(len(lines)) if _is_header(lines, i)]
    for n, start in enumerate(starts):
        end = starts[n + 1] if n + 1 < len(starts) else len(lines)
        body = lines[start + 2:end]
        # Drop the blank separator (and the final newline of the file).
        while body and body[-1] == "":
            body.pop()
        match = _COMMIT_LINE.fullmatch(lines[start])
        yield LogEntry(
            fingerprint=match.group(1),
            author=lines[start + 1][len(_AUTHOR_PREFIX):],
            message="\n".join(body),
        )


class CommitLog:
    """Reverse-chronological commit history backed by a text record."""

    def __init__(self, log_file: Path) -> None:
        self.log_file = log_file

    def entries(self) -> Iterator[LogEntry]:
        """Iterate over the entries, most recent first.

        Every call re-reads the record, so iterating twice yields the same
        sequence unless :meth:`append` ran in between.
        """
        return parse_log(read_text(self.log_file))

    def __iter__(self) -> Iterator[LogEntry]:
        return self.entries()

    def __len__(self) -> int:
        return sum(1 for _ in self.entries())

    def last_fingerprint(self) -> Optional[str]:
        """Return the fingerprint of the most recent entry, if any."""
        for entry in self.entries():
            return entry.fingerprint
        return None

    def append(self, fingerprint: str, author: str, message: str) -> LogEntry:
        """Record a new commit as the most recent entry.

        Existing entries are kept byte for byte below the new block.

        Raises
        ------
        ValueError
            If the message contains a line sequence that reads as a block
            header (see :func:`is_recordable_message`).
        """
        if not is_recordable_message(message):
            raise ValueError("Commit message contains a commit header line.")
        entry = LogEntry(fingerprint=fingerprint, author=author, message=message)
        current = read_text(self.log_file)
        atomic_write_text(self.log_file, f"{entry.render()}\n{current}")
        logger.debug("Logged commit %s by %r", fingerprint, author)
        return entry
