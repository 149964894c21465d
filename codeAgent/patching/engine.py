"""Apply search/replace edits to files using the fuzzy line locator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from codeAgent.utils.error_handler import AgentError

from .locator import LineMatch, LocateFailure, locate

LOGGER = logging.getLogger(__name__)

__all__ = ["MatchNotFoundError", "PatchEngine", "detect_newline", "split_edit_text", "split_lines"]


class MatchNotFoundError(AgentError):
    """The search text could not be located closely enough in the file."""

    def __init__(self, path: Union[str, Path], failure: LocateFailure):
        self.path = str(path)
        self.best_text = failure.best_text
        self.distance = failure.distance
        self.threshold = failure.threshold
        if failure.best_text is None:
            message = (
                f"Search text not found in {self.path}: "
                f"the search block has more lines than the file"
            )
        else:
            message = (
                f"Search text not found in {self.path} "
                f"(closest match distance {failure.distance}, allowed {failure.threshold:g}). "
                f"Closest match:\n{failure.best_text}"
            )
        super().__init__(message)


def detect_newline(content: str) -> str:
    """Return the newline sequence used by most lines of ``content``."""
    crlf = content.count("\r\n")
    return "\r\n" if crlf > content.count("\n") - crlf else "\n"


def split_lines(content: str) -> Tuple[List[str], List[str]]:
    """Split ``content`` into lines and the terminator of each line.

    Only LF and CRLF end a line, so a file with mixed line endings is
    split line by line. The last entry is the text after the final
    terminator, with an empty terminator.
    """
    pieces = content.split("\n")
    lines: List[str] = []
    endings: List[str] = []
    for index, piece in enumerate(pieces):
        if index == len(pieces) - 1:
            lines.append(piece)
            endings.append("")
        elif piece.endswith("\r"):
            lines.append(piece[:-1])
            endings.append("\r\n")
        else:
            lines.append(piece)
            endings.append("\n")
    return lines, endings


def _edited_endings(endings: List[str], match: LineMatch, inserted: int, newline: str) -> List[str]:
    # replacement lines take the file's newline; the last one inherits the
    # terminator of the block it replaces
    block_end = endings[match.end - 1] if match.length else newline
    new = [newline] * inserted
    if new:
        new[-1] = block_end
    edited = endings[:match.start] + new + endings[match.end:]
    if not new and match.length and match.end == len(endings) and match.start > 0:
        edited[match.start - 1] = block_end
    return edited


def split_edit_text(text: str) -> List[str]:
    """Split model-authored edit text into lines.

    CRLF is normalised to LF and one trailing newline is ignored.
    """
    normalised = text.replace("\r\n", "\n")
    if normalised.endswith("\n"):
        normalised = normalised[:-1]
    return normalised.split("\n")


class PatchEngine:
    """Rewrite files by replacing a located line block.

    Edits are not idempotent: once a block has been replaced, re-applying the
    same search text fails unless the replacement still resembles it.
    The whole file is rewritten on success; a failure mid-write is not
    recovered.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def apply_to_lines(
        self,
        lines: List[str],
        search: str,
        replace: str,
    ) -> Tuple[List[str], Union[LineMatch, LocateFailure]]:
        """Return the edited lines and the locate outcome.

        An empty ``search`` inserts ``replace`` before the first line.
        An empty ``replace`` deletes the located block.
        """
        replacement = split_edit_text(replace) if replace else []

        if not search:
            return replacement + lines, LineMatch(start=0, length=0, distance=0)

        outcome = locate(lines, split_edit_text(search))
        if isinstance(outcome, LocateFailure):
            return lines, outcome
        return lines[:outcome.start] + replacement + lines[outcome.end:], outcome

    def apply_to_text(self, content: str, search: str, replace: str, path: Optional[str] = None) -> Tuple[str, LineMatch]:
        """Edit ``content`` in memory, keeping each line's own terminator.

        Raises:
            MatchNotFoundError: If the search text cannot be located
        """
        newline = detect_newline(content)
        lines, endings = split_lines(content)
        edited, outcome = self.apply_to_lines(lines, search, replace)
        if isinstance(outcome, LocateFailure):
            raise MatchNotFoundError(path or "<text>", outcome)
        inserted = len(edited) - len(lines) + outcome.length
        edited_endings = _edited_endings(endings, outcome, inserted, newline)
        return "".join(line + end for line, end in zip(edited, edited_endings)), outcome

    def apply(self, path: Union[str, Path], search: str, replace: str) -> str:
        """Apply one edit to the file at ``path``.

        Returns:
            A short summary of the applied edit

        Raises:
            FileNotFoundError: If ``path`` does not exist
            MatchNotFoundError: If the search text cannot be located
        """
        target = Path(path)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        # newline="" keeps CRLF intact on read and write
        with open(target, "r", encoding=self.encoding, newline="") as f:
            content = f.read()

        new_content, match = self.apply_to_text(content, search, replace, path=str(path))

        with open(target, "w", encoding=self.encoding, newline="") as f:
            f.write(new_content)

        if not search:
            LOGGER.info(f"Inserted text at top of {path}")
            return f"Inserted text at the start of {path}"

        LOGGER.info(f"Edited {path}: lines {match.start + 1}-{match.end} (distance {match.distance})")
        if match.distance == 0:
            return f"Edited {path}: replaced lines {match.start + 1}-{match.end}"
        return (
            f"Edited {path}: replaced lines {match.start + 1}-{match.end} "
            f"(approximate match, distance {match.distance})"
        )
