# src/spicelib_core/parser/tokenizer.py
"""
Turns raw SPICE text into a stream of logical lines.

Every parser in this package works on the output of `LineTokenizer`, never on
physical lines, so `+` continuations are always joined before a line is
classified as a `.MODEL` header, a `.SUBCKT` header or a component.
"""
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# A '*' or ';' starts an inline comment when it opens the line or follows whitespace.
_INLINE_COMMENT_REGEX = re.compile(r"(^|\s)[*;]")


@dataclass(frozen=True)
class LogicalLine:
    """One code line after continuation joining and comment removal."""
    text: str
    line_number: int
    leading_comments: Tuple[str, ...] = ()

    @property
    def keyword(self) -> str:
        """Upper-cased first token, e.g. '.MODEL' or 'R1'."""
        head = self.text.split(None, 1)
        return head[0].upper() if head else ""

    def is_directive(self, name: str) -> bool:
        return self.keyword == name.upper()


def is_comment_line(raw_line: str) -> bool:
    return raw_line.lstrip().startswith("*")


def strip_inline_comment(text: str) -> str:
    match = _INLINE_COMMENT_REGEX.search(text)
    if match is None:
        return text.strip()
    return text[:match.start()].strip()


class _PendingLine:
    """Mutable accumulator for the logical line currently being built."""

    def __init__(self, text: str, line_number: int, leading_comments: Tuple[str, ...]):
        self.parts = [text] if text else []
        self.line_number = line_number
        self.leading_comments = leading_comments

    def append(self, text: str):
        if text:
            self.parts.append(text)

    def freeze(self) -> Optional[LogicalLine]:
        joined = " ".join(self.parts).strip()
        if not joined:
            return None
        return LogicalLine(text=joined, line_number=self.line_number, leading_comments=self.leading_comments)


class LineTokenizer:
    """
    Joins `+` continuation lines, drops comments and yields logical lines.

    Pure comment lines never reach the output as code. The contiguous run of
    comment lines directly above a code line is kept on that line as
    `leading_comments`, which is how subcircuit metadata travels to the
    subcircuit parser. Blank lines do not interrupt such a run.
    """

    def tokenize(self, text: str) -> List[LogicalLine]:
        logical_lines: List[LogicalLine] = []
        pending: Optional[_PendingLine] = None
        comment_run: List[str] = []

        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            stripped = raw_line.strip()
            if not stripped:
                continue

            if is_comment_line(stripped):
                comment_run.append(stripped)
                continue

            if stripped.startswith("+"):
                if pending is None:
                    logger.debug("Dropping continuation line %d with no preceding code line.", line_number)
                    continue
                pending.append(strip_inline_comment(stripped[1:]))
                # Comments between a line and its continuation belong to neither.
                comment_run = []
                continue

            code = strip_inline_comment(stripped)
            if not code:
                continue

            if pending is not None and (frozen := pending.freeze()) is not None:
                logical_lines.append(frozen)
            pending = _PendingLine(code, line_number, tuple(comment_run))
            comment_run = []

        if pending is not None and (frozen := pending.freeze()) is not None:
            logical_lines.append(frozen)

        logger.debug("Tokenized %d logical line(s).", len(logical_lines))
        return logical_lines
