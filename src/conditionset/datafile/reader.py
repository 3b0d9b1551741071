"""Reader for indented, tokenized data files.

Each non-blank line becomes a DataNode holding its tokens. A line that
is indented deeper than the line before it becomes a child of that
line, so a file reads as a tree::

    mission "Deliver Cargo"
        to offer
            has "license: Merchant"
            not "event: war"

Tokens are separated by whitespace. A token that contains spaces can be
quoted with ``"`` or `````; the quote characters are not part of the
token, so ``""`` is an empty token. A ``#`` that starts a token begins
a comment running to the end of the line.

Reading never fails on malformed content. Problems are reported through
``DataNode.print_trace``, which logs the offending line along with its
ancestors and records a Diagnostic on the owning DataFile.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from conditionset.errors import DataFileError

logger = logging.getLogger(__name__)

_QUOTES = ('"', "`")

# Plain decimal or scientific notation; "inf"/"nan" are names, not numbers
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")

_BOM = "\ufeff"


@dataclass
class Diagnostic:
    """A single problem reported while reading or interpreting a file."""

    message: str
    line_number: int
    text: str
    source: str = ""

    def __str__(self) -> str:
        where = f"{self.source}:" if self.source else ""
        return f"{where}L{self.line_number}: {self.message} {self.text}".rstrip()


@dataclass
class DataNode:
    """One tokenized line and the lines nested under it."""

    tokens: list[str] = field(default_factory=list)
    children: list[DataNode] = field(default_factory=list)
    line_number: int = 0
    text: str = ""
    parent: DataNode | None = field(default=None, repr=False, compare=False)
    _file: DataFile | None = field(default=None, repr=False, compare=False)

    def size(self) -> int:
        """Number of tokens on this line."""
        return len(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[DataNode]:
        return iter(self.children)

    def has_children(self) -> bool:
        return bool(self.children)

    def token(self, index: int) -> str:
        """Token text at ``index``, or an empty string if out of range."""
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return ""

    def is_number(self, index: int) -> bool:
        """True if the token at ``index`` is a numeric literal."""
        return bool(_NUMBER.fullmatch(self.token(index)))

    def value(self, index: int) -> int | float:
        """Numeric value of the token at ``index``.

        Integer literals come back as exact ints, other numbers as floats.
        Returns 0.0 for an index past the end of the line and NaN for a
        token that is not a number, printing a trace in both cases.
        """
        if not 0 <= index < len(self.tokens):
            self.print_trace(f"Requested token index ({index}) is out of range.")
            return 0.0
        if not self.is_number(index):
            self.print_trace(f"Cannot convert value to a number: {self.tokens[index]!r}")
            return math.nan
        token = self.tokens[index]
        if _INTEGER.fullmatch(token):
            return int(token)
        return float(token)

    def print_trace(self, message: str = "") -> str:
        """Report a problem with this line.

        The trace lists the message, then every ancestor line from the
        top of the file down to this one. It is logged at WARNING and
        recorded on the owning DataFile. Returns the trace text.
        """
        lines = [message] if message else []
        chain: list[DataNode] = []
        node: DataNode | None = self
        while node is not None and node.parent is not None:
            chain.append(node)
            node = node.parent
        for depth, ancestor in enumerate(reversed(chain)):
            lines.append(f"L{ancestor.line_number}: {'  ' * depth}{ancestor.text}")
        trace = "\n".join(lines)

        owner = self._owner()
        source = owner.source if owner is not None else ""
        logger.warning("%s%s", f"{source}: " if source else "", trace)
        if owner is not None:
            owner.diagnostics.append(
                Diagnostic(
                    message=message,
                    line_number=self.line_number,
                    text=self.text,
                    source=source,
                )
            )
        return trace

    def _owner(self) -> DataFile | None:
        node: DataNode | None = self
        while node is not None:
            if node._file is not None:
                return node._file
            node = node.parent
        return None


class DataFile:
    """A parsed data file: a root node whose children are top-level lines."""

    def __init__(self, text: str = "", source: str = "") -> None:
        self.source = source
        self.diagnostics: list[Diagnostic] = []
        self.root = DataNode(_file=self)
        _parse_into(self.root, text)

    @classmethod
    def from_string(cls, text: str, source: str = "") -> DataFile:
        return cls(text, source=source)

    @classmethod
    def load(cls, path: str | Path) -> DataFile:
        """Read and parse a UTF-8 data file.

        Raises:
            DataFileError: If the file cannot be read or decoded.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8-sig")
        except FileNotFoundError as e:
            raise DataFileError("File not found", path=str(path)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise DataFileError(str(e), path=str(path)) from e
        return cls(text, source=str(path))

    def __iter__(self) -> Iterator[DataNode]:
        return iter(self.root.children)

    def __len__(self) -> int:
        return len(self.root.children)

    def find(self, key: str) -> DataNode | None:
        """First top-level node whose tokens, joined by single spaces, equal ``key``."""
        for node in self.root.children:
            if " ".join(node.tokens) == key:
                return node
        return None


# ------------------------------------------------------------------ #
# Tokenizer
# ------------------------------------------------------------------ #


def _tokenize(line: str) -> list[str]:
    """Split one line (without indentation) into tokens."""
    tokens: list[str] = []
    pos = 0
    end = len(line)

    while pos < end:
        char = line[pos]
        if char.isspace():
            pos += 1
            continue
        if char == "#":
            break

        if char in _QUOTES:
            # Unterminated quotes run to the end of the line
            close = line.find(char, pos + 1)
            if close < 0:
                close = end
            tokens.append(line[pos + 1 : close])
            pos = close + 1
        else:
            start = pos
            while pos < end and not line[pos].isspace():
                pos += 1
            tokens.append(line[start:pos])

    return tokens


def _parse_into(root: DataNode, text: str) -> None:
    """Build the node tree for ``text`` under ``root``."""
    # (indent, node) for the current line and each open ancestor
    stack: list[tuple[int, DataNode]] = [(-1, root)]
    text = text.removeprefix(_BOM)

    for line_number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.lstrip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(raw) - len(stripped)

        tokens = _tokenize(stripped)
        if not tokens:
            continue

        while stack[-1][0] >= indent:
            stack.pop()
        parent = stack[-1][1]

        node = DataNode(
            tokens=tokens,
            line_number=line_number,
            text=stripped.rstrip(),
            parent=parent,
        )
        parent.children.append(node)
        stack.append((indent, node))
