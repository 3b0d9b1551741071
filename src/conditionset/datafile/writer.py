"""Writer for indented, tokenized data files.

The inverse of the reader: ``write`` emits one line of tokens at the
current depth, and ``begin_child`` / ``end_child`` open and close a
nested block (one tab per level).
"""

from __future__ import annotations

from pathlib import Path

from conditionset.errors import DataWriterError

_INDENT = "\t"


def quote_token(token: str | int) -> str:
    """Render a token so the reader gives back the same text.

    Tokens that are empty, contain whitespace, or start with ``#`` or a
    quote are wrapped in double quotes, or in backticks if they contain a
    double quote themselves. A token like that which contains both quote
    characters has no readable form.

    Raises:
        DataWriterError: If a token that needs quoting contains both quote
            characters.
    """
    if isinstance(token, int):
        return str(token)
    needs_quotes = (
        not token
        or any(c.isspace() for c in token)
        or token.startswith("#")
        or token[0] in ('"', "`")
    )
    if not needs_quotes:
        return token
    if '"' in token:
        if "`" in token:
            raise DataWriterError(f"Token cannot be quoted: {token!r}")
        return f"`{token}`"
    return f'"{token}"'


class DataWriter:
    """Accumulates data-file text, optionally saving it to ``path``."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self._lines: list[str] = []
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def write(self, *tokens: str | int) -> None:
        """Write one line. With no tokens, writes a blank line."""
        if not tokens:
            self._lines.append("")
            return
        line = " ".join(quote_token(t) for t in tokens)
        self._lines.append(_INDENT * self._depth + line)

    def begin_child(self) -> None:
        self._depth += 1

    def end_child(self) -> None:
        if self._depth == 0:
            raise DataWriterError("end_child() called without a matching begin_child()")
        self._depth -= 1

    def getvalue(self) -> str:
        """The text written so far, newline-terminated."""
        return "".join(f"{line}\n" for line in self._lines)

    def save(self) -> Path:
        """Write the accumulated text to ``path``.

        Raises:
            DataWriterError: If no path was given or a child block is still open.
        """
        if self.path is None:
            raise DataWriterError("DataWriter has no output path")
        if self._depth != 0:
            raise DataWriterError(f"{self._depth} child block(s) still open")
        self.path.write_text(self.getvalue(), encoding="utf-8")
        return self.path
