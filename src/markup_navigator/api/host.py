"""Host editor interface and an in-memory implementation.

The navigator only talks to the editing surface through :class:`TextHost`.
:class:`TextBuffer` implements it over a plain string and backs the
command-line tool and the tests.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple, Union


def line_bounds(text: str, offset: int) -> Tuple[str, int]:
    """Return the text of the line containing ``offset`` and its end offset.

    Lines are separated by ``\\n``; a trailing ``\\r`` is not part of the line
    text. The end offset is the position just after the last character of the
    line text, which is also where the line terminator starts.

    Examples:
        >>> line_bounds("ab\\ncd", 1)
        ('ab', 2)
        >>> line_bounds("ab\\r\\ncd", 4)
        ('cd', 6)
    """
    offset = max(0, min(offset, len(text)))
    line_start = text.rfind("\n", 0, offset) + 1
    newline = text.find("\n", offset)
    line_stop = len(text) if newline == -1 else newline
    line_text = text[line_start:line_stop]
    if line_text.endswith("\r"):
        line_text = line_text[:-1]
    return line_text, line_start + len(line_text)


class TextHost(ABC):
    """The editing surface a :class:`MarkupNavigator` drives.

    Offsets are character offsets into :meth:`get_text`. The version must
    increase strictly on every edit of the document.
    """

    @property
    @abstractmethod
    def document_id(self) -> str:
        """Stable identity of the document (e.g. its URI)."""

    @abstractmethod
    def get_text(self) -> str:
        """Return the full document text."""

    @abstractmethod
    def get_version(self) -> int:
        """Return the document version."""

    @abstractmethod
    def get_cursor_offset(self) -> int:
        """Return the cursor offset."""

    @abstractmethod
    def set_cursor_offset(self, offset: int) -> None:
        """Move the cursor to ``offset``."""

    @abstractmethod
    def reveal_offset(self, offset: int) -> None:
        """Scroll so that ``offset`` is visible."""

    @abstractmethod
    def get_line_text_and_end_offset(self, offset: int) -> Tuple[str, int]:
        """Return the text of the line containing ``offset`` and its end offset."""

    def is_line_end(self, offset: int) -> bool:
        """Check whether ``offset`` sits at the end of its line."""
        _, line_end = self.get_line_text_and_end_offset(offset)
        return offset == line_end


class TextBuffer(TextHost):
    """In-memory document with a cursor.

    Examples:
        >>> buffer = TextBuffer("<p>Hi</p>", cursor_offset=3)
        >>> buffer.get_version()
        1
        >>> buffer.insert(0, "<div>")
        >>> buffer.get_version(), buffer.get_cursor_offset()
        (2, 8)
    """

    def __init__(
        self,
        text: str = "",
        document_id: str = "untitled",
        cursor_offset: int = 0,
        version: int = 1
    ) -> None:
        self._text = text
        self._document_id = document_id
        self._version = version
        self._cursor = self._clamp(cursor_offset)
        self.revealed: List[int] = []

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        encoding: str = "utf-8",
        cursor_offset: int = 0
    ) -> "TextBuffer":
        """Load a buffer from a file; the resolved path is the document id."""
        path_obj = Path(path)
        text = path_obj.read_text(encoding=encoding)
        return cls(text, document_id=path_obj.resolve().as_uri(), cursor_offset=cursor_offset)

    def _clamp(self, offset: int) -> int:
        return max(0, min(offset, len(self._text)))

    @property
    def document_id(self) -> str:
        return self._document_id

    def get_text(self) -> str:
        return self._text

    def get_version(self) -> int:
        return self._version

    def get_cursor_offset(self) -> int:
        return self._cursor

    def set_cursor_offset(self, offset: int) -> None:
        self._cursor = self._clamp(offset)

    def reveal_offset(self, offset: int) -> None:
        self.revealed.append(offset)

    @property
    def last_revealed(self) -> Optional[int]:
        return self.revealed[-1] if self.revealed else None

    def get_line_text_and_end_offset(self, offset: int) -> Tuple[str, int]:
        return line_bounds(self._text, offset)

    def replace_text(self, text: str) -> None:
        """Replace the whole text, bumping the version."""
        self._text = text
        self._version += 1
        self._cursor = self._clamp(self._cursor)

    def insert(self, offset: int, fragment: str) -> None:
        """Insert ``fragment`` at ``offset``; a cursor at or after it shifts."""
        offset = self._clamp(offset)
        self._text = self._text[:offset] + fragment + self._text[offset:]
        self._version += 1
        if self._cursor >= offset:
            self._cursor += len(fragment)

    def offset_to_position(self, offset: int) -> Tuple[int, int]:
        """Convert an offset to a 1-based ``(line, column)`` pair."""
        offset = self._clamp(offset)
        line = self._text.count("\n", 0, offset) + 1
        line_start = self._text.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1
