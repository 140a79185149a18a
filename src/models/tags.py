"""
Delimiter models

Tags is the open/close delimiter pair active while scanning a template,
DelimiterRegexes the compiled patterns derived from it.
"""

import re
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Tags:
    """
    Immutable open/close delimiter pair

    Two Tags are equal iff both delimiters match. The canonical string form
    ("open close") is the key used by the delimiter regex cache.

    Attributes:
        open: Opening delimiter (e.g., "{{")
        close: Closing delimiter (e.g., "}}")

    Example:
        >>> str(Tags("<%", "%>"))
        '<% %>'
    """
    open: str = "{{"
    close: str = "}}"

    def __post_init__(self) -> None:
        for delimiter in (self.open, self.close):
            if not delimiter or any(char.isspace() for char in delimiter):
                raise ValueError(f"Delimiters must be non-empty and free of whitespace, got {delimiter!r}")

    def __str__(self) -> str:
        return f"{self.open} {self.close}"

    @classmethod
    def from_sequence(cls, parts: Sequence[str]) -> "Tags":
        """
        Build Tags from an (open, close) pair

        Raises:
            ValueError: If parts does not hold exactly two non-empty strings
        """
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Expected exactly two delimiters, got {list(parts)!r}")
        return cls(parts[0], parts[1])

    @classmethod
    def from_string(cls, value: str) -> "Tags":
        """
        Parse the body of a delimiter-change tag

        Example:
            >>> Tags.from_string("<% %>")
            Tags(open='<%', close='%>')
        """
        return cls.from_sequence(value.split())


DEFAULT_TAGS = Tags("{{", "}}")


@dataclass(frozen=True)
class DelimiterRegexes:
    """
    Compiled patterns for one delimiter pair

    Attributes:
        open_tag: Open delimiter plus trailing whitespace
        close_tag: Leading whitespace plus close delimiter
        triple_close: Leading whitespace plus "}" and close delimiter
    """
    open_tag: re.Pattern
    close_tag: re.Pattern
    triple_close: re.Pattern
