"""
Token models

Defines the closed set of token kinds, the registry specification that maps
a tag sigil onto a kind plus its capability flags, and the Token dataclass
produced by the parser.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .tags import Tags


class TokenKind(Enum):
    """
    Kinds of template tokens

    GENERIC covers tag types that have no registered specification.
    """
    TEXT = "text"                # raw template text
    VARIABLE = "variable"        # {{name}}
    UNESCAPED = "unescaped"      # {{&name}}, {{{name}}}
    SECTION = "section"          # {{#name}}
    INVERTED = "inverted"        # {{^name}}
    SECTION_END = "section_end"  # {{/name}}
    COMMENT = "comment"          # {{!text}}
    PARTIAL = "partial"          # {{>name}}
    DELIMITER = "delimiter"      # {{=<% %>=}}
    GENERIC = "generic"


@dataclass
class TokenSpec:
    """
    Registry entry for one tag type

    Attributes:
        sigil: Tag type string ("#", "/", or a word such as "name"/"text")
        kind: Token kind constructed for this sigil
        description: Human-readable description
        is_section: Opens a section; requires a matching "/" closer
        is_non_space: Counts as content on its line (no standalone trimming)
        aliases: Alternative sigils recognized for the same spec
    """
    sigil: str
    kind: TokenKind
    description: str = ""
    is_section: bool = False
    is_non_space: bool = False
    aliases: List[str] = field(default_factory=list)


@dataclass
class Token:
    """
    A single template token

    Section openers receive a children list and the offset of their
    closer during nesting; every other token leaves both as None.

    Attributes:
        tag_type: Sigil the token was created for ("name", "#", "text", ...)
        kind: Token kind from the registry
        value: Trimmed tag content, or the literal text for TEXT tokens
        start: Offset of the first character in the template
        end: Offset one past the last character
        tags: Delimiters active when the token was created
        is_section: Section opener capability
        is_non_space: Non-space content capability
        children: Tokens nested under a section opener
        parent_section_end: Offset of the matching closing tag
        buffer: Text accumulator used while squishing TEXT tokens

    Example:
        For "{{#a}}x{{/a}}":
        Token(tag_type="#", value="a", start=0, end=6,
              children=[Token(tag_type="text", value="x", ...)],
              parent_section_end=7)
    """
    tag_type: str
    kind: TokenKind = TokenKind.GENERIC
    value: str = ""
    start: int = 0
    end: int = 0
    tags: Optional[Tags] = None
    is_section: bool = False
    is_non_space: bool = False
    children: Optional[List["Token"]] = None
    parent_section_end: Optional[int] = None
    buffer: Optional[List[str]] = field(default=None, repr=False, compare=False)

    @property
    def is_text(self) -> bool:
        return self.kind is TokenKind.TEXT

    def text_append(self, other: "Token") -> None:
        """Merge a following TEXT token into this accumulator"""
        if self.buffer is None:
            self.buffer = [self.value]
        self.buffer.append(other.value)
        self.end = other.end

    def text_finalize(self) -> None:
        """Collapse the accumulator buffer back into value"""
        if self.buffer is not None:
            self.value = "".join(self.buffer)
            self.buffer = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain-data view of the token (recursing into children)

        Used by the CLI for YAML output.
        """
        data: Dict[str, Any] = {
            "type": self.tag_type,
            "kind": self.kind.value,
            "value": self.value,
            "start": self.start,
            "end": self.end,
        }
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
            data["section_end"] = self.parent_section_end
        return data
