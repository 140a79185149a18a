"""
Token type registry

Maps tag sigils to TokenSpec entries and builds tokens of the matching kind.
The parser only asks the registry two things: the pattern recognizing every
sigil that may follow an open delimiter, and a fresh token for a given tag
type.
"""

import re
from typing import Dict, List, Optional

from ..models.tags import Tags
from ..models.tokens import Token, TokenKind, TokenSpec

# Tag types that are words rather than sigils; never matched after "{{"
WORD_TYPES = {"name", "text"}


class TokenRegistry:
    """
    Registry of token specifications

    Maps tag types (and their aliases) to TokenSpec objects containing the
    token kind and the section/non-space capabilities.
    """

    def __init__(self) -> None:
        """Initialize the registry and register the built-in Mustache tags"""
        self.specs: Dict[str, TokenSpec] = {}
        self._sigil_pattern: Optional[re.Pattern] = None
        self.textTokens_register()
        self.interpolationTokens_register()
        self.sectionTokens_register()
        self.otherTokens_register()

    def register(self, spec: TokenSpec) -> None:
        """Register a token specification (replacing any with the same sigil)"""
        self.specs[spec.sigil] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec
        self._sigil_pattern = None

    def spec_get(self, tag_type: str) -> Optional[TokenSpec]:
        """Get the specification for a tag type, or None if unregistered"""
        return self.specs.get(tag_type)

    def specs_listByKind(self, kind: TokenKind) -> List[TokenSpec]:
        """All distinct specs producing a kind"""
        found: List[TokenSpec] = []
        for spec in self.specs.values():
            if spec.kind is kind and spec not in found:
                found.append(spec)
        return found

    @property
    def sigil_pattern(self) -> re.Pattern:
        """
        Pattern matching any registered sigil

        Longer sigils are tried first so multi-character sigils win over
        their single-character prefixes. Rebuilt after register().

        Example:
            >>> TokenRegistry().sigil_pattern.match("#items").group(0)
            '#'
        """
        if self._sigil_pattern is None:
            sigils = sorted(
                (sigil for sigil in self.specs if sigil not in WORD_TYPES),
                key=len,
                reverse=True,
            )
            self._sigil_pattern = re.compile("|".join(re.escape(sigil) for sigil in sigils))
        return self._sigil_pattern

    def token_create(self, tag_type: str, tags: Optional[Tags]) -> Token:
        """
        Build a new token for a tag type

        Args:
            tag_type: Classified tag type ("name", "#", "text", ...)
            tags: Delimiters active when the tag was read

        Returns:
            Token of the registered kind, or a GENERIC token when tag_type
            has no specification
        """
        spec = self.spec_get(tag_type)
        if spec is None:
            return Token(tag_type=tag_type, kind=TokenKind.GENERIC, tags=tags)

        return Token(
            tag_type=tag_type,
            kind=spec.kind,
            tags=tags,
            is_section=spec.is_section,
            is_non_space=spec.is_non_space,
        )

    def textTokens_register(self) -> None:
        """Register the raw text token"""
        self.register(TokenSpec(
            sigil="text",
            kind=TokenKind.TEXT,
            description="Literal template text",
        ))

    def interpolationTokens_register(self) -> None:
        """Register variable interpolation tags"""
        self.register(TokenSpec(
            sigil="name",
            kind=TokenKind.VARIABLE,
            description="HTML-escaped variable: {{name}}",
            is_non_space=True,
        ))
        self.register(TokenSpec(
            sigil="&",
            kind=TokenKind.UNESCAPED,
            description="Unescaped variable: {{&name}} or {{{name}}}",
            is_non_space=True,
            aliases=["{"],
        ))

    def sectionTokens_register(self) -> None:
        """Register section open/close tags"""
        self.register(TokenSpec(
            sigil="#",
            kind=TokenKind.SECTION,
            description="Section: {{#items}}...{{/items}}",
            is_section=True,
        ))
        self.register(TokenSpec(
            sigil="^",
            kind=TokenKind.INVERTED,
            description="Inverted section: {{^items}}...{{/items}}",
            is_section=True,
        ))
        self.register(TokenSpec(
            sigil="/",
            kind=TokenKind.SECTION_END,
            description="Section close: {{/items}}",
        ))

    def otherTokens_register(self) -> None:
        """Register comments, partials and delimiter changes"""
        self.register(TokenSpec(
            sigil="!",
            kind=TokenKind.COMMENT,
            description="Comment: {{! ignored }}",
        ))
        self.register(TokenSpec(
            sigil=">",
            kind=TokenKind.PARTIAL,
            description="Partial: {{>header}}",
        ))
        self.register(TokenSpec(
            sigil="=",
            kind=TokenKind.DELIMITER,
            description="Delimiter change: {{=<% %>=}}",
        ))
