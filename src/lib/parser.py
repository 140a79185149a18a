"""
Parser for Mustache templates

Transforms template source into a nested tree of typed tokens for a
renderer to walk.

The parser operates in three phases:
1. Tokenizing: Scan text and tags, apply delimiter changes, strip
   standalone tag lines and validate section boundaries
2. Squishing: Merge runs of single-character text tokens
3. Nesting: Move the tokens between a section's open and close tags under
   the opener

Key features:
- Custom delimiters, both per call and via {{=<% %>=}} tags
- Standalone-line whitespace removal per the Mustache spec
- Triple mustache {{{name}}} read as {{&name}}
- Character offsets on every token

Example:
    >>> tokens = parse("Hello {{#people}}{{name}} {{/people}}!")
    >>> [token.tag_type for token in tokens]
    ['text', '#', 'text']
    >>> [child.value for child in tokens[1].children]
    ['name', ' ']
"""

import re
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..config import appsettings
from ..models.tags import DelimiterRegexes, Tags
from ..models.tokens import Token
from .errors import (
    InvalidDelimiterError,
    MismatchedSectionError,
    UnclosedSectionError,
    UnclosedTagError,
    UnopenedSectionError,
)
from .log import LOG
from .scanner import Scanner
from .tagcache import DelimiterRegexCache, regex_cache
from .tokens import TokenRegistry

WHITESPACE_PATTERN = re.compile(r"\s*")
EQUALS_PATTERN = re.compile(r"\s*=")
CURLY_PATTERN = re.compile(r"\s*\}")

TagsLike = Union[Tags, Sequence[str]]


def tags_coerce(tags: Optional[TagsLike]) -> Tags:
    """
    Normalize a caller-supplied delimiter pair

    Args:
        tags: Tags, an (open, close) sequence, or None for the configured default

    Returns:
        Tags instance
    """
    if tags is None:
        return Tags.from_sequence(appsettings.tagPair_get())
    if isinstance(tags, Tags):
        return tags
    return Tags.from_sequence(tags)


class Parser:
    """
    Tokenizer and tree builder for Mustache templates

    A Parser holds only its collaborators (token registry and delimiter
    regex cache); all per-template state lives inside a single parse() call,
    so one instance can serve many threads.
    """

    def __init__(
        self,
        registry: Optional[TokenRegistry] = None,
        cache: Optional[DelimiterRegexCache] = None,
    ):
        """
        Initialize parser

        Args:
            registry: Token type registry (built-in Mustache tags if omitted)
            cache: Delimiter regex cache (process-wide cache if omitted)
        """
        if registry is None:
            registry = TokenRegistry()
        self.registry = registry
        self.cache = cache if cache is not None else regex_cache

    def parse(self, template: Optional[str], tags: Optional[TagsLike] = None) -> List[Token]:
        """
        Parse template source into a token tree

        Args:
            template: Template source; None or "" yields []
            tags: Initial delimiters (defaults to the configured "{{ }}")

        Returns:
            Top-level tokens; section openers carry their body in children

        Raises:
            UnclosedTagError: Tag opened but never closed
            UnopenedSectionError: Closing tag without an open section
            MismatchedSectionError: Closing tag naming the wrong section
            UnclosedSectionError: Section still open at end of input
            InvalidDelimiterError: Malformed {{=...=}} tag

        Example:
            >>> tokens = Parser().parse("{{=<% %>=}}<%name%>")
            >>> tokens[1].tag_type, tokens[1].value
            ('name', 'name')
        """
        if not template:
            return []

        LOG(f"Parsing template of {len(template)} characters", level=2)
        tokens = self.tokens_scan(template, tags_coerce(tags))
        tree = self.tokens_nest(self.tokens_squish(tokens))
        LOG(f"Parsed {len(tree)} top-level tokens", level=2)
        return tree

    def tokens_scan(self, template: str, tags: Tags) -> List[Token]:
        """
        Tokenize template into a flat list

        Text is emitted one character per token so that the whitespace of a
        standalone tag line can be removed character by character. Indices
        of whitespace tokens on the current line are kept on a stack and
        dropped when the line turns out to hold nothing but tags.

        Args:
            template: Template source
            tags: Delimiters in effect at the start

        Returns:
            Flat token list in source order (section closers included)
        """
        current_tags = tags
        regexes = self.cache.regexes_getOrBuild(current_tags)

        scanner = Scanner(template)
        sections: List[Token] = []
        tokens: List[Token] = []
        spaces: List[int] = []
        has_tag = False
        non_space = False

        while not scanner.at_end():
            start = scanner.position

            text = scanner.scan_until(regexes.open_tag)
            for char in text:
                if char.isspace():
                    spaces.append(len(tokens))
                else:
                    non_space = True

                text_token = self.registry.token_create("text", current_tags)
                text_token.value = char
                text_token.start = start
                text_token.end = start + 1
                tokens.append(text_token)
                start += 1

                if char != "\n":
                    continue

                if has_tag and not non_space:
                    while spaces:
                        del tokens[spaces.pop()]
                else:
                    spaces = []

                has_tag = False
                non_space = False

            if not scanner.scan_while(regexes.open_tag):
                break

            has_tag = True

            tag_type = scanner.scan_while(self.registry.sigil_pattern) or "name"
            scanner.scan_while(WHITESPACE_PATTERN)

            value, tag_type = self.tagValue_scan(scanner, tag_type, regexes)

            if not scanner.scan_while(regexes.close_tag):
                raise UnclosedTagError(scanner.position)

            token = self.registry.token_create(tag_type, current_tags)
            token.value = value
            token.start = start
            token.end = scanner.position
            tokens.append(token)

            if appsettings.debug_mode:
                LOG(f"Tag '{tag_type}' value '{value}' at {start}-{token.end}", level=3)

            if token.is_section:
                sections.append(token)
            elif token.is_non_space:
                non_space = True
            elif tag_type == "/":
                if not sections:
                    raise UnopenedSectionError(value, start)

                open_section = sections.pop()
                if open_section.value != value:
                    raise MismatchedSectionError(open_section.value, value, start)
            elif tag_type == "=":
                try:
                    current_tags = Tags.from_string(value)
                except ValueError as err:
                    raise InvalidDelimiterError(value, start) from err
                regexes = self.cache.regexes_getOrBuild(current_tags)
                LOG(f"Delimiters switched to '{current_tags}' at {start}", level=2)

        if sections:
            raise UnclosedSectionError(sections[-1].value, scanner.position)

        return tokens

    @staticmethod
    def tagValue_scan(scanner: Scanner, tag_type: str, regexes: DelimiterRegexes) -> Tuple[str, str]:
        """
        Read a tag's value and move up to its close delimiter

        Args:
            scanner: Scanner positioned just after the sigil and whitespace
            tag_type: Classified tag type
            regexes: Active delimiter patterns

        Returns:
            (value, effective tag type); "{" becomes "&"
        """
        if tag_type == "=":
            value = scanner.scan_until(EQUALS_PATTERN)
            scanner.scan_while(EQUALS_PATTERN)
            scanner.scan_until(regexes.close_tag)
        elif tag_type == "{":
            value = scanner.scan_until(regexes.triple_close)
            scanner.scan_while(CURLY_PATTERN)
            scanner.scan_until(regexes.close_tag)
            tag_type = "&"
        else:
            value = scanner.scan_until(regexes.close_tag)

        return value, tag_type

    @staticmethod
    def tokens_squish(tokens: Iterable[Token]) -> Iterator[Token]:
        """
        Merge consecutive text tokens

        The first text token of a run absorbs the others (value and end
        offset); the absorbed tokens are dropped. Lazy and single-pass.

        Args:
            tokens: Flat token sequence

        Yields:
            Tokens with no two adjacent text tokens
        """
        accumulator: Optional[Token] = None
        for token in tokens:
            if accumulator is not None and token.is_text:
                accumulator.text_append(token)
                continue

            if accumulator is not None:
                accumulator.text_finalize()
            accumulator = token if token.is_text else None
            yield token

        if accumulator is not None:
            accumulator.text_finalize()

    @staticmethod
    def tokens_nest(tokens: Iterable[Token]) -> List[Token]:
        """
        Build the token tree

        Section openers collect everything up to their closer as children
        and record the closer's start offset. Closers themselves are dropped.

        Args:
            tokens: Squished flat token sequence (sections already validated)

        Returns:
            Top-level token list
        """
        nested: List[Token] = []
        collector = nested
        sections: List[Token] = []

        for token in tokens:
            if token.is_section:
                collector.append(token)
                sections.append(token)
                token.children = []
                collector = token.children
            elif token.tag_type == "/":
                section = sections.pop()
                section.parent_section_end = token.start
                collector = sections[-1].children if sections else nested
            else:
                collector.append(token)

        return nested


_default_parser: Optional[Parser] = None


def parse(template: Optional[str], tags: Optional[TagsLike] = None) -> List[Token]:
    """
    Parse a template with the built-in registry and the shared regex cache

    Example:
        >>> [token.value for token in parse("Hello {{name}}!")]
        ['Hello ', 'name', '!']
    """
    global _default_parser
    if _default_parser is None:
        _default_parser = Parser()
    return _default_parser.parse(template, tags)
