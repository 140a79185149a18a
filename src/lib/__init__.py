"""
whisker - Mustache template tokenizer

Library modules: scanner, delimiter regex cache, token registry and parser.
"""

from .errors import (
    TemplateSyntaxError,
    UnclosedTagError,
    UnopenedSectionError,
    UnclosedSectionError,
    MismatchedSectionError,
    InvalidDelimiterError,
)
from .parser import Parser, parse
from .tagcache import DelimiterRegexCache, escape_for_pattern, regex_cache
from .tokens import TokenRegistry
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "parse",
    "TokenRegistry",
    "DelimiterRegexCache",
    "escape_for_pattern",
    "regex_cache",
    "TemplateSyntaxError",
    "UnclosedTagError",
    "UnopenedSectionError",
    "UnclosedSectionError",
    "MismatchedSectionError",
    "InvalidDelimiterError",
    "LOG",
    "state_connectToLogger",
]
