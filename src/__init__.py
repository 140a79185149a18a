"""
whisker - Mustache template tokenizer

Turns Mustache template source into a nested tree of typed tokens for a
rendering stage to walk.
"""

__version__ = "1.0.0"

from .lib import Parser, parse, TokenRegistry, regex_cache, escape_for_pattern, LOG, state_connectToLogger
from .models import Tags, Token, TokenKind

__all__ = [
    "Parser",
    "parse",
    "TokenRegistry",
    "regex_cache",
    "escape_for_pattern",
    "Tags",
    "Token",
    "TokenKind",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
