"""
Models package for whisker

Contains data structures and type definitions for the tokenizer and CLI.
"""

from .state import ProgramState, pipeline
from .tags import Tags, DelimiterRegexes, DEFAULT_TAGS
from .tokens import Token, TokenKind, TokenSpec

__all__ = [
    "ProgramState",
    "pipeline",
    "Tags",
    "DelimiterRegexes",
    "DEFAULT_TAGS",
    "Token",
    "TokenKind",
    "TokenSpec",
]
