"""
Template syntax errors

Every structural problem found while tokenizing fails the whole parse with
one of these; no partial token tree is ever returned.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    UNCLOSED_TAG = "unclosed_tag"
    UNOPENED_SECTION = "unopened_section"
    UNCLOSED_SECTION = "unclosed_section"
    MISMATCHED_SECTION = "mismatched_section"
    INVALID_DELIMITERS = "invalid_delimiters"


class TemplateSyntaxError(SyntaxError):
    """
    Base class for template parse failures

    Attributes:
        kind: ErrorKind identifying the failure
        value: Offending tag value, if any
        position: Character offset where the failure was detected
    """
    kind: ErrorKind

    def __init__(self, message: str, value: Optional[str] = None, position: int = 0):
        super().__init__(message)
        self.value = value
        self.position = position


class UnclosedTagError(TemplateSyntaxError):
    """Open delimiter consumed but no close delimiter before end of input"""
    kind = ErrorKind.UNCLOSED_TAG

    def __init__(self, position: int):
        super().__init__(f"Unclosed tag at {position}", position=position)


class UnopenedSectionError(TemplateSyntaxError):
    """Closing tag with no open section"""
    kind = ErrorKind.UNOPENED_SECTION

    def __init__(self, value: str, position: int):
        super().__init__(f"Unopened section '{value}' at {position}", value, position)


class UnclosedSectionError(TemplateSyntaxError):
    """Section still open when end of input was reached"""
    kind = ErrorKind.UNCLOSED_SECTION

    def __init__(self, value: str, position: int):
        super().__init__(f"Unclosed section '{value}' at {position}", value, position)


class MismatchedSectionError(UnclosedSectionError):
    """
    Closing tag does not match the innermost open section

    value names the section left unclosed, closer the tag that tried to
    close it.
    """
    kind = ErrorKind.MISMATCHED_SECTION

    def __init__(self, value: str, closer: str, position: int):
        super().__init__(value, position)
        self.closer = closer


class InvalidDelimiterError(TemplateSyntaxError):
    """Delimiter-change tag that does not name exactly two delimiters"""
    kind = ErrorKind.INVALID_DELIMITERS

    def __init__(self, value: str, position: int):
        super().__init__(f"Invalid delimiters '{value}' at {position}", value, position)
