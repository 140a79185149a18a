"""
Cursor over template source

The scanner only knows regular expressions and a position; template
semantics live in the parser.
"""

import re


class Scanner:
    """
    Position-tracking scanner over an immutable string

    Attributes:
        source: Text being scanned
        position: Current character offset (starts at 0)

    Example:
        >>> scanner = Scanner("abc{{x}}")
        >>> scanner.scan_until(re.compile(r"\\{\\{"))
        'abc'
        >>> scanner.position
        3
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0

    def at_end(self) -> bool:
        """True once the whole source has been consumed"""
        return self.position >= len(self.source)

    def scan_while(self, pattern: re.Pattern) -> str:
        """
        Consume pattern if it matches exactly at the current position

        Returns:
            Matched text, or "" (without moving) when there is no match
        """
        match = pattern.match(self.source, self.position)
        if not match or match.start() != self.position:
            return ""

        self.position = match.end()
        return match.group(0)

    def scan_until(self, pattern: re.Pattern) -> str:
        """
        Consume everything before the next match of pattern

        The match itself is left in place. With no match the rest of the
        source is consumed.

        Returns:
            Text between the old position and the match (possibly "")
        """
        match = pattern.search(self.source, self.position)
        if match is None:
            end = len(self.source)
        else:
            end = match.start()

        text = self.source[self.position:end]
        self.position = end
        return text
