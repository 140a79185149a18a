"""
Custom Pygments lexer for Mustache templates

Provides syntax highlighting for template source, used by the CLI's
--highlight option.

Token types:
- Comment.Preproc: Tag delimiters ({{ }}, {{{ }}})
- Keyword: Section sigils (#, ^, /)
- Name.Variable: Interpolated names
- Name.Function: Section names
- Name.Namespace: Partial names
- Comment: {{! comments }} and {{=delimiter changes=}}
- Other: Literal template text

Only the default {{ }} delimiters are recognized; text following a
delimiter change is highlighted as plain text.
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Operator,
    Other,
    Punctuation,
    Text,
)


class MustacheLexer(RegexLexer):
    """
    Lexer for Mustache templates

    Example:
        {{#items}}- {{name}}{{/items}}

    Tokens:
        {{ → Comment.Preproc
        # → Keyword
        items → Name.Function
        - → Other
        name → Name.Variable
    """

    name = 'Mustache'
    aliases = ['mustache', 'whisker']
    filenames = ['*.mustache']

    tokens = {
        'root': [
            # Comments (may span lines)
            (r'\{\{![\s\S]*?\}\}', Comment),

            # Delimiter changes
            (r'\{\{=[\s\S]*?=\}\}', Comment),

            # Triple mustache
            (r'(\{\{\{)(\s*)([^}\s]+)(\s*)(\}\}\})',
             bygroups(Comment.Preproc, Text, Name.Variable, Text, Comment.Preproc)),

            # Section open/inverted/close
            (r'(\{\{)(\s*)([#^/])(\s*)([^}\s]+)(\s*)(\}\})',
             bygroups(Comment.Preproc, Text, Keyword, Text, Name.Function, Text, Comment.Preproc)),

            # Partials
            (r'(\{\{)(\s*)(>)(\s*)([^}\s]+)(\s*)(\}\})',
             bygroups(Comment.Preproc, Text, Operator, Text, Name.Namespace, Text, Comment.Preproc)),

            # Unescaped variables
            (r'(\{\{)(\s*)(&)(\s*)([^}\s]+)(\s*)(\}\})',
             bygroups(Comment.Preproc, Text, Punctuation, Text, Name.Variable, Text, Comment.Preproc)),

            # Escaped variables
            (r'(\{\{)(\s*)([^}\s]+)(\s*)(\}\})',
             bygroups(Comment.Preproc, Text, Name.Variable, Text, Comment.Preproc)),

            # Everything else is literal text
            (r'[^{]+', Other),
            (r'\{', Other),
        ],
    }


def get_lexer() -> MustacheLexer:
    """
    Get the MustacheLexer instance

    Returns:
        MustacheLexer instance ready for use with Pygments
    """
    return MustacheLexer()
