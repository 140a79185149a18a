#!/usr/bin/env python3
"""
whisker - Mustache template tokenizer

Developer CLI: tokenizes a template file and prints the resulting token tree,
which is handy when checking how delimiter changes, standalone lines and
section nesting come out.

Usage:
    whisker template.mustache

Examples:
    # Indented tree view
    whisker page.mustache

    # YAML dump with custom starting delimiters
    whisker page.mustache --openTag '<%' --closeTag '%>' --format yaml

    # Show highlighted source first, with parser trace
    whisker page.mustache --highlight -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import List, Optional

import yaml
from pygments import highlight
from pygments.formatters import TerminalFormatter

from . import __version__
from .lib import parse, LOG, state_connectToLogger, TemplateSyntaxError
from .lib.lexer import MustacheLexer
from .models import ProgramState, Tags, Token, pipeline


# Define CLI arguments
parser = ArgumentParser(
    description="whisker - tokenize a Mustache template and print its token tree",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("templateFile", type=str, help="Mustache template to tokenize")

parser.add_argument("--openTag", default=None, type=str, help="Opening delimiter (default from settings)")

parser.add_argument("--closeTag", default=None, type=str, help="Closing delimiter (default from settings)")

parser.add_argument(
    "--format",
    dest="outputFormat",
    default="tree",
    choices=["tree", "yaml"],
    help="Token dump format",
)

parser.add_argument(
    "--highlight",
    action="store_true",
    help="Print the template source with syntax highlighting before the dump",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the template path.

    Returns:
        ProgramState with templatePath and envOK set

    Exits:
        1 if the template file does not exist
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    template_path = Path(state.templateFile)
    if not template_path.is_file():
        print(f"Error: Template file not found: {template_path}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if (state.openTag is None) != (state.closeTag is None):
        print("Error: --openTag and --closeTag must be given together", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if state.openTag is not None:
        try:
            Tags(state.openTag, state.closeTag)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)

    state.templatePath = template_path
    LOG(f"Template file: {template_path}", level=2)

    state.envOK = True
    return state


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read and tokenize the template.

    Returns:
        ProgramState with templateSource and parsedTokens set

    Exits:
        1 if the file cannot be read or the template has a syntax error
    """
    state = inputstate.copy()

    LOG("Reading template...", level=2)
    try:
        state.templateSource = state.templatePath.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error reading template: {e}", file=sys.stderr)
        sys.exit(1)

    if state.highlight:
        print(highlight(state.templateSource, MustacheLexer(), TerminalFormatter()))

    tags = None
    if state.openTag is not None:
        tags = (state.openTag, state.closeTag)

    try:
        state.parsedTokens = parse(state.templateSource, tags)
    except TemplateSyntaxError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Parsed {len(state.parsedTokens)} top-level tokens", level=2)
    return state


def tree_format(tokens: List[Token], depth: int = 0) -> List[str]:
    """Indented one-line-per-token view of a token tree"""
    lines = []
    for token in tokens:
        lines.append(f"{'  ' * depth}{token.tag_type} {token.value!r} [{token.start}:{token.end}]")
        if token.children is not None:
            lines.extend(tree_format(token.children, depth + 1))
    return lines


def tokens_report(inputstate: ProgramState) -> ProgramState:
    """
    Render and print the token dump.

    Returns:
        ProgramState with report set (terminal pipeline stage)
    """
    state = inputstate.copy()
    tokens = state.parsedTokens or []

    if state.outputFormat == "yaml":
        state.report = yaml.safe_dump(
            [token.to_dict() for token in tokens], sort_keys=False, allow_unicode=True
        )
    else:
        state.report = "\n".join(tree_format(tokens))

    print(state.report)
    return state


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point - tokenize a template and print the tree.

    Pipeline:
        1. env_check: Validate the template path
        2. source_parse: Read and tokenize the template
        3. tokens_report: Print the token dump
    """
    options: Namespace = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_parse, tokens_report)


if __name__ == "__main__":
    main()
