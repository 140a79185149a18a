"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern used by
the CLI and the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: templateFile, openTag, closeTag, outputFormat, highlight, verbosity
        - env_check: templatePath, envOK
        - source_parse: templateSource, parsedTokens
        - tokens_report: report

    Attributes:
        templateFile: Template path as given on the command line
        openTag: Opening delimiter override (None for the configured default)
        closeTag: Closing delimiter override (None for the configured default)
        outputFormat: "tree" or "yaml"
        highlight: Echo highlighted source before the token dump
        verbosity: Logging verbosity level (1-3)
        envOK: Environment validation passed
        templatePath: Resolved template path
        templateSource: Template text read from templatePath
        parsedTokens: Token tree returned by the parser
        report: Rendered token dump
    """

    # CLI arguments
    templateFile: str = field(default="")
    openTag: Optional[str] = field(default=None)
    closeTag: Optional[str] = field(default=None)
    outputFormat: str = field(default="tree")
    highlight: bool = field(default=False)
    verbosity: int = field(default=1)

    # Pipeline state
    envOK: bool = field(default=False)
    templatePath: Path = field(default=Path("/"))
    templateSource: str = field(default="")
    parsedTokens: Optional[List[Any]] = field(default=None)  # List[Token] at runtime
    report: str = field(default="")

    @classmethod
    def state_createFromNamespace(cls: Type["ProgramState"], options: Namespace) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace.

        Options without a matching field are ignored.

        Args:
            options: Parsed CLI arguments

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(initial_state, env_check, source_parse, tokens_report)

    This is equivalent to:
        tokens_report(source_parse(env_check(initial_state)))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
