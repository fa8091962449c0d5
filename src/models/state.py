"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the cook pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, optionsFile,
                   outputFile, sanitize, traditionalLinebreaks
        - env_check: inputSourceFile, htmlOutputFile, envOK
        - source_read: sourceText, cookOptions
        - html_cook: cookedHtml
        - output_write: cookResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source file
        outputdir: Directory receiving the cooked HTML
        verbosity: Logging verbosity level (1-3)
        inputFile: Source filename (relative to inputdir)
        optionsFile: Optional YAML file with cook options (relative to inputdir)
        outputFile: Output filename; defaults to inputFile with .html suffix
        sanitize: Sanitize the cooked HTML
        traditionalLinebreaks: Enable traditional line-break mode
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the source file
        htmlOutputFile: Resolved path of the HTML output
        sourceText: Source file contents
        cookOptions: Options handed to Dialect.cook()
        cookedHtml: Cooked HTML
        cookResult: Results (output_file, characters, status)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    optionsFile: Optional[str] = field(default=None)
    outputFile: Optional[str] = field(default=None)
    sanitize: bool = field(default=False)
    traditionalLinebreaks: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    htmlOutputFile: Path = field(default=Path("/"))
    sourceText: str = field(default="")
    cookOptions: Dict[str, Any] = field(default_factory=dict)
    cookedHtml: str = field(default="")
    cookResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing source files
            outputdir: Directory for cooked output

        Returns:
            ProgramState instance with all known CLI options as attributes
        """
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        return cls(**{**filtered_options, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """Shallow copy of the state"""
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Example:
        final_state = pipeline(initial_state, env_check, source_read, html_cook)

    This is equivalent to:
        html_cook(source_read(env_check(initial_state)))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
