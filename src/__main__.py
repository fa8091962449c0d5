#!/usr/bin/env python3
"""
dialectic - markdown dialect extension engine

Cooks a dialect source file (markdown paragraphs plus the standard rule set:
**bold**, *italic*, `code`, autolinks, [code] and [quote] blocks, @mentions)
into an HTML fragment.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    dialectic inputdir/ outputdir/ --inputFile post.md

Examples:
    # Basic cook
    dialectic . output/ --inputFile post.md

    # Sanitized output with options from a YAML file
    dialectic . output/ --inputFile post.md --optionsFile cook.yml --sanitize

    # Verbose output
    dialectic . output/ --inputFile post.md -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

import yaml
from chris_plugin import chris_plugin

from .lib import Dialect, register_standard_rules, __version__, LOG, state_connectToLogger
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    description="dialectic - cook markdown dialect source into HTML",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input dialect source file (relative to inputdir)"
)

parser.add_argument(
    "--optionsFile",
    default=None,
    type=str,
    help="YAML file with cook options (relative to inputdir)",
)

parser.add_argument(
    "--outputFile",
    default=None,
    type=str,
    help="Output filename within outputdir. Defaults to inputFile with an .html suffix",
)

parser.add_argument(
    "--sanitize",
    action="store_true",
    help="Sanitize the cooked HTML",
)

parser.add_argument(
    "--traditionalLinebreaks",
    action="store_true",
    help="Enable traditional markdown line-break mode",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve file paths.

    Returns:
        ProgramState with inputSourceFile, htmlOutputFile and envOK set

    Exits:
        1 if the input file does not exist
    """
    state = inputstate.copy()
    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    output_name = state.outputFile or Path(state.inputFile).with_suffix(".html").name
    state.htmlOutputFile = state.outputdir / output_name
    state.htmlOutputFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output file: {state.htmlOutputFile}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the source file and assemble the cook options.

    Options from --optionsFile come first; --sanitize and
    --traditionalLinebreaks override them when given.

    Returns:
        ProgramState with sourceText and cookOptions set

    Exits:
        1 if the source or options file cannot be read
    """
    state = inputstate.copy()
    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    options: dict = {}
    if state.optionsFile:
        options_path = state.inputdir / state.optionsFile
        try:
            loaded = yaml.safe_load(options_path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"Error reading options file: {e}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(loaded, dict):
            print(f"Error: options file {options_path} must contain a mapping", file=sys.stderr)
            sys.exit(1)
        options.update(loaded)
        LOG(f"Loaded {len(loaded)} option(s) from {options_path.name}", level=2)

    if state.sanitize:
        options["sanitize"] = True
    if state.traditionalLinebreaks:
        options["traditional_markdown_linebreaks"] = True

    state.cookOptions = options
    return state


def html_cook(inputstate: ProgramState) -> ProgramState:
    """
    Cook the source text with the standard rule set.

    Returns:
        ProgramState with cookedHtml set

    Exits:
        1 if a rule fails
    """
    state = inputstate.copy()
    LOG("Cooking source...", level=1)

    try:
        dialect = register_standard_rules(Dialect())
        state.cookedHtml = dialect.cook(state.sourceText, state.cookOptions)
    except Exception as e:
        print(f"Cook error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    LOG(f"Cooked {len(state.cookedHtml)} characters of HTML", level=2)
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the cooked HTML.

    Returns:
        ProgramState with cookResult set
    """
    state = inputstate.copy()
    state.htmlOutputFile.write_text(state.cookedHtml + "\n", encoding="utf-8")
    LOG(f"Wrote {state.htmlOutputFile}", level=2)
    state.cookResult = {
        "status": True,
        "output_file": str(state.htmlOutputFile),
        "characters": len(state.cookedHtml),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display the outcome to the user.

    Exits:
        1 if cookResult is missing
    """
    state = inputstate.copy()
    if not state.cookResult:
        print("Error: Cook failed", file=sys.stderr)
        sys.exit(1)

    LOG("✓ Cook successful!", level=1)
    LOG(f"  Output: {state.cookResult['output_file']}", level=1)
    LOG(f"  Characters: {state.cookResult['characters']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="dialectic - markdown dialect cook",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - cook a dialect source file to HTML.

    Orchestrates the pipeline:
        1. env_check: Validate paths
        2. source_read: Read source and options
        3. html_cook: Cook with the standard rule set
        4. output_write: Write the HTML fragment
        5. results_report: Display results

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_read, html_cook, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
