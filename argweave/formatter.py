"""
Argweave help formatter.

Formatter is the one object the parser talks to for any rendered text. Each
render runs the same four stages in order:

    annotate  -> display strings and their widths   (argweave.annotate)
    measure   -> column widths                      (argweave.columns)
    tabulate  -> row groups of cells                (argweave.tabulate)
    merge     -> wrapped, interleaved final text    (argweave.merge)

Renders are pure: the same tree and options always give the same string.

Outputs
- format_help(command): full help of a command (root by default).
- format_usage(command): the usage line only.
- format_error(fault): abbreviated (or full) help of the fault's command
  followed by "prog: error: reason."
- format_version(): "prog version".
"""
import logging

from .annotate import annotate_tree, format_usage, measurer
from .columns import Columns, column_widths, resolve_width
from .merge import merge_table
from .tabulate import Cell, tabulate_text, tabulate_tree, tabulate_usage
from .utils import arraywrap

logger = logging.getLogger(__name__)


class Formatter:
    """
    renders help, usage, error and version strings for one parser.

    parameters
    - parser: the Parser whose settings, language and tree are rendered.
    - terminal_width: width the "N%" form of max_width is resolved against.
    """

    def __init__(self, parser, /, terminal_width=None):
        self.parser = parser
        self.assets = parser.assets
        self.options = parser.format_options
        self.measure = measurer(self.options["use_visual_width"])
        self.width = resolve_width(self.options["max_width"], terminal_width)

    @property
    def prog(self):
        return self.parser.prog

    def render(self, command=None, /, abbreviate=False, suffix=()):
        """
        run the pipeline for a command.

        parameters
        - command: Command to render; the root when None.
        - abbreviate: usage line only.
        - suffix: extra full-width lines after everything else.
        """
        parser = self.parser
        command = command or parser.root
        root = command is parser.root

        usage = format_usage(command, self.prog, parser.options.get("title"), self.assets, self.options)
        annotation = None if abbreviate else annotate_tree(command, self.assets, self.options, self.measure)
        columns = column_widths(annotation, usage, self.options, self.width, self.assets, self.measure)

        groups = tabulate_usage(usage, columns)
        if not abbreviate:
            groups += tabulate_tree(
                command,
                annotation,
                columns,
                self.assets,
                self.options,
                description=parser.options.get("description") if root else command.description,
                prologue=arraywrap(parser.options.get("help")) if root else (),
                epilogue=arraywrap(parser.options.get("epilogue")) if root else (),
            )
        if suffix := [[Cell(columns.full, line)] for line in suffix]:
            if abbreviate:
                groups[-1] += suffix
            else:
                groups.append(suffix)

        logger.debug("rendering %s for %r at width %d", "usage" if abbreviate else "help", command, self.width)
        return merge_table(groups, self.options["paragraph_margin"], self.measure)

    def format_help(self, command=None, /):
        return self.render(command)

    def format_usage(self, command=None, /):
        return self.render(command, abbreviate=True)

    def format_error(self, fault, /):
        """render a ParseFault the way the CLI mode reports it."""
        reason = self.assets.error(fault)
        return self.render(
            fault.options.get("command"),
            abbreviate=self.options["use_abbreviated_error"],
            suffix=[self.assets.prog_error(self.prog, reason)],
        )

    def format_prompt_error(self, error, /):
        """render a string prompt that shlex could not split, against the root."""
        return self.render(
            abbreviate=self.options["use_abbreviated_error"],
            suffix=[self.assets.prog_error(self.prog, self.assets.error_prompt(error))],
        )

    def format_version(self):
        columns = Columns(full=self.width, usage=(0, 0, self.width))
        return merge_table(tabulate_text([f"{self.prog} {self.parser.version}"], columns), 0, self.measure)


__all__ = (
    "Formatter",
)
