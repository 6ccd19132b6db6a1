"""
Argweave parser (declaration root and entry points).

Overview
- Parser owns the settings of one program (name, version, language, format
  options, dash style, writers), the node arena (id -> node) and the root
  Command. Declaring arguments and commands on the parser declares them on
  the root command.

Operating modes
- evaluate(prompt) -> Continue(result) | RequestExit(code, message, stream)
  The core. Scans, runs callbacks, and reports what should happen without
  writing anything or exiting.
- parse_arguments(prompt): CLI mode. Writes help/version to write_out and
  parse errors to write_err, then exits (0 and 1 respectively). Otherwise
  returns the ParseResult.
- get_parsed_arguments(prompt): embeddable mode. Parse faults propagate to
  the caller unrendered; usage/version arguments only set their flag.

Prompt forms (all entry points)
- Unset: sys.argv[1:]
- str: shell-like string split with shlex
- Iterable[str]: pre-split tokens

Quick example
    >>> parser = Parser(prog="tool", version="1.2.0")
    >>> parser.add_argument(["-v", "--verbose"], type="count")   # clashes with -v/--version
    Traceback (most recent call last):
    ...
    argweave.faults.DeclarationError: cannot add argument with codes ['-v']: argument codes already in use
"""
import itertools
import logging
import os
import sys
from types import MappingProxyType
from typing import NamedTuple

from rich.console import Console

from .faults import ParseFault
from .formatter import Formatter
from .lang import ENGLISH, get_language, prefix_argument_codes
from .objects import Command, Hierarchy
from .parsing import Scanner
from .tokens import tokenize
from .utils import Unset, coalesce
from .validate import validate_format_options, validate_parser_options

logger = logging.getLogger(__name__)

stdout = Console(highlight=False)
stderr = Console(stderr=True, highlight=False)


def write_out(text, /):
    stdout.out(text, highlight=False)


def write_err(text, /):
    stderr.out(text, highlight=False)


class Continue(NamedTuple):
    """parsing succeeded; carry on with the result."""
    result: object


class RequestExit(NamedTuple):
    """
    the program should stop.

    fields
    - code: process exit status (0 for help/version, 1 for parse errors).
    - message: rendered text to write.
    - stream: "out" or "err".
    """
    code: int
    message: str
    stream: str


class Parser:
    """
    root of a declaration tree.

    parameters (all keyword-only except prog)
    - prog: program name; defaults to the basename of sys.argv[0].
    - version: version string shown by --version ("0.0.0" when unset).
    - description: text under the usage line of the root help.
    - help / epilogue: paragraphs before / after the argument sections.
    - title: line above the usage line.
    - lang: Language or locale code (English by default).
    - add_help / add_version: declare the reserved -h/--help and
      -v/--version arguments on the root command.
    - single_dash: options use a single dash ("-name"); combined short
      options are not unpacked and "--name" codes are refused.
    - write_out / write_err: writers for feedback and errors.
    - terminal_width: width used to resolve a "N%" max_width; queried from
      the terminal by the CLI entry points when left out.
    - format_options: layout options (see argweave.validate.FORMAT_DEFAULTS).

    raises
    - DeclarationError: on invalid options.
    """

    def __init__(
            self,
            prog=Unset,
            /,
            *,
            version=None,
            description=None,
            help=None,
            epilogue=None,
            title=None,
            lang=ENGLISH,
            add_help=True,
            add_version=True,
            single_dash=False,
            write_out=write_out,
            write_err=write_err,
            terminal_width=None,
            format_options=None,
    ):
        options = validate_parser_options({
            "prog": coalesce(prog, os.path.basename(sys.argv[0]) or "prog"),
            "version": version,
            "description": description,
            "help": help,
            "epilogue": epilogue,
            "title": title,
            "lang": lang,
            "add_help": add_help,
            "add_version": add_version,
            "single_dash": single_dash,
            "write_out": write_out,
            "write_err": write_err,
            "terminal_width": terminal_width,
            "format_options": format_options,
        })
        self.options = MappingProxyType(options)
        self.format_options = validate_format_options(format_options)
        self.language = get_language(lang)
        self.assets = self.language.load()

        self.nodes = {}
        self.codes = set()
        self.keys = set()
        self._ids = itertools.count(1)

        self.root = Command(self, None, None, {})

        if add_help:
            self.root.add_argument(
                prefix_argument_codes(single_dash, self.assets.argument_help),
                type="usage",
                description=self.assets.argument_help_desc,
            )
        if add_version:
            self.root.add_argument(
                prefix_argument_codes(single_dash, self.assets.argument_version),
                type="version",
                description=self.assets.argument_version_desc,
            )

    def register(self, node, /):
        """give a node the next arena id and store it."""
        self.nodes[id := next(self._ids)] = node
        return id

    @property
    def prog(self):
        return self.options["prog"]

    @property
    def version(self):
        return self.options.get("version") or "0.0.0"

    def add_argument(self, codes, /, **options):
        return self.root.add_argument(codes, **options)

    def add_command(self, label, /, **options):
        return self.root.add_command(label, **options)

    def add_section(self, title, /, **options):
        return self.root.add_section(title, **options)

    def get_argument_hierarchy(self, max_depth=None, /):
        """
        arguments and child commands directly under every command.

        parameters
        - max_depth: number of command levels to include (1 is the root
          alone); unlimited when None.

        returns
        - dict[int, Hierarchy] keyed by command id, root first, then
          breadth-first.
        """
        hierarchy = {}
        level, depth = [self.root], 1
        while level and (max_depth is None or depth <= max_depth):
            following = []
            for command in level:
                children = tuple(command.children)
                hierarchy[command.id] = Hierarchy(command, tuple(command.arguments), children)
                following.extend(children)
            level, depth = following, depth + 1
        return hierarchy

    def formatter(self, terminal_width=Unset, /):
        """
        a Formatter for this parser.

        the terminal is only queried when max_width is relative and no width
        was given here or at construction.
        """
        width = coalesce(terminal_width, self.options.get("terminal_width"))
        if width is None and isinstance(self.format_options["max_width"], str | float):
            width = stdout.width
        return Formatter(self, width)

    def format_help(self, command=None, /):
        return self.formatter().format_help(command)

    def format_usage(self, command=None, /):
        return self.formatter().format_usage(command)

    def format_version(self):
        return self.formatter().format_version()

    def _tokenize(self, prompt, /):
        return tokenize(prompt, unpack=not self.options["single_dash"])

    def _scan(self, tokens, /):
        scanner = Scanner(self.get_argument_hierarchy(), self.root)
        return scanner, scanner.scan(tokens)

    def evaluate(self, prompt=Unset, /):
        """
        parse a prompt and decide what the program should do.

        returns
        - Continue(result) after user callbacks ran;
        - RequestExit(0, text, "out") when a usage/version argument fired;
        - RequestExit(1, text, "err") on a parse fault, or when a string prompt
          has unbalanced quotes.
        """
        try:
            tokens = self._tokenize(prompt)
        except ValueError as error:
            logger.debug("cannot split prompt: %s", error)
            return RequestExit(1, self.formatter().format_prompt_error(error), "err")

        try:
            scanner, result = self._scan(tokens)
        except ParseFault as fault:
            logger.debug("parse fault %s", fault.code.label)
            return RequestExit(1, self.formatter().format_error(fault), "err")

        system, user = scanner.callbacks()
        if system:
            callback = system[0]
            logger.debug("running system callback %r", callback.argument.system_callback)
            if callback.argument.system_callback == "usage":
                text = self.formatter().format_help(scanner.command)
            else:
                text = self.formatter().format_version()
            if callback.argument.callback is not None:
                text = callback.argument.callback(callback.value, callback.argument) or text
            return RequestExit(0, text, "out")

        _run(user)
        return Continue(result)

    def parse_arguments(self, prompt=Unset, /):
        """CLI mode: write and exit on feedback, return the ParseResult otherwise."""
        match self.evaluate(prompt):
            case RequestExit(code=code, message=message, stream=stream):
                (self.options["write_err"] if stream == "err" else self.options["write_out"])(message)
                sys.exit(code)
            case Continue(result=result):
                return result

    def get_parsed_arguments(self, prompt=Unset, /):
        """
        embeddable mode: return the ParseResult.

        raises
        - ParseFault subclasses, unrendered.
        - ValueError: when a string prompt has unbalanced quotes.
        """
        scanner, result = self._scan(self._tokenize(prompt))
        _run(scanner.callbacks()[1])
        return result

    def __repr__(self):
        return f"Parser({self.prog!r})"


def _run(callbacks, /):
    for callback in callbacks:
        logger.debug("running callback of %r", callback.argument.summary)
        callback.argument.callback(callback.value, callback.argument)


__all__ = (
    "Parser",
    "Continue",
    "RequestExit",
    "write_out",
    "write_err",
)
