"""
Argweave declaration tree.

Overview
- Node: base of every tree object. A node is registered in its parser's
  arena (parser.nodes, id -> node) on construction and refers to its parent
  by id, so traversals return flat lists of nodes rather than nested shapes.
- Command: a named node (the root command has no label) owning three fixed
  sections (commands, positional arguments, optional arguments) plus any
  caller-added sections, which sit between the commands section and the
  positional one.
- Section: help-only grouping of arguments, commands and text blocks.
- Argument: an option or positional slot with codes, a key, a type, metavars
  and optional accepted Values.
- Value: one member of an argument's closed set of accepted values.
- TextBlock: free text rendered inside a section.

Uniqueness
- Argument codes and keys are unique across the whole tree. Every command
  keeps its own registry of what was declared directly under it; the parser
  keeps the tree-wide one that duplicate checks run against.

Quick example
    >>> parser = Parser(prog="tool", add_version=False)
    >>> parser.add_argument(["-o", "--output"], type="path", description="Output file.")
    >>> install = parser.add_command("install", description="Install a package.")
    >>> install.add_argument(["PACKAGE"], nargs="+")
"""
import logging
from types import MappingProxyType
from typing import NamedTuple

from .faults import DeclarationError
from .registry import describe, initial_value
from .utils import Unset
from .validate import *

logger = logging.getLogger(__name__)


class Node:
    """
    base of every declaration tree object.

    attributes
    - id: arena id, unique per parser, increasing in creation order.
    - parent_id: arena id of the parent node, or None for the root command.
    - options: read-only view of the validated options.
    """
    __slots__ = ("_parser", "id", "parent_id", "options")

    def __init__(self, parser, parent, options, /):
        self._parser = parser
        self.parent_id = parent.id if parent is not None else None
        self.options = MappingProxyType(options)
        self.id = parser.register(self)

    @property
    def parser(self):
        return self._parser

    @property
    def parent(self):
        return self._parser.nodes[self.parent_id] if self.parent_id is not None else None

    @property
    def description(self):
        return self.options.get("description")

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id})"


class TextBlock(Node):
    __slots__ = ("text",)

    def __init__(self, parser, parent, text, /):
        if not isinstance(text, str):
            raise DeclarationError(f"text block must be a string, not {text!r}")
        self.text = text
        super().__init__(parser, parent, {})


class Value(Node):
    """an accepted value of an argument, with an optional description."""
    __slots__ = ("content",)

    def __init__(self, parser, parent, content, options, /):
        self.content = content
        super().__init__(parser, parent, validate_value_options(content, options))

    def __repr__(self):
        return f"Value({self.content!r})"


class Section(Node):
    """
    help-output grouping; carries no parsing semantics.

    children are kept as arena ids in insertion order and may be arguments,
    commands or text blocks. Arguments and commands added through a section
    are still owned, for parsing purposes, by the section's command.
    """
    __slots__ = ("title", "children")

    def __init__(self, parser, parent, title, options, /):
        if not isinstance(title, str | None):
            raise DeclarationError(f"section title must be a string, not {title!r}")
        self.title = title
        self.children = []
        super().__init__(parser, parent, validate_section_options(options))

    @property
    def command(self):
        return self.parent

    @property
    def objects(self):
        return [self._parser.nodes[child] for child in self.children]

    def add_argument(self, codes, /, **options):
        return self.command.add_argument(codes, section=self, **options)

    def add_command(self, label, /, **options):
        return self.command.add_command(label, section=self, **options)

    def add_text(self, text, /):
        block = TextBlock(self._parser, self, text)
        self.children.append(block.id)
        return block

    def __repr__(self):
        return f"Section({self.title!r}, id={self.id})"


class Argument(Node):
    """
    one option or positional slot.

    attributes
    - codes: tuple[Token, ...] in declaration order.
    - primary: the code used for display and for the default key.
    - key: result field name.
    - kind: registry Kind; descriptor: its TypeDescriptor.
    - metavars: tuple of display placeholders (empty for value-less kinds or
      when metavar=None was given).
    - values: ids of accepted Value children.
    """
    __slots__ = ("codes", "primary", "key", "kind", "descriptor", "metavars", "values")

    def __init__(self, parser, parent, codes, options, /):
        self.codes = codes
        self.kind = options["type"]
        self.descriptor = describe(self.kind)
        self.primary = _primary_code(codes, parser.format_options["prefer_long_codes"])
        self.key = options.get("key") or _keyify(self.primary.content)
        self.metavars = _metavars(self, options["metavar"], parser.assets)
        self.values = []
        super().__init__(parser, parent, options)

    @property
    def is_option(self):
        return self.codes[0].is_option

    @property
    def is_positional(self):
        return not self.codes[0].is_option

    @property
    def short_codes(self):
        return tuple(code for code in self.codes if code.is_option and not code.is_long)

    @property
    def long_codes(self):
        """long option codes; a positional's single code also counts as long."""
        return tuple(code for code in self.codes if code.is_long or not code.is_option)

    @property
    def summary(self):
        return self.primary.content

    @property
    def nargs(self):
        return self.options["nargs"]

    @property
    def required(self):
        return self.options["required"]

    @property
    def value(self):
        return self.options["value"]

    @property
    def default_value(self):
        return self.options["default_value"]

    @property
    def initial_value(self):
        return initial_value(self.options)

    @property
    def callback(self):
        return self.options["callback"]

    @property
    def priority(self):
        return self.options["priority"]

    @property
    def accepts_values(self):
        return self.descriptor.accepts_values

    @property
    def system_callback(self):
        return self.descriptor.system_callback

    @property
    def command(self):
        return self.parent.command

    @property
    def objects(self):
        return [self._parser.nodes[value] for value in self.values]

    @property
    def accepted(self):
        """contents of the accepted values, empty when the set is open."""
        return tuple(value.content for value in self.objects)

    def add_value(self, content, /, **options):
        """
        restrict this argument to a closed set of values (one call per value).

        raises
        - DeclarationError: when the argument's type takes no values, or the
          value is already declared.
        """
        if not self.accepts_values:
            raise DeclarationError(f"cannot add values to argument {self.summary!r}: type {self.kind!s} takes no values")
        if content in self.accepted:
            raise DeclarationError(f"cannot add value {content!r} to argument {self.summary!r}: value already declared")
        value = Value(self._parser, self, content, options)
        self.values.append(value.id)
        return value

    def __repr__(self):
        return f"Argument({[code.content for code in self.codes]!r}, type={self.kind!s}, key={self.key!r})"


class Hierarchy(NamedTuple):
    """arguments and child commands declared directly under one command."""
    command: "Command"
    arguments: tuple[Argument, ...]
    commands: tuple["Command", ...]


class Command(Node):
    """
    a named node of the declaration tree.

    the root command (label None) belongs to the parser; every other command
    is created by add_command() and carries exactly one label, which is what
    end users type to select it.

    attributes
    - label: invocation code (None for the root).
    - key: name reported in the selected-command path.
    - codes / keys: argument codes and keys declared directly under it.
    - commands_section / positional_section / optional_section: the fixed sections.
    """
    __slots__ = ("label", "key", "codes", "keys", "commands_section", "positional_section", "optional_section", "_custom")

    def __init__(self, parser, parent, label, options, /):
        options = validate_command_options(options)
        self.label = label
        self.key = options.get("key", label)
        self.codes = set()
        self.keys = set()
        self._custom = []
        super().__init__(parser, parent, options)

        assets = parser.assets
        self.commands_section = Section(parser, self, assets.header_commands, {})
        self.positional_section = Section(parser, self, assets.header_positional, {})
        self.optional_section = Section(parser, self, assets.header_optional, {})

    @property
    def sections(self):
        """every section in help order: commands, custom, positional, optional."""
        return (
            self.commands_section,
            *(self._parser.nodes[section] for section in self._custom),
            self.positional_section,
            self.optional_section,
        )

    @property
    def path(self):
        """labels from the first subcommand down to this one (the root has none)."""
        path, command = [], self
        while command.label is not None:
            path.append(command.label)
            command = command.parent.command
        return tuple(reversed(path))

    @property
    def arguments(self):
        """arguments declared directly under this command, in section order."""
        return [
            object for section in self.sections for object in section.objects
            if isinstance(object, Argument)
        ]

    @property
    def children(self):
        """commands declared directly under this command, in section order."""
        return [
            object for section in self.sections for object in section.objects
            if isinstance(object, Command)
        ]

    def add_section(self, title, /, **options):
        section = Section(self._parser, self, title, options)
        self._custom.append(section.id)
        return section

    def add_command(self, label, /, *, section=None, **options):
        """
        declare a subcommand under this command.

        the command lands in the commands section unless 'section' says
        otherwise. labels are unique among siblings.
        """
        label = validate_command_label(label)
        if any(child.label == label for child in self.children):
            raise DeclarationError(f"cannot add command {label!r}: command already exists")

        section = _target_section(self, section, self.commands_section)
        command = Command(self._parser, section, label, options)
        section.children.append(command.id)
        logger.debug("registered command %r under %r", label, self.label)
        return command

    def add_argument(self, codes, /, *, section=None, **options):
        """
        declare an option or a positional under this command.

        parameters
        - codes: list of codes, e.g. ["-o", "--output"] or ["FILE"].
        - section: Section to display the argument in; defaults to the
          optional or positional section.
        - options: description, type, nargs, metavar, required, key, value,
          default_value, callback, priority.

        raises
        - DeclarationError on invalid codes, options, or duplicate codes/keys.
        """
        parser = self._parser
        tokens = validate_codes(codes, parser.options["single_dash"])
        positional = not tokens[0].is_option
        options = validate_argument_options(options, parser.assets, positional)

        target = _target_section(
            self, section, self.positional_section if positional else self.optional_section
        )
        primary = _primary_code(tokens, parser.format_options["prefer_long_codes"])
        key = options.get("key") or _keyify(primary.content)

        if used := [token.content for token in tokens if token.content in parser.codes]:
            raise DeclarationError(f"cannot add argument with codes {used!r}: argument codes already in use")
        if key in parser.keys:
            raise DeclarationError(f"cannot add argument with key {key!r}: argument key already in use")

        argument = Argument(parser, target, tokens, options)
        target.children.append(argument.id)

        for token in tokens:
            self.codes.add(token.content)
            parser.codes.add(token.content)
        self.keys.add(argument.key)
        parser.keys.add(argument.key)
        logger.debug("registered argument %r (key %r, type %s)", argument.summary, argument.key, argument.kind)
        return argument

    def __repr__(self):
        return f"Command({self.label!r}, id={self.id})"


def _target_section(command, section, default, /):
    if section is None:
        return default
    if not isinstance(section, Section) or section not in command.sections:
        raise DeclarationError(f"section {section!r} does not belong to {command!r}")
    return section


def _primary_code(codes, prefer_long, /):
    """
    positional code if present, else the first long code when long codes are
    preferred (first short code otherwise), else the first code.
    """
    for code in codes:
        if not code.is_option:
            return code
    for code in codes:
        if code.is_long == prefer_long:
            return code
    return codes[0]


def _keyify(code, /):
    return code.lstrip("-").replace("-", "_")


def _metavars(argument, metavar, assets, /):
    if not argument.descriptor.accepts_values or metavar is None:
        return ()
    if metavar is Unset:
        return (assets.to_metavar(argument.primary.content),)
    if isinstance(metavar, str):
        return (metavar,)
    return tuple(metavar)


__all__ = (
    "Node",
    "TextBlock",
    "Value",
    "Section",
    "Argument",
    "Hierarchy",
    "Command",
)
