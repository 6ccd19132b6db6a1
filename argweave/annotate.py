"""
Help engine, stage 1: metadata annotation.

Produces the display strings of every argument, command and value of one
command, plus their visual widths, without touching the declaration tree.

Metavar strings by arity (metavar FOO):
    '+'    FOO [FOO ...]
    '*'    [FOO [FOO ...]]   ([FOO ...] in the short form)
    '?'    [FOO]
    3      FOO FOO FOO
    None   FOO               (value-taking kinds only)
"""
from typing import NamedTuple

from rich.cells import cell_len

NBSP = "\u00a0"


class ArgumentInfo(NamedTuple):
    argument: object
    summary: str
    short: str
    long: str
    split: bool
    summary_width: int
    short_width: int
    long_width: int
    values: tuple[str, ...]


class CommandInfo(NamedTuple):
    command: object
    content: str
    width: int


class Annotation(NamedTuple):
    """display metadata of one command's direct children."""
    arguments: dict
    commands: dict

    @property
    def options(self):
        return [info for info in self.arguments.values() if info.argument.is_option]

    @property
    def positionals(self):
        return [info for info in self.arguments.values() if info.argument.is_positional]


def measurer(visual=True, /):
    """string width function: terminal cells when visual, characters otherwise."""
    return cell_len if visual else len


def format_metavars(argument, assets, /, short=False):
    """
    placeholder string for the values an argument takes.

    built from the inside out: each step wraps the result so far, optionally
    in brackets, after the metavar for its position (the last metavar is
    reused when there are fewer metavars than positions).
    """
    nargs = argument.nargs
    if not argument.accepts_values or not argument.metavars:
        return ""

    match nargs:
        case "+":
            items = [(False, False), (True, False), (False, True)]
        case "*" if short:
            items = [(True, False), (False, True)]
        case "*":
            items = [(True, False), (True, False), (False, True)]
        case "?":
            items = [(True, False)]
        case int():
            items = [(False, False)] * nargs
        case _:
            items = [(False, False)]

    metavars = argument.metavars
    result = ""
    for index, (optional, ellipsis) in reversed(list(enumerate(items))):
        if ellipsis:
            metavar = assets.arg_optional_ellipsis("")
        else:
            metavar = metavars[index] if index < len(metavars) else metavars[-1]
        result = assets.join_metavars([part for part in (metavar, result) if part])
        if optional:
            result = assets.arg_optional_brackets(result)
    return result


def format_arg(argument, assets, /, metavars=True, indices=None, compact=False):
    """
    one string per selected code, each followed by the metavar string.

    a positional shows the metavar string in place of its code ("FILE",
    "FILE [FILE ...]").

    parameters
    - indices: code positions to include (all codes when None).
    - compact: only the last selected code carries the metavars.
    """
    if indices is None:
        indices = range(len(argument.codes))
    indices = list(indices)
    placeholder = format_metavars(argument, assets) if metavars else ""
    if argument.is_positional:
        return [placeholder or argument.codes[index].content for index in indices]
    items = []
    for position, index in enumerate(indices):
        code = argument.codes[index].content
        if placeholder and (not compact or position == len(indices) - 1):
            code = assets.join_metavars([code, placeholder])
        items.append(code)
    return items


def format_arg_summary(argument, assets, /, metavars=True, indices=None, compact=False):
    return assets.join_args(format_arg(argument, assets, metavars, indices, compact))


def format_value(value, assets, /):
    return assets.arg_value_code(value.content, value.description)


def annotate_argument(argument, assets, options, measure, /):
    compact = options["compact_metavars"]
    short_indices = [index for index, code in enumerate(argument.codes) if code.is_option and not code.is_long]
    long_indices = [index for index, code in enumerate(argument.codes) if code.is_long or not code.is_option]

    summary = format_arg_summary(argument, assets, True, None, compact)
    short = format_arg_summary(argument, assets, False, short_indices) if short_indices else ""
    long = format_arg_summary(argument, assets, True, long_indices, compact) if long_indices else ""
    return ArgumentInfo(
        argument=argument,
        summary=summary,
        short=short,
        long=long,
        split=bool(short and long),
        summary_width=measure(summary),
        short_width=measure(short),
        long_width=measure(long),
        values=tuple(format_value(value, assets) for value in argument.objects),
    )


def annotate_tree(command, assets, options, measure, /):
    """
    annotate the arguments and child commands declared directly under 'command'.

    returns
    - Annotation, keyed by arena id.
    """
    return Annotation(
        arguments={
            argument.id: annotate_argument(argument, assets, options, measure)
            for argument in command.arguments
        },
        commands={
            child.id: CommandInfo(child, child.label, measure(child.label))
            for child in command.children
        },
    )


def format_usage_args(command, assets, options, /):
    """
    the argument part of the usage line.

    each argument shows its first code with metavars, bracketed unless
    required; spaces inside an item become non-breaking so wrapping never
    splits one. compact_usage folds every optional option into a single
    "[options]" item.
    """
    items, folded = [], False
    for argument in command.arguments:
        item = assets.join_args(format_arg(argument, assets, True, [0]))
        # '?' and '*' positionals are already bracketed by their metavars.
        if not argument.required and not (argument.is_positional and argument.nargs in ("?", "*")):
            if options["compact_usage"] and argument.is_option:
                if not folded:
                    items.append(assets.arg_optional_brackets(assets.usage_options))
                    folded = True
                continue
            item = assets.arg_optional_brackets(item)
        items.append(item.replace(" ", NBSP))
    return assets.join_metavars(items)


class UsageData(NamedTuple):
    title: str
    prog: str
    usage_prog: str
    usage_args: str


def format_usage(command, prog, title, assets, options, /):
    return UsageData(
        title=title or "",
        prog=prog,
        usage_prog=assets.prog_usage(prog, command.path),
        usage_args=format_usage_args(command, assets, options),
    )


__all__ = (
    "NBSP",
    "ArgumentInfo",
    "CommandInfo",
    "Annotation",
    "UsageData",
    "measurer",
    "format_metavars",
    "format_arg",
    "format_arg_summary",
    "format_value",
    "annotate_argument",
    "annotate_tree",
    "format_usage_args",
    "format_usage",
)
