"""
Help engine, stage 3: tabulation.

Turns one command into row groups. A row group is a list of rows separated
from the next group by a blank line; a row is a list of cells; a cell is a
width, its text and the indent of its wrapped continuation lines.

Arguments whose summary does not fit the argument column use the overflow
layout: the summary takes the whole row and the description moves to the
next one. In the separate-columns layout only the long-code part is checked
against its column.
"""
from typing import NamedTuple

from .objects import Argument, Command, TextBlock


class Cell(NamedTuple):
    width: int
    content: str | None
    indent: int = 0


def tabulate_usage(usage, columns, /):
    """the title (its own group, when set) and the usage line."""
    groups = []
    if usage.title:
        groups.append([[Cell(columns.full, usage.title)]])
    prog, gap, rest = columns.usage
    groups.append([[Cell(prog, usage.usage_prog), Cell(gap, ""), Cell(rest, usage.usage_args)]])
    return groups


def tabulate_text(paragraphs, columns, /):
    """one full-width group per paragraph."""
    return [[[Cell(columns.full, paragraph)]] for paragraph in paragraphs]


def has_overflow(info, columns, /):
    if columns.separate:
        return info.long_width > columns.args[3]
    return info.summary_width > columns.args[1]


def tabulate_command(info, columns, /):
    indent, *rest = columns.args
    gap, text = columns.desc
    return [[Cell(indent, ""), Cell(sum(rest), info.content), Cell(gap, ""), Cell(text, info.command.description)]]


def tabulate_values(info, columns, options, /):
    gap, indent, text = columns.value
    offset = sum(columns.args) + gap + indent
    return [
        [Cell(offset, ""), Cell(text, value, options["arg_value_desc_indent"])]
        for value in info.values
    ]


def tabulate_argument(info, columns, assets, options, /):
    """rows of one argument, in the normal or the overflow layout, plus its values."""
    description = info.argument.description
    gap, text = columns.desc
    overflow = has_overflow(info, columns)

    if columns.separate:
        indent, short, separator, long = columns.args
        head = [
            Cell(indent, ""),
            Cell(short, info.short),
            Cell(separator, assets.arg_separator if info.split else ""),
        ]
        if overflow:
            rows = [head + [Cell(long + gap + text, info.long)]]
            if description:
                rows.append([Cell(indent, ""), Cell(short, ""), Cell(separator, ""), Cell(long, ""), Cell(gap, ""), Cell(text, description)])
        else:
            rows = [head + [Cell(long, info.long), Cell(gap, ""), Cell(text, description)]]
    else:
        indent, summary = columns.args
        if overflow:
            rows = [[Cell(indent, ""), Cell(summary + gap + text, info.summary)]]
            if description:
                rows.append([Cell(indent, ""), Cell(summary, ""), Cell(gap, ""), Cell(text, description)])
        else:
            rows = [[Cell(indent, ""), Cell(summary, info.summary), Cell(gap, ""), Cell(text, description)]]

    return rows + tabulate_values(info, columns, options)


def tabulate_section(section, annotation, columns, assets, options, /):
    """
    one group holding the section header and its children, or None when the
    section has nothing to show.
    """
    rows = []
    for child in section.objects:
        match child:
            case Argument():
                rows += tabulate_argument(annotation.arguments[child.id], columns, assets, options)
            case Command():
                rows += tabulate_command(annotation.commands[child.id], columns)
            case TextBlock():
                rows.append([Cell(columns.full, child.text)])
    if not rows:
        return None

    header = [[Cell(columns.full, section.title)]] if section.title else []
    if section.description:
        header.append([Cell(columns.full, section.description)])
    return header + rows


def tabulate_tree(command, annotation, columns, assets, options, /, description=None, prologue=(), epilogue=()):
    """
    every group below the usage line: description, prologue paragraphs, the
    non-empty sections in help order, epilogue paragraphs.
    """
    groups = tabulate_text([description] if description else [], columns)
    groups += tabulate_text(prologue, columns)
    for section in command.sections:
        if (group := tabulate_section(section, annotation, columns, assets, options)) is not None:
            groups.append(group)
    groups += tabulate_text(epilogue, columns)
    return groups


__all__ = (
    "Cell",
    "tabulate_usage",
    "tabulate_text",
    "tabulate_command",
    "tabulate_values",
    "tabulate_argument",
    "tabulate_section",
    "tabulate_tree",
    "has_overflow",
)
