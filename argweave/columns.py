"""
Help engine, stage 2: column widths.

All layout options are resolved to absolute widths first. A value >= 1 (or
exactly 0) is a column count; a value between 0 and 1 is a fraction of the
maximum width. The maximum width itself may be "N%" of the terminal width.

Layouts
- usage: [program, gap, arguments]
- shared argument column: args = [indent, summary], the summary column being
  clamped between the minimum and maximum argument column widths.
- separate columns: args = [indent, short, separator, long]; the separator
  column only takes room when some option has a short code.
- description: desc = [gap, text]; value rows use value = [gap, indent, text].
"""
import math
from typing import NamedTuple


class Columns(NamedTuple):
    full: int
    usage: tuple
    separate: bool = False
    args: tuple = ()
    desc: tuple = ()
    value: tuple = ()
    overshoot: int = 0


def _round(value, /):
    return math.floor(value + 0.5)


def to_int(value, width, /):
    """absolute width of a layout value against a maximum width."""
    if value >= 1 or value == 0:
        return math.floor(value)
    return _round(value * width)


def resolve_width(max_width, terminal_width, /):
    """
    absolute maximum width.

    - "N%": N percent of terminal_width;
    - a fraction: that share of terminal_width;
    - otherwise the number of columns itself.
    """
    if isinstance(max_width, str):
        if terminal_width is None:
            raise TypeError("a percentage max_width needs a terminal width")
        return _round(terminal_width * float(max_width.removesuffix("%")) / 100)
    if 0 < max_width < 1:
        if terminal_width is None:
            raise TypeError("a fractional max_width needs a terminal width")
        return to_int(max_width, terminal_width)
    return math.floor(max_width)


def column_widths(annotation, usage, options, width, assets, measure, /):
    """
    compute every column width for one render.

    parameters
    - annotation: Annotation of the rendered command, or None for the
      abbreviated layout (usage only).
    - usage: UsageData of the rendered command.
    - options: validated format options.
    - width: resolved maximum width.
    """
    def resolve(name):
        return to_int(options[name], width)

    prog = measure(usage.usage_prog)
    gap = resolve("usage_col_gap")
    columns = Columns(
        full=width,
        usage=(prog, gap, max(0, width - gap - prog)),
        overshoot=resolve("arg_col_overshoot"),
    )
    if annotation is None:
        return columns

    indent = resolve("arg_start_indent")
    minimum = resolve("arg_col_minimum_width")
    maximum = resolve("arg_col_maximum_width")
    commands = [info.width for info in annotation.commands.values()]

    if separate := options["arg_separate_cols"]:
        short = max((info.short_width for info in annotation.options if info.short), default=0)
        long = max([
            *(info.long_width for info in annotation.options if info.long),
            *(info.summary_width for info in annotation.positionals),
            *commands,
        ], default=0)
        separator = measure(assets.arg_separator) if short else 0
        limited = min(max(minimum, indent + short + separator + long), maximum)
        args = (indent, short, separator, max(0, limited - separator - short - indent))
    else:
        largest = max([*(info.summary_width for info in annotation.arguments.values()), *commands], default=0)
        limited = min(max(minimum, indent + largest), maximum)
        args = (indent, max(0, limited - indent))

    described = max(0, width - limited)
    gap = resolve("arg_desc_col_gap")
    value_indent = resolve("arg_value_indent")
    return columns._replace(
        separate=separate,
        args=args,
        desc=(gap, max(0, described - gap)),
        value=(gap, value_indent, max(0, described - gap - value_indent)),
    )


__all__ = (
    "Columns",
    "to_int",
    "resolve_width",
    "column_widths",
)
