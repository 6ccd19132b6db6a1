"""
Help engine, stage 4: wrapping and merging.

Every cell is word-wrapped to its width and padded to it, keeping explicit
line breaks and whitespace as written; wrapped continuation lines take the
cell's indent. Cells of a row are then interleaved line by line, rows of a
group joined with newlines and groups separated by blank lines.

Wrapping is rich's Text.wrap with overflow="fold", so words wider than a line
are folded and wide (CJK) characters count as two columns. When visual width
is off, lines are filled by character count instead.
"""
from rich.cells import cell_len, set_cell_size
from rich.console import Console
from rich.text import Text

from .annotate import NBSP

console = Console(highlight=False)

# rich breaks lines on any whitespace, NBSP included.
HOLD = "\ue000"


def _fold_cells(paragraph, width, /):
    if not paragraph:
        return [""]
    text = Text(paragraph.replace(NBSP, HOLD))
    return [line.plain.replace(HOLD, NBSP) for line in text.wrap(console, width, overflow="fold")]


def _fold_chars(paragraph, width, /):
    """greedy wrap by character count; words longer than a line are chopped."""
    lines, fresh = [""], True
    for word in paragraph.split(" "):
        candidate = word if fresh else f"{lines[-1]} {word}"
        if len(candidate) <= width:
            lines[-1], fresh = candidate, False
            continue
        if not fresh:
            lines.append("")
        while len(word) > width:
            lines[-1], word = word[:width], word[width:]
            lines.append("")
        lines[-1], fresh = word, False
    return lines


def _pad(line, width, measure, /):
    if measure is cell_len:
        return set_cell_size(line, width)
    return line[:width].ljust(width)


def wrap(content, width, indent=0, measure=cell_len, /):
    """
    wrap text into lines of exactly 'width' columns.

    parameters
    - content: text (None counts as empty).
    - width: column width; 0 or less yields a single empty line.
    - indent: leading spaces of every line after the first.
    - measure: width function (cell_len or len).
    """
    if width <= 0:
        return [""]
    indent = max(0, min(indent, width - 1))
    fold = _fold_cells if measure is cell_len else _fold_chars

    lines = []
    for paragraph in str(content or "").split("\n"):
        if not lines:
            # Only the very first line is wrapped at the full width.
            lines.append(head := fold(paragraph, width)[0])
            if not (paragraph := paragraph[len(head):].lstrip(" ")):
                continue
        lines.extend(" " * indent + line for line in fold(paragraph, width - indent))
    return [_pad(line, width, measure) for line in lines]


def merge_columns(row, measure=cell_len, /):
    """interleave the wrapped cells of a row into one multi-line string."""
    columns = [(wrap(cell.content, cell.width, cell.indent, measure), cell.width) for cell in row]
    height = max((len(lines) for lines, _ in columns), default=0)
    merged = []
    for index in range(height):
        line = "".join(
            lines[index] if index < len(lines) and lines[index] else " " * width
            for lines, width in columns
        )
        merged.append(line.replace(NBSP, " ").rstrip())
    return "\n".join(merged)


def merge_table(groups, margin=1, measure=cell_len, /):
    """join row groups into the final text, 'margin' blank lines apart."""
    return ("\n" * (margin + 1)).join(
        "\n".join(merge_columns(row, measure) for row in group)
        for group in groups
    )


__all__ = (
    "wrap",
    "merge_columns",
    "merge_table",
)
