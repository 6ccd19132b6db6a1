"""
Option merging and declaration checks.

Every node of the declaration tree goes through one of the validate_*
functions before it is built. They layer caller options over defaults, run
the shape rules from argweave.rules and then the cross-field constraints no
single rule can express. Any failure becomes a DeclarationError listing each
offending field.

Nothing here is caught by the library: a bad declaration is a programming
error and surfaces immediately.
"""
from collections.abc import Mapping
from types import MappingProxyType

from . import rules
from .faults import DeclarationError, Mismatch
from .lang import Language
from .registry import Kind, GLOBAL_SHAPE, POSITIONAL_DEFAULTS, defaults, describe
from .tokens import classify
from .utils import Unset

FORMAT_DEFAULTS = MappingProxyType({
    "max_width": 80,
    "paragraph_margin": 1,
    "arg_start_indent": 2,
    "arg_desc_col_gap": 2,
    "arg_value_indent": 4,
    "arg_value_desc_indent": 2,
    "arg_col_minimum_width": 0.175,
    "arg_col_maximum_width": 0.35,
    "arg_col_overshoot": 0.05,
    "usage_col_gap": 1,
    "compact_usage": False,
    "compact_metavars": False,
    "arg_separate_cols": False,
    "use_visual_width": True,
    "use_abbreviated_error": True,
})

FORMAT_SHAPE = MappingProxyType({
    "max_width": rules.dimension | rules.percentage,
    "paragraph_margin": rules.natural,
    "arg_start_indent": rules.dimension,
    "arg_desc_col_gap": rules.dimension,
    "arg_value_indent": rules.dimension,
    "arg_value_desc_indent": rules.dimension,
    "arg_col_minimum_width": rules.dimension,
    "arg_col_maximum_width": rules.dimension,
    "arg_col_overshoot": rules.dimension,
    "usage_col_gap": rules.dimension,
    "compact_usage": rules.boolean,
    "compact_metavars": rules.boolean,
    "arg_separate_cols": rules.boolean,
    "use_visual_width": rules.boolean,
    "use_abbreviated_error": rules.boolean,
    "prefer_long_codes": rules.boolean,
    "prefer_short_codes": rules.boolean,
})

PARSER_SHAPE = MappingProxyType({
    "prog": rules.text,
    "version": rules.string | rules.null,
    "description": rules.string | rules.null,
    "help": rules.string | rules.sequence_of(rules.string) | rules.null,
    "epilogue": rules.string | rules.sequence_of(rules.string) | rules.null,
    "title": rules.string | rules.null,
    "lang": rules.instance_of(Language, "a Language") | rules.string,
    "add_help": rules.boolean,
    "add_version": rules.boolean,
    "single_dash": rules.boolean,
    "write_out": rules.function,
    "write_err": rules.function,
    "terminal_width": rules.positive | rules.null,
    "format_options": rules.mapping | rules.null,
})

COMMAND_SHAPE = MappingProxyType({
    "description": rules.string | rules.null,
    "key": rules.text,
})

SECTION_SHAPE = MappingProxyType({
    "description": rules.string | rules.null,
})

VALUE_SHAPE = MappingProxyType({
    "description": rules.string | rules.null,
})


def _enforce(shape, candidate, /, subject="option"):
    if not (verdict := rules.check(shape, candidate, subject=subject)).valid:
        raise DeclarationError.from_mismatches(verdict.mismatches)


def resolve_code_preference(options, /):
    """
    settle prefer_long_codes / prefer_short_codes into two opposite booleans.

    - both given: they must differ.
    - one given: the other becomes its inverse.
    - neither given: prefer long codes.

    mutates and returns 'options'.
    """
    long = options.get("prefer_long_codes", Unset)
    short = options.get("prefer_short_codes", Unset)
    if long is not Unset and short is not Unset and long == short:
        raise DeclarationError(
            "format options 'prefer_long_codes' and 'prefer_short_codes' cannot have the same value",
            (Mismatch("prefer_long_codes", "must differ from 'prefer_short_codes'"),),
        )
    if long is Unset:
        long = not short if short is not Unset else True
    options["prefer_long_codes"] = long
    options["prefer_short_codes"] = not long
    return options


def validate_format_options(options=None, /):
    """merge layout options over FORMAT_DEFAULTS and return a read-only view."""
    if options is not None and not isinstance(options, Mapping):
        raise DeclarationError("format options must be a mapping")
    _enforce(FORMAT_SHAPE, options := dict(options or {}), "format option")
    return MappingProxyType(resolve_code_preference(dict(FORMAT_DEFAULTS) | options))


def validate_parser_options(options, /):
    """check the Parser keyword arguments; Unset entries are dropped first."""
    options = {name: value for name, value in options.items() if value is not Unset}
    _enforce(PARSER_SHAPE, options, "parser option")
    return options


def validate_command_label(label, /):
    """a command label is a single dash-free word."""
    if not isinstance(label, str):
        raise DeclarationError(f"command label must be a string, not {label!r}")
    if not label or label != label.strip() or any(char.isspace() for char in label):
        raise DeclarationError(f"command label {label!r} must be a single non-empty word")
    if label.startswith("-"):
        raise DeclarationError(f"command label {label!r} cannot look like an option")
    return label


def validate_command_options(options, /):
    _enforce(COMMAND_SHAPE, options, "command option")
    return {"description": None} | options


def validate_section_options(options, /):
    _enforce(SECTION_SHAPE, options, "section option")
    return {"description": None} | options


def validate_value_options(content, options, /):
    if not rules.text(content):
        raise DeclarationError(f"value must be a non-empty string, not {content!r}")
    _enforce(VALUE_SHAPE, options, "value option")
    return {"description": None} | options


def validate_codes(codes, /, single_dash=False):
    """
    check argument codes and classify them.

    rules
    - codes is a non-empty list or tuple of non-empty strings without spaces;
    - each code classifies as exactly one token under the dash policy, so
      "-abc" is refused unless single-dash options are in use;
    - long codes are refused in single-dash mode;
    - either every code is an option code, or there is one positional code;
    - no code appears twice.

    returns
    - tuple[Token, ...] in declaration order.
    """
    if not isinstance(codes, list | tuple):
        raise DeclarationError(f"argument codes must be a list of strings, not {codes!r}")
    if not codes:
        raise DeclarationError("argument codes cannot be empty")

    tokens = []
    for code in codes:
        if not rules.text(code) or any(char.isspace() for char in code):
            raise DeclarationError(f"argument code {code!r} must be a non-empty string without spaces")
        if len(classified := classify(code, not single_dash)) != 1:
            raise DeclarationError(f"argument code {code!r} expands to multiple arguments")
        if (token := classified[0]).is_long and single_dash:
            raise DeclarationError(f"argument code {code!r} is a long option, but single-dash options are in use")
        tokens.append(token)

    if len({token.content for token in tokens}) != len(tokens):
        raise DeclarationError(f"argument codes {list(codes)!r} contain duplicates")
    if not all(token.is_option for token in tokens) and len(tokens) != 1:
        raise DeclarationError(f"argument codes {list(codes)!r} must all be options, or a single positional")
    return tuple(tokens)


def validate_argument_options(options, /, assets, positional=False):
    """
    build the final option set of an argument.

    layering
    - global defaults, then the kind's defaults (registry.defaults);
    - POSITIONAL_DEFAULTS for positionals ('?' and '*' positionals stay optional);
    - the caller's options;
    - the resolved Kind under 'type'.

    cross-field checks
    - 'value' and 'default_value' cannot be the same boolean;
    - kinds that take no values cannot carry a metavar.

    raises
    - UnknownTypeError / DeclarationError
    """
    kind = options.get("type", Kind.STRING if positional else Kind.BOOLEAN)
    descriptor = describe(kind)
    _enforce(GLOBAL_SHAPE | descriptor.shape, options)

    merged = defaults(kind, assets)
    if positional:
        merged |= POSITIONAL_DEFAULTS
        if options.get("nargs", merged["nargs"]) in ("?", "*"):
            merged["required"] = False
    merged |= options
    merged["type"] = descriptor.kind

    mismatches = []
    if (
        isinstance(value := merged["value"], bool)
        and isinstance(merged["default_value"], bool)
        and value == merged["default_value"]
    ):
        mismatches.append(Mismatch("value", f"options 'value' and 'default_value' cannot both be {value}"))
    if not descriptor.accepts_values and merged["metavar"] not in (Unset, None):
        mismatches.append(Mismatch("metavar", f"type {descriptor.kind!s} takes no values and cannot have a metavar"))
    if mismatches:
        raise DeclarationError.from_mismatches(mismatches)

    if descriptor.kind is Kind.COUNT and merged["nargs"] == 0:
        merged["nargs"] = None
    if isinstance(merged["metavar"], list):
        merged["metavar"] = tuple(merged["metavar"])
    if "key" in merged:
        merged["key"] = merged["key"].strip()
    return merged


__all__ = (
    "FORMAT_DEFAULTS",
    "FORMAT_SHAPE",
    "PARSER_SHAPE",
    "resolve_code_preference",
    "validate_format_options",
    "validate_parser_options",
    "validate_command_label",
    "validate_command_options",
    "validate_section_options",
    "validate_value_options",
    "validate_codes",
    "validate_argument_options",
)
