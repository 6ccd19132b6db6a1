"""
Argweave type registry.

Overview
- Kind: closed enumeration of the built-in argument types.
- TypeDescriptor: immutable record per kind. It says whether the kind takes
  input values, which system callback it triggers (if any), which defaults it
  contributes, which extra shape rules apply to its options, and how a raw
  string is coerced and then validated.
- REGISTRY: the dispatch table, one descriptor per Kind.

Defaults are layered: GLOBAL_DEFAULTS, then the kind's own defaults, then
POSITIONAL_DEFAULTS for positionals, then whatever the caller passed. A
kind's defaults may be a provider function of the language assets (the path
metavar comes from the active language).

Quick example
    >>> describe("count").accepts_values
    False
    >>> properties("usage")["system_callback"]
    'usage'
"""
from enum import StrEnum
from types import MappingProxyType
from typing import NamedTuple

from . import rules
from .faults import Mismatch, UnknownTypeError
from .utils import Unset


class Kind(StrEnum):
    BOOLEAN = "boolean"
    COUNT = "count"
    INTEGER = "integer"
    PATH = "path"
    STRING = "string"
    USAGE = "usage"
    VERSION = "version"


class TypeDescriptor(NamedTuple):
    kind: Kind
    accepts_values: bool = True
    system_callback: str | None = None
    defaults: object = MappingProxyType({})
    shape: object = MappingProxyType({})
    coerce: object = str
    validate: rules.Rule = rules.anything


GLOBAL_DEFAULTS = MappingProxyType({
    "description": None,
    "value": None,
    "default_value": None,
    "callback": None,
    "metavar": Unset,
    "nargs": None,
    "required": False,
    "priority": 1000,
})

POSITIONAL_DEFAULTS = MappingProxyType({
    "required": True,
})

ARITY = rules.positive | rules.one_of("*", "+", "?")

GLOBAL_SHAPE = MappingProxyType({
    "description": rules.string | rules.null,
    "type": rules.one_of(*(kind.value for kind in Kind)) | rules.instance_of(Kind, "a Kind"),
    "callback": rules.function | rules.null,
    "metavar": rules.string | rules.sequence_of(rules.string) | rules.null,
    "nargs": ARITY | rules.null,
    "required": rules.boolean,
    "priority": rules.number,
    "key": rules.text,
    "value": rules.anything,
    "default_value": rules.anything,
})


def _integer(value, /):
    return int(value.strip(), 10)


def _valueless(callback=None, defaults=MappingProxyType({})):
    return {
        "accepts_values": False,
        "system_callback": callback,
        "defaults": defaults,
        "shape": MappingProxyType({"nargs": rules.null}),
    }


REGISTRY = MappingProxyType({
    Kind.BOOLEAN: TypeDescriptor(
        Kind.BOOLEAN,
        **_valueless(defaults=MappingProxyType({"value": True, "default_value": False})),
    ),
    Kind.COUNT: TypeDescriptor(
        Kind.COUNT,
        accepts_values=False,
        defaults=MappingProxyType({"default_value": 0, "value": 1}),
        shape=MappingProxyType({
            "nargs": rules.one_of(0) | rules.null,
            "default_value": rules.number,
            "value": rules.number,
        }),
    ),
    Kind.INTEGER: TypeDescriptor(
        Kind.INTEGER,
        defaults=MappingProxyType({"default_value": 0, "nargs": None}),
        coerce=_integer,
        validate=rules.integer,
    ),
    Kind.PATH: TypeDescriptor(
        Kind.PATH,
        defaults=lambda assets: {"metavar": assets.metavar_path, "nargs": 1},
        validate=rules.text,
    ),
    Kind.STRING: TypeDescriptor(
        Kind.STRING,
        defaults=MappingProxyType({"nargs": None}),
        validate=rules.string,
    ),
    Kind.USAGE: TypeDescriptor(
        Kind.USAGE,
        **_valueless("usage", MappingProxyType({"value": True, "default_value": False})),
    ),
    Kind.VERSION: TypeDescriptor(
        Kind.VERSION,
        **_valueless("version", MappingProxyType({"value": True, "default_value": False})),
    ),
})


def describe(kind, /):
    """
    return the descriptor for a type name.

    raises
    - UnknownTypeError: when the name is not a registered Kind.
    """
    try:
        return REGISTRY[Kind(kind)]
    except ValueError:
        message = f"unknown argument type {kind!r}"
        raise UnknownTypeError(message, (Mismatch("type", message),)) from None


def defaults(kind, assets, /):
    """
    merged default options for a type name.

    the kind's defaults are layered over GLOBAL_DEFAULTS; provider defaults
    are called with the active language assets.
    """
    extra = (descriptor := describe(kind)).defaults
    if callable(extra):
        extra = extra(assets)
    return dict(GLOBAL_DEFAULTS) | dict(extra) | {"type": descriptor.kind}


def properties(kind, /):
    """public behaviour flags of a type name."""
    descriptor = describe(kind)
    return MappingProxyType({
        "accepts_values": descriptor.accepts_values,
        "system_callback": descriptor.system_callback,
    })


def initial_value(options, /):
    """value a never-seen argument holds in the result: its default, or [] for list arities."""
    return options["default_value"] if options["nargs"] is None else []


__all__ = (
    "Kind",
    "TypeDescriptor",
    "REGISTRY",
    "GLOBAL_DEFAULTS",
    "POSITIONAL_DEFAULTS",
    "GLOBAL_SHAPE",
    "ARITY",
    "describe",
    "defaults",
    "properties",
    "initial_value",
)
