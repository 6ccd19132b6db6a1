"""
Shape rules for option objects.

A shape is a plain mapping of field name -> Rule. check() walks a candidate
mapping against it and reports every field that fails, instead of stopping at
the first one, so declaration errors can list all problems at once.

Rules are small named predicates; '|' combines two of them into an
alternative ("a string or null").
"""
import re
from collections.abc import Mapping
from typing import NamedTuple

from .faults import Mismatch


class Rule(NamedTuple):
    """a predicate plus the phrase describing what it expects."""
    expected: str
    test: object

    def __call__(self, value, /):
        return bool(self.test(value))

    def __or__(self, other, /):
        return Rule(f"{self.expected} or {other.expected}", lambda value: self(value) or other(value))


class Verdict(NamedTuple):
    valid: bool
    mismatches: tuple[Mismatch, ...]


def _number(value):
    return isinstance(value, int | float) and not isinstance(value, bool)


anything = Rule("anything", lambda value: True)
null = Rule("null", lambda value: value is None)
string = Rule("a string", lambda value: isinstance(value, str))
text = Rule("a non-empty string", lambda value: isinstance(value, str) and bool(value.strip()))
boolean = Rule("a boolean", lambda value: isinstance(value, bool))
number = Rule("a number", _number)
dimension = Rule("a non-negative number", lambda value: _number(value) and value >= 0)
integer = Rule("an integer", lambda value: isinstance(value, int) and not isinstance(value, bool))
positive = Rule("a positive integer", lambda value: integer(value) and value > 0)
natural = Rule("a non-negative integer", lambda value: integer(value) and value >= 0)
function = Rule("callable", callable)
percentage = Rule("a percentage string", lambda value: isinstance(value, str) and bool(re.fullmatch(r"\d+(\.\d+)?%", value)))
mapping = Rule("a mapping", lambda value: isinstance(value, Mapping))


def one_of(*choices):
    """rule accepting exactly the given values (compared by equality and type)."""
    return Rule(
        "one of %s" % ", ".join(map(repr, choices)),
        lambda value: any(type(value) is type(choice) and value == choice for choice in choices),
    )


def sequence_of(rule, /):
    """rule accepting a list or tuple whose items all pass 'rule'."""
    return Rule(
        f"a list of {rule.expected.removeprefix('a ').removeprefix('an ')}s",
        lambda value: isinstance(value, list | tuple) and all(map(rule, value)),
    )


def instance_of(cls, expected, /):
    return Rule(expected, lambda value: isinstance(value, cls))


def check(shape, candidate, /, strict=True, subject="option"):
    """
    validate a candidate mapping against a shape.

    parameters
    - shape: Mapping[str, Rule]
    - candidate: Mapping[str, Any]; fields missing from it are not checked.
    - strict: report fields the shape does not know about.
    - subject: noun used in messages ("option", "format option", ...).

    returns
    - Verdict(valid, mismatches), mismatches in candidate order.
    """
    mismatches = []
    for field, value in candidate.items():
        if (rule := shape.get(field)) is None:
            if strict:
                mismatches.append(Mismatch(field, f"unknown {subject} {field!r}"))
            continue
        if not rule(value):
            mismatches.append(Mismatch(field, f"{subject} {field!r} must be {rule.expected}, not {value!r}"))
    return Verdict(not mismatches, tuple(mismatches))


__all__ = (
    "Rule",
    "Verdict",
    "anything",
    "null",
    "string",
    "text",
    "boolean",
    "number",
    "dimension",
    "integer",
    "positive",
    "natural",
    "function",
    "percentage",
    "mapping",
    "one_of",
    "sequence_of",
    "instance_of",
    "check",
)
