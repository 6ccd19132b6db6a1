"""
Argweave faults (declaration, parse and internal errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every end-user facing
  parse error. The label form (ARGS_UNKNOWN_OPTION, ...) is what logs carry.
- ParseFault: base type for errors raised while scanning a token list. It
  carries an optional message plus a read-only options mapping with all the
  context a renderer needs (offending token, argument, active command, ...).
- DeclarationError: raised while building the declaration tree. Programmer
  facing, never rendered for end users, never caught by the library.
- InternalError: the engine broke one of its own invariants.

Propagation
- Declaration and internal errors always surface as hard failures.
- Parse faults are caught only by Parser.parse_arguments (CLI mode), which
  renders them through the help engine; the embeddable mode lets them through
  untouched so callers can decide presentation.
"""
from enum import IntEnum
from types import MappingProxyType
from typing import NamedTuple

from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical parse fault codes (stable identifiers).

    grouping
    - tokens that match nothing (1010x)
      • UNKNOWN_OPTION, UNKNOWN_ARGUMENT
    - values handed to a known argument (1011x)
      • INCORRECT_NUMBER_OF_VALUES, INVALID_VALUE_TYPE, INVALID_VALUE_OPTS
    - structural leftovers after the scan (1012x)
      • MISSING_ARGUMENTS
    """
    UNKNOWN_OPTION              = 10101
    UNKNOWN_ARGUMENT            = 10102

    INCORRECT_NUMBER_OF_VALUES  = 10111
    INVALID_VALUE_TYPE          = 10112
    INVALID_VALUE_OPTS          = 10113

    MISSING_ARGUMENTS           = 10121

    @property
    def label(self):
        """prefixed, searchable label for this code (e.g. ARGS_UNKNOWN_OPTION)."""
        return f"ARGS_{self.name}"


class Mismatch(NamedTuple):
    """One field of an options object that failed its shape rule."""
    field: str
    message: str


class DeclarationError(ValueError):
    """
    Raised when the declaration tree is built with invalid options.

    Covers malformed option shapes, duplicate codes or keys, invalid code
    strings, values declared on a value-less type and contradictory format
    preferences. The individual field failures are kept in 'mismatches'.
    """

    def __init__(self, message, /, mismatches=()):
        super().__init__(message)
        self.message = message
        self.mismatches = tuple(mismatches)

    @classmethod
    def from_mismatches(cls, mismatches, /):
        """build a single error out of one or more field mismatches."""
        if len(mismatches := tuple(mismatches)) == 1:
            return cls(mismatches[0].message, mismatches)
        return cls("\n".join([
            "multiple option errors:",
            *(f"- {mismatch.message}" for mismatch in mismatches)
        ]), mismatches)


class UnknownTypeError(DeclarationError):
    """An argument asked for a type name the registry does not know."""


class InternalError(RuntimeError):
    """The engine reached a state its own invariants forbid."""


class ParseFault(Exception):
    """
    base type of every end-user facing parse error.

    construction
    - ParseFault(message=Unset, /, **options)
      the message is optional; renderers build the final phrase from the
      options through the language assets.

    common options
    - code: FaultCode
    - token: Token that triggered the fault
    - argument: Argument involved, when there is one
    - command: active Command at the time of the fault
    - invalid / accepted / missing: extra payload per fault kind
    """
    code = None

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*((message,) if message is not Unset else ()))
        self.message = message
        self.options = MappingProxyType({"code": type(self).code} | options)

    def __getattr__(self, name):
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} fault has no {name!r} option") from None

    def __str__(self):
        if self.message is not Unset:
            return self.message
        return self.options["code"].label

    def __rich__(self):
        return Text.assemble(
            (self.options["code"].label, "bold red"),
            ": ",
            str(self) if self.message is not Unset else "",
        )

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(ParseFault):
    code = FaultCode.UNKNOWN_OPTION


class UnknownArgumentError(ParseFault):
    code = FaultCode.UNKNOWN_ARGUMENT


class IncorrectNumberOfValuesError(ParseFault):
    code = FaultCode.INCORRECT_NUMBER_OF_VALUES


class InvalidValueTypeError(ParseFault):
    code = FaultCode.INVALID_VALUE_TYPE


class InvalidValueOptionError(ParseFault):
    code = FaultCode.INVALID_VALUE_OPTS


class MissingArgumentsError(ParseFault):
    code = FaultCode.MISSING_ARGUMENTS


__all__ = (
    "FaultCode",
    "Mismatch",
    "DeclarationError",
    "UnknownTypeError",
    "InternalError",
    "ParseFault",
    "UnknownOptionError",
    "UnknownArgumentError",
    "IncorrectNumberOfValuesError",
    "InvalidValueTypeError",
    "InvalidValueOptionError",
    "MissingArgumentsError",
)
