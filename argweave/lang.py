"""
Language assets.

A Language bundles a locale code, a display name and the phrase set (Assets)
class for that locale. The parser reads defaults from it (path metavar,
reserved help/version codes) and the help engine reads every user-visible
word from it.

Only English ships; other locales subclass Assets (or EnglishAssets) and are
registered in LANGUAGES.
"""
from typing import NamedTuple

from .faults import FaultCode


class Assets:
    """generic, locale-independent phrase producers."""

    def arg_optional_ellipsis(self, text, /):
        return f"{text}..."

    def arg_optional_brackets(self, text, /):
        return f"[{text}]"

    def arg_value_code(self, value, description, /):
        return f"- {value}: {description}" if description else f"- {value}"

    def join_args(self, items, /):
        return ", ".join(items)

    def join_metavars(self, items, /):
        return " ".join(items)

    def join_set(self, items, /):
        return "{%s}" % ", ".join(items)

    def to_metavar(self, code, /):
        return code.lstrip("-").upper()

    @property
    def arg_separator(self):
        """separator between codes, used when measuring the short/long columns."""
        return self.join_args(["", ""])

    @property
    def metavar_separator(self):
        return self.join_metavars(["", ""])


class EnglishAssets(Assets):
    metavar_path = "PATH"

    header_commands = "Commands:"
    header_positional = "Positional arguments:"
    header_optional = "Optional arguments:"

    usage_options = "options"

    argument_help = ("-h", "--help")
    argument_help_desc = "Show this help message and exit."
    argument_version = ("-v", "--version")
    argument_version_desc = "Show program's version number and exit."

    def prog_usage(self, name, path=(), /):
        return f"usage: {' '.join((name, *path))}"

    def prog_error(self, name, reason, /):
        return f"{name}: error: {reason}."

    def error_unknown(self, fault, /):
        return f"Unrecognized arguments: {fault.token.original}"

    def error_incorrect_number_of_values(self, fault, /):
        match nargs := (fault.argument.nargs if fault.argument.accepts_values else 0):
            case None:
                expected = "expected 1 argument"
            case int():
                expected = f"expected {nargs} argument{'s' if nargs != 1 else ''}"
            case "+":
                expected = "expected 1 or more arguments"
            case "?":
                expected = "expected 1 or 0 arguments"
            case _:
                expected = "unknown"
        return f"Argument {fault.token.original}: {expected}"

    def error_invalid_value_type(self, fault, /):
        return "Argument %s: invalid %s value: %s" % (
            fault.token.original,
            fault.argument.kind,
            self.join_args(fault.invalid),
        )

    def error_invalid_value_option(self, fault, /):
        return "Argument %s: value must be one of %s: %s" % (
            fault.token.original,
            self.join_set(fault.accepted),
            self.join_args(fault.invalid),
        )

    def error_missing_arguments(self, fault, /):
        return "The following arguments are required: %s" % self.join_args(
            argument.summary for argument in fault.missing
        )

    def error_prompt(self, error, /):
        return f"Malformed command line: {str(error).lower()}"

    def error_fallback(self, error, /):
        return f"An error occurred while parsing arguments: {getattr(error, 'code', None) or type(error).__name__}"

    def error(self, fault, /):
        """the end-user explanation for a parse fault."""
        match fault.code:
            case FaultCode.UNKNOWN_OPTION | FaultCode.UNKNOWN_ARGUMENT:
                return self.error_unknown(fault)
            case FaultCode.INCORRECT_NUMBER_OF_VALUES:
                return self.error_incorrect_number_of_values(fault)
            case FaultCode.INVALID_VALUE_TYPE:
                return self.error_invalid_value_type(fault)
            case FaultCode.INVALID_VALUE_OPTS:
                return self.error_invalid_value_option(fault)
            case FaultCode.MISSING_ARGUMENTS:
                return self.error_missing_arguments(fault)
        return self.error_fallback(fault)


class Language(NamedTuple):
    code: str
    name: str
    assets: type[Assets]

    def load(self):
        """instantiate the phrase set."""
        return self.assets()


ENGLISH = Language("en-US", "English (US)", EnglishAssets)

LANGUAGES = {
    ENGLISH.code: ENGLISH,
}


def get_language(language, /):
    """
    resolve a Language from an instance or a locale code.

    raises
    - KeyError: when the code is not registered.
    - TypeError: when the argument is neither a Language nor a string.
    """
    if isinstance(language, Language):
        return language
    if isinstance(language, str):
        return LANGUAGES[language]
    raise TypeError("language must be a Language or a locale code")


def prefix_argument_codes(single_dash, codes, /):
    """
    restyle reserved codes for the active dash policy.

    the first code is always short; the rest take "--", or "-" when
    single-dash options are in use. ('-h', '--help') -> ['-h', '-help'].
    """
    long = "-" if single_dash else "--"
    return [
        ("-" if index == 0 else long) + code.lstrip("-")
        for index, code in enumerate(codes)
    ]


__all__ = (
    "Assets",
    "EnglishAssets",
    "Language",
    "ENGLISH",
    "LANGUAGES",
    "get_language",
    "prefix_argument_codes",
)
