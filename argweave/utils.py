"""
Argweave utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the declaration tree, the parser and the
  help engine. Nothing here knows about arguments or layouts.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning "value not provided", distinct from None.
  • Falsey, printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.

- arraywrap(value)
  • Normalize a single item or an iterable of items into a tuple.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> arraywrap("-v")
    ('-v',)
"""
import functools
from collections.abc import Iterable
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None is a legitimate user value (a metavar of None hides the
    placeholder, a default_value of None is a real default) and the API still
    needs to tell "not provided" apart from "provided as None".

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns
    - object, if object is not Unset.
    - default, if object is Unset.
    """
    return object if object is not Unset else default


def arraywrap(object, /):
    """
    Normalize a scalar or an iterable into a tuple.

    Strings count as scalars, so arraywrap("-v") gives ("-v",) rather than
    ("-", "v"). None and Unset give an empty tuple.
    """
    if object is None or object is Unset:
        return ()
    if isinstance(object, str) or not isinstance(object, Iterable):
        return (object,)
    return tuple(object)


__all__ = (
    "Unset",
    "coalesce",
    "arraywrap",
)
