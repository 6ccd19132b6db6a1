"""
Command-line tokenizer.

Turns a raw prompt (sys.argv tail, a shell-like string or any iterable of
strings) into a deque of classified tokens. The parser consumes that deque
front to back and may push a single token back with appendleft().

Classification
- "--name" and "--name=value": long option (the inline value becomes its own
  positional token right after the option).
- "-x", "-xyz", "-x=value": short option; "-xyz" is unpacked into "-x", "-y",
  "-z" unless unpacking is off (single-dash style, where "-xyz" is one code).
- "-", negative numbers and anything without a leading dash: positional.
- "--": end of options, everything after it is positional verbatim.
"""
import re
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple

from .utils import Unset

_NUMBER = re.compile(r"-\d+(\.\d+)?")


class Token(NamedTuple):
    """
    A single classified command-line token.

    fields
    - content: the text used for lookups ("-v", "--path", "file.txt").
    - original: the raw item this token came from ("-vvv", "--path=x"); used
      when echoing the user's input back in error messages.
    - is_option: whether the token is option-shaped.
    - is_long: whether the token is a double-dash option.
    - inline: whether the token is a value split off an "=" option.
    """
    content: str
    original: str
    is_option: bool = False
    is_long: bool = False
    inline: bool = False


def split(prompt=Unset, /):
    """
    normalize a prompt into a list of raw strings.

    parameters
    - prompt:
      • Unset: read sys.argv[1:].
      • str: shell-like string; split via shlex.split.
      • Iterable[str]: pre-split sequence.

    raises
    - TypeError: when prompt is none of the above, or an item is not a string.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        items = list(prompt)
        if not all(isinstance(item, str) for item in items):
            raise TypeError("prompt must be a string or an iterable of strings")
        return items
    raise TypeError("prompt must be a string or an iterable of strings")


def classify(item, /, unpack=True):
    """
    classify one raw item into one or more tokens.

    returns a tuple; it holds more than one token only for inline values
    ("--path=x") and combined short options ("-vvv" with unpack on).
    """
    if item == "-" or _NUMBER.fullmatch(item) or not item.startswith("-"):
        return (Token(item, item),)

    name, separator, value = item.partition("=")
    long = name.startswith("--")
    if separator and name not in ("-", "--"):
        return Token(name, item, True, long), Token(value, item, inline=True)
    if long:
        return (Token(item, item, True, True),)
    if unpack and len(item) > 2:
        return tuple(Token(f"-{char}", item, True, False) for char in item[1:])
    return (Token(item, item, True, False),)


def tokenize(prompt=Unset, /, unpack=True):
    """
    split and classify a prompt into a deque of tokens.

    parameters
    - prompt: see split().
    - unpack: expand combined short options ("-abc" -> "-a", "-b", "-c").

    returns
    - deque[Token], consumed destructively by the parser.
    """
    tokens = deque()
    items = iter(split(prompt))
    for item in items:
        if item == "--":
            tokens.extend(Token(rest, rest) for rest in items)
            break
        tokens.extend(classify(item, unpack))
    return tokens


__all__ = (
    "Token",
    "split",
    "classify",
    "tokenize",
)
