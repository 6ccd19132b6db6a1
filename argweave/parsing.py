"""
Argweave parsing state machine.

Scope
- Walk a deque of classified tokens against the per-command lookup tables
  derived from the declaration tree, and produce either a ParseResult plus the
  callbacks to run, or a classified ParseFault.

States
- SELECTING_COMMAND: child command names of the active command are still
  recognised. Left for good the first time any other token is handled.
- CONSUMING_ARGUMENTS: command names are ordinary positional input.
- DONE / FAILED: terminal.

Per token
- a bare token first tries the active command's child commands (only while
  selecting), then takes the next free positional slot;
- an option-shaped token is looked up in the active command's option table;
  the root's usage/version arguments stay reachable from every command;
- the matched argument is then consumed according to its kind: booleans store
  their fixed value, usage/version store True, counts accumulate, and the
  value-taking kinds collect values until their arity is met, stopping at
  the first option-shaped token.

After the scan, required arguments that were never consumed raise
MISSING_ARGUMENTS unless a usage/version argument fired.
"""
import copy
import itertools
import logging
from collections import deque
from enum import Enum
from typing import NamedTuple

from .faults import *
from .registry import Kind

logger = logging.getLogger(__name__)


class ParseState(Enum):
    SELECTING_COMMAND = "selecting-command"
    CONSUMING_ARGUMENTS = "consuming-arguments"
    DONE = "done"
    FAILED = "failed"


class ParseResult(NamedTuple):
    """
    outcome of a successful scan.

    fields
    - arguments: key -> value for every argument of the active command,
      parsed values merged over the initial state.
    - commands: labels of the selected commands, outermost first.
    - initial_state: key -> default value, before any token was applied.
    - tokens: the tokens that were scanned.
    """
    arguments: dict
    commands: tuple
    initial_state: dict
    tokens: tuple


class Callback(NamedTuple):
    argument: object
    value: object
    token: object


def satisfies_nargs(nargs, count, /):
    """
    whether 'count' collected values satisfy an arity.

    - None (single value): exactly one
    - int n: exactly n
    - '*': always
    - '+': at least one
    - '?': zero or one
    """
    match nargs:
        case None:
            return count == 1
        case int():
            return count == nargs
        case "*":
            return True
        case "+":
            return count > 0
        case "?":
            return count in (0, 1)
    return False


def _limit(nargs, /):
    """most values an arity can take; None for unbounded."""
    match nargs:
        case None | "?":
            return 1
        case int():
            return nargs
    return None


class _Slot:
    """consumption bookkeeping for one argument during a scan."""
    __slots__ = ("argument", "consumed", "token", "order")

    def __init__(self, argument, /):
        self.argument = argument
        self.consumed = False
        self.token = None
        self.order = None


class Scope:
    """
    lookup tables of one command, built fresh whenever it becomes active.

    - commands: label -> child Command
    - options: option code -> Argument
    - positionals: deque of positional arguments still waiting for input
    - slots: argument id -> bookkeeping
    """

    def __init__(self, hierarchy, /, inherited=()):
        self.command = hierarchy.command
        self.commands = {command.label: command for command in hierarchy.commands}
        arguments = (*hierarchy.arguments, *inherited)
        self.options = {
            code.content: argument
            for argument in arguments if argument.is_option
            for code in argument.codes
        }
        self.positionals = deque(argument for argument in hierarchy.arguments if argument.is_positional)
        self.slots = {argument.id: _Slot(argument) for argument in arguments}


class Scanner:
    """
    single-use scanner over a token deque.

    parameters
    - hierarchy: id -> Hierarchy for every command of the tree.
    - root: the root Command.
    """

    def __init__(self, hierarchy, root, /):
        self.hierarchy = hierarchy
        self.state = ParseState.SELECTING_COMMAND
        self.system = tuple(argument for argument in hierarchy[root.id].arguments if argument.system_callback)
        self.scope = Scope(hierarchy[root.id])
        self.values = {}
        self.path = []
        self._pending = None
        self._order = itertools.count()

    @property
    def command(self):
        """the active command."""
        return self.scope.command

    def switch(self, command, /):
        if self.state is not ParseState.SELECTING_COMMAND:
            raise InternalError(f"cannot switch to command {command.label!r} after arguments were consumed")
        self.scope = Scope(self.hierarchy[command.id], self.system)
        self.path.append(command.key)
        logger.debug("switched to command %r", command.label)

    def scan(self, tokens, /):
        """
        consume every token and return the ParseResult.

        raises
        - ParseFault subclasses, with the active command attached.
        - InternalError on broken invariants.
        """
        scanned = tuple(tokens)
        try:
            while tokens:
                self.step(tokens.popleft(), tokens)
            self.finish()
        except ParseFault as fault:
            self.state = ParseState.FAILED
            logger.debug("scan failed with %s", fault.code.label)
            raise copy.replace(fault, command=self.command) from None
        self.state = ParseState.DONE
        return self.result(scanned)

    def step(self, token, tokens, /):
        pending, self._pending = self._pending, None

        if token.is_option:
            if (argument := self.scope.options.get(token.content)) is None:
                raise UnknownOptionError(token=token)
        elif self.state is ParseState.SELECTING_COMMAND and token.content in self.scope.commands:
            return self.switch(self.scope.commands[token.content])
        elif self.scope.positionals:
            argument = self.scope.positionals.popleft()
        elif pending is not None:
            # A bounded argument stopped right before this token.
            raise IncorrectNumberOfValuesError(token=pending[1], argument=pending[0])
        else:
            raise UnknownArgumentError(token=token)

        self.state = ParseState.CONSUMING_ARGUMENTS
        self.consume(argument, token, tokens)

    def consume(self, argument, token, tokens, /):
        if tokens and tokens[0].inline and not argument.accepts_values:
            raise IncorrectNumberOfValuesError(token=token, argument=argument)

        slot = self.scope.slots[argument.id]
        if not slot.consumed:
            slot.order = next(self._order)
        slot.consumed = True
        slot.token = token

        match argument.kind:
            case Kind.BOOLEAN:
                self.values[argument.id] = argument.value
            case Kind.USAGE | Kind.VERSION:
                self.values[argument.id] = True
            case Kind.COUNT:
                if argument.id in self.values:
                    self.values[argument.id] += argument.value
                else:
                    self.values[argument.id] = argument.value
            case _:
                self.values[argument.id] = self.collect(argument, token, tokens)

    def collect(self, argument, token, tokens, /):
        """gather, check and convert the values of a value-taking argument."""
        raw = [] if token.is_option else [token.content]
        limit = _limit(argument.nargs)
        while tokens and not tokens[0].is_option and (limit is None or len(raw) < limit):
            raw.append(tokens.popleft().content)

        if not satisfies_nargs(argument.nargs, len(raw)):
            raise IncorrectNumberOfValuesError(token=token, argument=argument)
        if argument.nargs is not None and limit is not None and tokens and not tokens[0].is_option:
            self._pending = (argument, token)

        values = self.convert(argument, token, raw)
        logger.debug("collected %r for %r", values, argument.summary)
        return values[0] if argument.nargs is None else values

    def convert(self, argument, token, raw, /):
        descriptor = argument.descriptor
        converted, invalid = [], []
        for value in raw:
            try:
                result = descriptor.coerce(value)
            except ValueError:
                invalid.append(value)
                continue
            if not descriptor.validate(result):
                invalid.append(value)
                continue
            converted.append(result)
        if invalid:
            raise InvalidValueTypeError(token=token, argument=argument, invalid=tuple(invalid))

        if accepted := argument.accepted:
            if invalid := [value for value in raw if value not in accepted]:
                raise InvalidValueOptionError(
                    token=token, argument=argument, invalid=tuple(invalid), accepted=accepted
                )
        return converted

    def finish(self):
        if self.triggered():
            return
        missing = tuple(
            slot.argument for slot in self.scope.slots.values()
            if slot.argument.required and not slot.consumed
        )
        if missing:
            raise MissingArgumentsError(missing=missing)

    def triggered(self):
        """slots of the system-callback arguments consumed during the scan."""
        return [
            slot for slot in self.scope.slots.values()
            if slot.consumed and slot.argument.system_callback
        ]

    def result(self, tokens, /):
        slots = self.scope.slots
        initial = {slot.argument.key: slot.argument.initial_value for slot in slots.values()}
        parsed = {slots[id].argument.key: value for id, value in self.values.items() if id in slots}
        return ParseResult(
            arguments=initial | parsed,
            commands=tuple(self.path),
            initial_state=initial,
            tokens=tokens,
        )

    def callbacks(self):
        """
        resolve what to run after a successful scan.

        returns
        - (system, user): system callbacks (usage/version) by priority, then by
          the order their tokens were met; when any fired, user callbacks are
          suppressed. user callbacks are ordered by priority, then by
          declaration order.
        """
        if triggered := self.triggered():
            triggered.sort(key=lambda slot: (slot.argument.priority, slot.order))
            return [Callback(slot.argument, True, slot.token) for slot in triggered], []

        user = [
            Callback(slot.argument, self.values[id], slot.token)
            for id, slot in self.scope.slots.items()
            if slot.consumed and slot.argument.callback is not None
        ]
        user.sort(key=lambda callback: (callback.argument.priority, callback.argument.id))
        return [], user


def scan(tokens, hierarchy, root, /):
    """run a fresh Scanner; returns (result, system callbacks, user callbacks)."""
    scanner = Scanner(hierarchy, root)
    result = scanner.scan(tokens)
    system, user = scanner.callbacks()
    return result, system, user


__all__ = (
    "ParseState",
    "ParseResult",
    "Callback",
    "Scope",
    "Scanner",
    "satisfies_nargs",
    "scan",
)
