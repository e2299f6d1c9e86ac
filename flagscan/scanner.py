"""
flagscan scanner: classify tokens, resolve flags, dispatch callbacks.

What this module provides
- classify(token): Terminator(), FlagToken(dash, name, value) or Positional(token).
- extract(flag, cursor): where a flag's value comes from (ViaEquals, ViaNextArg,
  NextArgMissing). Extraction never moves the cursor.
- expand(flag, source): one (name, source) candidate per character of a
  single-dash group; every member but the last gets NotLastInGroup().
- resolve(name, rules): first rule of the active rule set spelling `name`.
- Cursor: explicit index over the token tuple with a conditional advance.
- Config / Scanner / scan(): the dispatch loop.

Token shapes
- "--" is the terminator; everything after it goes to the rest handler verbatim.
- a flag token is one or two dashes, a name whose first character is neither
  '-' nor '=' and which contains no '=', and an optional '=value' suffix (the
  suffix may be empty and may contain further '=').
- anything else is positional: "-", "---", "--=", "-=", "value", "".

Dispatch (per token, left to right)
1. terminator → rest handler receives every token after it; done.
2. flag token → each candidate is resolved against the rules computed from the
   state as it was before this token. Switches get callback(state); value
   flags get callback(value, state) and, when the value was the next token,
   the cursor skips it.
3. positional → on_arg(token, state).
Every Ok(...) replaces the state and recomputes the rule set; Ok(..., rest=True)
hands all tokens after the cursor to the rest handler. The first fault ends the
scan; effects of callbacks that already ran are kept.

Example
    >>> from flagscan import Config, Switch, Ok, scan
    >>> config = Config(
    ...     initial=0,
    ...     rules=lambda state: [Switch("-v", callback=lambda state: Ok(state + 1))],
    ...     on_arg=lambda arg, state: Ok(state),
    ...     on_rest=lambda rest, state: Ok(state),
    ... )
    >>> scan(["-vvv"], config)
    Parsed(state=3)
"""
import logging
import re
import shlex
from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple, Any, Callable

from .faults import *
from .results import *
from .results import ensure
from .rules import Switch, Value
from .utils import Unset

logger = logging.getLogger(__name__)

TERMINATOR = "--"

_FLAG = re.compile(r"(?P<dash>--?)(?P<name>[^-=][^=]*)(?:=(?P<value>.*))?", re.DOTALL)


@dataclass(frozen=True, slots=True)
class Terminator:
    """the literal "--" token."""


@dataclass(frozen=True, slots=True)
class FlagToken:
    """a token shaped like a flag; value is None when no '=' was present."""
    dash: str
    name: str
    value: str | None = None


@dataclass(frozen=True, slots=True)
class Positional:
    token: str


@dataclass(frozen=True, slots=True)
class ViaEquals:
    value: str


@dataclass(frozen=True, slots=True)
class ViaNextArg:
    value: str


@dataclass(frozen=True, slots=True)
class NextArgMissing:
    pass


@dataclass(frozen=True, slots=True)
class NotLastInGroup:
    pass


def classify(token, /):
    """
    classify one raw token.

    returns
    - Terminator() for exactly "--".
    - FlagToken(dash, name, value) when the token has the flag shape.
    - Positional(token) otherwise.
    """
    if token == TERMINATOR:
        return Terminator()
    if match := _FLAG.fullmatch(token):
        return FlagToken(match["dash"], match["name"], match["value"])
    return Positional(token)


class Cursor:
    """
    explicit position over an indexable token sequence.

    the scanner reads `current`, looks ahead with `peek()` and only moves with
    `advance(count)`; consuming a flag's next-token value is a separate,
    explicit `advance()`.
    """
    __slots__ = ("_tokens", "_index")

    def __init__(self, tokens, index=0, /):
        self._tokens = tuple(tokens)
        self._index = index

    @property
    def tokens(self):
        return self._tokens

    @property
    def index(self):
        return self._index

    @property
    def exhausted(self):
        return self._index >= len(self._tokens)

    @property
    def current(self):
        return self._tokens[self._index]

    def peek(self):
        """the token after the current one, or Unset at the end of input."""
        try:
            return self._tokens[self._index + 1]
        except IndexError:
            return Unset

    def advance(self, count=1, /):
        if count < 0:
            raise ValueError("cursor cannot move backwards")
        self._index += count
        return self

    def remaining(self):
        """every token strictly after the current one."""
        return list(self._tokens[self._index + 1:])

    def __repr__(self):
        return "Cursor(index=%d, tokens=%r)" % (self._index, self._tokens)


def extract(flag, cursor, /):
    """
    find where the value of `flag` (at `cursor.current`) would come from.

    - '=...' suffix present (even empty) → ViaEquals(suffix)
    - a following token exists          → ViaNextArg(token); only consumed if
                                           the matched rule takes a value
    - end of input                      → NextArgMissing()
    """
    if flag.value is not None:
        return ViaEquals(flag.value)
    if (following := cursor.peek()) is not Unset:
        return ViaNextArg(following)
    return NextArgMissing()


def expand(flag, source, /):
    """
    split a flag token into (name, source) candidates.

    '--name' stays one candidate. '-abc' becomes '-a', '-b', '-c'; only the last
    one receives `source`, the others get NotLastInGroup().
    """
    if flag.dash == "--":
        return [(flag.dash + flag.name, source)]
    *heads, last = flag.name
    return [("-" + char, NotLastInGroup()) for char in heads] + [("-" + last, source)]


def resolve(name, rules, /):
    """
    return the first rule in `rules` that spells `name`, or None.
    """
    for rule in rules:
        if name in rule:
            return rule
    return None


class Config(NamedTuple):
    """
    configuration of one scan.

    fields
    - initial: the state the scan starts from.
    - rules: state -> iterable of Switch/Value; called before the scan and after
      every successful callback.
    - on_arg: (token, state) -> Ok | Error; called once per positional token.
    - on_rest: (tokens, state) -> Ok | Error; called at most once, at "--" or
      when a callback returns Ok(..., rest=True).
    """
    initial: Any
    rules: Callable
    on_arg: Callable
    on_rest: Callable


class Scanner:
    """
    the dispatch loop bound to one Config.

    a Scanner keeps the state and the active rule set of the scan in progress,
    so one instance runs one scan at a time; scan() builds a fresh one per call.
    """

    def __init__(self, config, /):
        if not isinstance(config, Config):
            raise TypeError("Scanner() argument must be a Config")
        for field in ("rules", "on_arg", "on_rest"):
            if not callable(getattr(config, field)):
                raise TypeError("Config %r must be callable" % field)
        self._config = config
        self._state = config.initial
        self._rules = ()

    @property
    def config(self):
        return self._config

    def __call__(self, tokens, /):
        cursor = Cursor(tokens)
        self._state = self._config.initial
        self._rules = self._recompute()

        logger.debug("scanning %d tokens", len(cursor.tokens))

        while not cursor.exhausted:
            match classify(cursor.current):
                case Terminator():
                    return self._handoff(cursor)
                case FlagToken() as flag:
                    outcome = self._flag(flag, cursor)
                case Positional(token):
                    outcome = self._positional(token, cursor)
            if outcome is not None:
                return outcome
            cursor.advance()

        return Parsed(self._state)

    def _recompute(self):
        rules = tuple(self._config.rules(self._state))
        for rule in rules:
            if not isinstance(rule, Switch | Value):
                raise TypeError("flag rules must be Switch or Value, not %s" % type(rule).__name__)
        return rules

    def _commit(self, result, cursor):
        # None means: keep scanning
        self._state = result.state
        self._rules = self._recompute()
        if result.rest:
            return self._handoff(cursor)
        return None

    def _handoff(self, cursor):
        rest = cursor.remaining()
        logger.debug("handing %d tokens to the rest handler at index %d", len(rest), cursor.index)
        match ensure(self._config.on_rest(rest, self._state), "rest handler"):
            case Ok(state):
                return Parsed(state)
            case Error(error):
                return ArgFault(error)

    def _abort(self, fault):
        logger.debug("scan aborted: %s", fault)
        return FlagFault(fault)

    def _flag(self, flag, cursor):
        group = "-" + flag.name if flag.dash == "-" and len(flag.name) > 1 else None
        for name, source in expand(flag, extract(flag, cursor)):
            rule = resolve(name, self._rules)
            match rule, source:
                case None, _:
                    return self._abort(UnknownFlag(name, group))
                case Switch(), ViaEquals(value):
                    return self._abort(UnexpectedFlagValue(name, value))
                case Switch(), _:
                    result = rule(self._state)
                case Value(), NotLastInGroup():
                    return self._abort(ValueFlagNotLastInGroup(name, rule.metavar))
                case Value(), NextArgMissing():
                    return self._abort(MissingFlagValue(name, rule.metavar))
                case Value(), ViaNextArg(value):
                    cursor.advance()
                    result = rule(value, self._state)
                case Value(), ViaEquals(value):
                    result = rule(value, self._state)

            logger.debug("flag %r matched %r", name, rule)

            match ensure(result, "callback of %r" % name):
                case Error(error):
                    return self._abort(Custom(name, getattr(rule, "metavar", None), error))
                case Ok() as result:
                    if (outcome := self._commit(result, cursor)) is not None:
                        return outcome
        return None

    def _positional(self, token, cursor):
        match ensure(self._config.on_arg(token, self._state), "positional handler"):
            case Error(error):
                return ArgFault(error)
            case Ok() as result:
                return self._commit(result, cursor)


def _tokenize(tokens):
    if isinstance(tokens, str):
        return shlex.split(tokens)
    if not isinstance(tokens, Iterable):
        raise TypeError("scan() argument must be a string or an iterable of strings")
    tokens = list(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("scan() argument must be a string or an iterable of strings")
    return tokens


def scan(tokens, config, /):
    """
    scan `tokens` with `config` and return Parsed, FlagFault or ArgFault.

    parameters
    - tokens:
      • Iterable[str]: pre-tokenized arguments (e.g., sys.argv[1:]); used as-is.
      • str: shell-like string; split with shlex.split.
    - config: Config

    raises
    - TypeError: for non-string tokens, a malformed Config, rule generators
      returning something other than rules, or callbacks returning something
      other than Ok/Error. Flag and argument problems are returned, never raised.
    """
    return Scanner(config)(_tokenize(tokens))


__all__ = (
    "Terminator",
    "FlagToken",
    "Positional",
    "ViaEquals",
    "ViaNextArg",
    "NextArgMissing",
    "NotLastInGroup",
    "Cursor",
    "Config",
    "Scanner",
    "classify",
    "extract",
    "expand",
    "resolve",
    "scan",
)
