r"""
flagscan flag rules and decorators.

Overview
- Rules
  • Switch: named, presence-only flag (no value), e.g., -v/--verbose.
  • Value: named, value-bearing flag with an optional metavar label, e.g., -o/--output.
  Both accept one or more spellings (aliases) and hold the callback the scanner
  invokes when one of those spellings is matched.

- Decorators
  • @switch(...): build a Switch and bind the decorated function as its callback.
  • @value(...): build a Value and bind the decorated function as its callback.

- Callbacks
  • Switch callback: callback(state) -> Ok(...) | Error(...)
  • Value callback:  callback(value, state) -> Ok(...) | Error(...)
  A rule without a bound callback is a recognized no-op: it returns Ok(state).

- Introspection & representation
  • RuleType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ via read-only properties.

Validation highlights
- names: at least one; every name must be a string. Duplicates are rejected.
  Any string is accepted, but only '-x' (one character) and '--name' spellings can
  ever match: single-dash tokens are always read as groups ('-abc' is '-a', '-b',
  '-c'), so rules spelled '-help' or 'help' are inert.
- metavar (Value only): Unset | non-empty str; becomes None when omitted.
- descr: Unset | non-empty str | Text; becomes None when omitted.
- callback: Unset | callable.

Rule sets
- A rule set is any ordered iterable of rules. When several rules share a
  spelling, the first one wins.

Example
    >>> from flagscan import Switch, Value, Ok
    >>> verbose = Switch("-v", "--verbose", callback=lambda state: Ok(state + 1))
    >>> @value("-o", "--output", metavar="path")
    ... def output(path, state):
    ...     return Ok(state)
"""
import functools
import operator
import re
from types import MethodType

from rich.text import Text

from .results import Ok
from .utils import *


class RuleType(type):
    """
    Metaclass that gives rules a readable, introspectable surface.

    Responsibilities
    - Expose selected fields as read-only properties using view() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and representations.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - switch(names=frozenset({'-v', '--verbose'}), descr=None)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize metadata shared by Switch and Value.

    Responsibilities
    - names: required, strings, no duplicates;
      normalized into a frozenset.
    - descr: optional non-empty string (or rich Text); None when Unset.
    - callback: Unset or a callable.

    Raises
    - TypeError: when names are missing or not strings, or when descr/callback
      have the wrong type.
    - ValueError: when a name is duplicated, or descr is empty.

    Notes
    - This function mutates the provided metadata dict in place.
    """
    names = set()
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.add(name)

    metadata["names"] = frozenset(names)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if metadata["callback"] is not Unset and not callable(metadata["callback"]):
        raise TypeError(f"{cls.__typename__} 'callback' must be callable")


class FlagRule(metaclass=RuleType):
    """
    Common base of Switch and Value (not meant to be instantiated directly).
    """
    __slots__ = ("_names", "_descr", "_callback")
    __introspectable__ = ()

    def __contains__(self, name):
        """
        `name in rule` is True when `name` is one of the rule's spellings.
        """
        return name in self._names

    def _build(self, metadata):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Switch(FlagRule):
    """
    Presence-only flag rule.

    The scanner invokes the callback with the current state whenever one of the
    names is matched without a value. An attached value ('--name=...') is
    reported as UnexpectedFlagValue instead.
    """
    __slots__ = ()
    __introspectable__ = (
        "names",
        "descr",
    )

    def __new__(cls, *names, callback=Unset, descr=Unset):
        metadata = {
            "names": names,
            "descr": descr,
            "callback": callback,
        }
        _sanitize_metadata(cls, metadata)
        return super().__new__(cls)._build(metadata)

    def __call__(self, state, /):
        if self._callback is Unset:
            return Ok(state)
        return self._callback(state)


class Value(FlagRule):
    """
    Value-bearing flag rule.

    The value comes from an '=' suffix ('--name=value', '-n=value') or from the
    following token ('--name value'). `metavar` labels the value in messages.
    """
    __slots__ = ("_metavar",)
    __introspectable__ = (
        "names",
        "metavar",
        "descr",
    )

    def __new__(cls, *names, metavar=Unset, callback=Unset, descr=Unset):
        metadata = {
            "names": names,
            "metavar": metavar,
            "descr": descr,
            "callback": callback,
        }
        _sanitize_metadata(cls, metadata)

        if not isinstance(metavar, str | Unset):
            raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
        metadata["metavar"] = coalesce(metavar)

        return super().__new__(cls)._build(metadata)

    def __call__(self, value, state, /):
        if self._callback is Unset:
            return Ok(state)
        return self._callback(value, state)


def switch(*args, **kwargs):
    """
    Decorator/factory for defining a switch handler.

    Usage
    - As a decorator with metadata:
        @switch("-v", "--verbose")
        def verbose(state):
            return Ok(state._replace(verbose=True))
      The decorator returns a Switch whose callback is the decorated function.

    - As a two-step decorator:
        dec = switch("--watch")
        @dec
        def watch(state): ...

    Behavior
    - Validates that it decorates a callable and enforces single application.

    Parameters
    - *args, **kwargs: forwarded to Switch(...) (names, descr).
    """
    rule = Switch(*args, **kwargs)

    @rename("switch")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@switch() must be applied to a callable")
        if rule._callback is not Unset:
            raise TypeError("@switch() must be applied only once")
        rule._callback = callback
        return rule

    wrapper.__rule__ = MethodType(rename(lambda self: rule, "__rule__"), wrapper)
    return wrapper


def value(*args, **kwargs):
    """
    Decorator/factory for defining a value flag handler.

    Usage
        @value("-o", "--output", metavar="path")
        def output(path, state):
            return Ok(state._replace(output=path))

    Behavior
    - Validates that it decorates a callable and enforces single application.

    Parameters
    - *args, **kwargs: forwarded to Value(...) (names, metavar, descr).
    """
    rule = Value(*args, **kwargs)

    @rename("value")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@value() must be applied to a callable")
        if rule._callback is not Unset:
            raise TypeError("@value() must be applied only once")
        rule._callback = callback
        return rule

    wrapper.__rule__ = MethodType(rename(lambda self: rule, "__rule__"), wrapper)
    return wrapper


__all__ = (
    # Classes (rules)
    "FlagRule",
    "Switch",
    "Value",

    # Decorators
    "switch",
    "value",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del RuleType
