"""
flagscan faults: the closed set of flag errors and their rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every flag error kind.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- FlagError: base of the five error kinds a scan can report for a flag:
  • UnknownFlag               no rule in the active rule set spells the name.
  • UnexpectedFlagValue       a value was attached ('=...') to a switch.
  • MissingFlagValue          a value flag ended the input without a value.
  • ValueFlagNotLastInGroup   a value flag appeared before the end of a '-abc' group.
  • Custom                    a flag callback returned Error(...); wraps that payload.
- getdoc(): optional description lookup for a code from the host application.

Faults are values, not exceptions: the scanner returns them inside FlagFault and
the caller decides what to do. Each fault knows how to describe itself (title,
message, hint) and how to render itself with rich.

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import os.path
import sys
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar

from rich.console import Group
from rich.protocol import is_renderable
from rich.text import Text


class FaultCode(IntEnum):
    """
    canonical fault codes for flag errors (stable identifiers).

    this enumeration follows the Seralix Fault Codes convention:
    - numeric ranges encode domains (switches 1111x, delegated 1113x).
    - spacing leaves room for future additions without reshuffling existing codes.
    - normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- flag errors (111xx) ---
    UNKNOWN_FLAG                 = 11112
    UNEXPECTED_FLAG_VALUE        = 11113
    MISSING_FLAG_VALUE           = 11117
    VALUE_FLAG_NOT_LAST_IN_GROUP = 11118

    # --- delegated errors (1113x) ---
    CUSTOM                       = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _metavar(metavar):
    return "<%s>" % (metavar or "value")


class FlagError(ABC):
    """
    abstract base of the flag error kinds.

    subclasses are frozen dataclasses, so they compare by value and support
    structural pattern matching on their fields. every kind exposes:
    - code: FaultCode of the kind.
    - title: short lowercase title.
    - message: one-sentence description of what went wrong.
    - hint: one actionable suggestion.
    """
    __slots__ = ()

    code: ClassVar[FaultCode]
    title: ClassVar[str]

    @property
    @abstractmethod
    def message(self):
        raise NotImplementedError

    @property
    @abstractmethod
    def hint(self):
        raise NotImplementedError

    @property
    def body(self):
        """what render() shows under the header; the message unless overridden."""
        return self.message

    def __str__(self):
        return self.message

    def render(self, *, colorful=True):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not isinstance(fragment, str):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        prog = getattr(main, "__prog__", os.path.basename(sys.argv[0]) or "flagscan")

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.body, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint"))

        return Group(header, message, hint)

    def __rich__(self):
        return self.render()


@dataclass(frozen=True, slots=True)
class UnknownFlag(FlagError):
    """`group` is the whole single-dash token when `name` came out of one, e.g. '-help'."""
    name: str
    group: str | None = field(default=None, compare=False)

    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"

    @property
    def message(self):
        return "unknown flag %r" % self.name

    @property
    def hint(self):
        if self.group is not None:
            return "%r is read as single-character flags, one per letter; use '-%s' for a long name" % (
                self.group, self.group
            )
        return "check the spelling of %r; it is not accepted here" % self.name


@dataclass(frozen=True, slots=True)
class UnexpectedFlagValue(FlagError):
    name: str
    value: str

    code = FaultCode.UNEXPECTED_FLAG_VALUE
    title = "flag cannot take a value"

    @property
    def message(self):
        return "flag %r takes no value but was given %r" % (self.name, self.value)

    @property
    def hint(self):
        return "remove everything from '=' (for example: %s)" % self.name


@dataclass(frozen=True, slots=True)
class MissingFlagValue(FlagError):
    name: str
    metavar: str | None = None

    code = FaultCode.MISSING_FLAG_VALUE
    title = "missing flag value"

    @property
    def message(self):
        return "flag %r requires a value %s" % (self.name, _metavar(self.metavar))

    @property
    def hint(self):
        return "pass it after a space (%s %s) or inline (%s=%s)" % (
            self.name, _metavar(self.metavar), self.name, _metavar(self.metavar)
        )


@dataclass(frozen=True, slots=True)
class ValueFlagNotLastInGroup(FlagError):
    name: str
    metavar: str | None = None

    code = FaultCode.VALUE_FLAG_NOT_LAST_IN_GROUP
    title = "value flag not last in group"

    @property
    def message(self):
        return "flag %r requires a value %s and must be last in its group" % (self.name, _metavar(self.metavar))

    @property
    def hint(self):
        return "move %r to the end of the group or pass it on its own" % self.name


@dataclass(frozen=True, slots=True)
class Custom(FlagError):
    name: str
    metavar: str | None
    error: Any

    code = FaultCode.CUSTOM
    title = "invalid flag usage"

    @property
    def message(self):
        return str(self.error)

    @property
    def body(self):
        if is_renderable(self.error) and not isinstance(self.error, str):
            return self.error
        return self.message

    @property
    def hint(self):
        if self.metavar is None:
            return "check how %r is used here" % self.name
        return "check the %s given to %r" % (_metavar(self.metavar), self.name)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "FlagError",
    "UnknownFlag",
    "UnexpectedFlagValue",
    "MissingFlagValue",
    "ValueFlagNotLastInGroup",
    "Custom",
    "getdoc",
)
