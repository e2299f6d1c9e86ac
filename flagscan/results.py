"""
flagscan result model: what callbacks hand back and what a scan returns.

Callback results
- Ok(state, rest=False): the callback succeeded; `state` fully replaces the
  current state. When `rest` is True the scanner stops classifying and hands
  every remaining token to the rest handler.
- Error(error): the callback failed with an opaque, caller-defined payload.

Parse results (the single exit value of scan())
- Parsed(state): the whole input was consumed (or handed off) successfully.
- FlagFault(error): a flag could not be resolved or its callback failed; `error`
  is one of the FlagError kinds from flagscan.faults.
- ArgFault(error): the positional or rest handler returned Error(error).

All of them are frozen dataclasses: immutable, equal only to the same kind with
equal fields, and usable with structural pattern matching:

    match scan(argv, config):
        case Parsed(state):
            ...
        case FlagFault(error):
            ...
        case ArgFault(error):
            ...
"""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Ok:
    """successful callback outcome carrying the replacement state."""
    state: Any
    rest: bool = False


@dataclass(frozen=True, slots=True)
class Error:
    """failed callback outcome carrying the caller's error payload."""
    error: Any


@dataclass(frozen=True, slots=True)
class Parsed:
    state: Any


@dataclass(frozen=True, slots=True)
class FlagFault:
    error: Any


@dataclass(frozen=True, slots=True)
class ArgFault:
    error: Any


CallbackResult = Ok | Error
ParseResult = Parsed | FlagFault | ArgFault


def ensure(result, source, /):
    """
    check that a callback honoured the Ok/Error contract and return its result.

    parameters
    - result: whatever the callback returned.
    - source: short label of the callback (used in the error message).

    raises
    - TypeError when result is neither Ok nor Error; this is a programming error
      in the caller's callback, not a parse outcome.
    """
    if not isinstance(result, Ok | Error):
        raise TypeError("%s must return Ok(...) or Error(...), not %s" % (source, type(result).__name__))
    return result


__all__ = (
    "Ok",
    "Error",
    "Parsed",
    "FlagFault",
    "ArgFault",
    "CallbackResult",
    "ParseResult",
)
