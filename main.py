"""
Example front-end: a test-runner wrapper built on flagscan.

    runner [init | install PACKAGE | make [GLOBS...] | [test] [GLOBS...]] [flags]

The first positional picks the subcommand ("init", "install", "make"); anything
else starts the default "test" subcommand and becomes its first glob. Which
flags are accepted depends on the subcommand picked so far:

    everywhere       --help, --version, --compiler PATH
    make, test       --report console|json|junit
    test             --fuzz N, --seed N, --watch
"""
import re
import sys
from dataclasses import dataclass
from typing import NamedTuple

from rich.console import Console
from rich.pretty import pprint
from rich.text import Text

from flagscan import *

__prog__ = "runner"

console = Console(stderr=True)

REPORTS = ("console", "json", "junit")
COMMANDS = ("init", "install", "make")


class Options(NamedTuple):
    command: str = "none"
    args: tuple = ()
    compiler: str | None = None
    report: str = "console"
    fuzz: int = 100
    seed: int = 1337
    help: bool = False
    version: bool = False
    watch: bool = False


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Version:
    pass


@dataclass(frozen=True)
class Init:
    pass


@dataclass(frozen=True)
class Install:
    package: str
    compiler: str | None


@dataclass(frozen=True)
class Make:
    globs: tuple
    report: str
    compiler: str | None


@dataclass(frozen=True)
class Run:
    globs: tuple
    report: str
    fuzz: int
    seed: int
    watch: bool
    compiler: str | None


def _positive_integer(text):
    if not re.fullmatch(r"\d+", text):
        return Error("expected one or more digits, but got: %s" % text)
    return Ok(int(text))


@switch("--help", descr="show this help")
def helper(options):
    return Ok(options._replace(help=True))


@switch("--version", descr="show the version")
def versioner(options):
    return Ok(options._replace(version=True))


@value("--compiler", metavar="path")
def compiler(path, options):
    return Ok(options._replace(compiler=path))


@value("--report", metavar="console|json|junit")
def report(name, options):
    if name not in REPORTS:
        return Error("--report requires a known reporter: expected console, json or junit, but got: %s" % name)
    return Ok(options._replace(report=name))


@value("--fuzz", metavar="N")
def fuzz(text, options):
    match _positive_integer(text):
        case Ok(number):
            return Ok(options._replace(fuzz=number))
        case Error(error):
            return Error("--fuzz requires a number: %s" % error)


@value("--seed", metavar="N")
def seed(text, options):
    match _positive_integer(text):
        case Ok(number):
            return Ok(options._replace(seed=number))
        case Error(error):
            return Error("--seed requires a number: %s" % error)


@switch("--watch")
def watcher(options):
    return Ok(options._replace(watch=True))


COMMON = (helper, versioner, compiler)
ALL = COMMON + (report, fuzz, seed, watcher)
KNOWN = frozenset().union(*(rule.names for rule in ALL))


def rules(options):
    match options.command:
        case "make":
            return COMMON + (report,)
        case "test":
            return ALL
        case _:
            return COMMON


def on_arg(arg, options):
    if options.command != "none":
        return Ok(options._replace(args=options.args + (arg,)))
    if arg in COMMANDS:
        return Ok(options._replace(command=arg))
    if arg == "help":
        return Ok(options._replace(help=True))
    return Ok(options._replace(command="test", args=(arg,)))


def on_rest(rest, options):
    return Ok(options._replace(args=options.args + tuple(rest)))


CONFIG = Config(Options(), rules, on_arg, on_rest)


def build(options):
    """turn the final options into a command record, or an error string."""
    if options.help:
        return Help()
    if options.version:
        return Version()

    got = "%d: %s" % (len(options.args), " ".join(options.args))

    match options.command:
        case "none" | "test":
            return Run(options.args, options.report, options.fuzz, options.seed, options.watch, options.compiler)
        case "init":
            if options.args:
                return "init takes no arguments, but got %s" % got
            return Init()
        case "install":
            if not options.args:
                return "you need to provide the package you want to install, for example: runner install elm/regex"
            if len(options.args) > 1:
                return "install takes one single argument, but got %s" % got
            return Install(options.args[0], options.compiler)
        case "make":
            return Make(options.args, options.report, options.compiler)


def interpret(argv):
    """scan argv; return a command record, a FlagError, or an error string."""
    match scan(argv, CONFIG):
        case Parsed(options):
            return build(options)
        case FlagFault(fault):
            return fault
        case ArgFault(error):
            return error


def describe(fault):
    if isinstance(fault, UnknownFlag) and fault.name in KNOWN:
        return "invalid flag in this context: %s" % fault.name
    return fault.message


def parse_command(argv):
    """like interpret(), with flag errors turned into plain messages."""
    result = interpret(argv)
    if isinstance(result, FlagError):
        return describe(result)
    return result


def main(argv=None):
    result = interpret(sys.argv[1:] if argv is None else argv)
    match result:
        case UnknownFlag(name) if name in KNOWN:
            console.print(Text(describe(result), style="bold #FF4DA6"))
        case FlagError():
            console.print(result)
        case str():
            console.print(Text(result, style="bold #FF4DA6"))
        case _:
            pprint(result)
            return 0
    return 1


if __name__ == '__main__':
    sys.exit(main())
