"""
Tabopt argument scanner: walk an argument list and dispatch to handlers.

What this module provides
- scan(table, args, context=None): parse `args` against an OptionTable, invoke
  the handlers, and return the arguments that follow the `--` terminator.
- getopts(options, context, prog, args, ...): one-call convenience that builds the
  table, scans, and (in shell mode) reports a parse fault the way a command-line
  tool should: rendered on stderr, followed by the usage text, then exit status 2.

Token classification (single forward cursor, no backtracking across tokens)
- "--"                   terminator; everything after it is returned untouched.
- "--name" / "--name=v"  long option; a value-taking option without "=v" takes
                         the next token.
- "-"                    lone dash; dispatched to the option whose short is "-".
- "-abc"                 short bundle. Letters are looked up one by one; the first
                         letter that is not an option starts the attached value of
                         the bundle's value-taking option ("-nk2" is "-n -k 2",
                         "-nk2r" gives k the value "2r"). At most one letter of a
                         bundle may take a value; without attached characters it
                         takes the next token ("-nkr 2").
- anything else          operand; dispatched to the table's default handler.

Repeatability
- an option (or the default handler) that is not repeatable fails with
  RepeatedOptionError the second time it is dispatched, before its handler runs.
  the check is per descriptor: "-v" and "--verbose" of one row are one option.

Faults
- scanning stops at the first fault. all faults carry the 1-based position of the
  offending token (options["index"]) and the token itself.
- exceptions raised by handlers are wrapped in HandlerRejectionError (cause kept);
  ParseError subclasses raised by handlers propagate, located when they carry no
  position of their own.

Limitations
- there is no optional-value syntax: an option either always takes a value or
  never does.
- long names must be spelled in full (no prefix abbreviations).
"""
import copy
import logging
import os.path
import sys

from rich.console import Console

from .faults import *
from .table import OptionTable
from .usage import print_usage
from .utils import *

logger = logging.getLogger(__name__)


class ParseState:
    """
    Per-call scanning state. Never shared between calls.

    - args: the argument tuple being scanned.
    - cursor: index of the next unread token.
    - handled: descriptors dispatched so far (identity set).
    - leftover: tokens after the terminator.
    """
    __slots__ = ("args", "cursor", "handled", "leftover")

    def __init__(self, args, /):
        self.args = args
        self.cursor = 0
        self.handled = set()
        self.leftover = []

    def __bool__(self):
        return self.cursor < len(self.args)

    def take(self):
        """Return (position, token) for the next token and advance the cursor."""
        token = self.args[self.cursor]
        self.cursor += 1
        return self.cursor, token

    def __repr__(self):
        return "parse-state(cursor=%d, handled=%d, leftover=%r)" % (self.cursor, len(self.handled), self.leftover)


class Scanner:
    """
    The scanning state machine for one call.

    A Scanner binds a table, a context and a fresh ParseState; it is used once
    and discarded. Prefer the module-level scan() function.
    """

    def __init__(self, table, args, context=None):
        if isinstance(args, str):
            raise TypeError("scan() arguments must be a sequence of strings, not a string")
        args = tuple(args)
        for arg in args:
            if not isinstance(arg, str):
                raise TypeError("scan() arguments must be strings, not %s" % type(arg).__name__)
        self.table = table if isinstance(table, OptionTable) else OptionTable(table)
        self.context = context
        self.state = ParseState(args)

    def run(self):
        state = self.state
        while state:
            index, token = state.take()

            if token == "--":
                state.leftover.extend(state.args[state.cursor:])
                state.cursor = len(state.args)
                logger.debug("terminator at position %d, %d leftover argument(s)", index, len(state.leftover))
                break
            elif token.startswith("--"):
                self._long(token, index)
            elif token == "-":
                self._lonedash(index)
            elif token.startswith("-"):
                self._bundle(token, index)
            else:
                self._dispatch(self.table.default, token, "argument %r" % token, index, token)

        return state.leftover

    def _long(self, token, index):
        name, assigned, attached = token[2:].partition("=")

        if (option := self.table.longs.get(name)) is None:
            raise UnknownOptionError(
                "unknown option %r at %s position" % ("--" + name if name else token, ordinal(index)),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                name=name,
                token=token,
                index=index,
                hint="long options must be spelled in full; check the usage for valid names",
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            )

        if not option.value and assigned:
            raise UnexpectedValueError(
                "option %r at %s position does not take a value" % ("--" + name, ordinal(index)),
                title="option cannot take a value",
                code=FaultCode.UNEXPECTED_VALUE,
                name=name,
                token=token,
                index=index,
                hint="remove everything from '=' (for example: --%s)" % name,
                docs=getdoc(FaultCode.UNEXPECTED_VALUE),
            )

        if option.value and not assigned:
            value = self._following(option, "--" + name, index, token)
        else:
            value = attached

        self._dispatch(option, value, "option %r" % ("--" + name), index, token)

    def _lonedash(self, index):
        if (option := self.table.shorts.get("-")) is None:
            raise UnknownOptionError(
                "unknown option '-' at %s position" % ordinal(index),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                name="-",
                token="-",
                index=index,
                hint="a lone dash is not accepted here; use './-' to name a file called '-'",
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            )
        self._dispatch(option, "", "option '-'", index, "-")

    def _bundle(self, token, index):
        letters = token[1:]
        pending = None
        position = 0

        while position < len(letters):
            letter = letters[position]
            # "-" only means the lone-dash sentinel as a whole token
            option = self.table.shorts.get(letter) if letter != "-" else None
            if option is None:
                if position == 0:
                    raise self._unknown_letter(letter, token, index)
                break
            position += 1

            self._guard(option, "option %r" % ("-" + letter), index, token)
            if option.value:
                if pending is not None:
                    raise ConflictingValueError(
                        "options %r and %r at %s position compete for a value" % (
                            "-" + pending.short, "-" + letter, ordinal(index)
                        ),
                        title="conflicting values",
                        code=FaultCode.CONFLICTING_VALUE,
                        name=letter,
                        token=token,
                        index=index,
                        hint="give each value-taking option its own argument (for example: -%s A -%s B)" % (
                            pending.short, letter
                        ),
                        docs=getdoc(FaultCode.CONFLICTING_VALUE),
                    )
                pending = option
            else:
                self._dispatch(option, "", "option %r" % ("-" + letter), index, token)

        remainder = letters[position:]
        if pending is None:
            if remainder:
                raise self._unknown_letter(remainder[0], token, index)
            return

        label = "option %r" % ("-" + pending.short)
        value = remainder if remainder else self._following(pending, "-" + pending.short, index, token)
        self._dispatch(pending, value, label, index, token)

    def _unknown_letter(self, letter, token, index):
        return UnknownOptionError(
            "unknown option %r at %s position" % ("-" + letter, ordinal(index)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            name=letter,
            token=token,
            index=index,
            hint="check the usage for valid short options",
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        )

    def _following(self, option, input, index, token):
        """Consume the next token as the value of `option`."""
        if not self.state:
            raise MissingValueError(
                "missing value for option %r at %s position" % (input, ordinal(index)),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                name=input.lstrip("-"),
                token=token,
                index=index,
                hint="pass a %s after %s" % (option.metavar, input),
                docs=getdoc(FaultCode.MISSING_VALUE),
            )
        _, value = self.state.take()
        return value

    def _guard(self, option, label, index, token):
        if option in self.state.handled and not option.repeatable:
            raise RepeatedOptionError(
                "repeated but unrepeatable %s at %s position" % (label, ordinal(index)),
                title="repeated option" if not option.default else "too many arguments",
                code=FaultCode.REPEATED_OPTION,
                name=option.long or option.short,
                token=token,
                index=index,
                hint="give %s only once" % label,
                docs=getdoc(FaultCode.REPEATED_OPTION),
            )

    def _dispatch(self, option, value, label, index, token):
        self._guard(option, label, index, token)
        logger.debug("dispatching %s at position %d with %r", label, index, value)
        try:
            option.handler(self.context, value)
        except ParseError as fault:
            if fault.index is not None:
                raise
            located = {"index": index, "token": token}
            if isinstance(fault.message, str):
                located["message"] = "%s at %s position" % (fault.message, ordinal(index))
            raise copy.replace(fault, **located) from fault.__cause__
        except Exception as exception:
            raise HandlerRejectionError(
                "rejected %s at %s position: %s" % (label, ordinal(index), exception),
                title="rejected value",
                code=FaultCode.REJECTED_VALUE,
                name=option.long or option.short,
                value=value,
                token=token,
                index=index,
                hint="check the usage for the values %s accepts" % label,
                docs=getdoc(FaultCode.REJECTED_VALUE),
            ) from exception
        self.state.handled.add(option)


def scan(table, args, context=None):
    """
    Parse `args` against `table` and return the tokens after "--".

    parameters
    - table: OptionTable, or an iterable of Option rows (built on the fly, which
      may raise ConfigurationError).
    - args: sequence of strings, without the program name.
    - context: object handed to every handler (see tabopt.handlers).

    returns
    - list[str]: the leftover arguments (empty when no terminator was given).

    raises
    - a ParseError subclass describing the first problem found.
    """
    return Scanner(table, args, context).run()


def getopts(options, context=None, prog=None, args=None, *, shell=False, fancy=False, colorful=True):
    """
    Build the table, scan the arguments and return the leftover arguments.

    parameters
    - options: iterable of Option rows, or an OptionTable.
    - context: object handed to every handler.
    - prog: program name for fault headers (default: basename of sys.argv[0]).
    - args: arguments to parse (default: sys.argv[1:]).
    - shell: when True, a parse fault is printed to stderr together with the
      usage text and the process exits with status 2; otherwise it is raised.
    - fancy / colorful: rendering switches for shell mode.

    ConfigurationError is never intercepted: a broken table is a bug.
    """
    if args is None:
        args = sys.argv[1:]
    if prog is None:
        prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "tabopt"

    table = options if isinstance(options, OptionTable) else OptionTable(options)
    try:
        return scan(table, args, context)
    except ParseError as fault:
        if not shell:
            raise
        trigger(fault, prog=prog, shell=True, fancy=fancy, colorful=colorful, deferred=True)
        print_usage(table, Console(stderr=True), colorful=colorful)
        sys.exit(2)


__all__ = (
    "ParseState",
    "Scanner",
    "scan",
    "getopts",
)
