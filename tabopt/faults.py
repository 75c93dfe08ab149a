"""
Tabopt faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the parser can
  report. Codes are grouped by domain (table configuration vs. argument parsing).
- ConfigurationError: programmer error raised while building an option table.
  It does not derive from ParseError, so `except ParseError` never hides it.
- ParseError: base type for user-facing parse faults. It carries a message plus a
  read-only mapping of options (code, title, hint, index, token, name, ...) and
  knows how to render itself with rich.
- trigger(): central entry point to surface a parse fault (raise, or render and
  exit when running in shell mode).
- getdoc(): optional description lookup for a code from the host application.

UX
- Position-first messages: every parse fault names the ordinal position of the
  offending token (“at third position”).
- Lowercased tone, short titles, a single clear hint.
- Palette is configurable via __styles__ in __main__; code labels via __codes__;
  program name via __prog__ (or the `prog` option).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - table configuration (10xxx): programmer errors found while indexing the table
      • MISSING_HANDLER, MULTIPLE_DEFAULTS, DUPLICATED_SHORT, DUPLICATED_LONG,
        MALFORMED_LONE_DASH
    - parsing (11xxx): user errors found while scanning arguments
      • UNKNOWN_OPTION, UNEXPECTED_VALUE, MISSING_VALUE, CONFLICTING_VALUE,
        REPEATED_OPTION, UNEXPECTED_ARGUMENT
    - delegated (1113x): handler rejections
      • REJECTED_VALUE
    """
    # --- table configuration (10xxx) ---
    MISSING_HANDLER             = 10101
    MULTIPLE_DEFAULTS           = 10102
    DUPLICATED_SHORT            = 10103
    DUPLICATED_LONG             = 10104
    MALFORMED_LONE_DASH         = 10105

    # --- parsing (11xxx) ---
    UNKNOWN_OPTION              = 11111
    UNEXPECTED_VALUE            = 11112
    MISSING_VALUE               = 11113
    CONFLICTING_VALUE           = 11114
    REPEATED_OPTION             = 11115
    UNEXPECTED_ARGUMENT         = 11121

    # --- delegated (1113x) ---
    REJECTED_VALUE              = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ConfigurationError(Exception):
    """
    an option table violates one of its invariants.

    this is a bug in the calling program, never a user input problem: it is
    raised while the table is built, strictly before any argument is scanned.
    the offending descriptor's 0-based position is available as options["index"].
    """

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")


class ParseError(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def name(self):
        return self.options.get("name")

    @property
    def index(self):
        return self.options.get("index")

    def __rich__(self):
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

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog") or "tabopt"), styler("prog-name"))

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code is not None else "?", styler("code")),
            " | ",
            text(self.options.get("title", "parse error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(2)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        message = overrides.pop("message", self.message)
        fault = type(self)(message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class UnknownOptionError(ParseError): ...
class UnexpectedValueError(ParseError): ...
class MissingValueError(ParseError): ...
class ConflictingValueError(ParseError): ...
class RepeatedOptionError(ParseError): ...
class UnexpectedArgumentError(ParseError): ...


class HandlerRejectionError(ParseError):
    """
    a handler refused a syntactically valid option or argument.

    the original exception is kept both as __cause__ and as the `cause` property.
    """

    @property
    def cause(self):
        return self.__cause__


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode the fault is rendered through the rich console and the process
      exits with status 2 (unless deferred); otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ConfigurationError",
    "ParseError",
    "UnknownOptionError",
    "UnexpectedValueError",
    "MissingValueError",
    "ConflictingValueError",
    "RepeatedOptionError",
    "UnexpectedArgumentError",
    "HandlerRejectionError",
    "trigger",
    "getdoc",
)
