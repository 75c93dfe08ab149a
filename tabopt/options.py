r"""
Tabopt option descriptors.

Overview
- Option: one row of the option table. It names an option (short and/or long),
  says whether it takes a value and whether it may repeat, carries the help text
  used by the usage printer, and holds the handler invoked when it is seen.

Special rows
- default handler: an Option with neither `short` nor `long`. It receives every
  non-option argument found before the `--` terminator. It is repeatable unless
  `repeatable=False` is given explicitly.
- lone dash: an Option whose `short` is "-". It matches the single token "-"
  (conventionally "read from standard input").

Metadata (sanitized on construction)
- short: Unset | str, exactly one printable ASCII character other than "=".
- long: Unset | str, non-empty, no leading "-", no "=" and no whitespace.
- help: str (may be empty; empty help hides the row from usage output).
  A backtick-quoted fragment names the value in usage (e.g. "listen on `PORT`").
- value: bool, whether the option consumes a value.
- repeatable: Unset | bool (see default handler above for the Unset rule).
- handler: Unset | Handler | callable; plain callables are wrapped in Custom.

Cross-row invariants (duplicate names, single default handler, lone dash shape,
handler presence) are checked by tabopt.table.OptionTable, not here.

Quick example:
    >>> from tabopt import Option, SetFlag, SetString
    >>> verbose = Option("v", "verbose", help="Enable verbose output", handler=SetFlag("verbose"))
    >>> output = Option("o", help="Write to `FILE`", value=True, handler=SetString("output"))
    >>> output.metavar
    'file'
"""
import re

from .handlers import Handler, Custom
from .utils import *


def _sanitize_names(metadata, /):
    """
    Internal: validate and normalize the short/long names.

    Raises
    - TypeError: when a name is not a string (or Unset).
    - ValueError: when a name has the wrong shape.
    """
    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError("option 'short' must be a string")
    elif isinstance(short, str):
        if len(short) != 1:
            raise ValueError("option 'short' must be a single character")
        elif not short.isascii() or not short.isprintable() or short.isspace():
            raise ValueError("option 'short' must be a printable ascii character")
        elif short == "=":
            raise ValueError("option 'short' cannot be '='")
    metadata["short"] = coalesce(short)

    if not isinstance(long := metadata["long"], str | Unset):
        raise TypeError("option 'long' must be a string")
    elif isinstance(long, str):
        if not long:
            raise ValueError("option 'long' cannot be empty")
        elif long.startswith("-"):
            raise ValueError("option 'long' must be given without leading dashes")
        elif re.search(r"[=\s]", long):
            raise ValueError("option 'long' cannot contain '=' or whitespace")
    metadata["long"] = coalesce(long)


def _sanitize_behavior(metadata, /):
    """
    Internal: validate help/value/repeatable/handler and resolve defaults.
    """
    if not isinstance(metadata["help"], str):
        raise TypeError("option 'help' must be a string")

    if not isinstance(metadata["value"], bool):
        raise TypeError("option 'value' must be a boolean")

    if not isinstance(repeatable := metadata["repeatable"], bool | Unset):
        raise TypeError("option 'repeatable' must be a boolean")
    # The default handler collects operands, so it repeats unless told otherwise.
    metadata["repeatable"] = coalesce(repeatable, metadata["short"] is None and metadata["long"] is None)

    if isinstance(handler := metadata["handler"], Handler | Unset):
        pass
    elif callable(handler):
        handler = Custom(handler)
    else:
        raise TypeError("option 'handler' must be callable")
    metadata["handler"] = coalesce(handler)


class Option:
    """
    Immutable option descriptor.

    Properties
    - short, long, help, value, repeatable, handler: sanitized metadata (absent
      names and a missing handler read as None).
    - default: True for the default handler (no short and no long name).
    - lonedash: True for the lone-dash sentinel (short == "-").
    - metavar: value label for usage output.
    - label: how the option is named in messages ("-v/--verbose", "--etags", ...).
    """

    __introspectable__ = (
        "short",
        "long",
        "help",
        "value",
        "repeatable",
        "handler",
    )

    __slots__ = tuple("_" + name for name in __introspectable__)

    short = mirror("short")
    long = mirror("long")
    help = mirror("help")
    value = mirror("value")
    repeatable = mirror("repeatable")
    handler = mirror("handler")

    def __init__(
            self,
            short=Unset,
            long=Unset,
            help="",
            *,
            value=False,
            repeatable=Unset,
            handler=Unset
    ):
        metadata = {
            "short": short,
            "long": long,
            "help": help,
            "value": value,
            "repeatable": repeatable,
            "handler": handler,
        }
        _sanitize_names(metadata)
        _sanitize_behavior(metadata)

        for name in self.__introspectable__:
            object.__setattr__(self, "_" + name, metadata[name])

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    @property
    def default(self):
        return self._short is None and self._long is None

    @property
    def lonedash(self):
        return self._short == "-"

    @property
    def metavar(self):
        if match := re.search(r"`([^`]+)`", self._help):
            return match[1].lower()
        return "value"

    @property
    def label(self):
        if self.default:
            return "argument"
        return "/".join(
            name for name in (
                "-" + self._short if self._short is not None else None,
                "--" + self._long if self._long is not None else None,
            ) if name
        )

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "option(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "Option",
)
