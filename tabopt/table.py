"""
Tabopt option table: validate a list of Option descriptors and index them.

The table is built once, before any argument is scanned, and is read-only
afterwards; one table can serve any number of scans (also from several threads,
since scanning never writes to it).

Invariants (a violation raises ConfigurationError, naming the row)
- every descriptor has a handler;
- at most one descriptor has neither a short nor a long name (the default handler);
- short names are unique; long names are unique;
- the lone-dash descriptor (short "-") has no long name and takes no value.

When the caller supplies no default handler, one is synthesized that rejects any
non-option argument with UnexpectedArgumentError.
"""
import logging

from .faults import *
from .handlers import Handler
from .options import Option
from .utils import *

logger = logging.getLogger(__name__)


class _RejectArgument(Handler):
    """Handler of the synthesized default option: operands are not allowed."""
    __slots__ = ()

    def __call__(self, context, value, /):
        raise UnexpectedArgumentError(
            "unexpected argument %r" % value,
            title="unexpected argument",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            token=value,
            hint="remove the extra argument, or pass it after '--'",
        )

    def __repr__(self):
        return "RejectArgument()"


def _misconfigured(message, code, index, option):
    return ConfigurationError(
        "%s (at row %d: %r)" % (message, index, option),
        code=code,
        index=index,
        option=option,
    )


class OptionTable:
    """
    Validated, indexed, read-only option table.

    Properties
    - options: tuple of the caller's descriptors, in input order.
    - shorts: read-only mapping short character → Option.
    - longs: read-only mapping long name → Option.
    - default: the caller's default handler, or the synthesized rejecting one.
    - synthesized: True when `default` was synthesized.
    """

    __slots__ = ("_options", "_shorts", "_longs", "_default", "_synthesized")

    options = mirror("options")
    shorts = mirror("shorts")
    longs = mirror("longs")
    default = mirror("default")
    synthesized = mirror("synthesized")

    def __init__(self, options, /):
        if isinstance(options, OptionTable):
            options = options.options
        try:
            options = tuple(options)
        except TypeError:
            raise TypeError("OptionTable() argument must be an iterable of options") from None

        shorts = {}
        longs = {}
        default = None

        for index, option in enumerate(options):
            if not isinstance(option, Option):
                raise TypeError("OptionTable() rows must be options, not %s" % type(option).__name__)

            if option.handler is None:
                raise _misconfigured("option without handler", FaultCode.MISSING_HANDLER, index, option)

            if option.default:
                if default is not None:
                    raise _misconfigured("multiple default handlers", FaultCode.MULTIPLE_DEFAULTS, index, option)
                default = option

            if option.short is not None:
                if option.short in shorts:
                    raise _misconfigured(
                        "multiple definitions for short option %r" % option.short,
                        FaultCode.DUPLICATED_SHORT, index, option
                    )
                if option.lonedash:
                    if option.long is not None:
                        raise _misconfigured(
                            "long name defined for lone dash", FaultCode.MALFORMED_LONE_DASH, index, option
                        )
                    if option.value:
                        raise _misconfigured(
                            "lone dash cannot take a value", FaultCode.MALFORMED_LONE_DASH, index, option
                        )
                shorts[option.short] = option

            if option.long is not None:
                if option.long in longs:
                    raise _misconfigured(
                        "multiple definitions for long option %r" % option.long,
                        FaultCode.DUPLICATED_LONG, index, option
                    )
                longs[option.long] = option

        synthesized = default is None
        if synthesized:
            default = Option(handler=_RejectArgument(), repeatable=True)

        self._options = options
        self._shorts = shorts
        self._longs = longs
        self._default = default
        self._synthesized = synthesized

        logger.debug(
            "option table built: %d rows, shorts=%s, longs=%s, %s default handler",
            len(options), "".join(shorts), ",".join(longs), "synthesized" if synthesized else "caller's"
        )

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return "option-table(options=%r)" % (self._options,)


def build(options, /):
    """
    Validate `options` and return an OptionTable.

    Raises ConfigurationError on any invariant violation (see module docs) and
    TypeError when given something that is not an iterable of Option objects.
    """
    return OptionTable(options)


__all__ = (
    "OptionTable",
    "build",
)
