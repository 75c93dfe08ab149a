"""
Tabopt handlers: what happens when an option or argument is recognized.

A handler is anything implementing the Handler capability: called with the parse
context and the option's value (an empty string for options without value). It
signals rejection by raising; the scanner wraps the exception with the option's
name (see tabopt.faults.HandlerRejectionError).

Variants
- SetFlag(name):    context.name = True
- SetString(name):  context.name = value
- AppendList(name): context.name.append(value), creating the list when missing
- Custom(callback): callback(value)

Contexts
- Any object with writable attributes (e.g. types.SimpleNamespace), or any
  MutableMapping (keys are used instead of attributes).

Example
    >>> from types import SimpleNamespace
    >>> context = SimpleNamespace()
    >>> SetString("output")(context, "out.txt")
    >>> context.output
    'out.txt'
"""
from abc import ABC, abstractmethod
from collections.abc import MutableMapping


def _store(context, name, value):
    if isinstance(context, MutableMapping):
        context[name] = value
    else:
        setattr(context, name, value)


def _load(context, name, default):
    if isinstance(context, MutableMapping):
        return context.get(name, default)
    return getattr(context, name, default)


class Handler(ABC):
    """
    capability interface: accept a value for a recognized option, or raise.
    """
    __slots__ = ()

    @abstractmethod
    def __call__(self, context, value, /):
        raise NotImplementedError


class _Named(Handler):
    __slots__ = ("_name",)

    def __init__(self, name, /):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__name__} name must be a string")
        elif not name:
            raise ValueError(f"{type(self).__name__} name cannot be empty")
        self._name = name

    @property
    def name(self):
        return self._name

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._name == other._name

    def __hash__(self):
        return hash((type(self), self._name))

    def __repr__(self):
        return f"{type(self).__name__}({self._name!r})"


class SetFlag(_Named):
    """Set `name` on the context to True; the value is ignored."""
    __slots__ = ()

    def __call__(self, context, value, /):
        _store(context, self._name, True)


class SetString(_Named):
    """Set `name` on the context to the option's value."""
    __slots__ = ()

    def __call__(self, context, value, /):
        _store(context, self._name, value)


class AppendList(_Named):
    """Append the value to the list stored at `name`, creating it when missing."""
    __slots__ = ()

    def __call__(self, context, value, /):
        values = _load(context, self._name, None)
        if values is None:
            _store(context, self._name, values := [])
        values.append(value)


class Custom(Handler):
    """
    Adapt a plain `callback(value)` to the Handler capability.

    The callback does not see the context; bind it yourself if it needs one.
    """
    __slots__ = ("_callback",)

    def __init__(self, callback, /):
        if not callable(callback):
            raise TypeError("Custom callback must be callable")
        self._callback = callback

    @property
    def callback(self):
        return self._callback

    def __call__(self, context, value, /):
        self._callback(value)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._callback == other._callback

    def __hash__(self):
        return hash((type(self), self._callback))

    def __repr__(self):
        return f"Custom({getattr(self._callback, '__qualname__', self._callback)!s})"


__all__ = (
    "Handler",
    "SetFlag",
    "SetString",
    "AppendList",
    "Custom",
)
