"""
Tabopt usage printer: a plain summary of an option table.

For every row that has help text and is not the default handler, in table
order, two lines are produced:

      -o, --output file
          Write the result to `FILE`

The value label is "value" unless the help text holds a backtick-quoted
fragment, which is used lower-cased. Nothing is wrapped or reordered.

Sinks
- any object with a write(str) method receives the plain text;
- a rich Console receives the same lines as styled Text (palette keys
  "option-name", "metavar", "help"; override them with __styles__ in __main__,
  or pass colorful=False).
"""
from collections import defaultdict

from rich.console import Console
from rich.text import Text

INDENT = "  "
HELP_INDENT = "      "


def _rows(options):
    for option in options:
        if option.default or not option.help:
            continue
        names = []
        if option.short is not None:
            names.append(option.short if option.lonedash else "-" + option.short)
        if option.long is not None:
            names.append("--" + option.long)
        yield names, option.metavar if option.value else None, option.help.splitlines()


def format_usage(options):
    """
    Return the usage text for `options` (an iterable of Option rows or an
    OptionTable). Every line, including the last, ends with a newline.
    """
    lines = []
    for names, metavar, help in _rows(options):
        head = INDENT + ", ".join(names)
        if metavar is not None:
            head += " " + metavar
        lines.append(head)
        lines.extend(HELP_INDENT + line for line in help)
    return "".join(line + "\n" for line in lines)


def render_usage(options, *, colorful=True):
    """Return the usage text as a rich Text, styled unless colorful is False."""
    styles = defaultdict(str, {
        "option-name": "bold #00E6FF",  # CYAN for option names
        "metavar": "bold #FFD600",  # AMBER for value labels
        "help": "#9CA3AF",  # Muted gray help
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    text = Text()
    for names, metavar, help in _rows(options):
        text.append(INDENT)
        text.append_text(Text(", ").join(Text(name, styler("option-name")) for name in names))
        if metavar is not None:
            text.append(" ")
            text.append(metavar, styler("metavar"))
        text.append("\n")
        for line in help:
            text.append(HELP_INDENT)
            text.append(line, styler("help"))
            text.append("\n")
    return text


def print_usage(options, sink=None, *, colorful=True):
    """
    Write the usage text for `options` to `sink` (default: stderr).

    A rich Console sink gets styled output; anything else must provide write().
    """
    if sink is None:
        sink = Console(stderr=True)
    if isinstance(sink, Console):
        sink.print(render_usage(options, colorful=colorful), end="", soft_wrap=True, highlight=False)
    else:
        sink.write(format_usage(options))


__all__ = (
    "format_usage",
    "render_usage",
    "print_usage",
)
