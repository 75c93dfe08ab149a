from types import SimpleNamespace

from rich.pretty import pprint

from tabopt import *

__prog__ = "tabopt-demo"

settings = SimpleNamespace(output="-", etags="etags", inputs=[])

options = [
    Option("h", "help", help="Print help", handler=SetFlag("help")),
    Option("o", help='Filename of output `FILE`, "-" for stdout, default "%s"' % settings.output, value=True, handler=SetString("output")),
    Option("v", help="Enable verbose output (for debugging)", handler=SetFlag("verbose")),
    Option("V", "version", help="Print version information", handler=SetFlag("version")),
    Option(long="etags", help='Path of the native `etags` program, default "%s"' % settings.etags, value=True, handler=SetString("etags")),
    Option("-", help="Read input names from stdin", handler=SetFlag("stdin")),
    Option(handler=AppendList("inputs")),
]


if __name__ == '__main__':
    rest = getopts(options, settings, shell=True, fancy=True)
    if getattr(settings, "help", False):
        print_usage(options)
        raise SystemExit(0)
    settings.inputs.extend(rest)
    pprint(settings)
