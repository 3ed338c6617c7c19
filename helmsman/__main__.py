"""
material-color: print the nearest Material Design color for each input.

    $ material-color f44337 "#3f51b4"
    $ material-color --field=hex 3f51b4
"""
import sys

from . import __version__
from .commands import App
from .faults import InvalidValueError
from .materials import Material, closest
from .options import Option


def materialize(color, options):
    material = closest(color)
    if field := options.get("field"):
        if field not in Material._fields:
            raise InvalidValueError('Invalid value for option "field"')
        app.sink.out.print(str(getattr(material, field)), highlight=False)
    else:
        app.sink.out.print_json(data=material._asdict())
    return material


app = App(
    "material-color",
    __version__,
    descr="find the nearest material design color",
    options=[Option("field", alias="f", descr="print a single field (name, hex, rgb, hsl, ...)")],
    input=True,
    multiple=True,
    run=materialize,
)


def main(argv=None):
    try:
        app.process(sys.argv[1:] if argv is None else argv)
    except Exception:
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
