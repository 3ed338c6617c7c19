"""
Help, usage and version rendering.

Every render_* function is a pure function of an App to a rich Text. Printing is
done by the App through its Sink, so tests can capture output by injecting
consoles that write into a buffer.

Layout
    (blank line)
      Usage: <name> [command] [options] <input> [...input]

      <description>

      Commands:

        build      build the project
        convert    convert a file

      Options:

        --format, -f    output format

      Global options:

        --help, -h    show this help message and exit

Palette keys
- usage-label, program-name, usage-section, description-section
- group-label, option-name, command-name, argument-description

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the app is not colorful, styling is suppressed.
"""
from collections import defaultdict
from typing import NamedTuple

from rich.console import Console
from rich.text import Text


class Sink(NamedTuple):
    """
    Output capability: one console for standard output, one for diagnostics.
    """
    out: Console
    err: Console

    @classmethod
    def default(cls):
        return cls(Console(), Console(stderr=True))

    def write(self, renderable="", /, *, diagnostic=False):
        (self.err if diagnostic else self.out).print(renderable)


def _styler(app):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "usage-section": "bold #36C5F0",
        "description-section": "italic #A3A3A3",
        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "command-name": "bold #36C5F0",
        "argument-description": "#9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if app.colorful else ""

    return styler


def _table(rows, styler, style):
    """Two-column table; names are right-padded to the widest one."""
    width = max((len(name) for name, _ in rows), default=0)
    table = Text()
    for index, (name, descr) in enumerate(rows):
        if index:
            table.append("\n")
        table.append("    ")
        table.append(name.ljust(width), styler(style))
        table.append("    ")
        table.append(descr or "", styler("argument-description"))
    return table


def _inputs(command):
    if not command.input:
        return ""
    return " <input>" + (" [...input]" if command.multiple else "")


def _page(app, usage, descr, commands, options, globals):
    styler = _styler(app)

    page = Text("\n")
    page.append("  ").append("Usage", styler("usage-label")).append(": ").append(usage).append("\n\n")

    if descr:
        page.append("  ").append(descr, styler("description-section")).append("\n\n")

    sections = (
        ("Commands", commands, "command-name"),
        ("Options", options, "option-name"),
        ("Global options", globals, "option-name"),
    )
    for label, rows, style in sections:
        if not rows:
            continue
        page.append("  ").append(label, styler("group-label")).append(":\n\n")
        page.append(_table(rows, styler, style)).append("\n\n")

    page.rstrip()
    return page


def render_help(app, /):
    """
    Top-level help: usage, description, sorted command list (subcommand mode),
    default command options (single-command mode) and global options.
    """
    styler = _styler(app)
    default = app.get_command(None) if app.run is not None else None

    usage = Text()
    usage.append(app.name, styler("program-name"))
    usage.append(
        (" [command]" if app.commands else "") + " [options]" + (_inputs(default) if default else ""),
        styler("usage-section"),
    )

    commands = [(name, app.commands[name].descr) for name in sorted(app.commands or ())]
    options = [(option.label, option.descr) for option in default.options] if default else []
    globals = [(option.label, option.descr) for option in app.globals]
    return _page(app, usage, app.descr, commands, options, globals)


def render_command_help(app, name, /):
    """
    Help for one command (None is the default command of a single-command app).

    The usage line lists every required option inline before [options]:
    --name=<value> for strings, --name=<path> for paths, bare --name for booleans.
    """
    styler = _styler(app)
    command = app.get_command(name)

    required = []
    for option in app.allowed(name):
        if option.required:
            example = option.example
            required.append("--" + option.name + ("=" + example if example else ""))

    usage = Text()
    usage.append(app.name, styler("program-name"))
    usage.append(
        (" " + name if name else "")
        + (" " + " ".join(required) if required else "")
        + " [options]"
        + _inputs(command),
        styler("usage-section"),
    )

    options = [(option.label, option.descr) for option in command.options]
    globals = [(option.label, option.descr) for option in app.globals]
    return _page(app, usage, command.descr, [], options, globals)


def render_version(app, /):
    return Text(app.version)


__all__ = (
    "Sink",
    "render_help",
    "render_command_help",
    "render_version",
)
