"""
Helmsman command layer: declare, compose, and run CLI applications.

What this module provides
- Command: one invocable unit (handler + option schema + input arity).
- command(...): build a Command from a plain function, directly or as a decorator.
- App: the root registry. Either a single default command (run=...) or a mapping of
  named subcommands (commands=...), plus global options shared by every command.

Pipeline of App.process()
    tokenize → resolve command → help/version interception → expand aliases
    → check input → validate → call handler → report

Execution modes
- Synchronous (default): returns the handler result.
- Asynchronous (asynchronous=True): returns a coroutine; awaitable handler results
  are awaited, one input at a time in MULTIPLE mode.
Both modes capture an Outcome and hand it to faults.report(), which writes
diagnostics and re-raises. Faults are never swallowed.

Quick start
    from helmsman import App, Option, command

    @command(options=[Option("format", alias="f", required=True)], input=True)
    def convert(path, options):
        \"\"\"convert a file\"\"\"
        return path, options["format"]

    app = App("imgtool", "1.0.0", commands={"convert": convert})

    if __name__ == "__main__":
        app.process()
"""
import inspect
import logging
from collections.abc import Iterable, Mapping

from .dispatch import Arity, Invocation, Outcome, asettle, settle
from .faults import UnknownCommandError, report
from .options import Option
from .rendering import Sink, render_command_help, render_help, render_version
from .tokens import tokenize
from .utils import *
from .validation import expand

logger = logging.getLogger(__name__)


def _sanitize_options(owner, options):
    if not isinstance(options, Iterable) or isinstance(options, str):
        raise TypeError(f"{owner} 'options' must be an iterable of options")
    options = tuple(options)
    for option in options:
        if not isinstance(option, Option):
            raise TypeError(f"{owner} 'options' must only contain options, got {option!r}")
    return options


def _check_unique(owner, options):
    names = set()
    aliases = set()
    for option in options:
        if option.name in names:
            raise ValueError(f"{owner} declares option {option.name!r} twice")
        names.add(option.name)
        if option.alias:
            if option.alias in aliases:
                raise ValueError(f"{owner} declares alias {option.alias!r} twice")
            aliases.add(option.alias)


class Command:
    """
    Declares one invocable unit.

    Fields
    - run: handler. Called as run(options), run(input, options), or once per input
      when multiple is set (see arity).
    - descr: text for command lists and help.
    - options: command-scoped options (global options are added by the App).
    - input: whether at least one positional argument is required.
    - multiple: whether every positional argument gets its own handler call.
      Only meaningful when input is set.
    """

    __introspectable__ = (
        "descr",
        "options",
        "input",
        "multiple",
    )

    run = mirror("run")
    descr = mirror("descr")
    options = mirror("options")
    input = mirror("input")
    multiple = mirror("multiple")

    def __init__(self, run, /, descr=Unset, options=(), input=False, multiple=False):
        if not callable(run):
            raise TypeError("command 'run' must be callable")
        if not isinstance(descr, str | Unset):
            raise TypeError("command 'descr' must be a string")
        self._run = run
        self._descr = coalesce(descr, inspect.getdoc(run) or "")
        self._options = _sanitize_options("command", options)
        self._input = bool(input)
        self._multiple = bool(input) and bool(multiple)
        _check_unique("command", self._options)

    @property
    def arity(self):
        return Arity.of(self._input, self._multiple)

    def __repr__(self):
        return f"Command({getattr(self._run, '__name__', self._run)!r}, arity={self.arity.value!r})"

    def __rich_repr__(self):
        yield getattr(self._run, "__name__", self._run)
        for field in self.__introspectable__:
            if value := getattr(self, field):
                yield field, value


def command(source=Unset, /, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct: cmd = command(func, input=True)
    - Decorator:
        @command(options=[...], input=True)
        def convert(path, options): ...

    The description defaults to the function's docstring.
    """
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, **kwargs)

    return wrapper(source) if source is not Unset else rename(wrapper, "command")


class App:
    """
    The root registry of an executable.

    Construction invariants (TypeError/ValueError on violation)
    - name and version are non-empty strings.
    - exactly one of run (single-command mode) or commands (subcommand mode).
    - option names and aliases are unique within every command's combined
      (command + global) option list.

    Built-in global options
    - help (alias h unless the alias is already taken) and version, both boolean,
      unless an option with the same name is declared.

    Runtime flags
    - colorful: style help and diagnostics (default True).
    - fancy: render diagnostics as titled panels (default False).
    - sink: output capability (default: rich consoles on stdout and stderr).
    """

    __introspectable__ = (
        "name",
        "version",
        "descr",
        "options",
        "input",
        "multiple",
        "commands",
        "colorful",
        "fancy",
    )

    name = mirror("name")
    version = mirror("version")
    descr = mirror("descr")
    options = mirror("options")
    input = mirror("input")
    multiple = mirror("multiple")
    run = mirror("run")
    commands = mirror("commands")
    globals = mirror("globals")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(
            self,
            name,
            version,
            /,
            descr=Unset,
            options=(),
            input=False,
            multiple=False,
            run=Unset,
            commands=Unset,
            *,
            colorful=True,
            fancy=False,
            sink=Unset
    ):
        if not isinstance(name, str) or not name.strip():
            raise TypeError("app 'name' must be a non-empty string")
        if not isinstance(version, str) or not version.strip():
            raise TypeError("app 'version' must be a non-empty string")
        if not isinstance(descr, str | Unset):
            raise TypeError("app 'descr' must be a string")
        if (run is Unset) == (commands is Unset):
            raise TypeError("app requires exactly one of 'run' or 'commands'")
        if run is not Unset and not callable(run):
            raise TypeError("app 'run' must be callable")
        if commands is not Unset:
            if not isinstance(commands, Mapping):
                raise TypeError("app 'commands' must be a mapping of names to commands")
            for key, value in commands.items():
                if not isinstance(key, str) or not key.strip():
                    raise TypeError("app command names must be non-empty strings")
                if not isinstance(value, Command):
                    raise TypeError(f"app command {key!r} must be a command, got {value!r}")
        if not isinstance(sink, Sink | Unset):
            raise TypeError("app 'sink' must be a sink")

        self._name = name.strip()
        self._version = version.strip()
        self._descr = coalesce(descr, "")
        self._options = _sanitize_options("app", options)
        self._input = bool(input)
        self._multiple = bool(input) and bool(multiple)
        self._run = coalesce(run)
        self._commands = dict(commands) if commands is not Unset else None
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._sink = coalesce(sink) or Sink.default()

        if self._run is not None:
            self._default = Command(self._run, self._descr, self._options, self._input, self._multiple)
            declared = self._options
        else:
            self._default = None
            declared = self._options + tuple(
                option for value in self._commands.values() for option in value.options
            )

        builtins = []
        if all(option.name != "help" for option in declared):
            taken = any(option.alias == "h" for option in declared)
            builtins.append(Option(
                "help", **({} if taken else {"alias": "h"}), type="boolean",
                descr="show this help message and exit"
            ))
        if all(option.name != "version" for option in declared):
            builtins.append(Option("version", type="boolean", descr="show the version and exit"))

        # single-command mode: app options are the default command's own options
        self._globals = tuple(builtins) if self._run is not None else self._options + tuple(builtins)

        for key in (self._commands or {None: None}):
            _check_unique(f"command {key!r}" if key else "app", self.allowed(key))

    @property
    def sink(self):
        return self._sink

    def has_command(self, name, /):
        """A command is valid when unnamed with a default run, or a registered name."""
        if not name:
            return self._default is not None
        return self._commands is not None and name in self._commands

    def get_command(self, name, /):
        if not name:
            return self._default
        return (self._commands or {}).get(name)

    def allowed(self, name, /):
        """Combined option list for a command: command-scoped options, then globals."""
        command = self.get_command(name)
        return (command.options if command else ()) + self._globals

    def help(self, name=Unset, /, *, diagnostic=False):
        """
        Print help through the sink.

        - name Unset: top-level help.
        - name None or a command name: help for that command (None is the default command).
        - diagnostic: write to the diagnostic channel instead of standard output.
        """
        if name is Unset:
            renderable = render_help(self)
        else:
            renderable = render_command_help(self, name)
        self._sink.write(renderable, diagnostic=diagnostic)

    def _versioner(self):
        self._sink.write(render_version(self))

    def _parse(self, tokens):
        if self._commands is not None:
            name, inputs = (tokens.positional[0], tokens.positional[1:]) if tokens.positional else (None, ())
        else:
            name, inputs = None, tokens.positional
        return Invocation(name, tuple(inputs), dict(tokens.options))

    def _intercept(self, invocation):
        """
        Handle help, version and unknown commands. Returns True when the run is over.

        Raises UnknownCommandError (after reporting it) for an unregistered name.
        """
        name = invocation.command
        valid = self.has_command(name)
        options = expand(self.allowed(name) if valid else self._globals, invocation.options)

        if (options.get("help") or (not name and not valid)) and not (name and not valid):
            logger.debug("showing help for %r", name)
            self.help(name if name else Unset)
            return True

        if options.get("version"):
            self._versioner()
            return True

        if not valid:
            report(self, Outcome(fault=UnknownCommandError(f'Unknown command: "{name}"')))

        return False

    def process(self, prompt=Unset, /, *, asynchronous=False):
        """
        Run the application against a prompt.

        Parameters
        - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.
        - asynchronous: when True, return a coroutine that awaits the handler result.

        Returns
        - the handler result (a list of results in MULTIPLE mode), or None when help
          or version was shown.

        Raises
        - ArgumentError subclasses for usage problems, after reporting them with help.
        - whatever the handler raised, after reporting it with a traceback.
        """
        invocation = self._parse(tokenize(prompt))
        logger.debug("resolved command %r (%s)", invocation.command, "async" if asynchronous else "sync")
        if asynchronous:
            return self._aprocess(invocation)
        if self._intercept(invocation):
            return None
        return report(self, settle(self, invocation), command=invocation.command)

    async def _aprocess(self, invocation):
        if self._intercept(invocation):
            return None
        return report(self, await asettle(self, invocation), command=invocation.command)

    def __repr__(self):
        return f"App({self._name!r}, {self._version!r})"

    def __rich_repr__(self):
        yield self._name
        yield self._version
        for field in self.__introspectable__[2:]:
            if value := getattr(self, field):
                yield field, value


__all__ = (
    "Command",
    "command",
    "App",
)
