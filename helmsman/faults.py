"""
Helmsman faults (errors) and reporting.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- CommandException: base type carrying message + options, able to render itself
  through rich in a short, colorized form (or a titled panel when fancy).
- ArgumentError: classification for user-input problems (unknown command, missing
  input, missing/invalid/unknown option). The dispatcher branches on this type.
- report(): the single reporting path shared by the synchronous and asynchronous
  execution modes. It writes diagnostics and always re-raises.

Integration
- Validation raises ArgumentError subclasses; handlers may raise anything.
- App.process() wraps every run into an Outcome and hands it to report().
"""
import copy
import logging
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text
from rich.traceback import Traceback

from .utils import Unset

logger = logging.getLogger(__name__)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_COMMAND
    - options (1111x/1112x): UNKNOWN_OPTION, MISSING_OPTION, INVALID_VALUE
    - inputs (1112x): MISSING_INPUT
    - delegated (1113x): DELEGATED_ERROR (anything raised by a handler)
    """
    # --- routing errors ---
    UNKNOWN_COMMAND = 11101

    # --- option errors ---
    UNKNOWN_OPTION  = 11112
    MISSING_OPTION  = 11117
    INVALID_VALUE   = 11124

    # --- input errors ---
    MISSING_INPUT   = 11125

    # --- delegated errors ---
    DELEGATED_ERROR = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    Base for every fault raised by the framework itself.

    Subclasses pin a code, a title and a hint. Rendering options (tool, colorful,
    fancy) are attached late via copy.replace() by the reporter; the copy bypasses
    __init__, so subclasses are free to define their own constructor.
    """
    code = FaultCode.DELEGATED_ERROR
    title = "command error"
    hint = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "red",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        message = Text(str(self), styler("error-message"))

        if not fancy:
            return message

        tool = self.options.get("tool")
        header = Text.assemble(
            "[ ",
            Text(getattr(main, "__prog__", getattr(tool, "name", "")), styler("prog-name")),
            " — ",
            Text(self.code.normalize(), styler("code")),
            " | ",
            Text(self.title.title(), styler("error-title")),
            " ]"
        )
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(Text(" → ", styler("hint-arrow")), Text(self.hint, styler("hint"))))
        return Panel(Group(*renders), title=header, title_align="left")

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        clone = type(self).__new__(type(self), *self.args)
        clone.__dict__.update(self.__dict__)
        clone.options = MappingProxyType({**self.options, **overrides})
        return clone


class ArgumentError(CommandException):
    title = "argument error"


class UnknownCommandError(ArgumentError):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"
    hint = "pick one of the commands listed below"


class MissingInputError(ArgumentError):
    code = FaultCode.MISSING_INPUT
    title = "missing input"
    hint = "pass at least one positional argument"


class MissingOptionError(ArgumentError):
    code = FaultCode.MISSING_OPTION
    title = "missing option"
    hint = "required options are listed in the usage line"


class InvalidValueError(ArgumentError):
    code = FaultCode.INVALID_VALUE
    title = "invalid value"
    hint = "check the value type expected by the option"


class UnknownOptionError(ArgumentError):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"
    hint = "see the option tables below"


def report(app, outcome, /, *, command=Unset):
    """
    surface the outcome of a run and return its value, or report and re-raise its fault.

    contract
    - ArgumentError: short message on the diagnostic channel, followed by contextual help
      (help for 'command', None meaning the default command; top-level help when Unset).
    - anything else: full rich traceback on the diagnostic channel, no help.
    - faults are never swallowed: the original exception is raised again.
    """
    if outcome.fault is None:
        return outcome.value

    fault = outcome.fault
    if isinstance(fault, ArgumentError):
        app.sink.err.print(copy.replace(fault, tool=app, colorful=app.colorful, fancy=app.fancy))
        app.help(command, diagnostic=True)
    else:
        logger.debug("handler for %r failed with %s", command, type(fault).__name__)
        app.sink.err.print(Traceback.from_exception(type(fault), fault, fault.__traceback__))
    raise fault


__all__ = (
    "FaultCode",
    "CommandException",
    "ArgumentError",
    "UnknownCommandError",
    "MissingInputError",
    "MissingOptionError",
    "InvalidValueError",
    "UnknownOptionError",
    "report",
)
