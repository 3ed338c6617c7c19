"""
Command dispatch: shape handler calls and capture their outcome.

What this module provides
- Arity: NONE / SINGLE / MULTIPLE call shape, resolved once from (input, multiple).
- Invocation: the per-run view of the tokenized prompt (command name, inputs, raw options).
- Outcome: value or fault of a run. Both execution modes produce one, and a single
  reporter (faults.report) consumes it.
- settle(app, invocation) / asettle(app, invocation): run the pipeline
  expand → input check → validate → call, synchronously or awaiting the handler.

Nothing here writes output; reporting is left to the caller.
"""
import inspect
import logging
from enum import Enum
from typing import Any, NamedTuple

from .faults import MissingInputError
from .validation import expand, validate

logger = logging.getLogger(__name__)


class Arity(Enum):
    NONE = "none"
    SINGLE = "single"
    MULTIPLE = "multiple"

    @classmethod
    def of(cls, input, multiple, /):
        if not input:
            return cls.NONE
        return cls.MULTIPLE if multiple else cls.SINGLE


class Invocation(NamedTuple):
    command: str | None
    inputs: tuple[str, ...]
    options: dict[str, str | bool]


class Outcome(NamedTuple):
    value: Any = None
    fault: Exception | None = None


def prepare(app, invocation, /):
    """
    Resolve the command of an invocation and return (command, validated options).

    Raises an ArgumentError subclass when the input is missing or options do not
    validate; the handler is never reached in that case.
    """
    command = app.get_command(invocation.command)
    allowed = app.allowed(invocation.command)
    options = expand(allowed, invocation.options)
    if command.input and not invocation.inputs:
        raise MissingInputError("Missing input argument")
    validate(options, allowed)
    return command, options


def call(command, inputs, options, /):
    match command.arity:
        case Arity.NONE:
            return command.run(options)
        case Arity.SINGLE:
            return command.run(inputs[0], options)
        case Arity.MULTIPLE:
            return [command.run(input, options) for input in inputs]


async def acall(command, inputs, options, /):
    async def resolve(value):
        return await value if inspect.isawaitable(value) else value

    match command.arity:
        case Arity.NONE:
            return await resolve(command.run(options))
        case Arity.SINGLE:
            return await resolve(command.run(inputs[0], options))
        case Arity.MULTIPLE:
            results = []
            for input in inputs:
                results.append(await resolve(command.run(input, options)))
            return results


def settle(app, invocation, /):
    """Run the invocation synchronously and capture its outcome."""
    try:
        command, options = prepare(app, invocation)
        logger.debug("calling %r (%s) with %d input(s)", invocation.command, command.arity.value, len(invocation.inputs))
        return Outcome(value=call(command, invocation.inputs, options))
    except Exception as fault:
        return Outcome(fault=fault)


async def asettle(app, invocation, /):
    """Run the invocation, awaiting the handler result, and capture its outcome."""
    try:
        command, options = prepare(app, invocation)
        logger.debug("awaiting %r (%s) with %d input(s)", invocation.command, command.arity.value, len(invocation.inputs))
        return Outcome(value=await acall(command, invocation.inputs, options))
    except Exception as fault:
        return Outcome(fault=fault)


__all__ = (
    "Arity",
    "Invocation",
    "Outcome",
    "prepare",
    "call",
    "acall",
    "settle",
    "asettle",
)
