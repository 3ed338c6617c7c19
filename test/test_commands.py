"""
Dispatch behavioral tests (routing, help precedence, validation, arity, faults).

Scope
- Validate command resolution: subcommands, default command, unknown commands.
- Validate help/version interception and its precedence rules.
- Validate that usage problems never reach the handler and are reported with help.
- Validate handler arity shapes and that handler faults are reported and re-raised.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured through a Sink of consoles writing into buffers.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from helmsman import (
    App,
    Command,
    Option,
    Sink,
    command,
    ArgumentError,
    InvalidValueError,
    MissingInputError,
    MissingOptionError,
    UnknownCommandError,
    UnknownOptionError,
)


def capture():
    out, err = io.StringIO(), io.StringIO()
    sink = Sink(
        Console(file=out, width=120, color_system=None, highlight=False),
        Console(file=err, width=120, color_system=None, highlight=False),
    )
    return sink, out, err


class TestSubcommands(TestCase):
    """Behavioral tests for an app in subcommand mode."""

    def setUp(self):
        self.calls = []
        self.sink, self.out, self.err = capture()

        @command(options=[Option("format", alias="f", required=True, descr="output format")], input=True)
        def convert(path, options):
            """convert an image"""
            self.calls.append(("convert", path, options))
            return path.replace(".jpg", "." + options["format"])

        @command
        def build(options):
            """build the project"""
            self.calls.append(("build", options))
            return options

        self.app = App(
            "imgtool",
            "2.1.0",
            descr="image tools",
            options=[Option("verbose", alias="v", type="boolean", descr="chatty output")],
            commands={"convert": convert, "build": build},
            sink=self.sink,
        )

    def testConvertReceivesInputAndOptions(self):
        result = self.app.process("convert --format=png photo.jpg")
        self.assertEqual(self.calls, [("convert", "photo.jpg", {"format": "png"})])
        self.assertEqual(result, "photo.png")

    def testMissingRequiredOptionShowsCommandHelp(self):
        with self.assertRaises(MissingOptionError) as context:
            self.app.process("convert photo.jpg")
        self.assertEqual(str(context.exception), 'Missing option "format"')
        self.assertEqual(self.calls, [])
        err = self.err.getvalue()
        self.assertIn('Missing option "format"', err)
        self.assertIn("Usage: imgtool convert --format=<value> [options] <input>", err)
        self.assertNotIn("Commands:", err)

    def testAliasMatchesLongForm(self):
        self.app.process("convert -f=png photo.jpg")
        self.app.process("convert --format=png photo.jpg")
        self.assertEqual(self.calls[0], self.calls[1])

    def testGlobalAliasIsExpanded(self):
        result = self.app.process("build -v")
        self.assertEqual(result, {"verbose": True})

    def testIterablePromptIsAccepted(self):
        result = self.app.process(["build", "--verbose"])
        self.assertEqual(result, {"verbose": True})

    def testUnknownOptionRaises(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.app.process("build --bogus")
        self.assertEqual(str(context.exception), 'Invalid option: "bogus"')
        self.assertEqual(self.calls, [])

    def testWronglyTypedValueRaises(self):
        with self.assertRaises(InvalidValueError) as context:
            self.app.process("build --verbose=yes")
        self.assertEqual(str(context.exception), 'Invalid value for option "verbose"')
        self.assertEqual(self.calls, [])

    def testStringOptionGivenAsFlagRaises(self):
        with self.assertRaises(InvalidValueError):
            self.app.process("convert --format photo.jpg")
        self.assertEqual(self.calls, [])

    def testNegatedRequiredOptionCountsAsMissing(self):
        with self.assertRaises(MissingOptionError):
            self.app.process("convert --no-format photo.jpg")

    def testMissingInputRaises(self):
        with self.assertRaises(MissingInputError) as context:
            self.app.process("convert --format=png")
        self.assertEqual(str(context.exception), "Missing input argument")
        self.assertEqual(self.calls, [])

    def testUnknownCommandShowsTopLevelHelp(self):
        with self.assertRaises(UnknownCommandError) as context:
            self.app.process("deploy")
        self.assertIsInstance(context.exception, ArgumentError)
        err = self.err.getvalue()
        self.assertIn('Unknown command: "deploy"', err)
        self.assertIn("Commands:", err)
        self.assertEqual(self.calls, [])

    def testUnknownCommandWithHelpIsStillUnknown(self):
        with self.assertRaises(UnknownCommandError):
            self.app.process("deploy --help")
        self.assertEqual(self.out.getvalue(), "")

    def testHelpOnValidCommandShowsCommandHelp(self):
        result = self.app.process("convert --help")
        self.assertIsNone(result)
        self.assertEqual(self.calls, [])
        out = self.out.getvalue()
        self.assertIn("Usage: imgtool convert --format=<value> [options] <input>", out)
        self.assertIn("convert an image", out)
        self.assertNotIn("Commands:", out)

    def testShortHelpAliasIsBuiltIn(self):
        self.app.process("build -h")
        self.assertIn("Usage: imgtool build [options]", self.out.getvalue())
        self.assertEqual(self.calls, [])

    def testNoCommandShowsTopLevelHelp(self):
        self.assertIsNone(self.app.process(""))
        self.assertIn("Usage: imgtool [command] [options]", self.out.getvalue())
        self.assertIn("Commands:", self.out.getvalue())

    def testNoCommandWithVersionStillShowsHelp(self):
        self.app.process("--version")
        self.assertIn("Usage: imgtool [command] [options]", self.out.getvalue())

    def testVersionOnCommand(self):
        self.assertIsNone(self.app.process("build --version"))
        self.assertEqual(self.out.getvalue().strip(), "2.1.0")
        self.assertEqual(self.calls, [])

    def testHelpWinsOverVersion(self):
        self.app.process("build --help --version")
        self.assertIn("Usage: imgtool build", self.out.getvalue())
        self.assertNotIn("2.1.0", self.out.getvalue())

    def testHandlerFaultIsReportedAndReraised(self):
        fault = RuntimeError("boom")

        def explode(options):
            raise fault

        app = App("imgtool", "2.1.0", commands={"explode": Command(explode)}, sink=self.sink)
        with self.assertRaises(RuntimeError) as context:
            app.process("explode")
        self.assertIs(context.exception, fault)
        err = self.err.getvalue()
        self.assertIn("boom", err)
        self.assertNotIn("Usage:", err)

    def testArgumentErrorFromHandlerShowsHelp(self):
        def strict(options):
            raise InvalidValueError('Invalid value for option "mode"')

        app = App("imgtool", "2.1.0", commands={"strict": Command(strict)}, sink=self.sink)
        with self.assertRaises(InvalidValueError):
            app.process("strict")
        self.assertIn("Usage: imgtool strict [options]", self.err.getvalue())

    def testCustomArgumentErrorIsReportedAndReraised(self):
        class BadColor(ArgumentError):
            def __init__(self, color):
                super().__init__(f"Unknown color: {color!r}")
                self.color = color

        def paint(options):
            raise BadColor("mauve")

        app = App("imgtool", "2.1.0", commands={"paint": Command(paint)}, sink=self.sink, fancy=True)
        with self.assertRaises(BadColor) as context:
            app.process("paint")
        self.assertEqual(context.exception.color, "mauve")
        self.assertEqual(context.exception.options, {})
        err = self.err.getvalue()
        self.assertIn("Unknown color: 'mauve'", err)
        self.assertIn("Usage: imgtool paint [options]", err)

    def testFancyFaultsRenderCodeAndTitle(self):
        app = App("imgtool", "2.1.0", commands=self.app.commands, sink=self.sink, fancy=True)
        with self.assertRaises(MissingOptionError):
            app.process("convert photo.jpg")
        err = self.err.getvalue()
        self.assertIn("11117", err)
        self.assertIn("Missing Option", err)


class TestDefaultCommand(TestCase):
    """Behavioral tests for an app in single-command mode."""

    def setUp(self):
        self.calls = []
        self.sink, self.out, self.err = capture()

    def make(self, **kwargs):
        def run(*args):
            self.calls.append(args)
            return args[0]

        return App("shrink", "0.3.0", run=run, sink=self.sink, **kwargs)

    def testAllPositionalsAreInput(self):
        app = self.make(input=True, options=[Option("quality", alias="q")])
        self.assertEqual(app.process("photo.jpg -q=high"), "photo.jpg")
        self.assertEqual(self.calls, [("photo.jpg", {"quality": "high"})])

    def testNoInputCommandGetsOptionsOnly(self):
        app = self.make()
        self.assertEqual(app.process("ignored"), {})
        self.assertEqual(self.calls, [({},)])

    def testMultipleInputsAreCalledInOrder(self):
        app = self.make(input=True, multiple=True)
        self.assertEqual(app.process("a b c"), ["a", "b", "c"])
        self.assertEqual([call[0] for call in self.calls], ["a", "b", "c"])

    def testValidationFaultShowsDefaultCommandHelp(self):
        app = self.make(input=True, options=[Option("output", type="path", required=True)])
        with self.assertRaises(MissingOptionError):
            app.process("photo.jpg")
        self.assertIn("Usage: shrink --output=<path> [options] <input>", self.err.getvalue())
        self.assertEqual(self.calls, [])

    def testHelpIsTopLevel(self):
        app = self.make(input=True, multiple=True, options=[Option("quality", alias="q", descr="jpeg quality")])
        app.process("--help")
        out = self.out.getvalue()
        self.assertIn("Usage: shrink [options] <input> [...input]", out)
        self.assertIn("--quality, -q", out)
        self.assertEqual(self.calls, [])


class TestConstruction(TestCase):
    """Construction invariants of the command model."""

    def testRunAndCommandsAreExclusive(self):
        with self.assertRaises(TypeError):
            App("tool", "1.0.0", run=print, commands={})
        with self.assertRaises(TypeError):
            App("tool", "1.0.0")

    def testNameAndVersionAreMandatory(self):
        with self.assertRaises(TypeError):
            App("", "1.0.0", run=print)
        with self.assertRaises(TypeError):
            App("tool", "", run=print)

    def testCommandsMustBeCommands(self):
        with self.assertRaises(TypeError):
            App("tool", "1.0.0", commands={"x": print})

    def testDuplicateAliasAcrossScopesRejected(self):
        with self.assertRaises(ValueError):
            App(
                "tool",
                "1.0.0",
                options=[Option("verbose", alias="v", type="boolean")],
                commands={"x": Command(print, options=[Option("values", alias="v")])},
            )

    def testDuplicateNameWithinCommandRejected(self):
        with self.assertRaises(ValueError):
            Command(print, options=[Option("a"), Option("a")])

    def testHelpAliasDroppedWhenTaken(self):
        app = App("tool", "1.0.0", options=[Option("host", alias="h")], run=print)
        help = next(option for option in app.globals if option.name == "help")
        self.assertIsNone(help.alias)

    def testDeclaredHelpReplacesBuiltIn(self):
        app = App("tool", "1.0.0", options=[Option("help", type="boolean")], run=print)
        self.assertEqual([option.name for option in app.globals], ["version"])

    def testMultipleRequiresInput(self):
        self.assertFalse(Command(print, multiple=True).multiple)

    def testDecoratorUsesDocstring(self):
        @command(input=True)
        def convert(path, options):
            """convert a file"""

        self.assertIsInstance(convert, Command)
        self.assertEqual(convert.descr, "convert a file")
        self.assertTrue(convert.input)


if __name__ == "__main__":
    unittest.main()
