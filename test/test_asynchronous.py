"""
Asynchronous execution mode tests.

Scope
- Awaitable handler results are awaited; plain results pass through.
- MULTIPLE mode awaits one input at a time, in input order.
- Rejections go through the same reporting path and are re-raised.
- Help/version and usage faults behave as in synchronous mode.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import asyncio
import io
import unittest
from unittest import IsolatedAsyncioTestCase

from rich.console import Console

from helmsman import App, Command, Option, Sink, MissingOptionError, UnknownCommandError


def capture():
    out, err = io.StringIO(), io.StringIO()
    sink = Sink(
        Console(file=out, width=120, color_system=None, highlight=False),
        Console(file=err, width=120, color_system=None, highlight=False),
    )
    return sink, out, err


class TestAsynchronousMode(IsolatedAsyncioTestCase):
    """Behavioral tests for App.process(..., asynchronous=True)."""

    def setUp(self):
        self.events = []
        self.sink, self.out, self.err = capture()

    async def testAwaitableResultIsAwaited(self):
        async def fetch(url, options):
            await asyncio.sleep(0)
            return url.upper()

        app = App("fetch", "1.0.0", input=True, run=fetch, sink=self.sink)
        self.assertEqual(await app.process("example.org", asynchronous=True), "EXAMPLE.ORG")

    async def testPlainResultPassesThrough(self):
        app = App("plain", "1.0.0", run=lambda options: "done", sink=self.sink)
        self.assertEqual(await app.process("", asynchronous=True), "done")

    async def testMultipleInputsSettleInOrder(self):
        async def visit(name, options):
            self.events.append(("start", name))
            await asyncio.sleep(0.01 if name == "a" else 0)
            self.events.append(("end", name))
            return name * 2

        app = App("visit", "1.0.0", input=True, multiple=True, run=visit, sink=self.sink)
        self.assertEqual(await app.process("a b c", asynchronous=True), ["aa", "bb", "cc"])
        self.assertEqual(self.events, [
            ("start", "a"), ("end", "a"),
            ("start", "b"), ("end", "b"),
            ("start", "c"), ("end", "c"),
        ])

    async def testRejectionIsReportedAndReraised(self):
        fault = ConnectionError("refused")

        async def ping(options):
            await asyncio.sleep(0)
            raise fault

        app = App("net", "1.0.0", commands={"ping": Command(ping)}, sink=self.sink)
        with self.assertRaises(ConnectionError) as context:
            await app.process("ping", asynchronous=True)
        self.assertIs(context.exception, fault)
        self.assertIn("refused", self.err.getvalue())
        self.assertNotIn("Usage:", self.err.getvalue())

    async def testValidationFaultIsRejected(self):
        async def push(options):
            self.events.append("push")

        app = App(
            "net",
            "1.0.0",
            commands={"push": Command(push, options=[Option("remote", required=True)])},
            sink=self.sink,
        )
        with self.assertRaises(MissingOptionError):
            await app.process("push", asynchronous=True)
        self.assertEqual(self.events, [])
        self.assertIn("Usage: net push --remote=<value> [options]", self.err.getvalue())

    async def testUnknownCommandIsRejected(self):
        app = App("net", "1.0.0", commands={"ping": Command(print)}, sink=self.sink)
        with self.assertRaises(UnknownCommandError):
            await app.process("pong", asynchronous=True)

    async def testHelpResolvesToNone(self):
        app = App("net", "1.0.0", commands={"ping": Command(print)}, sink=self.sink)
        self.assertIsNone(await app.process("--help", asynchronous=True))
        self.assertIn("Usage: net [command] [options]", self.out.getvalue())


if __name__ == "__main__":
    unittest.main()
