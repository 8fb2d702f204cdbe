# python
"""
Argument parser behavioral tests.

Scope
- Validate successful parses: presence-only switches, parameters taken
  verbatim, shortcut/name equivalence, command-line ordering.
- Validate every parsing fault: malformed tokens, unknown and duplicated
  switches, incomplete parameters (with position-first messages).
- Validate the Arguments mapping: lookup, membership, registry snapshot,
  textual rendering.

Conventions
- Test method names follow CamelCase per project convention.
- Tokens never include the program name.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from switchyard import (
    Argument,
    ArgumentsParsingError,
    DuplicatedSwitchError,
    FaultCode,
    IncompleteParametersError,
    MalformedSwitchError,
    Switch,
    SwitchRegistry,
    UnknownSwitchError,
    parse,
)

SWITCH1 = Switch("switch1", "s", 0, "First switch.")
PARAM = Switch("param", "p", 1, "Switch with one parameter.")
DOUBLE = Switch("double", "d", 2, "Switch with two parameters.")
VERBOSE = Switch("verbose", descr="Named only.")


def registry():
    return SwitchRegistry((SWITCH1, PARAM, DOUBLE, VERBOSE))


class TestParseSuccess(TestCase):
    """Well-formed command lines."""

    def testEmptyCommandLine(self):
        arguments = parse(registry(), [])
        self.assertEqual(len(arguments), 0)
        self.assertEqual(arguments.lookup(SWITCH1), Argument(False, None))

    def testSwitchAndParameter(self):
        arguments = parse(registry(), ["-switch1", "-p", "val"])
        self.assertEqual(arguments[SWITCH1], ())
        self.assertEqual(arguments[PARAM], ("val",))
        self.assertEqual(len(arguments), 2)

    def testShortcutOnly(self):
        arguments = parse(registry(), ["-s"])
        self.assertEqual(arguments.lookup(SWITCH1), Argument(True, ()))
        self.assertEqual(arguments.lookup(PARAM), Argument(False, None))

    def testShortcutAndNameAreEquivalent(self):
        self.assertEqual(
            parse(registry(), ["-p", "x"])[PARAM],
            parse(registry(), ["-param", "x"])[PARAM],
        )

    def testParametersTakenVerbatim(self):
        arguments = parse(registry(), ["-p", "-d"])
        self.assertEqual(arguments[PARAM], ("-d",))
        self.assertNotIn(DOUBLE, arguments)

    def testParametersMayBeEmptyStrings(self):
        arguments = parse(registry(), ["-double", "", "-"])
        self.assertEqual(arguments[DOUBLE], ("", "-"))

    def testIterationFollowsCommandLine(self):
        arguments = parse(registry(), ["-d", "a", "b", "-verbose", "-s"])
        self.assertEqual(list(arguments), [DOUBLE, VERBOSE, SWITCH1])

    def testTokensFromGenerator(self):
        arguments = parse(registry(), (token for token in ["-p", "1"]))
        self.assertEqual(arguments[PARAM], ("1",))

    def testMissingKeyRaisesKeyError(self):
        arguments = parse(registry(), ["-s"])
        with self.assertRaises(KeyError):
            arguments[PARAM]

    def testForeignSwitchIsNotSpecified(self):
        arguments = parse(registry(), ["-s"])
        foreign = Switch("foreign", descr="Not registered.")
        self.assertNotIn(foreign, arguments)
        self.assertEqual(arguments.lookup(foreign), Argument(False, None))

    def testResultIgnoresLaterRegistryChanges(self):
        source = registry()
        arguments = parse(source, ["-s"])
        late = Switch("late", descr="Registered after parsing.")
        source.add(late)
        self.assertNotIn(late, arguments.registry)
        self.assertEqual(arguments.lookup(late), Argument(False, None))
        self.assertIn(SWITCH1, arguments)

    def testLookalikeWithOtherParameterCountIsNotSpecified(self):
        arguments = parse(registry(), ["-p", "val"])
        lookalike = Switch("param", "p", 2, "Switch with one parameter.")
        self.assertNotIn(lookalike, arguments)
        self.assertEqual(arguments.lookup(lookalike), Argument(False, None))

    def testIdenticalSwitchIsInterchangeable(self):
        arguments = parse(registry(), ["-p", "val"])
        twin = Switch("param", "p", 1, "Switch with one parameter.")
        self.assertEqual(arguments.lookup(twin), Argument(True, ("val",)))


class TestParseFaults(TestCase):
    """Malformed command lines; the first violation wins."""

    def assertFault(self, kind, code, tokens):
        with self.assertRaises(kind) as cm:
            parse(registry(), tokens)
        self.assertIsInstance(cm.exception, ArgumentsParsingError)
        self.assertIs(cm.exception.code, code)
        return cm.exception

    def testMissingPrefix(self):
        fault = self.assertFault(MalformedSwitchError, FaultCode.MALFORMED_TOKEN, ["switch1"])
        self.assertEqual(str(fault), "invalid switch 'switch1' at first position, prefix '-' not found")
        self.assertEqual(fault.options["position"], 1)
        self.assertEqual(fault.options["token"], "switch1")

    def testLoneSeparator(self):
        fault = self.assertFault(MalformedSwitchError, FaultCode.MALFORMED_TOKEN, ["-"])
        self.assertEqual(str(fault), "invalid switch '-' at first position, name not specified")

    def testBlankKey(self):
        fault = self.assertFault(MalformedSwitchError, FaultCode.MALFORMED_TOKEN, ["-s", "-  "])
        self.assertIn("name not specified", str(fault))
        self.assertEqual(fault.options["position"], 2)

    def testStrayValue(self):
        fault = self.assertFault(MalformedSwitchError, FaultCode.MALFORMED_TOKEN, ["-p", "a", "b"])
        self.assertEqual(fault.options["position"], 3)
        self.assertIn("third position", str(fault))

    def testUnknownSwitch(self):
        fault = self.assertFault(UnknownSwitchError, FaultCode.UNKNOWN_SWITCH, ["-s", "-x"])
        self.assertEqual(str(fault), "unknown switch '-x' at second position")

    def testMatchingIsCaseSensitive(self):
        self.assertFault(UnknownSwitchError, FaultCode.UNKNOWN_SWITCH, ["-S"])

    def testNamedSwitchHasNoImplicitShortcut(self):
        self.assertFault(UnknownSwitchError, FaultCode.UNKNOWN_SWITCH, ["-v"])

    def testDuplicatedSwitch(self):
        fault = self.assertFault(DuplicatedSwitchError, FaultCode.DUPLICATED_SWITCH, ["-s", "-s"])
        self.assertEqual(str(fault), "switch '-s' at second position provided more than one time")

    def testDuplicatedThroughNameAndShortcut(self):
        fault = self.assertFault(DuplicatedSwitchError, FaultCode.DUPLICATED_SWITCH, ["-p", "1", "-param", "2"])
        self.assertIs(fault.options["switch"], PARAM)
        self.assertEqual(fault.options["position"], 3)

    def testIncompleteParameters(self):
        fault = self.assertFault(
            IncompleteParametersError, FaultCode.INCOMPLETE_PARAMETERS, ["-p", "x", "-d", "a"]
        )
        self.assertEqual(str(fault), "incorrect parameters count for switch '-double', 2 required but 1 found")
        self.assertEqual(fault.options["required"], 2)
        self.assertEqual(fault.options["supplied"], 1)
        self.assertEqual(fault.options["position"], 4)

    def testSwitchSwallowedAsParameter(self):
        fault = self.assertFault(IncompleteParametersError, FaultCode.INCOMPLETE_PARAMETERS, ["-d", "-p"])
        self.assertEqual(fault.options["supplied"], 1)

    def testParameterMissingAtEnd(self):
        fault = self.assertFault(IncompleteParametersError, FaultCode.INCOMPLETE_PARAMETERS, ["-p"])
        self.assertEqual(fault.options["supplied"], 0)

    def testFirstViolationWins(self):
        self.assertFault(UnknownSwitchError, FaultCode.UNKNOWN_SWITCH, ["-x", "-s", "-s"])

    def testFaultCarriesHint(self):
        fault = self.assertFault(UnknownSwitchError, FaultCode.UNKNOWN_SWITCH, ["-x"])
        self.assertIn("-help", fault.hint)

    def testInvalidInputs(self):
        with self.assertRaises(TypeError):
            parse([SWITCH1], ["-s"])  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            parse(registry(), "-s")
        with self.assertRaises(TypeError):
            parse(registry(), [1])  # type: ignore[list-item]


class TestTwoSwitchRegistry(TestCase):
    """A presence-only switch next to a one-parameter switch."""

    def setUp(self):
        self.switch1 = Switch("switch1", "s", 0, "Test switch.")
        self.switch2 = Switch("switch2", "p", 1, "Test switch.")
        self.registry = SwitchRegistry((self.switch1, self.switch2))

    def testNameThenShortcut(self):
        arguments = parse(self.registry, ["-switch1", "-p", "val"])
        self.assertEqual(dict(arguments), {self.switch1: (), self.switch2: ("val",)})

    def testShortcutOnly(self):
        self.assertEqual(dict(parse(self.registry, ["-s"])), {self.switch1: ()})

    def testParameterThenSwitch(self):
        arguments = parse(self.registry, ["-switch2", "param", "-s"])
        self.assertEqual(list(arguments), [self.switch2, self.switch1])

    def testEmptyRegistryRejectsEverything(self):
        for tokens in (["switch1"], ["-switch1"]):
            with self.subTest(tokens=tokens), self.assertRaises(ArgumentsParsingError):
                parse(SwitchRegistry(), tokens)

    def testRejectedCommandLines(self):
        for tokens, kind in (
            (["switch1"], MalformedSwitchError),
            (["-switch1", "-switch1"], DuplicatedSwitchError),
            (["-switch1", "-s"], DuplicatedSwitchError),
            (["-switch1", "-p"], IncompleteParametersError),
            (["-switch1", "-p", "d", "-d"], UnknownSwitchError),
            (["-switch1", "-p", "d", "d"], MalformedSwitchError),
            (["-switch1", "a"], MalformedSwitchError),
            (["-switch1", "-"], MalformedSwitchError),
        ):
            with self.subTest(tokens=tokens), self.assertRaises(kind):
                parse(self.registry, tokens)


class TestArgumentsRendering(TestCase):
    """Textual rendering of parsed arguments."""

    def testText(self):
        arguments = parse(registry(), ["-s", "-p", "val", "-d", "a", "b"])
        self.assertEqual(
            str(arguments),
            "Parsed command line arguments:\n-switch1\n-param val\n-double a b\n",
        )

    def testEmptyText(self):
        self.assertEqual(str(parse(registry(), [])), "Parsed command line arguments:\n(none)\n")

    def testRepr(self):
        self.assertEqual(repr(parse(registry(), ["-p", "val"])), "arguments({-param: ('val',)})")

    def testRichRendering(self):
        group = parse(registry(), ["-p", "val"]).__rich__()
        self.assertEqual([text.plain for text in group.renderables], ["parsed arguments:", "  -param val"])


if __name__ == "__main__":
    unittest.main()
