"""
Switchyard faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- ConsoleException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- SwitchDefinitionError family: raised while declaring switches and registries.
- ArgumentsParsingError family: raised while parsing a command line.
- OutputStreamError: raised when the output sink cannot be redirected.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): looks up host-provided documentation for a code.

UX goals
- Position-first messages: parse errors include the ordinal position of the
  offending token (“at third position”).
- One-sentence messages under a short title, followed by at most one hint.
- Palette entries can be overridden through __styles__ in __main__.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - parsing (111xx)
      • MALFORMED_TOKEN, UNKNOWN_SWITCH, DUPLICATED_SWITCH, INCOMPLETE_PARAMETERS
    - output (131xx)
      • OUTPUT_DIRECTORY, OUTPUT_FILE
    - definitions (211xx)
      • NAME_TOO_SHORT, NAME_BAD_CHARACTER, SHORTCUT_NOT_ALPHANUMERIC,
        NO_IDENTIFIER, NEGATIVE_PARAMETER_COUNT, EMPTY_DESCRIPTION,
        INCOMPATIBLE_SWITCH

    codes are normalized to a string via normalize() so hosts can remap them
    if desired (e.g., to shorter labels).
    """
    # --- parsing errors (111xx) ---
    MALFORMED_TOKEN             = 11111
    UNKNOWN_SWITCH              = 11112
    DUPLICATED_SWITCH           = 11115
    INCOMPLETE_PARAMETERS       = 11122

    # --- output errors (131xx) ---
    OUTPUT_DIRECTORY            = 13111
    OUTPUT_FILE                 = 13112

    # --- definition errors (211xx) ---
    NAME_TOO_SHORT              = 21111
    NAME_BAD_CHARACTER          = 21112
    SHORTCUT_NOT_ALPHANUMERIC   = 21113
    NO_IDENTIFIER               = 21114
    NEGATIVE_PARAMETER_COUNT    = 21115
    EMPTY_DESCRIPTION           = 21116
    INCOMPATIBLE_SWITCH         = 21121

    def normalize(self):
        """
        return a host-normalized string for this code.

        a __codes__ mapping in __main__ may relabel codes (e.g. "E-UNKNOWN");
        otherwise the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program():
    main = __import__("__main__")
    return getattr(main, "__prog__", os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "switchyard")


class ConsoleException(Exception):
    """
    base of every fault raised by the library.

    options
    - code: FaultCode, title: str, hint: str, plus any context the reporter
      wants to keep (token, position, switch, ...).
    - rendering options: prog, colorful (default True), fancy (default False),
      shell (default False), ratio.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message else ""

    @property
    def code(self):
        return self.options.get("code")

    @property
    def title(self):
        return self.options.get("title")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(self.options.get("prog", _program()), styler("prog-name"))

        parts = ["[ ", prog]
        if self.code is not None:
            parts += [" — ", text(self.code.normalize(), styler("code"))]
        if self.title:
            parts += [" | ", text(self.title.title(), styler("error-title"))]
        parts.append(" ]")

        header = Text.assemble(*parts)
        message = text(self.message, styler("error-message"))
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if fancy:
            try:
                width = int((console.width - 4) * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(*renders), title=header, title_align="left", width=width)

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SwitchDefinitionError(ConsoleException, ValueError): ...
class InvalidSwitchError(SwitchDefinitionError): ...
class IncompatibleSwitchError(SwitchDefinitionError): ...


class ArgumentsParsingError(ConsoleException): ...
class MalformedSwitchError(ArgumentsParsingError): ...
class UnknownSwitchError(ArgumentsParsingError): ...
class DuplicatedSwitchError(ArgumentsParsingError): ...
class IncompleteParametersError(ArgumentsParsingError): ...


class OutputStreamError(ConsoleException): ...


def trigger(fault, /, **options):
    """
    merge runtime options into a fault, then raise or report it.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ConsoleException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - shell=True prints the fault on stderr and exits; otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    documentation registered by the host for a fault code, or None.

    the host application may expose a __docs__ mapping in __main__ where keys
    are fault codes and values are documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ConsoleException",
    "SwitchDefinitionError",
    "InvalidSwitchError",
    "IncompatibleSwitchError",
    "ArgumentsParsingError",
    "MalformedSwitchError",
    "UnknownSwitchError",
    "DuplicatedSwitchError",
    "IncompleteParametersError",
    "OutputStreamError",
    "FaultCode",
    "trigger",
    "getdoc",
)
