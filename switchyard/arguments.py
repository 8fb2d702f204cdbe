"""
Switchyard argument parser.

parse(registry, tokens) turns a raw argument vector (program name already
stripped) into an Arguments mapping from each given switch to the tuple of its
parameters.

Grammar
- every switch consumes exactly 'nargs' following tokens, verbatim: a parameter
  may look like a switch ("-d") and is still taken as a parameter.
- there is no look-ahead and no backtracking; one pass, left to right.

States
- expecting a switch (initial): the token must be PREFIX + key, where key is
  not blank; the first registry member matching key is selected. unknown and
  repeated switches are errors. presence-only switches are recorded at once.
- collecting parameters: tokens are appended until 'nargs' are gathered, then
  the switch is recorded and the parser expects a switch again.

Faults (first violation wins, nothing partial is returned)
- MalformedSwitchError: missing prefix, or nothing after it.
- UnknownSwitchError: no registry member matches.
- DuplicatedSwitchError: the switch was already given.
- IncompleteParametersError: input ended while collecting parameters.
"""
import collections
from collections import defaultdict
from collections.abc import Iterable, Mapping

from rich.console import Group
from rich.text import Text

from .faults import *
from .registry import SwitchRegistry
from .switches import PREFIX, Switch
from .utils import *

Argument = collections.namedtuple("Argument", (
    "specified",
    "parameters",
))


class Arguments(Mapping):
    """
    Read-only result of one parse: Mapping[Switch, tuple[str, ...]].

    Values are keyed by the registry identifier of each switch, so lookups go
    through the registry snapshot the parse ran against. A key is the registered
    switch itself or one with the same name, shortcut, nargs and descr; a
    lookalike differing in nargs or descr is not part of the result.
    Iteration follows the order in which switches appeared on the command line.
    """

    def __init__(self, registry, values=Unset, /):
        if not isinstance(registry, SwitchRegistry):
            raise TypeError("arguments() first argument must be a switch-registry")
        self._registry = registry
        self._values = dict(coalesce(values, {}))

    @property
    def registry(self):
        return self._registry

    def _identify(self, switch):
        # the registered instance itself, else a switch with identical metadata
        if not isinstance(switch, Switch):
            raise TypeError("arguments keys must be switches")
        fallback = None
        for index, registered in enumerate(self._registry):
            if registered is switch:
                return index
            if fallback is None and tuple(registered.__rich_repr__()) == tuple(switch.__rich_repr__()):
                fallback = index
        return fallback

    def __getitem__(self, switch, /):
        if (index := self._identify(switch)) is None or index not in self._values:
            raise KeyError(switch)
        return self._values[index]

    def __iter__(self):
        for index in self._values:
            yield self._registry[index]

    def __len__(self):
        return len(self._values)

    def __contains__(self, switch, /):
        if not isinstance(switch, Switch):
            return False
        return self._identify(switch) in self._values

    def lookup(self, switch, /):
        """
        Return Argument(specified, parameters) for a switch.

        parameters is None when the switch was not given (or does not belong
        to the registry the arguments were parsed against).
        """
        try:
            return Argument(True, self[switch])
        except KeyError:
            return Argument(False, None)

    def __repr__(self):
        return "arguments({%s})" % ", ".join(
            "%s: %r" % (switch.full_prefixed_name, parameters) for switch, parameters in self.items()
        )

    def __str__(self):
        lines = ["Parsed command line arguments:"]
        if not self._values:
            lines.append("(none)")
        for switch, parameters in self.items():
            lines.append(" ".join((switch.full_prefixed_name, *parameters)))
        return "\n".join(lines) + "\n"

    def __rich__(self):
        styles = defaultdict(str, {
            "group-label": "bold #FFFFFF",
            "switch-name": "bold #00E6FF",
            "metavar": "bold #FFD600",
            "none": "dim",
        } | getattr(__import__('__main__'), "__styles__", {}))
        renders = [Text("parsed arguments:", styles["group-label"])]
        if not self._values:
            renders.append(Text("  (none)", styles["none"]))
        for switch, parameters in self.items():
            renders.append(Text.assemble(
                "  ",
                (switch.full_prefixed_name, styles["switch-name"]),
                *((" " + parameter, styles["metavar"]) for parameter in parameters),
            ))
        return Group(*renders)


def parse(registry, tokens, /):
    """
    parse a raw argument vector against a registry of known switches.

    parameters
    - registry: SwitchRegistry
      known switches; scanned in registration order, first match wins.
    - tokens: Iterable[str]
      the argument vector without the program name.

    returns
    - Arguments: every given switch mapped to a tuple of exactly 'nargs' parameters.

    raises
    - an ArgumentsParsingError subclass describing the first violation, with
      the offending token and its 1-based position in the options.
    - TypeError when the inputs are not a registry and an iterable of strings.
    """
    if not isinstance(registry, SwitchRegistry):
        raise TypeError("parse() first argument must be a switch-registry")
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("parse() second argument must be an iterable of strings")

    registry = SwitchRegistry(registry)
    values = {}

    # collecting state: (identifier, switch, collected parameters)
    current = None

    for position, token in enumerate(tokens, 1):
        if not isinstance(token, str):
            raise TypeError("parse() tokens must be strings")

        if current is not None:
            index, switch, collected = current
            collected.append(token)
            if len(collected) == switch.nargs:
                values[index] = tuple(collected)
                current = None
            continue

        if not token.startswith(PREFIX):
            trigger(MalformedSwitchError(
                "invalid switch %r at %s position, prefix %r not found" % (token, ordinal(position), PREFIX),
                title="malformed switch",
                code=FaultCode.MALFORMED_TOKEN,
                hint="switches are spelled %sname or %sx (for example: %shelp)" % (PREFIX, PREFIX, PREFIX),
                token=token,
                position=position,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            ))

        if not (key := token[len(PREFIX):]).strip():
            trigger(MalformedSwitchError(
                "invalid switch %r at %s position, name not specified" % (token, ordinal(position)),
                title="malformed switch",
                code=FaultCode.MALFORMED_TOKEN,
                hint="write the switch name right after %r (for example: %shelp)" % (PREFIX, PREFIX),
                token=token,
                position=position,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            ))

        for index, switch in enumerate(registry):
            if switch.matches(key):
                break
        else:
            trigger(UnknownSwitchError(
                "unknown switch %r at %s position" % (token, ordinal(position)),
                title="unknown switch",
                code=FaultCode.UNKNOWN_SWITCH,
                hint="try '%shelp' to see all available switches" % PREFIX,
                token=token,
                position=position,
                docs=getdoc(FaultCode.UNKNOWN_SWITCH),
            ))

        if index in values:
            trigger(DuplicatedSwitchError(
                "switch %r at %s position provided more than one time" % (token, ordinal(position)),
                title="duplicated switch",
                code=FaultCode.DUPLICATED_SWITCH,
                hint="remove the repeated %r" % switch.full_prefixed_name,
                token=token,
                position=position,
                switch=switch,
                docs=getdoc(FaultCode.DUPLICATED_SWITCH),
            ))

        if switch.nargs == 0:
            values[index] = ()
        else:
            current = index, switch, []

    if current is not None:
        index, switch, collected = current
        trigger(IncompleteParametersError(
            "incorrect parameters count for switch %r, %d required but %d found" % (
                switch.full_prefixed_name, switch.nargs, len(collected)
            ),
            title="not enough parameters",
            code=FaultCode.INCOMPLETE_PARAMETERS,
            hint="pass %s after %r" % (
                "one value" if switch.nargs == 1 else "%d values" % switch.nargs,
                switch.full_prefixed_name,
            ),
            position=position,
            switch=switch,
            required=switch.nargs,
            supplied=len(collected),
            docs=getdoc(FaultCode.INCOMPLETE_PARAMETERS),
        ))

    return Arguments(registry, values)


__all__ = (
    "Argument",
    "Arguments",
    "parse",
)
