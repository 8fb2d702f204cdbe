"""
Switchyard switch registry.

A SwitchRegistry is an ordered, append-only collection of switches in which no
two members are incompatible (see Switch.is_incompatible_with). The position
of a member is its stable integer identifier: it is assigned by add() and never
changes, since members are never removed.

Construction
- SwitchRegistry()                  → empty registry.
- SwitchRegistry(other_registry)    → copy; order preserved, no re-validation.
- SwitchRegistry(iterable)          → switches added one by one; the first
  incompatibility raises and no registry is returned.

Sharing
- a fully built registry may be read from several threads; add() must not run
  concurrently with any read.
"""
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Group
from rich.text import Text

from .faults import *
from .switches import Switch
from .utils import *


class SwitchRegistry:
    """
    Ordered collection of mutually compatible switches.

    Supports len(), membership tests, integer indexing, iteration in
    registration order (every iter() call starts over) and help rendering
    through str() and rich.
    """

    def __init__(self, source=Unset, /):
        self._switches = []
        if source is Unset:
            return
        if isinstance(source, SwitchRegistry):
            # members of another registry are already pairwise compatible
            self._switches = list(source._switches)
            return
        if isinstance(source, str) or not isinstance(source, Iterable):
            raise TypeError("switch-registry() argument must be a switch-registry or an iterable of switches")
        for switch in source:
            self.add(switch)

    def add(self, switch, /):
        """
        Append a switch and return its identifier.

        Raises IncompatibleSwitchError (leaving the registry unchanged) when an
        existing member shares the switch's name or shortcut.
        """
        if not isinstance(switch, Switch):
            raise TypeError("add() argument must be a switch")
        for existing in self._switches:
            if switch.is_incompatible_with(existing):
                raise IncompatibleSwitchError(
                    "switch %r is incompatible with switch %r" % (
                        switch.full_prefixed_name,
                        existing.full_prefixed_name,
                    ),
                    code=FaultCode.INCOMPATIBLE_SWITCH,
                    title="incompatible switches",
                    hint="switches in the same registry need distinct names and shortcuts",
                    switch=switch,
                    existing=existing,
                )
        self._switches.append(switch)
        return len(self._switches) - 1

    def index(self, switch, /):
        """
        Return the identifier of a registered switch (ValueError when absent).
        """
        try:
            return self._switches.index(switch)
        except ValueError:
            raise ValueError(f"{switch!r} is not registered") from None

    def __getitem__(self, index, /):
        if not isinstance(index, int):
            raise TypeError("switch-registry indices must be integers")
        return self._switches[index]

    def __iter__(self):
        return iter(tuple(self._switches))

    def __len__(self):
        return len(self._switches)

    def __contains__(self, switch, /):
        return switch in self._switches

    def __repr__(self):
        return f"switch-registry({', '.join(map(repr, self._switches))})"

    def __str__(self):
        lines = ["Command line switches:"]
        lines.extend(map(str, self._switches))
        return "\n".join(lines) + "\n"

    def __rich__(self):
        styles = defaultdict(str, {
            "group-label": "bold #FFFFFF",  # Pure white headers
        } | getattr(__import__('__main__'), "__styles__", {}))
        return Group(
            Text("switches:", styles["group-label"]),
            *(Text.assemble("  ", switch.__rich__()) for switch in self._switches),
        )


__all__ = (
    "SwitchRegistry",
)
