r"""
Switchyard switch descriptors.

Overview
- Switch: an immutable, validated descriptor of one recognized command-line
  switch: a long name and/or a one-character shortcut, a fixed parameter count
  and a help description.
- PREFIX: the single lead character ("-") that marks a token as a switch.
- SwitchType: metaclass providing stable __repr__/__rich_repr__ and read-only
  properties for the fields declared in __introspectable__.

Metadata (validated on construction)
- name: Unset | str. Empty (or Unset) means "no long name"; otherwise at least
  two characters out of [A-Za-z0-9_-].
- shortcut: Unset | str. Empty (or Unset) means "no shortcut"; otherwise a
  single ASCII letter or digit.
- nargs: int >= 0. Exact number of parameters following the switch.
- descr: str. Non-empty after trimming; shown in help.

Matching
- one-character keys are matched against the shortcut only; longer keys are
  matched against the name only (exact and case-sensitive). A one-character
  name is therefore unreachable, which is why it is rejected on construction.

Quick example:
    >>> output = Switch("output", "o", 1, "Redirect output into file.")
    >>> output.full_prefixed_name
    '-output'
    >>> output.matches("o"), output.matches("output")
    (True, True)
    >>> print(output)
    -o or -output <value>
    	Redirect output into file.
"""
import functools
import operator
import re
from collections import defaultdict

from rich.text import Text

from .faults import *
from .utils import *

PREFIX = "-"


class SwitchType(type):
    """
    Metaclass that turns switch classes into introspectable descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - switch(name='output', shortcut='o', nargs=1, descr='...')
            """
            return f"{type(self).__typename__}(" + ", ".join(
                map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())
            ) + ")"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _styles():
    return defaultdict(str, {
        "switch-name": "bold #00E6FF",  # CYAN for switch names
        "metavar": "bold #FFD600",  # AMBER for parameters
        "switch-description": "#9CA3AF",  # Muted gray
    } | getattr(__import__('__main__'), "__styles__", {}))


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize switch metadata.

    Type errors (a name that is not a string, a boolean parameter count, ...)
    raise TypeError. Every other violation raises InvalidSwitchError with a
    dedicated FaultCode, checked in this order: name length, name characters,
    shortcut, missing identifier, parameter count, description.

    The metadata dict is mutated in place: name becomes "" when absent and
    shortcut becomes None when absent; descr is trimmed.
    """
    if not isinstance(name := metadata["name"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    if not isinstance(shortcut := metadata["shortcut"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'shortcut' must be a string")
    if isinstance(nargs := metadata["nargs"], bool) or not isinstance(nargs, int):
        raise TypeError(f"{cls.__typename__} 'nargs' must be an integer")
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")

    name = coalesce(name, "")
    shortcut = coalesce(shortcut) or None

    if len(name) == 1:
        raise InvalidSwitchError(
            f"{cls.__typename__} name {name!r} cannot be shorter than 2 characters",
            code=FaultCode.NAME_TOO_SHORT,
            title="switch name too short",
            hint="use the 'shortcut' field for one-character switches",
        )
    if not re.fullmatch(r"[A-Za-z0-9_-]*", name):
        character = re.search(r"[^A-Za-z0-9_-]", name)[0]
        raise InvalidSwitchError(
            f"{cls.__typename__} name {name!r} has an invalid character {character!r}",
            code=FaultCode.NAME_BAD_CHARACTER,
            title="invalid switch name",
            hint="valid characters are letters, digits, underscores and hyphens",
        )
    if shortcut is not None and not re.fullmatch(r"[A-Za-z0-9]", shortcut):
        raise InvalidSwitchError(
            f"{cls.__typename__} shortcut {shortcut!r} must be a single letter or digit",
            code=FaultCode.SHORTCUT_NOT_ALPHANUMERIC,
            title="invalid switch shortcut",
            hint="pick one of a-z, A-Z or 0-9",
        )
    if not name and shortcut is None:
        raise InvalidSwitchError(
            f"{cls.__typename__} name and shortcut cannot be both empty",
            code=FaultCode.NO_IDENTIFIER,
            title="anonymous switch",
            hint="give the switch a name, a shortcut, or both",
        )
    if nargs < 0:
        raise InvalidSwitchError(
            f"{cls.__typename__} parameters count cannot be less than zero (got {nargs})",
            code=FaultCode.NEGATIVE_PARAMETER_COUNT,
            title="negative parameters count",
            hint="use 0 for presence-only switches",
        )
    if not (descr := coalesce(descr, "").strip()):
        raise InvalidSwitchError(
            f"{cls.__typename__} description cannot be empty",
            code=FaultCode.EMPTY_DESCRIPTION,
            title="missing switch description",
            hint="describe what the switch does; it is shown in help",
        )

    metadata["name"] = name
    metadata["shortcut"] = shortcut
    metadata["descr"] = descr


class Switch(Sealed, metaclass=SwitchType):
    """
    Immutable descriptor of one command-line switch.

    Properties
    - name, shortcut, nargs, descr: sanitized metadata (read-only).
    - short_prefixed_name: "-" + shortcut when present, otherwise "-" + name.
    - full_prefixed_name: "-" + name when present, otherwise "-" + shortcut.

    Identity
    - equality and hashing use the (name, shortcut) pair.
    """

    __introspectable__ = (
        "name",
        "shortcut",
        "nargs",
        "descr",
    )

    def __new__(cls, name=Unset, shortcut=Unset, nargs=0, descr=Unset):
        """
        Construct a switch, failing fast on any invalid field.

        Parameters
        - name: Unset | str
          Long name, matched when the token after the prefix is longer than one character.
        - shortcut: Unset | str
          One-character alias, matched when the token after the prefix is a single character.
        - nargs: int
          Exact count of parameters the switch consumes (0 for presence-only).
        - descr: str
          Help description. Required.
        """
        metadata = {
            "name": name,
            "shortcut": shortcut,
            "nargs": nargs,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "_" + name, object)
        return self

    @property
    def short_prefixed_name(self):
        return PREFIX + (self.shortcut if self.shortcut is not None else self.name)

    @property
    def full_prefixed_name(self):
        return PREFIX + (self.name if self.name else self.shortcut)

    def matches(self, key, /):
        """
        Tell whether a token (with the prefix already stripped) designates this switch.

        - len(key) > 1: exact, case-sensitive comparison against the name.
        - len(key) == 1: comparison against the shortcut.
        - empty keys never match.
        """
        if not isinstance(key, str):
            raise TypeError("matches() argument must be a string")
        if len(key) > 1:
            return bool(self.name) and key == self.name
        return self.shortcut is not None and key == self.shortcut

    def is_incompatible_with(self, other, /):
        """
        Tell whether both switches could not live in the same registry.

        Two switches are incompatible when they share a non-empty name or when
        both have the same shortcut.
        """
        if not isinstance(other, Switch):
            raise TypeError("is_incompatible_with() argument must be a switch")
        return (
            (bool(self.name) and self.name == other.name) or
            (self.shortcut is not None and self.shortcut == other.shortcut)
        )

    def __eq__(self, other):
        if not isinstance(other, Switch):
            return NotImplemented
        return (self.name, self.shortcut) == (other.name, other.shortcut)

    def __hash__(self):
        return hash((self.name, self.shortcut))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def _metavar(self):
        if self.nargs == 1:
            return " <value>"
        if self.nargs > 1:
            return f" <{self.nargs} values>"
        return ""

    def __str__(self):
        names = []
        if self.shortcut is not None:
            names.append(PREFIX + self.shortcut)
        if self.name:
            names.append(PREFIX + self.name)
        return " or ".join(names) + self._metavar() + "\n\t" + self.descr

    def __rich__(self):
        styles = _styles()
        names = []
        if self.shortcut is not None:
            names.append(Text(PREFIX + self.shortcut, styles["switch-name"]))
        if self.name:
            names.append(Text(PREFIX + self.name, styles["switch-name"]))
        return Text.assemble(
            Text(" or ").join(names),
            Text(self._metavar(), styles["metavar"]),
            "\n    ",
            Text(self.descr, styles["switch-description"]),
        )


__all__ = (
    "PREFIX",
    "SwitchType",
    "Switch",
)
