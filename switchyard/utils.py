"""
Switchyard utilities.

Helpers shared by the switch, registry, context and harness modules.

- Unset: "argument not given" marker, distinct from None; falsey and usable
  in PEP 604 unions (str | Unset) for isinstance checks.
- coalesce(object, default): Unset becomes default, anything else is kept.
- rename(name): decorator fixing __name__/__qualname__ of generated functions.
- mirror(name): read-only property over self._<name>.
- Sealed: mixin for instances that are frozen once built.
- ordinal(number): "first", "second", ..., "21st" for parse messages.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ordinal(3)
    'third'
"""
import builtins
import functools
from contextlib import contextmanager
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    UnsetType() always returns the same instance, which is falsey and prints as
    "Unset". The type cannot be subclassed.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Replace Unset by a default; None, 0 and "" are real values and kept.

    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(name, /):
    """
    Decorator giving a generated function a stable __name__ and __qualname__.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not builtins.callable(function):
            raise TypeError("rename() must decorate a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance. Lists are handed
    out as tuples and dicts as read-only mapping proxies, so the public API
    never leaks a mutable container.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        object = getattr(self, "_" + name)
        if isinstance(object, list):
            return tuple(object)
        if isinstance(object, dict):
            return MappingProxyType(object)
        return object

    return property(getter)


class Sealed:
    """
    Mixin that locks instance attributes once construction is over.

    build phase
    - the mixin's __new__ is a context manager; subclasses write their fields
      inside the 'with' block and the instance is read-only afterwards:
        with super().__new__(cls) as self:
            self._field = value
    - outside the build phase both assignment and deletion raise AttributeError.
    """
    __slots__ = ("__building",)

    @contextmanager
    def __new__(cls):
        self = super().__new__(cls)
        object.__setattr__(self, "_Sealed__building", True)
        try:
            yield self
        finally:
            object.__setattr__(self, "_Sealed__building", False)

    def __setattr__(self, name, value, /):
        if not self.__building:
            raise AttributeError(f"{type(self).__name__!r} object is read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")


def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",
    "Sealed",

    # Constants
    "Unset",
)
