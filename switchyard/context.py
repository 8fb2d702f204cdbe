"""
Switchyard utility context.

A Context bundles what a console utility needs while it runs: its name and
version, the output sink, the registry of known switches, the parsed
arguments, and the verbosity level derived from them.

Lifecycle
1. parse(registry, tokens)    → once per context.
2. setup_verbosity(...)       → silent/verbose from presence-only switches.
3. setup_output(switch)       → optional redirection into a file.
"""
import os.path
import sys

from .arguments import parse
from .output import StreamOutput
from .switches import Switch
from .utils import *


def _main(name, default, /):
    return getattr(__import__("__main__"), name, default)


class Context:
    """
    Runtime state of a console utility.

    Properties
    - name: program name (argument, else __main__.__prog__, else the script basename).
    - version: program version (argument, else __main__.__version__, else "0.0.0").
    - output: StreamOutput the utility writes to.
    - switches: registry given to parse() (None before).
    - arguments: parsed Arguments (None before parse()).
    - silent, verbose: verbosity flags set by setup_verbosity().
    """

    name = mirror("name")
    version = mirror("version")
    output = mirror("output")
    switches = mirror("switches")
    arguments = mirror("arguments")
    silent = mirror("silent")
    verbose = mirror("verbose")

    def __init__(self, name=Unset, version=Unset, output=Unset):
        if not isinstance(name, str | Unset):
            raise TypeError("context 'name' must be a string")
        if not isinstance(version, str | Unset):
            raise TypeError("context 'version' must be a string")
        if not isinstance(output, StreamOutput | Unset):
            raise TypeError("context 'output' must be a stream-output")

        self._name = coalesce(name, _main("__prog__", os.path.basename(sys.argv[0]) if sys.argv else ""))
        self._version = coalesce(version, str(_main("__version__", "0.0.0")))
        self._output = coalesce(output) or StreamOutput()
        self._switches = None
        self._arguments = None
        self._silent = False
        self._verbose = False

    def parse(self, registry, tokens, /):
        """
        Parse the command line once; the registry is kept even when parsing fails
        so that help can still be rendered.
        """
        if self._arguments is not None:
            raise RuntimeError("command line arguments are already parsed")
        self._switches = registry
        self._arguments = parse(registry, tokens)
        return self._arguments

    def _ensure_parsed(self):
        if self._arguments is None:
            raise RuntimeError("command line arguments are not parsed yet")

    def setup_verbosity(self, silent=Unset, verbose=Unset):
        """
        Derive silent/verbose from presence-only switches; silent wins over verbose.
        """
        self._ensure_parsed()
        for option, switch in (("silent", silent), ("verbose", verbose)):
            if switch is Unset:
                continue
            if not isinstance(switch, Switch):
                raise TypeError(f"switch for option {option!r} must be a switch")
            if switch.nargs != 0:
                raise ValueError(f"switch for option {option!r} must have no parameters")

        if silent is not Unset:
            self._silent = self._arguments.lookup(silent).specified
        if verbose is not Unset:
            self._verbose = not self._silent and self._arguments.lookup(verbose).specified

    def setup_output(self, switch, /):
        """
        Redirect the output into the file given to a one-parameter switch, if present.

        Raises OutputStreamError when the file cannot be prepared.
        """
        self._ensure_parsed()
        if not isinstance(switch, Switch):
            raise TypeError("switch for option 'output' must be a switch")
        if switch.nargs != 1:
            raise ValueError("switch for option 'output' must have exactly one parameter")

        specified, parameters = self._arguments.lookup(switch)
        if specified:
            self._output.set_to_file(parameters[0])


__all__ = (
    "Context",
)
