"""
Switchyard simple console harness.

What this module provides
- ExitCode: default process exit codes (host-remappable through __exits__ in __main__).
- SILENT / VERBOSE / OUTPUT / HELP: the default switches, and DEFAULTS, a
  registry holding them (copy it before adding your own switches).
- Success / Failure: the values a payload returns.
- SimpleConsole: parses the command line, honours the default switches,
  runs the payload and maps its outcome to an exit code.

Payload contract
- payload(context) returns Success() or Failure(code, message=None).
- a Failure without a non-zero integer code, or any other returned value, is an abnormal
  return: the exit code is ExitCode.ABNORMAL_RETURN.
- an exception escaping the payload gives ExitCode.UNHANDLED_EXCEPTION and its
  message is written to the output.

Quick start
    from switchyard import *

    NAME = Switch("user", "u", 1, "User name.")

    def hello(context):
        specified, parameters = context.arguments.lookup(NAME)
        if not specified:
            return Failure(11, "user name not specified")
        context.output.writeline(f"Hello, {parameters[0]}!")
        return Success()

    if __name__ == "__main__":
        registry = SwitchRegistry(DEFAULTS)
        registry.add(NAME)
        SimpleConsole.run(registry, sys.argv[1:], hello)
"""
import atexit
import collections
import sys
from enum import IntEnum

from .context import Context
from .faults import *
from .registry import SwitchRegistry
from .switches import Switch
from .utils import *


class ExitCode(IntEnum):
    """
    default exit codes of a console utility.

    - SUCCESS: the payload succeeded, or help was requested.
    - UNEXPECTED_EXIT: the harness never reached a conclusion (initial value).
    - PARSE_ERROR: the command line could not be parsed.
    - OUTPUT_ERROR: the output file could not be prepared.
    - UNHANDLED_EXCEPTION: the payload raised.
    - ABNORMAL_RETURN: the payload returned neither Success nor a non-zero Failure.
    """
    SUCCESS             = 0
    UNEXPECTED_EXIT     = 1
    PARSE_ERROR         = 2
    OUTPUT_ERROR        = 3
    UNHANDLED_EXCEPTION = 4
    ABNORMAL_RETURN     = 5

    def normalize(self):
        """
        return the process exit status for this code.

        the host application can provide a __exits__ mapping in __main__ to
        override the default values.
        """
        return int(getattr(__import__("__main__"), "__exits__", {}).get(self, self.value))


Success = collections.namedtuple("Success", ())
Failure = collections.namedtuple("Failure", ("code", "message"), defaults=(None,))

SILENT = Switch("silent", descr="Output only errors and execution results.")
VERBOSE = Switch("verbose", descr="Output additional information.")
OUTPUT = Switch("output", nargs=1, descr="Redirect output into file. File contents will be erased.")
HELP = Switch("help", descr="Show usage instructions.")

DEFAULTS = SwitchRegistry((SILENT, VERBOSE, OUTPUT, HELP))


class SimpleConsole:
    """
    Default behaviour of a console utility around a payload function.

    Options
    - name, version, output: forwarded to the Context.
    - colorful: style faults when the output supports colors.
    - fancy: render faults inside a panel.
    """

    def __init__(self, name=Unset, version=Unset, output=Unset, *, colorful=True, fancy=False):
        self.context = Context(name, version, output)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self._code = ExitCode.UNEXPECTED_EXIT

    @property
    def exit_code(self):
        if isinstance(self._code, ExitCode):
            return self._code.normalize()
        return int(self._code)

    @classmethod
    def run(cls, registry, tokens, payload, /, **options):
        """
        initialize, execute the payload when allowed, and exit the process.

        a file opened through the output switch is closed before exiting.
        """
        console = cls(**options)
        with console.context.output:
            if console.initialize(registry, tokens):
                console.execute(payload)
        sys.exit(console.exit_code)

    def initialize(self, registry, tokens, /):
        """
        parse the command line and apply the default switches.

        returns
        - True when the payload may run.
        - False when parsing or output redirection failed, or help was shown;
          exit_code tells which.
        """
        if not isinstance(registry, SwitchRegistry):
            raise TypeError("initialize() first argument must be a switch-registry")

        try:
            self.context.parse(registry, tokens)
        except ArgumentsParsingError as fault:
            self._code = ExitCode.PARSE_ERROR
            self._refuse(fault)
            return False

        self.context.setup_verbosity(SILENT, VERBOSE)

        try:
            self.context.setup_output(OUTPUT)
        except OutputStreamError as fault:
            self._code = ExitCode.OUTPUT_ERROR
            self._refuse(fault)
            return False

        self._welcome()

        if self.context.arguments.lookup(HELP).specified:
            self._help()
            self._code = ExitCode.SUCCESS
            return False

        if self.context.verbose:
            self.context.output.writeline(self.context.arguments)

        return True

    def execute(self, payload, /, on_terminate=Unset):
        """
        run the payload and map its outcome to an exit code (see module docs).

        on_terminate, when given, is registered with atexit while the payload runs.
        """
        if not callable(payload):
            raise TypeError("execute() argument must be callable")
        if on_terminate is Unset:
            self._code = self._outcome(payload)
            return self.exit_code

        if not callable(on_terminate):
            raise TypeError("execute() 'on_terminate' must be callable")
        atexit.register(on_terminate)
        try:
            self._code = self._outcome(payload)
        finally:
            atexit.unregister(on_terminate)
        return self.exit_code

    def _outcome(self, payload):
        output = self.context.output
        try:
            result = payload(self.context)
        except Exception as exception:
            output.writeline("unhandled exception: %s" % (str(exception) or type(exception).__name__))
            return ExitCode.UNHANDLED_EXCEPTION

        match result:
            case Success():
                return ExitCode.SUCCESS
            case Failure(code=int() as code, message=message) if code != ExitCode.SUCCESS:
                if message:
                    output.writeline(message)
                return code
            case _:
                output.writeline(
                    "payload returned %r, expected a success or a failure with a non-zero code" % (result,)
                )
                return ExitCode.ABNORMAL_RETURN

    def _welcome(self):
        if self.context.silent:
            return
        self.context.output.writeline(f"{self.context.name} v. {self.context.version}")
        self.context.output.writeline()

    def _help(self):
        if self.context.silent or self.context.switches is None:
            return
        if self.colorful:
            self.context.output.writeline(self.context.switches)
        else:
            self.context.output.write(str(self.context.switches))

    def _refuse(self, fault):
        self._welcome()
        self.context.output.writeline(fault.__replace__(
            prog=self.context.name,
            colorful=self.colorful,
            fancy=self.fancy,
            ratio=1,
        ))
        self.context.output.writeline()
        self._help()


__all__ = (
    "ExitCode",
    "Success",
    "Failure",
    "SILENT",
    "VERBOSE",
    "OUTPUT",
    "HELP",
    "DEFAULTS",
    "SimpleConsole",
)
