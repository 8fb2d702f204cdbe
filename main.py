import sys

from switchyard import *

__prog__ = "hello"
__version__ = "1.0.0"

USER = Switch("user", "u", 1, "Name of the user to greet.")
GREETING = Switch("greeting", "g", 1, "Greeting to use instead of 'Hello'.")


def hello(context):
    specified, parameters = context.arguments.lookup(USER)
    if not specified:
        return Failure(11, "user name not specified, use -u <name>")
    greeting, = context.arguments.lookup(GREETING).parameters or ("Hello",)
    context.output.writeline(f"{greeting}, {parameters[0]}!")
    return Success()


if __name__ == '__main__':
    registry = SwitchRegistry(DEFAULTS)
    registry.add(USER)
    registry.add(GREETING)
    SimpleConsole.run(registry, sys.argv[1:], hello)
