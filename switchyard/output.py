"""
Switchyard output sink.

StreamOutput is the line-oriented writer the harness and payloads print to. It
wraps a rich Console bound to one target at a time:
- the standard output (default),
- a file, truncated and written as UTF-8 (missing parent directories are created),
- any caller-provided text stream.

Plain values are written verbatim through str() (tabs and control characters
included); as soon as one object is a rich renderable (faults, registries,
parsed arguments) the whole line is rendered by the console, with colors only
when the target is a terminal.

Only files opened by the sink itself are closed when the target changes.
"""
import os
import os.path
import sys

from rich.abc import RichRenderable
from rich.console import Console

from .faults import *
from .utils import *


class StreamOutput:
    """
    Redirectable line-oriented writer.

    Usage
        output = StreamOutput()
        output.writeline("hello")           # standard output
        output.set_to_file("logs/run.txt")  # creates logs/ when needed
        output.writeline("to the file")
        output.close()
    """

    def __init__(self, stream=Unset, /):
        self._console = None
        self._handle = None
        if stream is Unset:
            self.set_to_console()
        else:
            self.set_to_stream(stream)

    @property
    def console(self):
        return self._console

    @property
    def stream(self):
        return self._console.file

    def set_to_console(self):
        self._bind(sys.stdout)

    def set_to_file(self, path, /):
        """
        Redirect output into a file, erasing its previous contents.

        Raises OutputStreamError (with the OSError chained) when the parent
        directory cannot be created or the file cannot be opened.
        """
        if not isinstance(path, str | os.PathLike):
            raise TypeError("set_to_file() argument must be a path")

        try:
            if (parent := os.path.dirname(path)) and not os.path.isdir(parent):
                os.makedirs(parent)
        except OSError as error:
            raise OutputStreamError(
                "error creating parent directory for file %r" % os.fspath(path),
                title="cannot create output directory",
                code=FaultCode.OUTPUT_DIRECTORY,
                hint="check the path and the permissions of %r" % os.fspath(parent),
                path=path,
                docs=getdoc(FaultCode.OUTPUT_DIRECTORY),
            ) from error

        try:
            handle = open(path, "w", encoding="utf-8")
        except OSError as error:
            raise OutputStreamError(
                "error opening output file %r" % os.fspath(path),
                title="cannot open output file",
                code=FaultCode.OUTPUT_FILE,
                hint="check that %r is a writable file path" % os.fspath(path),
                path=path,
                docs=getdoc(FaultCode.OUTPUT_FILE),
            ) from error

        self._bind(handle)
        self._handle = handle

    def set_to_stream(self, stream, /):
        if not callable(getattr(stream, "write", None)):
            raise TypeError("set_to_stream() argument must be a writable text stream")
        self._bind(stream)

    def _bind(self, stream):
        self.close()
        self._console = Console(file=stream, soft_wrap=True, highlight=False, markup=False, emoji=False)

    def _emit(self, objects, end):
        if any(isinstance(object, RichRenderable) for object in objects):
            self._console.print(*objects, end=end)
            return
        stream = self._console.file
        stream.write(" ".join(map(str, objects)) + end)
        stream.flush()

    def write(self, *objects):
        """
        Write objects separated by spaces, without a trailing newline.
        """
        self._emit(objects, "")

    def writeline(self, *objects):
        """
        Write objects separated by spaces, then a newline (an empty line when no objects).
        """
        self._emit(objects, "\n")

    def close(self):
        """
        Close the file opened by set_to_file(), if any; other targets are left open.
        """
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


__all__ = (
    "StreamOutput",
)
