"""Spawn an external command and collect its output.

One child process per call.  stdout and stderr are delivered chunk by chunk
into two separate buffers.  The call completes when the child exits: output
still in flight is drained briefly, and pipes held open by a process the
child left running in the background are closed rather than waited on.  A
non-zero exit status is reported on the result, never raised: callers decide
what counts as failure by looking at ``errors``.
"""

from __future__ import annotations

import asyncio
import codecs
import os
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, TextIO

from .args import obj_to_args
from .debug import debug_enabled


# Seconds to wait for output still in the pipes once the child has exited.
DRAIN_TIMEOUT = 0.2
TRACE_PREFIX = "swiss-army~cli~exec"

STDOUT, STDERR = 1, 2

ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class ExecResult:
    """Output of a child process that ran and exited."""

    result: str
    errors: str
    returncode: Optional[int] = None


class ExecError(RuntimeError):
    """The child process could not be started or failed at the OS level.

    Attributes:
        error: The underlying exception (usually an ``OSError``).
        errors: stderr text collected before the failure.
    """

    def __init__(self, error: BaseException, errors: str = "") -> None:
        super().__init__(str(error))
        self.error = error
        self.errors = errors


def build_argv(command: str, args: Optional[Mapping[str, Any]] = None) -> List[str]:
    """Split *command* on single spaces and append the flags encoded from *args*.

    Empty tokens (from repeated or surrounding spaces) are dropped.  There is
    no quoting: an argument containing a space cannot be expressed.
    """
    tokens = (command or "").split(" ") + obj_to_args(args)
    return [t for t in tokens if t]


class _ExecProtocol(asyncio.SubprocessProtocol):
    """Routes decoded pipe chunks to per-stream handlers and records exit.

    ``exited`` resolves with the return code as soon as the child is reaped.
    ``failed`` resolves with the first exception raised by a handler or
    reported by a pipe.  ``closed`` holds one future per pipe, set at EOF.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, handlers: Dict[int, Callable[[str], None]]) -> None:
        self._handlers = handlers
        # Incremental decoding keeps multi-byte characters split across reads intact.
        self._decoders = {fd: codecs.getincrementaldecoder("utf-8")(errors="replace") for fd in handlers}
        self._transport: Optional[asyncio.SubprocessTransport] = None
        self.exited: asyncio.Future = loop.create_future()
        self.failed: asyncio.Future = loop.create_future()
        self.closed = {fd: loop.create_future() for fd in handlers}
        self.detached = False

    def connection_made(self, transport) -> None:
        self._transport = transport

    def detach(self) -> None:
        """Stop delivering chunks; the call has settled."""
        self.detached = True
        if self.failed.done() and not self.failed.cancelled():
            self.failed.exception()

    def _deliver(self, fd: int, data: bytes, final: bool = False) -> None:
        if self.detached or self.failed.done():
            return
        text = self._decoders[fd].decode(data, final=final)
        if not text:
            return
        try:
            self._handlers[fd](text)
        except Exception as e:
            self.failed.set_exception(e)

    def pipe_data_received(self, fd: int, data: bytes) -> None:
        self._deliver(fd, data)

    def pipe_connection_lost(self, fd: int, exc: Optional[Exception]) -> None:
        if fd not in self.closed or self.closed[fd].done():
            return
        self._deliver(fd, b"", final=True)
        self.closed[fd].set_result(None)
        if exc is not None and not self.detached and not self.failed.done():
            self.failed.set_exception(exc)

    def flush(self) -> None:
        """Emit whatever is left in the decoders of pipes that never closed."""
        for fd, fut in self.closed.items():
            if not fut.done():
                self._deliver(fd, b"", final=True)

    def process_exited(self) -> None:
        if not self.exited.done():
            self.exited.set_result(self._transport.get_returncode())


async def _abort(transport: asyncio.SubprocessTransport, protocol: _ExecProtocol) -> None:
    if not protocol.exited.done():
        try:
            transport.kill()
        except ProcessLookupError:
            pass
        await protocol.exited


class Executor:
    """Reusable command executor.

    The debug toggle is resolved once, here: an explicit *debug* wins,
    otherwise ``$SWISS_ARMY_DEBUG`` decides.  Diagnostics go to *stream*
    (``sys.stderr`` when omitted).
    """

    def __init__(self, debug: Optional[bool] = None, stream: Optional[TextIO] = None) -> None:
        self.debug = debug_enabled() if debug is None else bool(debug)
        self.stream = stream

    def _trace(self, *parts: object) -> None:
        if self.debug:
            print(*parts, file=self.stream or sys.stderr)

    async def run(
        self,
        command: str,
        *,
        args: Optional[Mapping[str, Any]] = None,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ExecResult:
        """Run *command* and return its collected output.

        Args:
            command: Program and literal arguments separated by single spaces.
            args: Flag map appended as ``--kebab-name`` tokens (truthy values only).
            cwd: Working directory; defaults to the current one.
            env: Environment for the child; defaults to a copy of ``os.environ``.
            progress: Called with every stdout chunk as it arrives.

        Raises:
            ExecError: If there is no program to run or it cannot be spawned.
        """
        argv = build_argv(command, args)
        cwd = os.getcwd() if cwd is None else cwd
        env = dict(os.environ) if env is None else dict(env)
        self._trace(argv)

        if not argv:
            raise ExecError(ValueError("No command to execute"))

        result: List[str] = []
        errors: List[str] = []

        def on_stdout(chunk: str) -> None:
            result.append(chunk)
            if progress is not None:
                progress(chunk)

        def on_stderr(chunk: str) -> None:
            self._trace(f"{TRACE_PREFIX}::error", repr(chunk))
            errors.append(chunk)

        loop = asyncio.get_running_loop()
        try:
            transport, protocol = await loop.subprocess_exec(
                lambda: _ExecProtocol(loop, {STDOUT: on_stdout, STDERR: on_stderr}),
                *argv,
                cwd=cwd,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExecError(e, "\n".join(errors)) from e

        try:
            await asyncio.wait([protocol.exited, protocol.failed], return_when=asyncio.FIRST_COMPLETED)
            if not protocol.failed.done():
                await asyncio.wait([protocol.failed, *protocol.closed.values()], timeout=DRAIN_TIMEOUT)
            if not protocol.failed.done():
                protocol.flush()
            if protocol.failed.done():
                protocol.failed.result()
            returncode = protocol.exited.result()
        except OSError as e:
            await _abort(transport, protocol)
            raise ExecError(e, "\n".join(errors)) from e
        except BaseException:
            # progress raised or the caller cancelled: don't leave the child behind
            await _abort(transport, protocol)
            raise
        finally:
            protocol.detach()
            transport.close()

        out = ExecResult(result="\n".join(result), errors="\n".join(errors), returncode=returncode)
        self._trace(f"{TRACE_PREFIX}::exit", {"result": out.result, "errors": out.errors})
        return out

    def run_sync(self, command: str, **kwargs: Any) -> ExecResult:
        """Blocking form of :meth:`run` for code without an event loop."""
        return asyncio.run(self.run(command, **kwargs))


async def exec_command(
    command: str,
    *,
    args: Optional[Mapping[str, Any]] = None,
    cwd: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    progress: Optional[ProgressCallback] = None,
    debug: Optional[bool] = None,
) -> ExecResult:
    """Run *command* once with a fresh :class:`Executor`."""
    return await Executor(debug=debug).run(command, args=args, cwd=cwd, env=env, progress=progress)


def exec_sync(command: str, *, debug: Optional[bool] = None, **kwargs: Any) -> ExecResult:
    """Run *command* to completion and return its output, blocking the caller."""
    return Executor(debug=debug).run_sync(command, **kwargs)
