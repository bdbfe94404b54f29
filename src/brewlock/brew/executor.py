"""Async subprocess execution for ``brew`` and ``mas``.

Commands run through ``asyncio.create_subprocess_exec``. In streaming mode
output is echoed to the terminal as it arrives and also collected, so a
passthrough ``brew install`` looks exactly like running brew directly.

A binary that cannot be started is reported as exit code 127 rather than
an exception.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import sys
from typing import IO, Awaitable, Protocol, Sequence

from brewlock.brew.base import ExecutionResult

logger = logging.getLogger(__name__)

# Exit status used when the executable is missing or not runnable.
EXIT_NOT_RUNNABLE: int = 127

_CHUNK_SIZE: int = 4096


class CommandRunner(Protocol):
    """Callable signature shared by ``run_command`` and test doubles."""

    def __call__(
        self, argv: Sequence[str], *, stream: bool = False
    ) -> Awaitable[ExecutionResult]: ...


async def _pump(
    reader: asyncio.StreamReader,
    sink: IO[str] | None,
    chunks: list[str],
) -> None:
    """Copy a process stream into ``chunks``, echoing to ``sink``."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        data = await reader.read(_CHUNK_SIZE)
        text = decoder.decode(data, final=not data)
        if text:
            chunks.append(text)
            if sink is not None:
                sink.write(text)
                sink.flush()
        if not data:
            break


async def run_command(argv: Sequence[str], *, stream: bool = False) -> ExecutionResult:
    """Run an external command and collect its output.

    Args:
        argv: Program and arguments, e.g. ``["brew", "info", "git"]``.
        stream: Echo stdout/stderr live to this process's streams.

    Returns:
        The ``ExecutionResult``. Never raises for process-level failures.
    """
    logger.debug("Running %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        logger.warning("Cannot run %s: %s", argv[0], exc)
        return ExecutionResult(exit_code=EXIT_NOT_RUNNABLE, stderr=str(exc))

    if not stream:
        stdout, stderr = await proc.communicate()
        return ExecutionResult(
            exit_code=proc.returncode if proc.returncode is not None else 1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    out_chunks: list[str] = []
    err_chunks: list[str] = []
    assert proc.stdout is not None and proc.stderr is not None
    await asyncio.gather(
        _pump(proc.stdout, sys.stdout, out_chunks),
        _pump(proc.stderr, sys.stderr, err_chunks),
    )
    exit_code = await proc.wait()
    return ExecutionResult(
        exit_code=exit_code,
        stdout="".join(out_chunks),
        stderr="".join(err_chunks),
    )
