"""Async runner for external document tools (converter, merger).

Every invocation is time-bounded; a process that outlives its timeout is
killed and reported as a failure like any non-zero exit.
"""

import asyncio
import logging
from collections.abc import Sequence

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """External tool failed: missing binary, non-zero exit, or timeout."""

    def __init__(self, message: str, returncode: int | None = None, output: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output


async def run_tool(argv: Sequence[str], timeout_s: float) -> str:
    """Run ``argv`` and return its combined stdout/stderr.

    Raises:
        ToolError: If the binary cannot be started, exits non-zero, or
            does not finish within ``timeout_s`` seconds.
    """
    logger.debug("Running: %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as e:
        msg = f"{argv[0]}: {e}"
        raise ToolError(msg) from e

    try:
        raw, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout_s)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        msg = f"{argv[0]} timed out after {timeout_s:g}s"
        raise ToolError(msg) from None
    except asyncio.CancelledError:
        proc.kill()
        raise

    output = raw.decode("utf-8", errors="replace") if raw else ""
    if proc.returncode != 0:
        msg = f"{argv[0]} exited with status {proc.returncode}: {output.strip()}"
        raise ToolError(msg, returncode=proc.returncode, output=output)
    return output
