"""Runs the external pack tool."""

import subprocess
import time
from typing import List, Optional, Sequence

import structlog
from prometheus_client import Counter, Histogram

from pack_platform.core.exceptions import InvocationError

logger = structlog.get_logger()

INVOCATION_COUNT = Counter(
    "pack_platform_tool_invocations_total",
    "Total pack tool invocations",
    ["verb", "outcome"],
)

INVOCATION_DURATION = Histogram(
    "pack_platform_tool_invocation_duration_seconds",
    "Pack tool invocation duration",
    ["verb"],
)


def _verb(args: Sequence[str]) -> str:
    if not args:
        return ""
    # `registry add` is the only two-word verb
    if args[0] == "registry" and len(args) > 1:
        return f"{args[0]} {args[1]}"
    return args[0]


class ToolInvoker:
    """Invokes the pack tool synchronously and returns its combined output.

    One process per call, no retries. Output is not interpreted here.
    """

    def __init__(self, binary: str = "nomad-pack", timeout: Optional[float] = None):
        self.binary = binary
        self.timeout = timeout

    def command(self, args: Sequence[str]) -> List[str]:
        return [self.binary, *args]

    def run(self, args: Sequence[str]) -> bytes:
        """Run `<binary> <args...>` and return stdout+stderr as bytes.

        Raises:
            InvocationError: on launch failure, timeout or non-zero exit. The
                error carries whatever output was captured.
        """
        cmd = self.command(args)
        verb = _verb(args)

        logger.debug("Invoking pack tool", binary=self.binary, args=list(args))
        start = time.perf_counter()
        try:
            completed = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout,
                check=False,
            )
        except OSError as e:
            INVOCATION_COUNT.labels(verb=verb, outcome="launch_error").inc()
            logger.error("Failed to launch pack tool", binary=self.binary, error=str(e))
            raise InvocationError(
                f"failed to launch {self.binary}: {e}", args=args
            ) from e
        except subprocess.TimeoutExpired as e:
            INVOCATION_COUNT.labels(verb=verb, outcome="timeout").inc()
            logger.error("Pack tool timed out", verb=verb, timeout=self.timeout)
            raise InvocationError(
                f"{self.binary} {verb} timed out after {self.timeout}s",
                args=args,
                output=e.output or b"",
            ) from e
        finally:
            INVOCATION_DURATION.labels(verb=verb).observe(time.perf_counter() - start)

        output = completed.stdout or b""
        if completed.returncode != 0:
            INVOCATION_COUNT.labels(verb=verb, outcome="failed").inc()
            logger.warning(
                "Pack tool exited non-zero",
                verb=verb,
                returncode=completed.returncode,
            )
            raise InvocationError(
                f"{self.binary} {verb} exited with status {completed.returncode}",
                args=args,
                returncode=completed.returncode,
                output=output,
            )

        INVOCATION_COUNT.labels(verb=verb, outcome="ok").inc()
        logger.debug("Pack tool finished", verb=verb, output_bytes=len(output))
        return output
