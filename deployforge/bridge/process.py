"""External process invocation — pluggable runner for build and chain tools.

Defines the ``ProcessRunner`` Protocol that the build, publish and
verification stages depend on, plus the default ``SubprocessRunner``.
Tests substitute a fake runner; nothing else in the package imports
``subprocess`` directly.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# Shell conventions for an executable that cannot be found or cannot be run.
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


class ProcessResult(BaseModel):
    """Exit status and (when captured) output of a child process."""

    model_config = ConfigDict(frozen=True)

    command: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessTimeoutError(RuntimeError):
    """Raised when a child process outlives its timeout."""

    def __init__(self, command: Sequence[str], timeout: float) -> None:
        self.command = list(command)
        self.timeout = timeout
        super().__init__(
            f"{' '.join(redact_argv(self.command))} timed out after {timeout:g}s"
        )


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class ProcessRunner(Protocol):
    """Protocol for synchronous external-process backends."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env_overlay: Mapping[str, str] | None = None,
        capture_output: bool = False,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run *command* to completion and return its result.

        Raises ``ProcessTimeoutError`` if *timeout* expires.
        """
        ...


# ---------------------------------------------------------------------------
# Default implementation
# ---------------------------------------------------------------------------


class SubprocessRunner:
    """Runs commands with ``subprocess.run``.

    Standard streams are inherited unless *capture_output* is set, so the
    operator sees live tool output.  The child environment is the current
    environment with *env_overlay* applied on top.
    """

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env_overlay: Mapping[str, str] | None = None,
        capture_output: bool = False,
        timeout: float | None = None,
    ) -> ProcessResult:
        argv = [str(part) for part in command]
        env = {**os.environ, **(env_overlay or {})}
        logger.debug("exec: %s (cwd=%s)", " ".join(redact_argv(argv)), cwd or ".")

        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                env=env,
                capture_output=capture_output,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProcessTimeoutError(argv, timeout or 0.0) from exc
        except FileNotFoundError as exc:
            logger.error("Executable not found: %s", argv[0])
            return ProcessResult(
                command=argv, exit_code=COMMAND_NOT_FOUND, stderr=str(exc)
            )
        except OSError as exc:
            logger.error("Cannot run %s: %s", argv[0], exc)
            return ProcessResult(
                command=argv, exit_code=COMMAND_NOT_EXECUTABLE, stderr=str(exc)
            )

        return ProcessResult(
            command=argv,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def redact_argv(argv: Sequence[str]) -> list[str]:
    """Strip query strings from URL arguments, which commonly carry API keys."""
    return [arg.split("?", 1)[0] if "://" in arg else arg for arg in argv]
