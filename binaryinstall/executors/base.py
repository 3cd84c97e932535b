#!/usr/bin/env python3
"""
Base executor interface for running installation scripts.
"""

import subprocess

from ..errors import RemoteExecutionError


class BaseExecutor:
    """
    Runs one composed script as a single unit of work.

    A single attempt per call: no retries. Output is passed through for
    diagnostics and never interpreted.
    """

    def __init__(self, timeout=None, verbose=False):
        self.timeout = timeout
        self.verbose = verbose

    def build_cmd(self, target, command):
        """Return the argv that runs `command` against `target`."""
        raise NotImplementedError("Subclasses must implement build_cmd()")

    def run(self, target, command):
        """Execute command and return (output, returncode) with stderr merged into output."""
        argv = self.build_cmd(target, command)
        try:
            result = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise RemoteExecutionError(
                f"command timed out after {self.timeout}s",
                output=_decode(e.output),
                command=command,
            ) from e
        except OSError as e:
            raise RemoteExecutionError(f"unable to start {argv[0]}: {e}", command=command) from e

        return result.stdout, result.returncode

    def execute(self, target, command):
        """Execute command and raise RemoteExecutionError if it fails."""
        output, returncode = self.run(target, command)

        if returncode != 0:
            raise RemoteExecutionError(
                f"command failed (exit {returncode}): {output.strip()}",
                returncode=returncode,
                output=output,
                command=command,
            )

        return output


def _decode(output):
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output
