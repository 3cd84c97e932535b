"""Executor stubs used across the test suite."""

import threading
import time

from binaryinstall.errors import RemoteExecutionError


class RecordingExecutor:
    """Records every script and fails the ones mentioning `fail_on`."""

    def __init__(self, fail_on=None, output="ok"):
        self.fail_on = fail_on
        self.output = output
        self.calls = []
        self._lock = threading.Lock()

    @property
    def scripts(self):
        return [command for _, command in self.calls]

    def execute(self, target, command):
        with self._lock:
            self.calls.append((target, command))
        if self.fail_on and self.fail_on in command:
            raise RemoteExecutionError(
                "command failed (exit 2): tar: Error opening archive",
                returncode=2,
                output="tar: Error opening archive",
                command=command,
            )
        return self.output


class BarrierExecutor(RecordingExecutor):
    """Blocks every call until `parties` calls are in flight at once."""

    def __init__(self, parties, delay=0.2):
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=5)
        self.delay = delay

    def execute(self, target, command):
        # BrokenBarrierError here means the calls were not concurrent
        self.barrier.wait()
        time.sleep(self.delay)
        return super().execute(target, command)
