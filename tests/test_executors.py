"""Tests for the ssh and local executors.

subprocess.run is mocked for the ssh executor; the local executor runs bash.
"""

import shutil
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from binaryinstall.config.models import InstallationConfig, RemoteTarget
from binaryinstall.errors import ConfigurationError, RemoteExecutionError
from binaryinstall.executors import LocalExecutor, SSHExecutor, get_executor

needs_bash = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")


def _completed(stdout="", returncode=0):
    result = MagicMock()
    result.stdout = stdout
    result.returncode = returncode
    return result


class TestSSHCommand:
    def test_build_cmd(self):
        target = RemoteTarget(host="example.com", ssh_user="deploy", ssh_key_path="/keys/id.pem", port=2222)

        assert SSHExecutor().build_cmd(target, "echo hi") == [
            "ssh", "-i", "/keys/id.pem", "-p", "2222", "-o", "BatchMode=yes",
            "deploy@example.com", "echo hi",
        ]

    def test_build_cmd_without_host_key_checking(self):
        target = RemoteTarget(host="example.com", ssh_key_path="/keys/id.pem", strict_host_key_checking=False)
        cmd = SSHExecutor().build_cmd(target, "true")

        assert "StrictHostKeyChecking=no" in cmd
        assert "UserKnownHostsFile=/dev/null" in cmd
        assert cmd[-2:] == ["ec2-user@example.com", "true"]

    def test_build_cmd_requires_key(self):
        with pytest.raises(ConfigurationError):
            SSHExecutor().build_cmd(RemoteTarget(host="example.com"), "true")


class TestSSHExecute:
    @pytest.fixture
    def target(self):
        return RemoteTarget(host="example.com", ssh_key_path="/keys/id.pem")

    def test_returns_combined_output(self, target):
        with patch("binaryinstall.executors.base.subprocess.run", return_value=_completed("done\n")) as run:
            output = SSHExecutor(timeout=30).execute(target, "set -e\ntrue\n")

        assert output == "done\n"
        args, kwargs = run.call_args
        assert args[0][-1] == "set -e\ntrue\n"
        assert kwargs["stderr"] == subprocess.STDOUT
        assert kwargs["timeout"] == 30

    def test_single_attempt_on_failure(self, target):
        with patch("binaryinstall.executors.base.subprocess.run",
                   return_value=_completed("test: missing\n", returncode=1)) as run:
            with pytest.raises(RemoteExecutionError) as exc:
                SSHExecutor().execute(target, "test -f /nope")

        assert run.call_count == 1
        assert exc.value.returncode == 1
        assert exc.value.output == "test: missing\n"
        assert exc.value.command == "test -f /nope"
        assert "exit 1" in str(exc.value)

    def test_run_does_not_raise_on_exit_code(self, target):
        with patch("binaryinstall.executors.base.subprocess.run", return_value=_completed("x", returncode=3)):
            assert SSHExecutor().run(target, "exit 3") == ("x", 3)

    def test_timeout(self, target):
        expired = subprocess.TimeoutExpired(cmd=["ssh"], timeout=5, output=b"partial output")
        with patch("binaryinstall.executors.base.subprocess.run", side_effect=expired):
            with pytest.raises(RemoteExecutionError) as exc:
                SSHExecutor(timeout=5).execute(target, "sleep 60")

        assert "timed out" in str(exc.value)
        assert exc.value.output == "partial output"

    def test_transport_missing(self, target):
        with patch("binaryinstall.executors.base.subprocess.run", side_effect=FileNotFoundError("ssh")):
            with pytest.raises(RemoteExecutionError, match="unable to start ssh"):
                SSHExecutor().execute(target, "true")

    def test_verbose(self, target, capsys):
        with patch("binaryinstall.executors.base.subprocess.run", return_value=_completed("hello")):
            SSHExecutor(verbose=True).execute(target, "echo hello")

        out = capsys.readouterr().out
        assert "Running command on ec2-user@example.com" in out
        assert "Output: hello" in out


@needs_bash
class TestLocalExecutor:
    def test_executes_script(self):
        assert LocalExecutor().execute(None, "echo hello") == "hello\n"

    def test_merges_stderr(self):
        output = LocalExecutor().execute(None, "echo out; echo err >&2")
        assert "out" in output
        assert "err" in output

    def test_stops_at_first_failure(self):
        with pytest.raises(RemoteExecutionError) as exc:
            LocalExecutor().execute(None, "set -e\necho first\nfalse\necho never\n")

        assert exc.value.returncode == 1
        assert "first" in exc.value.output
        assert "never" not in exc.value.output


class TestGetExecutor:
    def test_modes(self):
        target = RemoteTarget(host="example.com", ssh_key_path="/k")

        ssh = get_executor(InstallationConfig(target=target, timeout=12, verbose=True))
        local = get_executor(InstallationConfig(target=target, mode="local"))

        assert isinstance(ssh, SSHExecutor)
        assert ssh.timeout == 12
        assert ssh.verbose
        assert isinstance(local, LocalExecutor)

    def test_unknown_mode(self):
        with pytest.raises(ConfigurationError):
            get_executor(InstallationConfig(target=RemoteTarget(host="h"), mode="winrm"))
