#!/usr/bin/env python3
"""
SSH executor: runs installation scripts on the remote host with the
system `ssh` client and a private key.
"""

from .base import BaseExecutor
from ..errors import ConfigurationError


class SSHExecutor(BaseExecutor):
    """SSH remote executor using key-based authentication."""

    def build_cmd(self, target, command):
        """Build ssh command list."""
        if not target.host or not target.ssh_user:
            raise ConfigurationError("SSH host and user are required")
        if not target.ssh_key_path:
            raise ConfigurationError(f"SSH key path not set for {target.destination}")

        cmd = [
            'ssh',
            '-i', target.ssh_key_path,
            '-p', str(target.port),
            '-o', 'BatchMode=yes',
        ]
        if not target.strict_host_key_checking:
            cmd += [
                '-o', 'StrictHostKeyChecking=no',
                '-o', 'UserKnownHostsFile=/dev/null',
            ]
        cmd += [target.destination, command]
        return cmd

    def run(self, target, command):
        if self.verbose:
            print(f"Running command on {target.destination} (port {target.port})")

        output, returncode = super().run(target, command)

        if self.verbose:
            status = "succeeded" if returncode == 0 else f"failed (exit {returncode})"
            print(f"Command on {target.destination} {status}.\nOutput: {output}")

        return output, returncode
