#!/usr/bin/env python3
"""
Composes the one-shot shell script that installs a single upload.

The whole installation of one archive is sent as a single script under
`set -e`, so the remote shell stops at the first failing step and the ssh
call exits non-zero.
"""

import posixpath
import shlex
import time
import uuid

CAPABILITY = "cap_net_bind_service=+ep"


def new_temp_dir(temp_root="/tmp"):
    """Generate a temp directory path unique to one installation task."""
    return posixpath.join(temp_root, f"install-{time.time_ns()}-{uuid.uuid4().hex[:8]}")


class ScriptComposer:
    """Builds installation scripts. Holds no per-call state."""

    def __init__(self, use_sudo=True):
        self._sudo = "sudo " if use_sudo else ""

    @property
    def use_sudo(self):
        return bool(self._sudo)

    def steps(self, temp_dir, upload, binary_name, backup_dir):
        """Return the ordered (label, command) pairs for one upload."""
        q = shlex.quote
        staged = posixpath.join(temp_dir, binary_name)
        installed = posixpath.join(upload.destination_dir, binary_name)
        backup_dir_slash = backup_dir.rstrip("/") + "/"
        dest_dir_slash = upload.destination_dir.rstrip("/") + "/"

        steps = [
            ("create temp dir", f"mkdir -p {q(temp_dir)}"),
            ("extract archive", f"tar -xzf {q(upload.path)} -C {q(temp_dir)}"),
            # Nothing destructive may run before this check passes
            ("verify binary", f"test -f {q(staged)}"),
            ("create backup dir", f"mkdir -p {q(backup_dir)}"),
            ("backup existing binary",
             f"if [ -f {q(installed)} ]; then mv -f {q(installed)} {q(backup_dir_slash)}; fi"),
            ("copy binary", f"cp {q(staged)} {q(dest_dir_slash)}"),
            ("set ownership", f"{self._sudo}chown {q(upload.owner + ':' + upload.owner)} {q(installed)}"),
            ("set permissions", f"{self._sudo}chmod {q(upload.permission)} {q(installed)}"),
            ("remove temp dir", f"rm -rf {q(temp_dir)}"),
        ]
        if upload.bind_low_ports:
            steps.append(("grant low port binding", f"{self._sudo}setcap {CAPABILITY} {q(installed)}"))
        return steps

    def compose(self, temp_dir, upload, binary_name, backup_dir):
        """Render the full script for one upload."""
        lines = ["set -e"]
        lines.extend(command for _, command in self.steps(temp_dir, upload, binary_name, backup_dir))
        return "\n".join(lines) + "\n"
