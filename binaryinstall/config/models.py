#!/usr/bin/env python3
"""
Configuration model for a binary installation run.

RemoteTarget identifies the single host (and credentials) for a run.
UploadSpec describes one archive already present on that host.
InstallationConfig ties them together with the shared backup directory.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..errors import ConfigurationError, NoUploadsConfigured

DEFAULT_SSH_USER = "ec2-user"
DEFAULT_BACKUP_DIR = "/home/ec2-user/bin.old"
DEFAULT_DESTINATION_DIR = "/usr/local/bin"
DEFAULT_OWNER = "root"
DEFAULT_PERMISSION = "0755"

EXECUTOR_MODES = ("ssh", "local")

_TRUE_VALUES = ("true", "1", "yes")


@dataclass(frozen=True)
class RemoteTarget:
    host: str
    ssh_user: str = DEFAULT_SSH_USER
    ssh_key_path: str = ""
    port: int = 22
    strict_host_key_checking: bool = True

    @property
    def destination(self) -> str:
        return f"{self.ssh_user}@{self.host}"


@dataclass(frozen=True)
class UploadSpec:
    """One archive to install.

    ``path`` must already exist on the remote host. ``permission`` is handed
    to chmod as-is.
    """

    path: str
    destination_dir: str = DEFAULT_DESTINATION_DIR
    owner: str = DEFAULT_OWNER
    permission: str = DEFAULT_PERMISSION
    bind_low_ports: bool = False

    def describe(self) -> str:
        return (
            f"path={self.path},dest={self.destination_dir},owner={self.owner},"
            f"perm={self.permission},bindlowports={str(self.bind_low_ports).lower()}"
        )


@dataclass(frozen=True)
class InstallationConfig:
    """Everything needed to install a set of uploads on one host."""

    target: RemoteTarget
    uploads: tuple = field(default_factory=tuple)
    backup_dir: str = DEFAULT_BACKUP_DIR
    verbose: bool = False
    mode: str = "ssh"
    timeout: Optional[float] = None
    use_sudo: bool = True
    temp_root: str = "/tmp"

    def __post_init__(self):
        # Accept any iterable of uploads but keep the stored value immutable.
        object.__setattr__(self, "uploads", tuple(self.uploads))

    def validate(self):
        """Raise ConfigurationError if the config cannot be installed."""
        if not self.uploads:
            raise NoUploadsConfigured()

        if self.mode not in EXECUTOR_MODES:
            raise ConfigurationError(
                f"unknown mode {self.mode!r} (expected one of: {', '.join(EXECUTOR_MODES)})"
            )

        if self.mode == "ssh":
            missing = [
                name for name, value in (
                    ("host", self.target.host),
                    ("ssh_user", self.target.ssh_user),
                    ("ssh_key_path", self.target.ssh_key_path),
                )
                if not value
            ]
            if missing:
                raise ConfigurationError(f"missing required remote target fields: {', '.join(missing)}")

        if not self.backup_dir:
            raise ConfigurationError("backup_dir must not be empty")

        for index, upload in enumerate(self.uploads):
            if not upload.path:
                raise ConfigurationError(f"upload #{index + 1} has no source path")
            if not upload.destination_dir or not upload.owner or not upload.permission:
                raise ConfigurationError(
                    f"upload '{upload.path}' requires dest, owner and perm"
                )

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be a positive number of seconds")


def parse_upload_spec(value):
    """
    Parse an upload given as comma separated key=value pairs.

    Example: "path=/tmp/x_Linux_x86_64.tar.gz,dest=/usr/local/bin,owner=root,perm=0755,bindlowports=true"
    """
    fields = {}
    for part in value.split(","):
        if not part.strip():
            continue
        key, sep, val = part.partition("=")
        if not sep:
            raise ConfigurationError(f"invalid upload argument: {part!r}")
        key = key.strip().lower()
        val = val.strip()

        if key == "path":
            fields["path"] = val
        elif key == "dest":
            fields["destination_dir"] = val
        elif key == "owner":
            fields["owner"] = val
        elif key == "perm":
            fields["permission"] = val
        elif key == "bindlowports":
            fields["bind_low_ports"] = val.lower() in _TRUE_VALUES
        else:
            raise ConfigurationError(f"unknown field {key!r} in upload spec")

    if not fields.get("path"):
        raise ConfigurationError(f"upload spec {value!r} is missing path=")

    # Empty values fall back to the defaults
    for name in ("destination_dir", "owner", "permission"):
        if name in fields and not fields[name]:
            del fields[name]

    return UploadSpec(**fields)
