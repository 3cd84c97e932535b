"""
binaryinstall: install pre-built release archives on a remote host over SSH.
"""

__version__ = "0.2.0"

from .config.models import InstallationConfig, RemoteTarget, UploadSpec
from .errors import (
    BinaryInstallError, ConfigurationError, InstallationFailed,
    InvalidArchiveName, NoUploadsConfigured, RemoteExecutionError,
)
from .installation.orchestrator import InstallationOutcome, install

__all__ = [
    'install',
    'InstallationConfig',
    'InstallationOutcome',
    'RemoteTarget',
    'UploadSpec',
    'BinaryInstallError',
    'ConfigurationError',
    'InstallationFailed',
    'InvalidArchiveName',
    'NoUploadsConfigured',
    'RemoteExecutionError',
]
