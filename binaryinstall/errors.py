#!/usr/bin/env python3
"""
Error types raised by binaryinstall.
"""


class BinaryInstallError(Exception):
    """Base exception for binaryinstall."""
    pass


class ConfigurationError(BinaryInstallError):
    """Raised when the installation config is invalid or incomplete."""
    pass


class NoUploadsConfigured(ConfigurationError):
    """Raised when an installation is requested without any uploads."""

    def __init__(self, message="no uploads configured"):
        super().__init__(message)


class InvalidArchiveName(BinaryInstallError):
    """Raised when an archive name does not follow <binary>_<platform>.tar.gz."""

    def __init__(self, path, reason="no binary name before the first underscore"):
        super().__init__(f"invalid archive name {path!r}: {reason}")
        self.path = path


class RemoteExecutionError(BinaryInstallError):
    """Raised when the composed script fails on the remote host."""

    def __init__(self, message, returncode=-1, output="", command=""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output
        self.command = command


class InstallationFailed(BinaryInstallError):
    """Raised when one or more uploads failed to install."""

    def __init__(self, failures):
        self.failures = list(failures)
        first = self.failures[0]
        message = f"failed to process upload '{first.source_path}': {first.error}"
        if len(self.failures) > 1:
            message += f" (and {len(self.failures) - 1} more failed)"
        super().__init__(message)

    @property
    def source_paths(self):
        return [f.source_path for f in self.failures]
