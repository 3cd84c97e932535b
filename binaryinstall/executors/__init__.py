#!/usr/bin/env python3
"""
Executor factory and package exports.
"""

from .base import BaseExecutor
from .local import LocalExecutor
from .ssh import SSHExecutor
from ..errors import ConfigurationError


def get_executor(config):
    """
    Factory function to create the executor for a run.

    Args:
        config: InstallationConfig

    Returns:
        SSHExecutor (mode 'ssh') or LocalExecutor (mode 'local')
    """
    if config.mode == 'ssh':
        return SSHExecutor(timeout=config.timeout, verbose=config.verbose)
    elif config.mode == 'local':
        return LocalExecutor(timeout=config.timeout, verbose=config.verbose)
    else:
        raise ConfigurationError(f"Unknown executor mode: {config.mode}")


__all__ = ['BaseExecutor', 'LocalExecutor', 'SSHExecutor', 'get_executor']
