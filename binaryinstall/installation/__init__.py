"""
Installation package.

This package contains modules for deriving binary names, composing the
per-upload install script, and orchestrating parallel installation.
"""

__all__ = ['naming', 'script', 'orchestrator', 'utils']
