#!/usr/bin/env python3
"""
Local executor for installation scripts (mock mode).
"""

from .base import BaseExecutor


class LocalExecutor(BaseExecutor):
    """Runs the composed script with the local bash, ignoring the target host."""

    def build_cmd(self, target, command):
        return ['bash', '-c', command]

    def run(self, target, command):
        if self.verbose:
            print("Running command locally (LOCAL)")
        return super().run(target, command)
