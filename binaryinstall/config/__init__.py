"""
Configuration model and validation package.

This package contains the installation config model and the JSON schema
validation of YAML config files.
"""

from .models import InstallationConfig, RemoteTarget, UploadSpec, parse_upload_spec

__all__ = ['InstallationConfig', 'RemoteTarget', 'UploadSpec', 'parse_upload_spec', 'models', 'validation']
