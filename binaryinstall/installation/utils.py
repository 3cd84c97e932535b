#!/usr/bin/env python3
"""
Installation utilities - config file loading and config building.
"""

import os
from pathlib import Path

import yaml

from ..config.models import (
    DEFAULT_BACKUP_DIR, DEFAULT_DESTINATION_DIR, DEFAULT_OWNER,
    DEFAULT_PERMISSION, DEFAULT_SSH_USER,
    InstallationConfig, RemoteTarget, UploadSpec,
)
from ..errors import ConfigurationError


def load_yaml(file_path):
    with open(file_path, 'r') as f:
        return yaml.safe_load(f)


def deep_merge(base, override):
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def local_override_path(config_path):
    """install-config.yaml -> install-config.local.yaml"""
    path = Path(config_path)
    return path.with_name(f"{path.stem}.local{path.suffix}")


def load_config(config_path):
    """
    Load an installation config file with optional local overrides.
    - Default: the given YAML file
    - INSTALL_ENV=local: merges <name>.local.yaml overrides from the same directory
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        base_config = load_yaml(path) or {}
        if not isinstance(base_config, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")

        env = os.environ.get('INSTALL_ENV', '').strip()
        if env == 'local':
            override_path = local_override_path(path)
            if override_path.exists():
                override_config = load_yaml(override_path) or {}
                return deep_merge(base_config, override_config)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"YAML syntax error in {config_path}: {e}") from e

    return base_config


def resolve_ssh_key_path(remote):
    """
    Resolve the SSH key path from the remote section.
    ssh_key_path wins; otherwise ssh_key_env names an environment variable holding the path.
    """
    key_path = remote.get('ssh_key_path')
    if key_path:
        return os.path.expanduser(key_path)

    key_env = remote.get('ssh_key_env')
    if key_env:
        key_path = os.environ.get(key_env)
        if not key_path:
            raise ConfigurationError(f"SSH key not found: environment variable {key_env} is not set")
        return os.path.expanduser(key_path)

    return ''


def upload_from_dict(entry):
    return UploadSpec(
        path=entry.get('path', ''),
        destination_dir=entry.get('dest') or DEFAULT_DESTINATION_DIR,
        owner=entry.get('owner') or DEFAULT_OWNER,
        permission=str(entry.get('perm') or DEFAULT_PERMISSION),
        bind_low_ports=bool(entry.get('bind_low_ports', False)),
    )


def build_installation_config(data):
    """Turn a loaded (and schema-validated) config dict into an InstallationConfig."""
    remote = data.get('remote') or {}

    target = RemoteTarget(
        host=remote.get('host', ''),
        ssh_user=remote.get('ssh_user') or DEFAULT_SSH_USER,
        ssh_key_path=resolve_ssh_key_path(remote),
        port=int(remote.get('port', 22)),
        strict_host_key_checking=bool(remote.get('strict_host_key_checking', True)),
    )

    return InstallationConfig(
        target=target,
        uploads=[upload_from_dict(u) for u in data.get('uploads') or []],
        backup_dir=data.get('backup_dir') or DEFAULT_BACKUP_DIR,
        verbose=bool(data.get('verbose', False)),
        mode=data.get('mode', 'ssh'),
        timeout=data.get('timeout'),
        use_sudo=bool(data.get('use_sudo', True)),
        temp_root=data.get('temp_root') or '/tmp',
    )
