#!/usr/bin/env python3
"""
Binary Installation Orchestrator
Installs pre-uploaded release archives on a remote host, one parallel task per upload
"""

import sys
import argparse
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Optional

from .naming import derive_binary_name
from .script import ScriptComposer, new_temp_dir
from .utils import build_installation_config, load_config
from ..config.models import (
    DEFAULT_BACKUP_DIR, DEFAULT_SSH_USER, EXECUTOR_MODES, parse_upload_spec,
)
from ..config.validation import validate_config_data, validate_config_file
from ..errors import (
    BinaryInstallError, ConfigurationError, InstallationFailed,
    InvalidArchiveName, NoUploadsConfigured, RemoteExecutionError,
)
from ..executors import get_executor


@dataclass
class InstallationOutcome:
    """Result of installing one upload."""

    source_path: str
    binary_name: Optional[str] = None
    error: Optional[BinaryInstallError] = None
    output: str = ""
    script: str = ""

    @property
    def is_success(self) -> bool:
        return self.error is None


def install_upload(config, upload, executor, composer):
    """Install a single upload with one remote call. Never raises for per-upload failures."""
    if config.verbose:
        print(f"Processing upload: {upload.path}")

    try:
        binary_name = derive_binary_name(upload.path)
    except InvalidArchiveName as e:
        if config.verbose:
            print(f"ERROR: {e}")
        return InstallationOutcome(source_path=upload.path, error=e)

    script = composer.compose(new_temp_dir(config.temp_root), upload, binary_name, config.backup_dir)

    try:
        output = executor.execute(config.target, script)
    except RemoteExecutionError as e:
        if config.verbose:
            print(f"# Install script for {upload.path}:\n{script}")
            print(f"ERROR: {upload.path} failed.\nOutput: {e.output}")
        return InstallationOutcome(
            source_path=upload.path, binary_name=binary_name,
            error=e, output=e.output, script=script,
        )

    if config.verbose:
        print(f"[OK] Installed {upload.path} (binary: {binary_name})")
    return InstallationOutcome(
        source_path=upload.path, binary_name=binary_name, output=output, script=script,
    )


def install(config, executor=None, composer=None):
    """
    Install every upload in config concurrently.

    Every upload runs to completion regardless of failures in the others.
    Returns the list of outcomes (in upload order) when all succeed, raises
    InstallationFailed naming each failed upload otherwise.

    Args:
        config: InstallationConfig
        executor: executor with execute(target, command) (defaults to get_executor(config))
        composer: ScriptComposer (defaults to one honouring config.use_sudo)
    """
    if not config.uploads:
        raise NoUploadsConfigured()
    config.validate()

    executor = executor or get_executor(config)
    composer = composer or ScriptComposer(use_sudo=config.use_sudo)

    if config.verbose:
        print(f"Installing {len(config.uploads)} upload(s) on {config.target.destination} ({config.mode.upper()})")

    with ThreadPoolExecutor(max_workers=len(config.uploads), thread_name_prefix='install') as pool:
        futures = [
            pool.submit(install_upload, config, upload, executor, composer)
            for upload in config.uploads
        ]
        wait(futures)

    outcomes = [future.result() for future in futures]
    failures = [outcome for outcome in outcomes if not outcome.is_success]
    if failures:
        raise InstallationFailed(failures)

    return outcomes


def render_scripts(config, composer=None):
    """Return (upload, script) pairs without executing anything."""
    composer = composer or ScriptComposer(use_sudo=config.use_sudo)
    rendered = []
    for upload in config.uploads:
        binary_name = derive_binary_name(upload.path)
        rendered.append((upload, composer.compose(new_temp_dir(config.temp_root), upload, binary_name, config.backup_dir)))
    return rendered


def apply_cli_overrides(data, args):
    """Merge command line flags over the (possibly empty) config file data."""
    data = dict(data)
    remote = dict(data.get('remote') or {})

    if args.remote:
        remote['host'] = args.remote
    if args.sshuser:
        remote['ssh_user'] = args.sshuser
    if args.sshkey:
        remote['ssh_key_path'] = args.sshkey
    if args.port:
        remote['port'] = args.port
    if args.no_strict_host_key_checking:
        remote['strict_host_key_checking'] = False
    if remote:
        remote.setdefault('ssh_user', DEFAULT_SSH_USER)
        data['remote'] = remote

    if args.upload:
        data['uploads'] = [
            {
                'path': u.path,
                'dest': u.destination_dir,
                'owner': u.owner,
                'perm': u.permission,
                'bind_low_ports': u.bind_low_ports,
            }
            for u in args.upload
        ]
    if args.backup:
        data['backup_dir'] = args.backup
    data.setdefault('backup_dir', DEFAULT_BACKUP_DIR)
    if args.mode:
        data['mode'] = args.mode
    if args.timeout is not None:
        data['timeout'] = args.timeout
    if args.no_sudo:
        data['use_sudo'] = False
    if args.verbose:
        data['verbose'] = True

    return data


def _upload_arg(value):
    try:
        return parse_upload_spec(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def _print_failure(error, verbose):
    print(f"ERROR: Installation failed: {error}", file=sys.stderr)
    for failure in getattr(error, 'failures', [])[1:]:
        print(f"  - {failure.source_path}: {failure.error}", file=sys.stderr)
    if not verbose:
        return
    for failure in getattr(error, 'failures', []):
        if failure.output:
            print(f"\n# Output for {failure.source_path}:\n{failure.output}", file=sys.stderr)


def validate_command(config_file):
    print(f"\n=== CONFIG VALIDATION ===")
    print(f"File: {config_file}\n")

    is_valid, errors = validate_config_file(config_file)
    if is_valid:
        print("[OK] Config is valid")
    else:
        print("[FAILED] Config validation failed")
        for error in errors:
            print(f"  - {error}")
    return 0 if is_valid else 1


def render_command(config):
    for upload, script in render_scripts(config):
        print(f"# {upload.describe()}")
        print(script)
    return 0


def install_command(config):
    if config.verbose:
        print(f"Starting installation on {config.target.host or 'localhost'}")

    outcomes = install(config)
    for outcome in outcomes:
        print(f"[OK] {outcome.binary_name} <- {outcome.source_path}")
    print(f"\n✓ Installed {len(outcomes)} binaries")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog='binaryinstall',
        description='Install pre-uploaded release archives on a remote host over SSH',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Install from flags
  binaryinstall install --remote ec2-1-2-3-4.compute-1.amazonaws.com --sshkey ~/.ssh/key.pem \\
      --upload path=/tmp/service_Linux_x86_64.tar.gz,dest=/usr/local/bin,owner=root,perm=0755,bindlowports=true

  # Install from a config file
  binaryinstall install --config config/install-config.yaml --verbose

  # Validate a config file / show the scripts that would run
  binaryinstall validate --config config/install-config.yaml
  binaryinstall render --config config/install-config.yaml
        """
    )
    parser.add_argument('command', nargs='?', default='install', choices=['install', 'validate', 'render'], help='Command (default: install)')
    parser.add_argument('--config', help='YAML config file')
    parser.add_argument('--remote', help='Remote host address')
    parser.add_argument('--sshuser', help=f'SSH user for remote host (default: {DEFAULT_SSH_USER})')
    parser.add_argument('--sshkey', help='Path to SSH private key')
    parser.add_argument('--port', type=int, help='SSH port (default: 22)')
    parser.add_argument('--no-strict-host-key-checking', action='store_true', help='Do not verify the remote host key')
    parser.add_argument('--upload', action='append', type=_upload_arg, metavar='SPEC',
                        help='Upload as "path=/x.tar.gz,dest=/usr/local/bin,owner=root,perm=0755,bindlowports=true" (repeatable)')
    parser.add_argument('--backup', help=f'Backup directory on remote (default: {DEFAULT_BACKUP_DIR})')
    parser.add_argument('--mode', choices=EXECUTOR_MODES, help='Executor mode (default: ssh)')
    parser.add_argument('--timeout', type=float, help='Hard timeout in seconds for each remote call')
    parser.add_argument('--no-sudo', action='store_true', help='Run chown/chmod/setcap without sudo')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose output')
    return parser


def main(argv=None):
    """Main entry point - parse command line and run the installation."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'validate':
        if not args.config:
            parser.error("validate requires --config argument")
        return validate_command(args.config)

    try:
        data = load_config(args.config) if args.config else {}
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    data = apply_cli_overrides(data, args)

    if not data.get('uploads'):
        parser.error("at least one --upload (or uploads in --config) is required")
    if data.get('mode', 'ssh') == 'ssh':
        remote = data.get('remote') or {}
        if not remote.get('host') or not (remote.get('ssh_key_path') or remote.get('ssh_key_env')):
            parser.error("--remote and --sshkey (or remote.host and remote.ssh_key_path in --config) are required")

    is_valid, errors = validate_config_data(data)
    if not is_valid:
        print("ERROR: Invalid configuration:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)
        return 1

    config = build_installation_config(data)
    try:
        if args.command == 'render':
            return render_command(config)
        return install_command(config)
    except BinaryInstallError as e:
        _print_failure(e, config.verbose)
        return 1


if __name__ == '__main__':
    sys.exit(main())
