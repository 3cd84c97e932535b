#!/usr/bin/env python3
"""
Binary name derivation from release archive names.
"""

import posixpath

from ..errors import InvalidArchiveName

ARCHIVE_SUFFIX = ".tar.gz"


def derive_binary_name(archive_path):
    """
    Derive the installable binary name from an archive path.

    Release archives are named <binary>_<platform...>.tar.gz, so
    "/tmp/service_Linux_x86_64.tar.gz" yields "service".
    """
    base = posixpath.basename(archive_path)
    if not base.endswith(ARCHIVE_SUFFIX):
        raise InvalidArchiveName(archive_path, f"expected <binary>_<platform>{ARCHIVE_SUFFIX}")

    name = base[:-len(ARCHIVE_SUFFIX)].split("_", 1)[0]
    if not name:
        raise InvalidArchiveName(archive_path)
    return name
