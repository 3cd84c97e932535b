#!/usr/bin/env python3
"""
Config Validation
Validates installation config files for schema compliance and naming rules
"""

import json
from pathlib import Path

import jsonschema

from .models import DEFAULT_DESTINATION_DIR
from ..errors import ConfigurationError, InvalidArchiveName
from ..installation.naming import derive_binary_name
from ..installation.utils import build_installation_config, load_config

SCHEMA_FILE = Path(__file__).parent.parent / 'schemas' / 'install-config-schema.json'


def load_schema():
    with open(SCHEMA_FILE, 'r') as f:
        return json.load(f)


def validate_against_schema(data):
    """
    Validate config data against the JSON schema.
    Returns (is_valid, errors_list)
    """
    validator = jsonschema.Draft7Validator(load_schema())
    errors = []
    for e in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path))):
        error_path = ' -> '.join(str(p) for p in e.path) if e.path else 'root'
        errors.append(f"Schema validation failed at '{error_path}': {e.message}")
    return len(errors) == 0, errors


def check_uploads(data):
    """Apply naming rules to uploads. Returns list of errors."""
    errors = []
    seen = {}

    for upload in data.get('uploads') or []:
        path = upload.get('path', '')
        try:
            binary = derive_binary_name(path)
        except InvalidArchiveName as e:
            errors.append(str(e))
            continue

        # Two uploads installing the same binary into the same directory race each other
        key = (binary, upload.get('dest') or DEFAULT_DESTINATION_DIR)
        if key in seen:
            errors.append(
                f"Uploads '{seen[key]}' and '{path}' both install '{binary}' into {key[1]}"
            )
        else:
            seen[key] = path

    return errors


def validate_config_data(data):
    """
    Validate a loaded config dict.
    Uses JSON schema validation + naming rules + model validation.
    """
    if not data:
        return False, ["Config is empty"]

    # STEP 1: Validate against JSON schema
    is_valid, schema_errors = validate_against_schema(data)
    if not is_valid:
        return False, schema_errors

    # STEP 2: Naming rules
    errors = check_uploads(data)

    # STEP 3: Model validation (credentials, mode)
    try:
        build_installation_config(data).validate()
    except ConfigurationError as e:
        errors.append(str(e))

    return len(errors) == 0, errors


def validate_config_file(config_file):
    """Validate a single config file. Returns (is_valid, errors)."""
    if not Path(config_file).exists():
        return False, [f"File not found: {config_file}"]

    try:
        data = load_config(config_file)
    except ConfigurationError as e:
        return False, [str(e)]

    return validate_config_data(data)
