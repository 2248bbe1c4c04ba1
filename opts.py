# -*- coding: utf-8 -*-

# Small library for reading command line arguments and credential files

from payeer_api import Auth

import json
import sys

################################################################################
# Constants

# Default path to look for the API keyfile
DEFAULT_AUTH_FILE = 'payeer.cred'

# Accepted key names in the credential file, first match wins
API_ID_KEYS = ('api_id', 'id')
SECRET_KEY_KEYS = ('secret_key', 'key')

################################################################################
# Argument Processing

# Find the single `--name=value` flag for `prefix` and return its value (or None)
def find_option(args, prefix):
    flags = [s for s in args if s.lower().startswith(prefix)]

    if not flags:
        return None

    if len(flags) != 1:
        print(f'Error: Ambiguous \'{prefix[0:-1]}\' option!', file = sys.stderr)
        sys.exit(1)

    return flags[0][len(prefix):]

def read_string_option(args, prefix, opts = None, default = None, lowercase = True):
    value = find_option(args, prefix)

    if value is None:
        return default

    if lowercase:
        value = value.lower()

    if opts is not None and value not in opts:
        print(f'Error: Unrecognized selection for option \'{prefix[0:-1]}\': \'{value}\'!', file = sys.stderr)
        sys.exit(1)

    return value

def read_number_option(args, prefix, default = None, kind = float):
    value = find_option(args, prefix)

    if value is None:
        return default

    try:
        return kind(value)
    except ValueError:
        print(f'Error: Option \'{prefix[0:-1]}\' needs a number, got \'{value}\'!', file = sys.stderr)
        sys.exit(1)

################################################################################
# Credentials

def _first_key(creds, keys):
    for key in keys:
        if creds.get(key):
            return creds[key]

    return None

# Credential files are JSON: {"api_id": "...", "secret_key": "..."}
def load_auth(path):
    with open(path, 'rb') as file:
        creds = json.load(file)

    if not isinstance(creds, dict):
        raise ValueError(f'Credential file {path} does not hold a JSON object')

    api_id = _first_key(creds, API_ID_KEYS)
    secret_key = _first_key(creds, SECRET_KEY_KEYS)

    if not api_id or not secret_key:
        raise ValueError(f'Credential file {path} needs both "api_id" and "secret_key"')

    return Auth(str(api_id), str(secret_key))

def make_auth(args, prefix = '--auth-file=', verbose = False):
    path = find_option(args, prefix)

    if path is None:
        print(f'Warning: No auth file specified. Will default to looking at "{DEFAULT_AUTH_FILE}"...', file = sys.stderr)
        path = DEFAULT_AUTH_FILE

    if verbose:
        print(f'Info: Using auth file: {path}', file = sys.stderr)

    try:
        return load_auth(path)
    except (OSError, ValueError) as error:
        print(f'Error: Can\'t read credentials from "{path}": {error}', file = sys.stderr)
        sys.exit(1)
