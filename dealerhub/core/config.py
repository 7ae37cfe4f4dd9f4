"""DealerHub configuration helpers.

Environment values arrive from dashboards and CI secrets in many shapes:
wrapped in quotes, pasted as a whole `psql '<url>'` command, or as an entire
service-account JSON blob. Each normalizer below handles one such input and
raises ConfigurationError when nothing usable is left.
"""
import os
import re
import json
import logging
from urllib.parse import urlsplit

from dealerhub.core.exceptions import ConfigurationError

logger = logging.getLogger('dealerhub.core.config')

_WRAPPING_QUOTES = ('"', "'", '`')
_POSTGRES_SCHEME = re.compile(r'postgres(ql)?://', re.IGNORECASE)
_POSTGRES_URL = re.compile(r'postgres(ql)?://[^\'"`\s]+', re.IGNORECASE)


def get_required_env(name):
    """Return a non-empty environment variable or raise ConfigurationError."""
    value = os.environ.get(name)
    if not value:
        raise ConfigurationError(f'Missing env: {name}')
    return value


def get_int_env(name, default):
    value = os.environ.get(name)
    if value in (None, ''):
        return default
    try:
        return int(normalize_env_value(value))
    except ValueError:
        raise ConfigurationError(f'Invalid {name}. Expected an integer, got {value!r}.')


def normalize_env_value(value):
    """Trim and strip one pair of wrapping quotes (", ' or `)."""
    trimmed = value.strip()
    if len(trimmed) >= 2:
        for quote in _WRAPPING_QUOTES:
            if trimmed.startswith(quote) and trimmed.endswith(quote):
                return trimmed[1:-1].strip()
    return trimmed


def normalize_private_key(value):
    """Normalize a service-account private key to real PEM text.

    Accepts the raw PEM (with literal ``\\n`` escapes) or the full
    service-account JSON, in which case ``private_key`` is extracted.
    """
    key = normalize_env_value(value)
    if key.startswith('{'):
        try:
            parsed = json.loads(key)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict) and isinstance(parsed.get('private_key'), str):
            key = parsed['private_key']

    key = key.replace('\\n', '\n').strip()
    if 'BEGIN PRIVATE KEY' not in key or 'END PRIVATE KEY' not in key:
        raise ConfigurationError(
            "Invalid FIREBASE_ADMIN_PRIVATE_KEY. Paste the full 'private_key' value "
            "from the Firebase service account JSON."
        )
    return key


def validate_db_connection_string(value):
    """Extract a postgres:// URL from a raw env value.

    Handles quoted values and `psql <url>` invocations copied from the Neon
    console. Raises ConfigurationError when no parseable URL remains.
    """
    raw = normalize_env_value(value)
    candidate = raw[len('psql '):].strip() if raw.lower().startswith('psql ') else raw

    match = _POSTGRES_SCHEME.search(candidate)
    if match:
        extracted = candidate[match.start():].strip().strip('\'"`')
        extracted = extracted.split()[0] if extracted else extracted
    else:
        extracted = candidate

    url_match = _POSTGRES_URL.search(extracted)
    url = url_match.group(0) if url_match else extracted

    if not _POSTGRES_SCHEME.match(url):
        starts_with_psql = raw.lower().startswith('psql ')
        contains_postgres = bool(_POSTGRES_SCHEME.search(raw))
        raise ConfigurationError(
            'Invalid NEON_DATABASE_URL. Expected a postgres:// connection string. '
            f'startsWithPsql={str(starts_with_psql).lower()}, '
            f'containsPostgres={str(contains_postgres).lower()}'
        )

    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        raise ConfigurationError('Invalid NEON_DATABASE_URL. Unable to parse connection string.')
    if not hostname:
        raise ConfigurationError('Invalid NEON_DATABASE_URL. Missing hostname.')
    if hostname.lower() == 'base':
        raise ConfigurationError("Invalid NEON_DATABASE_URL. Hostname is 'base'.")
    return url


def get_database_url():
    """Connection string from NEON_DATABASE_URL, falling back to DATABASE_URL."""
    raw = os.environ.get('NEON_DATABASE_URL') or os.environ.get('DATABASE_URL')
    if not raw:
        raise ConfigurationError('Missing env: NEON_DATABASE_URL')
    return validate_db_connection_string(raw)


def is_local_database(url):
    hostname = (urlsplit(url).hostname or '').lower()
    return hostname in ('localhost', '127.0.0.1')
