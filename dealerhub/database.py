"""DealerHub database module.

Process-wide PostgreSQL connection pool and the lazily bootstrapped
`vehicles` schema. Both are created on first use and shared by every
request a warm worker serves.
"""
import logging
import threading
from contextlib import contextmanager
from decimal import Decimal

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

from dealerhub.core.config import get_database_url, get_int_env, is_local_database

logger = logging.getLogger('dealerhub.database')

_connection_pool = None
_pool_lock = threading.Lock()

_schema_ready = False
_schema_lock = threading.Lock()


def _get_pool():
    """Get or create the connection pool (lazy initialization, thread-safe)."""
    global _connection_pool
    if _connection_pool is None:
        with _pool_lock:
            if _connection_pool is None:
                dsn = get_database_url()
                min_conn = get_int_env('DB_POOL_MIN_CONN', 1)
                max_conn = get_int_env('DB_POOL_MAX_CONN', 5)
                statement_timeout = get_int_env('DB_STATEMENT_TIMEOUT_MS', 15000)
                options = {
                    'connect_timeout': get_int_env('DB_CONNECT_TIMEOUT', 8),
                    'options': f'-c statement_timeout={statement_timeout}',
                    'keepalives': 1,
                    'keepalives_idle': 30,
                }
                # Managed Postgres only accepts TLS; local containers usually have none
                if not is_local_database(dsn):
                    options['sslmode'] = 'require'
                _connection_pool = pool.ThreadedConnectionPool(
                    minconn=min_conn,
                    maxconn=max_conn,
                    dsn=dsn,
                    **options,
                )
                logger.info(f'Connection pool created: min={min_conn}, max={max_conn}')
    return _connection_pool


def get_db():
    """Get a healthy connection from the pool.

    Stale connections (closed by the server while idle) are discarded and
    replaced, up to 3 attempts.
    """
    max_retries = 3
    last_error = None

    for attempt in range(max_retries):
        conn = _get_pool().getconn()
        try:
            with conn.cursor() as cur:
                cur.execute('SELECT 1')
            conn.rollback()
            conn.autocommit = True
            return conn
        except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
            last_error = e
            logger.warning(f'Stale connection discarded (attempt {attempt + 1}/{max_retries}): {e}')
            _get_pool().putconn(conn, close=True)

    raise psycopg2.OperationalError(f'Failed to get valid connection after {max_retries} attempts: {last_error}')


def release_db(conn):
    """Return a connection to the pool, closing it if it is broken."""
    if conn is None or _connection_pool is None:
        return
    if conn.closed:
        _connection_pool.putconn(conn, close=True)
        return
    conn.autocommit = False
    _connection_pool.putconn(conn)


@contextmanager
def get_db_connection():
    """Context manager for database connections - auto-releases to pool."""
    conn = get_db()
    try:
        yield conn
    finally:
        release_db(conn)


def get_cursor(conn):
    """Get cursor with dict row factory."""
    return conn.cursor(cursor_factory=RealDictCursor)


def _json_number(value):
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def dict_from_row(row):
    """Convert a database row to a JSON-ready dict.

    - date/datetime values become ISO-8601 strings
    - NUMERIC values (Decimal) become int when integral, float otherwise
    """
    if row is None:
        return None
    result = dict(row)
    for key, value in result.items():
        if isinstance(value, Decimal):
            result[key] = _json_number(value)
        elif hasattr(value, 'isoformat'):
            result[key] = value.isoformat()
    return result


def ensure_schema():
    """Create the vehicles table and indexes once per process.

    Concurrent first callers block on the lock and return once the single
    bootstrap has finished. A failed bootstrap leaves the flag unset so the
    next request tries again.
    """
    global _schema_ready
    if _schema_ready:
        return

    with _schema_lock:
        if _schema_ready:
            return

        from dealerhub.migrations.init_schema import create_schema

        conn = get_db()
        try:
            create_schema(get_cursor(conn))
            conn.commit()
        finally:
            release_db(conn)
        _schema_ready = True
        logger.info('Vehicle schema ensured')


def is_schema_ready():
    return _schema_ready
