"""Database schema initialization.

Idempotent DDL for the `vehicles` table and its secondary indexes.
Called by database.ensure_schema() on the first request a process serves.
"""

VEHICLES_TABLE = '''
    CREATE TABLE IF NOT EXISTS vehicles (
        id TEXT PRIMARY KEY,
        make TEXT NOT NULL,
        model TEXT NOT NULL,
        variant TEXT,
        year INTEGER,
        price NUMERIC,
        original_price NUMERIC,
        est_monthly_payment NUMERIC,
        mileage INTEGER,
        fuel_type TEXT,
        transmission TEXT,
        body_type TEXT,
        condition TEXT,
        drive TEXT,
        seats INTEGER,
        color TEXT,
        engine_size TEXT,
        description TEXT,
        images TEXT[] NOT NULL,
        features TEXT[] NOT NULL DEFAULT '{}',
        is_special_offer BOOLEAN,
        status TEXT NOT NULL DEFAULT 'draft',
        vin TEXT,
        engine_number TEXT,
        registration_number TEXT,
        stock_number TEXT NOT NULL,
        cost_price NUMERIC,
        reconditioning_cost NUMERIC,
        natis_number TEXT,
        previous_owner TEXT,
        key_number TEXT,
        supplier TEXT,
        purchase_date DATE,
        branch TEXT NOT NULL,
        service_history BOOLEAN,
        warranty_months INTEGER,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
'''

VEHICLES_INDEXES = (
    'CREATE INDEX IF NOT EXISTS vehicles_status_idx ON vehicles(status)',
    'CREATE INDEX IF NOT EXISTS vehicles_created_at_idx ON vehicles(created_at DESC)',
)


def create_schema(cursor):
    """Create the vehicles table and indexes.

    Args:
        cursor: Database cursor from get_cursor(conn)
    """
    cursor.execute(VEHICLES_TABLE)
    for statement in VEHICLES_INDEXES:
        cursor.execute(statement)
