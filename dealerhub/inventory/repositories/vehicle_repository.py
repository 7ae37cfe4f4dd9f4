"""Vehicle Repository: list/get/upsert/delete over the vehicles table."""
import logging

from dealerhub.core.base_repository import BaseRepository
from dealerhub.database import ensure_schema
from dealerhub.inventory.services.vehicle_payload import VEHICLE_COLUMNS

logger = logging.getLogger('dealerhub.inventory.repositories.vehicle')

ADMIN_LIST_LIMIT = 1000
PUBLIC_LIST_LIMIT = 500
PUBLIC_STATUS = 'available'

_MUTABLE_COLUMNS = tuple(c for c in VEHICLE_COLUMNS if c != 'id')

UPSERT_SQL = '''
    INSERT INTO vehicles ({columns})
    VALUES ({placeholders})
    ON CONFLICT (id) DO UPDATE SET
        {assignments},
        updated_at = now()
    RETURNING *
'''.format(
    columns=', '.join(VEHICLE_COLUMNS),
    placeholders=', '.join(['%s'] * len(VEHICLE_COLUMNS)),
    assignments=',\n        '.join(f'{c} = EXCLUDED.{c}' for c in _MUTABLE_COLUMNS),
)


class VehicleRepository(BaseRepository):
    """Every method ensures the schema exists before touching the table."""

    def list_recent(self, limit=ADMIN_LIST_LIMIT):
        ensure_schema()
        return self.query_all(
            'SELECT * FROM vehicles ORDER BY created_at DESC LIMIT %s',
            (limit,)
        )

    def get_by_id(self, vehicle_id):
        ensure_schema()
        return self.query_one('SELECT * FROM vehicles WHERE id = %s LIMIT 1', (vehicle_id,))

    def list_public(self, limit=PUBLIC_LIST_LIMIT):
        ensure_schema()
        return self.query_all(
            '''SELECT * FROM vehicles
               WHERE status = %s
               ORDER BY created_at DESC
               LIMIT %s''',
            (PUBLIC_STATUS, limit)
        )

    def get_public_by_id(self, vehicle_id):
        ensure_schema()
        return self.query_one(
            'SELECT * FROM vehicles WHERE id = %s AND status = %s LIMIT 1',
            (vehicle_id, PUBLIC_STATUS)
        )

    def upsert(self, row):
        """Insert or fully replace a vehicle keyed on id.

        Args:
            row: column -> value dict from normalize_vehicle_payload().

        Returns:
            The stored row; created_at is untouched on update.
        """
        ensure_schema()
        params = tuple(row[c] for c in VEHICLE_COLUMNS)
        result = self.execute(UPSERT_SQL, params, returning=True)
        logger.info('Vehicle upserted', extra={'context': {'vehicle_id': row['id'], 'status': row['status']}})
        return result

    def delete(self, vehicle_id):
        """Delete by id. Returns the number of rows removed (0 or 1)."""
        ensure_schema()
        deleted = self.execute('DELETE FROM vehicles WHERE id = %s', (vehicle_id,))
        logger.info('Vehicle deleted', extra={'context': {'vehicle_id': vehicle_id, 'rows': deleted}})
        return deleted
