"""Public storefront listing: available vehicles only, no authentication."""
from flask import jsonify, request

from dealerhub.core.exceptions import MethodNotSupported, NotFoundError
from dealerhub.core.utils.api_helpers import get_query_id

from . import inventory_bp
from .repositories import VehicleRepository
from .services.vehicle_payload import to_public_vehicle

_vehicle_repo = VehicleRepository()


@inventory_bp.route('/api/vehicles-public', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
def api_vehicles_public():
    """GET ?id=<id> for one listed vehicle, or GET for the storefront (max 500)."""
    if request.method != 'GET':
        raise MethodNotSupported()

    vehicle_id = get_query_id()
    if vehicle_id:
        row = _vehicle_repo.get_public_by_id(vehicle_id)
        if row is None:
            raise NotFoundError()
        return jsonify({'vehicle': to_public_vehicle(row)})

    rows = _vehicle_repo.list_public()
    return jsonify({'vehicles': [to_public_vehicle(r) for r in rows]})
