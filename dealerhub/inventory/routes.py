"""Vehicle Records API: the back-office inventory endpoint.

One URL, dispatched on the HTTP method:

    GET     /api/vehicles-admin           list (newest first, max 1000)
    GET     /api/vehicles-admin?id=<id>   single vehicle or 404
    POST    /api/vehicles-admin           create or fully replace (upsert on id)
    DELETE  /api/vehicles-admin?id=<id>   delete, always 204

Authentication runs before method dispatch, so an unauthenticated PUT is a
401, not a 405.
"""
from flask import jsonify, request

from dealerhub.core.auth import authenticate_request, firebase_auth_required
from dealerhub.core.exceptions import MethodNotSupported, NotFoundError, ValidationError
from dealerhub.core.utils.api_helpers import get_query_id, no_content, parse_json_object

from . import inventory_bp
from .repositories import VehicleRepository
from .services.vehicle_payload import normalize_vehicle_payload, to_api_vehicle

_vehicle_repo = VehicleRepository()

ADMIN_PATH = '/api/vehicles-admin'

# Registered so that unsupported verbs still pass through authentication.
# OPTIONS is listed explicitly to switch off Flask's automatic handler.
ADMIN_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def _get_vehicles():
    vehicle_id = get_query_id()
    if vehicle_id:
        row = _vehicle_repo.get_by_id(vehicle_id)
        if row is None:
            raise NotFoundError()
        return jsonify({'vehicle': to_api_vehicle(row)})

    rows = _vehicle_repo.list_recent()
    return jsonify({'vehicles': [to_api_vehicle(r) for r in rows]})


def _upsert_vehicle():
    payload = parse_json_object()
    row = normalize_vehicle_payload(payload)
    stored = _vehicle_repo.upsert(row)
    return jsonify({'vehicle': to_api_vehicle(stored)})


def _delete_vehicle():
    vehicle_id = get_query_id()
    if not vehicle_id:
        raise ValidationError('Missing id')
    _vehicle_repo.delete(vehicle_id)
    return no_content()


_HANDLERS = {
    'GET': _get_vehicles,
    'POST': _upsert_vehicle,
    'DELETE': _delete_vehicle,
}


@inventory_bp.before_app_request
def _authenticate_unrouted_admin_methods():
    """Verbs the router rejects itself (TRACE, ...) still answer 401 before 405."""
    if request.routing_exception is not None and request.path == ADMIN_PATH:
        authenticate_request()


@inventory_bp.route(ADMIN_PATH, methods=ADMIN_METHODS, provide_automatic_options=False)
@firebase_auth_required
def api_vehicles_admin():
    handler = _HANDLERS.get(request.method)
    if handler is None:
        raise MethodNotSupported()
    return handler()
