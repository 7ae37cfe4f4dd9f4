"""DealerHub Inventory: vehicle records.

Authenticated back-office CRUD (/api/vehicles-admin) and the public
storefront listing (/api/vehicles-public) over the same vehicles table.
"""
from flask import Blueprint

inventory_bp = Blueprint('inventory', __name__)

from . import routes, public_routes  # noqa: E402, F401
