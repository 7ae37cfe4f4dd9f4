"""DealerHub Storage: presigned URLs for vehicle media and private documents.

Uploads go straight from the browser to the R2 bucket; the API only signs.
"""
from flask import Blueprint

storage_bp = Blueprint('storage', __name__)

from . import routes  # noqa: E402, F401
