"""DealerHub Flask application.

Run locally with `flask --app dealerhub.app run`, or under gunicorn as
`gunicorn dealerhub.app:app`.
"""
import os

from flask import Flask, jsonify
from flask_compress import Compress
from werkzeug.exceptions import HTTPException

from dealerhub import __version__
from dealerhub.core.exceptions import DealerHubError
from dealerhub.core.utils.api_helpers import error_response
from dealerhub.core.utils.logging_config import setup_logging, get_logger
from dealerhub.database import is_schema_ready

logger = setup_logging(level=os.environ.get('LOG_LEVEL', 'INFO'))
app_logger = get_logger('dealerhub.app')

app = Flask(__name__)
app.json.sort_keys = False

# Vehicle listings are large JSON arrays; gzip/brotli them
compress = Compress()
compress.init_app(app)

# ============== Blueprint Registrations ==============

from dealerhub.inventory import inventory_bp  # noqa: E402
app.register_blueprint(inventory_bp)

from dealerhub.storage import storage_bp  # noqa: E402
app.register_blueprint(storage_bp)

app_logger.info(f'DealerHub startup complete, {len(app.url_map._rules)} routes registered')


# ============== Global Error Handlers ==============

@app.errorhandler(DealerHubError)
def handle_dealerhub_error(e):
    if e.status_code >= 500:
        app_logger.error(f'{type(e).__name__}: {e.message}')
    return error_response(e.message, e.status_code)


@app.errorhandler(HTTPException)
def handle_http_exception(e):
    return error_response(e.name, e.code)


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    app_logger.exception('Unhandled error in API route')
    return error_response(str(e) or 'Internal Server Error', 500)


# ============== Health ==============

@app.route('/health', methods=['GET'])
def health():
    return jsonify({
        'status': 'ok',
        'service': 'dealerhub-api',
        'version': __version__,
        'schema_ready': is_schema_ready(),
    })
