"""Shared API utilities: response helpers and request parsing."""
import json

from flask import jsonify, request

from dealerhub.core.exceptions import ValidationError


# ============== Responses ==============

def error_response(message, status_code=400):
    """Uniform error body: {'success': False, 'error': message}."""
    return jsonify({'success': False, 'error': message}), status_code


def no_content():
    return '', 204


# ============== Request Parsing ==============

def get_bearer_token():
    """Extract the token from an `Authorization: Bearer <token>` header.

    Returns None when the header is missing, uses another scheme, or the
    token part is empty.
    """
    header = request.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return None
    token = header[len('Bearer '):].strip()
    return token or None


def get_query_id():
    """The trimmed `id` query parameter, or None when absent or blank."""
    value = request.args.get('id', '')
    value = value.strip()
    return value or None


def parse_json_object():
    """Parse the raw request body as a JSON object.

    Content-Type is not required; clients post with whatever fetch() sends.
    Raises ValidationError('Invalid JSON') for an empty body, unparseable
    text, or a JSON value that is not an object.
    """
    raw = request.get_data(cache=True, as_text=True)
    if not raw:
        raise ValidationError('Invalid JSON')
    try:
        data = json.loads(raw)
    except ValueError:
        raise ValidationError('Invalid JSON')
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON')
    return data
