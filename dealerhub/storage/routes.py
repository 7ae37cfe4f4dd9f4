"""Presigned upload/download endpoints."""
import logging

from flask import jsonify, request

from dealerhub.core.auth import firebase_auth_required
from dealerhub.core.exceptions import MethodNotSupported, ValidationError
from dealerhub.core.utils.api_helpers import parse_json_object

from . import storage_bp
from . import r2_client

logger = logging.getLogger('dealerhub.storage.routes')

_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']


def _string_field(data, name):
    value = data.get(name)
    return value if isinstance(value, str) else None


@storage_bp.route('/api/storage/sign-upload', methods=_METHODS)
def api_sign_upload():
    """Sign a PUT for a new object under pathPrefix.

    Body: {bucket: public|private, contentType, extension, pathPrefix}
    """
    if request.method != 'POST':
        raise MethodNotSupported()
    return _sign_upload()


@firebase_auth_required
def _sign_upload():
    data = parse_json_object()
    bucket = _string_field(data, 'bucket')
    content_type = _string_field(data, 'contentType')
    extension = _string_field(data, 'extension')
    prefix = _string_field(data, 'pathPrefix')

    if bucket not in r2_client.BUCKET_ENV:
        raise ValidationError('Invalid bucket')
    if not content_type:
        raise ValidationError('Invalid contentType')
    extension = r2_client.sanitize_extension(extension) if extension is not None else None
    if not extension:
        raise ValidationError('Invalid extension')
    prefix = r2_client.sanitize_prefix(prefix) if prefix is not None else None
    if not prefix:
        raise ValidationError('Invalid pathPrefix')

    key = r2_client.build_object_key(prefix, extension)
    url = r2_client.presign_upload(bucket, key, content_type)
    logger.info(f'Signed upload: bucket={bucket} key={key}')

    return jsonify({
        'url': url,
        'key': key,
        'method': 'PUT',
        'headers': {'Content-Type': content_type},
    })


@storage_bp.route('/api/storage/sign-download', methods=_METHODS)
def api_sign_download():
    """Sign a GET for an object in the private bucket. Body: {bucket: private, key}"""
    if request.method != 'POST':
        raise MethodNotSupported()
    return _sign_download()


@firebase_auth_required
def _sign_download():
    data = parse_json_object()
    if data.get('bucket') != 'private':
        raise ValidationError('Invalid bucket')
    key = _string_field(data, 'key')
    key = r2_client.sanitize_key(key) if key is not None else None
    if not key:
        raise ValidationError('Invalid key')

    url = r2_client.presign_download('private', key)
    return jsonify({'url': url})
