"""Cloudflare R2 client and object-key sanitizers.

R2 speaks the S3 API, so boto3 is pointed at the account endpoint with
path-style addressing and the `auto` region.
"""
import re
import uuid

import boto3
from botocore.config import Config

from dealerhub.core.config import get_required_env

SIGNED_URL_TTL = 60

BUCKET_ENV = {
    'public': 'R2_PUBLIC_BUCKET',
    'private': 'R2_PRIVATE_BUCKET',
}

_EXTENSION_RE = re.compile(r'^[a-z0-9]+$')


def get_s3_client():
    account_id = get_required_env('R2_ACCOUNT_ID')
    return boto3.client(
        's3',
        region_name='auto',
        endpoint_url=f'https://{account_id}.r2.cloudflarestorage.com',
        aws_access_key_id=get_required_env('R2_ACCESS_KEY_ID'),
        aws_secret_access_key=get_required_env('R2_SECRET_ACCESS_KEY'),
        config=Config(signature_version='s3v4', s3={'addressing_style': 'path'}),
    )


def get_bucket_name(bucket):
    return get_required_env(BUCKET_ENV[bucket])


def sanitize_key(key):
    """Strip leading slashes; reject empty keys and `..` segments."""
    cleaned = key.strip().lstrip('/')
    if not cleaned or '..' in cleaned:
        return None
    return cleaned


def sanitize_prefix(prefix):
    cleaned = prefix.strip().strip('/')
    if not cleaned or '..' in cleaned:
        return None
    return cleaned


def sanitize_extension(extension):
    """'.JPG' -> 'jpg'. Only [a-z0-9]+ survives."""
    cleaned = extension.strip().lower().lstrip('.')
    if not cleaned or not _EXTENSION_RE.match(cleaned):
        return None
    return cleaned


def build_object_key(prefix, extension):
    return f'{prefix}/{uuid.uuid4()}.{extension}'


def presign_upload(bucket, key, content_type):
    return get_s3_client().generate_presigned_url(
        'put_object',
        Params={'Bucket': get_bucket_name(bucket), 'Key': key, 'ContentType': content_type},
        ExpiresIn=SIGNED_URL_TTL,
    )


def presign_download(bucket, key):
    return get_s3_client().generate_presigned_url(
        'get_object',
        Params={'Bucket': get_bucket_name(bucket), 'Key': key},
        ExpiresIn=SIGNED_URL_TTL,
    )
