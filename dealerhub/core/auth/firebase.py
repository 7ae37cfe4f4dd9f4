"""Firebase bearer-token authentication.

The back-office signs in with the Firebase client SDK and sends the ID token
as `Authorization: Bearer <token>`. Any verified principal is accepted; no
role or custom-claim checks are made here.
"""
import logging
import threading
from functools import wraps

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from flask import g

from dealerhub.core.config import get_required_env, normalize_env_value, normalize_private_key
from dealerhub.core.exceptions import AuthError
from dealerhub.core.utils.api_helpers import get_bearer_token

logger = logging.getLogger('dealerhub.core.auth')

TOKEN_URI = 'https://oauth2.googleapis.com/token'

_app_lock = threading.Lock()


def build_service_account_info():
    """Service-account dict for credentials.Certificate, read from env."""
    return {
        'type': 'service_account',
        'project_id': normalize_env_value(get_required_env('FIREBASE_ADMIN_PROJECT_ID')),
        'client_email': normalize_env_value(get_required_env('FIREBASE_ADMIN_CLIENT_EMAIL')),
        'private_key': normalize_private_key(get_required_env('FIREBASE_ADMIN_PRIVATE_KEY')),
        'token_uri': TOKEN_URI,
    }


def get_firebase_app():
    """Return the default Firebase app, initializing it once per process."""
    with _app_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            info = build_service_account_info()
            app = firebase_admin.initialize_app(credentials.Certificate(info))
            logger.info(f'Firebase admin initialized for project {info["project_id"]}')
            return app


def verify_token(token):
    """Verify a Firebase ID token and return its decoded claims.

    Raises AuthError for missing, malformed, expired, revoked or disabled
    tokens. Configuration problems propagate as ConfigurationError.
    """
    if not token:
        raise AuthError()

    app = get_firebase_app()
    try:
        return firebase_auth.verify_id_token(token, app=app)
    except (firebase_auth.InvalidIdTokenError, firebase_auth.UserDisabledError, ValueError) as e:
        logger.warning('Rejected bearer token', extra={'context': {'reason': type(e).__name__}})
        raise AuthError()


def authenticate_request():
    """Verify the current request's bearer token and store its claims in g.firebase_user."""
    g.firebase_user = verify_token(get_bearer_token())
    return g.firebase_user


def firebase_auth_required(f):
    """Require a verified Firebase bearer token; claims land in g.firebase_user."""
    @wraps(f)
    def decorated(*args, **kwargs):
        authenticate_request()
        return f(*args, **kwargs)
    return decorated
