"""DealerHub Core Authentication Module.

Verifies Firebase ID tokens presented as bearer credentials.
"""
from .firebase import authenticate_request, firebase_auth_required, verify_token  # noqa: F401
