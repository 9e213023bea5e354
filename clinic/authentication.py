"""
Token authentication for the API.

Kept in its own module, apart from any view, so that DRF can import
the authentication classes named in ``REST_FRAMEWORK`` during start-up
without pulling in views and causing circular imports.  JWT bearer
tokens are handled by SimpleJWT's ``JWTAuthentication``, configured
next to this class in settings.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions


class TokenAuthentication(authentication.TokenAuthentication):
    """Legacy ``Authorization: Token <key>`` authentication.

    Deactivated accounts (staff who left, soft-deleted doctors) are
    rejected with a message that does not reveal whether the key exists.
    """

    keyword = 'Token'

    def authenticate_credentials(self, key):
        user, token = super().authenticate_credentials(key)
        if not getattr(user, 'is_active', False):
            raise exceptions.AuthenticationFailed('Invalid token.')
        return user, token
