# Request authentication

from .auth import BearerAuth, get_jwt_secret, require_user

__all__ = ["BearerAuth", "get_jwt_secret", "require_user"]
