# anandayojan/utils/__init__.py
from .auth import (
    oauth2_scheme,
    verify_password,
    get_password_hash,
    create_access_token,
    issue_access_token,
    get_current_user,
    require_admin
)

__all__ = [
    "oauth2_scheme",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "issue_access_token",
    "get_current_user",
    "require_admin"
]
