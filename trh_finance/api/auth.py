"""
Authentication Module

Passcode plus allowed-user login for the admin endpoints.
"""

import hmac
import os
from pathlib import Path

import yaml
from fastapi import Depends, Header, HTTPException, status
from pydantic import BaseModel

from ..config import DEFAULT_CONFIG_DIR


class AdminUser(BaseModel):
    """Authenticated administrator."""

    name: str
    role: str
    permissions: list[str]


class LoginError(Exception):
    """Login rejected. Carries the message shown to the user."""

    def __init__(self, message: str, status_code: int = status.HTTP_401_UNAUTHORIZED):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthConfig:
    """Authentication configuration loaded from admin_acl.yaml."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize auth config.

        Args:
            config_dir: Path to configuration directory
        """
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.config_path = self.config_dir / "admin_acl.yaml"
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML."""
        if self.config_path.exists():
            with open(self.config_path) as f:
                self.config = yaml.safe_load(f) or {}
        else:
            # Default config for development
            self.config = {
                "passcode": "trhfin",
                "users": [
                    {"name": "Admin", "role": "admin"},
                    {"name": "Finance", "role": "finance"},
                ],
                "permissions": {
                    "admin": ["*"],
                    "finance": ["view", "approve", "disburse", "ledger", "audit"],
                    "viewer": ["view"],
                },
            }

        # Deployment passcode wins over the file
        self.passcode = str(os.getenv("ADMIN_PASSCODE") or self.config.get("passcode", ""))

    def get_user(self, name: str) -> AdminUser | None:
        """Find an allowed user by name (case-insensitive).

        Returns:
            AdminUser carrying the canonical name, or None
        """
        wanted = name.strip().lower()
        for user_data in self.config.get("users", []):
            canonical = str(user_data.get("name", ""))
            if canonical.lower() == wanted:
                role = user_data.get("role", "viewer")
                return AdminUser(
                    name=canonical,
                    role=role,
                    permissions=self.config.get("permissions", {}).get(role, ["view"]),
                )
        return None

    def login(self, username: str | None, passcode: str | None) -> AdminUser:
        """Check a login attempt. The passcode is checked before the user name.

        Raises:
            LoginError: With the message to show
        """
        if not self.passcode or not hmac.compare_digest(
            (passcode or "").encode("utf-8"), self.passcode.encode("utf-8")
        ):
            raise LoginError("Incorrect passcode. Try again.")

        if not (username or "").strip():
            raise LoginError("Please enter a username.")

        user = self.get_user(username)
        if user is None:
            raise LoginError("Login not authorised.", status.HTTP_403_FORBIDDEN)
        return user

    def has_permission(self, user: AdminUser, permission: str) -> bool:
        if "*" in user.permissions:
            return True
        return permission in user.permissions


# Global auth config instance
auth_config = AuthConfig(os.getenv("FINANCE_CONFIG_DIR") or None)


def get_auth_config() -> AuthConfig:
    return auth_config


async def get_current_user(
    x_admin_user: str | None = Header(None, alias="X-Admin-User"),
    x_admin_passcode: str | None = Header(None, alias="X-Admin-Passcode"),
    config: AuthConfig = Depends(get_auth_config),
) -> AdminUser:
    """Get the acting administrator from request headers.

    Raises:
        HTTPException: If authentication fails
    """
    # Development mode: allow any request
    if os.getenv("ENVIRONMENT", "development") == "development":
        if not x_admin_user and not x_admin_passcode:
            return AdminUser(name="Admin", role="admin", permissions=["*"])

    try:
        return config.login(x_admin_user, x_admin_passcode)
    except LoginError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e


def require_permission(permission: str):
    """Dependency factory for permission checks.

    Args:
        permission: Required permission

    Returns:
        Dependency function
    """
    async def check_permission(
        user: AdminUser = Depends(get_current_user),
        config: AuthConfig = Depends(get_auth_config),
    ) -> AdminUser:
        if not config.has_permission(user, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission '{permission}' required",
            )
        return user

    return check_permission


# Common permission dependencies
require_view = require_permission("view")
require_approve = require_permission("approve")
require_disburse = require_permission("disburse")
require_ledger = require_permission("ledger")
require_audit = require_permission("audit")
