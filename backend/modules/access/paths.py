"""
Route locations used by redirects.
"""

from typing import Optional
from pydantic import BaseModel

from shared.config import Settings, get_settings
from modules.roles.models import Role


class RoutePaths(BaseModel):
    """Where the gate and the login flow send people."""

    model_config = {"frozen": True}

    login: str = "/login"
    account_status: str = "/account-status"
    admin_home: str = "/admin-dashboard"
    rider_home: str = "/rider-dashboard"
    customer_home: str = "/home"

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RoutePaths":
        settings = settings or get_settings()
        return cls(
            login=settings.login_path,
            account_status=settings.account_status_path,
            admin_home=settings.admin_home_path,
            rider_home=settings.rider_home_path,
            customer_home=settings.customer_home_path,
        )

    def home_for(self, role: Role) -> str:
        """Dashboard for a role; business accounts land on the customer home."""
        if role is Role.ADMIN:
            return self.admin_home
        if role is Role.RIDER:
            return self.rider_home
        return self.customer_home
