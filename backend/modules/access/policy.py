"""
Route access policy: which roles may open which routes.
"""

from typing import Optional

from shared.config import get_settings
from modules.roles.models import Role

from .exceptions import UnknownRouteError


class RoutePolicy:
    """
    Maps route prefixes to allowed roles.

    The longest configured prefix wins, so "/admin-dashboard/riders" falls
    under "/admin-dashboard".
    """

    def __init__(self, policies: Optional[dict[str, list[str]]] = None):
        policies = policies if policies is not None else get_settings().route_policies
        self._policies = {
            self._clean(path): frozenset(Role(role) for role in roles)
            for path, roles in policies.items()
        }

    @staticmethod
    def _clean(path: str) -> str:
        return "/" + path.strip().strip("/")

    def allowed_roles(self, path: str) -> frozenset[Role]:
        """
        Raises:
            UnknownRouteError: If no configured prefix covers the path
        """
        cleaned = self._clean(path)
        best: Optional[str] = None
        for prefix in self._policies:
            covers = cleaned == prefix or cleaned.startswith(prefix.rstrip("/") + "/")
            if covers and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            raise UnknownRouteError(path)
        return self._policies[best]
