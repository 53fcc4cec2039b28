"""
Access module exceptions.
"""

from shared.exceptions import NotFoundError


class UnknownRouteError(NotFoundError):
    """Raised when a path has no access policy."""

    def __init__(self, path: str):
        super().__init__(
            f"No access policy for route: {path}",
            code="UNKNOWN_ROUTE",
            details={"path": path},
        )
