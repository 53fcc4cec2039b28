"""
Identity module.

Bridges an externally verified phone number or e-mail into a backend
session.

Public API:
- IBackendAuth: Interface onto the backend session service
- IExternalIdentityProvider / IExternalTokenVerifier: External provider seams
- ExternalIdentity, SyntheticCredential, LoginResult: Data models
- Identity exceptions: IdentityBridgeError, etc.
"""

from .interfaces import IBackendAuth, IExternalIdentityProvider, IExternalTokenVerifier
from .models import (
    BridgeResponse,
    ExternalIdentity,
    LoginResult,
    SyntheticCredential,
)
from .exceptions import (
    AccountExistsError,
    BackendAuthError,
    ExternalTokenError,
    IdentityBridgeError,
    InvalidCredentialsError,
    MissingIdentifierError,
)

__all__ = [
    # Interfaces
    "IBackendAuth",
    "IExternalIdentityProvider",
    "IExternalTokenVerifier",
    # Models
    "BridgeResponse",
    "ExternalIdentity",
    "LoginResult",
    "SyntheticCredential",
    # Exceptions
    "AccountExistsError",
    "BackendAuthError",
    "ExternalTokenError",
    "IdentityBridgeError",
    "InvalidCredentialsError",
    "MissingIdentifierError",
]
