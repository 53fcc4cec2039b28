"""
External identity token verification.

The phone-OTP / e-mail provider (Firebase Auth) issues RS256 ID tokens
signed with keys published as a JWKS. A token is accepted only if its
signature, issuer, audience and expiry check out.
"""

from typing import Optional

import jwt

from shared.config import get_settings

from .exceptions import ExternalTokenError
from .models import ExternalIdentity


class FirebaseTokenVerifier:
    """IExternalTokenVerifier for Firebase Auth ID tokens."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        jwks_client: Optional[jwt.PyJWKClient] = None,
    ):
        settings = get_settings()
        self._project_id = project_id or settings.firebase_project_id
        self._jwks_client = jwks_client or jwt.PyJWKClient(settings.firebase_jwks_url)

    @property
    def issuer(self) -> str:
        return f"https://securetoken.google.com/{self._project_id}"

    def verify(self, token: str) -> ExternalIdentity:
        if not token:
            raise ExternalTokenError("Identity token required")
        if not self._project_id:
            raise ExternalTokenError("Identity provider not configured")

        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self._project_id,
                issuer=self.issuer,
            )
        except jwt.ExpiredSignatureError:
            raise ExternalTokenError("Identity token has expired")
        except jwt.PyJWKClientError as e:
            raise ExternalTokenError(f"Identity token signing key unavailable: {e}")
        except jwt.InvalidTokenError as e:
            raise ExternalTokenError(f"Invalid identity token: {e}")

        phone = claims.get("phone_number") or None
        # Only a provider-verified e-mail may stand in for the identity.
        email = claims.get("email") if claims.get("email_verified") else None
        if not phone and not email:
            raise ExternalTokenError("Identity token carries no verified phone or email")

        return ExternalIdentity(phone=phone, email=email, subject=claims.get("sub"))
