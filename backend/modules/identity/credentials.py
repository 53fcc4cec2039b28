"""
Synthetic credential derivation.

The backend session service and the external identity provider are kept in
lock-step without a join table: every external identifier maps, through a
pure function, to one backend sign-in address and secret.

Normalization rules:
- phone: digits only with country code, address "phone_<digits>@<domain>"
- email: trimmed and lower-cased, address "email_<sha256[:32]>@<domain>"

The "phone_" and "email_" prefixes keep the two namespaces apart. The
secret is HMAC-SHA256 over "<kind>:<identifier>" keyed by the bridge secret,
so it is never stored and cannot be guessed from the identifier alone.
"""

import hashlib
import hmac

from shared.identifiers import normalize_email, normalize_phone_digits

from .exceptions import MissingIdentifierError
from .models import ExternalIdentity, SyntheticCredential


def derive_credential(
    identity: ExternalIdentity,
    domain: str,
    secret_key: str,
    country_code: str = "92",
) -> SyntheticCredential:
    """
    Derive the backend credential for an external identity.

    Phone takes precedence when the identity carries both.

    Raises:
        MissingIdentifierError: If neither identifier normalizes to a value
        RuntimeError: If no bridge secret is configured
    """
    if not secret_key:
        raise RuntimeError(
            "Identity bridge configuration missing. "
            "Set IDENTITY_BRIDGE_SECRET environment variable."
        )

    if identity.phone and normalize_phone_digits(identity.phone, country_code):
        kind = "phone"
        identifier = normalize_phone_digits(identity.phone, country_code)
        local_part = f"phone_{identifier}"
    elif identity.email and normalize_email(identity.email):
        kind = "email"
        identifier = normalize_email(identity.email)
        local_part = "email_" + hashlib.sha256(identifier.encode()).hexdigest()[:32]
    else:
        raise MissingIdentifierError()

    password = hmac.new(
        secret_key.encode(),
        f"{kind}:{identifier}".encode(),
        hashlib.sha256,
    ).hexdigest()

    return SyntheticCredential(
        kind=kind,
        identifier=identifier,
        email=f"{local_part}@{domain}",
        password=password,
    )
