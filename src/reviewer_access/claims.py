"""
Reviewer Access Claims

Grants or revokes the ``reviewer`` (and optionally ``admin``) custom claim
on a Firebase Auth user. The reviewer UI reads these claims from the ID
token; the user must refresh their token before a change takes effect.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimUpdate:
    """Claims written for one user."""
    uid: str
    email: Optional[str]
    claims: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"uid": self.uid, "email": self.email, "claims": dict(self.claims)}


def parse_boolean(value: Optional[str], default: Optional[bool]) -> Optional[bool]:
    """
    Parse a ``true``/``false`` flag value.

    Raises:
        ValueError: For anything other than true/false
    """
    if value is None:
        return default
    normalized = str(value).strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValueError(f"Invalid boolean value: {value}. Use true or false.")


def build_updated_claims(
    existing: Optional[Mapping[str, Any]],
    reviewer: bool,
    admin: Optional[bool] = None,
) -> Dict[str, Any]:
    """Keep existing claims, set ``reviewer``, and set ``admin`` only if given."""
    claims = dict(existing or {})
    claims["reviewer"] = reviewer
    if admin is not None:
        claims["admin"] = admin
    return claims


class ReviewerClaimService:
    """Applies reviewer claims through a Firebase Auth client."""

    def __init__(self, auth: Any = None):
        """
        Args:
            auth: ``firebase_admin.auth`` module or a compatible object
        """
        if auth is None:
            from firebase_admin import auth as firebase_auth
            auth = firebase_auth
        self.auth = auth

    def set_reviewer_claim(
        self,
        uid: Optional[str] = None,
        email: Optional[str] = None,
        reviewer: bool = True,
        admin: Optional[bool] = None,
    ) -> ClaimUpdate:
        """
        Set the reviewer claim on one user.

        Args:
            uid: Firebase user id
            email: User email (alternative to uid)
            reviewer: Reviewer flag value
            admin: Admin flag value; left untouched when None

        Returns:
            ClaimUpdate with the claims now on the user

        Raises:
            ValueError: Neither or both of uid/email given
        """
        if not uid and not email:
            raise ValueError("You must provide either uid or email.")
        if uid and email:
            raise ValueError("Provide only one of uid or email, not both.")

        user = self.auth.get_user(uid) if uid else self.auth.get_user_by_email(email)
        claims = build_updated_claims(user.custom_claims, reviewer, admin)
        self.auth.set_custom_user_claims(user.uid, claims)

        logger.info(
            f"Updated custom claims for {user.uid}",
            extra={'extra_data': {'reviewer': reviewer, 'admin': admin}},
        )
        return ClaimUpdate(uid=user.uid, email=user.email, claims=claims)
