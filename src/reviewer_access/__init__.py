"""Reviewer access administration (custom auth claims)."""

from .claims import (
    ClaimUpdate,
    ReviewerClaimService,
    build_updated_claims,
    parse_boolean,
)

__all__ = [
    "ClaimUpdate",
    "ReviewerClaimService",
    "build_updated_claims",
    "parse_boolean",
]
