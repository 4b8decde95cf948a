"""
Notification Delivery

Email delivery for assessment review notifications.

Provides:
- Provider abstraction (Resend, SendGrid, Null)
- Review notification composition

Usage:
    from notifications import EmailMessage, create_email_provider, dispatch

    provider = create_email_provider("resend", api_key)
    dispatch(provider, EmailMessage(
        from_email="ops@example.com",
        to=["reviewer@example.com"],
        subject="New submission",
        body_text="Ready for review",
    ))
"""

from .email_provider import (
    EmailProvider,
    EmailMessage,
    DeliveryResult,
    DeliveryStatus,
    DispatchError,
    NullEmailProvider,
    create_email_provider,
    dispatch,
)

from .review_email import (
    ComposedEmail,
    ReviewContext,
    build_review_url,
    compose_review_notification,
)

__all__ = [
    # Core interfaces
    "EmailProvider",
    "EmailMessage",
    "DeliveryResult",
    "DeliveryStatus",
    "DispatchError",
    "NullEmailProvider",
    "create_email_provider",
    "dispatch",
    # Composition
    "ComposedEmail",
    "ReviewContext",
    "build_review_url",
    "compose_review_notification",
]
