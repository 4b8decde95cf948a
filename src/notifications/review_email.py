"""
Review Notification Composer

Builds the reviewer email for a completed assessment. Pure formatting:
the same submission and context always produce the same subject, text
and HTML.
"""

from dataclasses import dataclass
from html import escape

from submissions.models import SubmissionRecord

SUBJECT_TEMPLATE = "New Ops Assessment Submission: {user_id}"


@dataclass(frozen=True)
class ReviewContext:
    """Where the submission lives and where reviewers open it."""
    app_id: str
    submission_doc_id: str
    review_app_base_url: str


@dataclass(frozen=True)
class ComposedEmail:
    subject: str
    text: str
    html: str


def build_review_url(base_url: str) -> str:
    """Append ``review=1`` to the reviewer app URL."""
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}review=1"


def compose_review_notification(
    submission: SubmissionRecord,
    context: ReviewContext,
) -> ComposedEmail:
    """
    Compose the reviewer notification.

    Args:
        submission: Parsed submission document
        context: App id, document id and reviewer app URL

    Returns:
        ComposedEmail with subject, plain-text and HTML bodies
    """
    user_id = submission.display_user_id
    submission_id = submission.submission_id or context.submission_doc_id
    answered = submission.totals.answered
    total = submission.totals.questions
    completion_percent = submission.totals.completion_percent
    review_url = build_review_url(context.review_app_base_url)

    subject = SUBJECT_TEMPLATE.format(user_id=user_id)

    text = "\n".join([
        "A new operations assessment has been submitted for review.",
        "",
        f"App ID: {context.app_id}",
        f"Submission ID: {submission_id}",
        f"Submitter: {user_id}",
        f"Completion: {answered}/{total} ({completion_percent}%)",
        "",
        f"Review now: {review_url}",
    ])

    html = f"""
<div style="font-family: Inter, Arial, sans-serif; line-height: 1.5; color: #0f172a;">
    <h2 style="margin-bottom: 8px;">New operations assessment submitted</h2>
    <p style="margin-top: 0;">A completed assessment is ready for review and analysis.</p>
    <ul style="padding-left: 18px;">
        <li><strong>App ID:</strong> {escape(context.app_id)}</li>
        <li><strong>Submission ID:</strong> {escape(submission_id)}</li>
        <li><strong>Submitter:</strong> {escape(user_id)}</li>
        <li><strong>Completion:</strong> {answered}/{total} ({completion_percent}%)</li>
    </ul>
    <p>
        <a href="{escape(review_url)}" style="display: inline-block; padding: 10px 14px; background: #0f172a; color: white; text-decoration: none; border-radius: 6px;">
            Open Reviewer View
        </a>
    </p>
</div>
    """.strip()

    return ComposedEmail(subject=subject, text=text, html=html)
