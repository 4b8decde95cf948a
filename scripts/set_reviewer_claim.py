#!/usr/bin/env python3
"""
Grant or revoke reviewer access for a Firebase Auth user.

Usage:
  python scripts/set_reviewer_claim.py --uid <UID> [--reviewer true|false] [--admin true|false]
  python scripts/set_reviewer_claim.py --email <EMAIL> [--reviewer true|false] [--admin true|false]

Options:
  --project <PROJECT_ID>           Google Cloud project id
  --service-account <KEY_PATH>     Service account key (defaults to
                                   GOOGLE_APPLICATION_CREDENTIALS)
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import firebase_admin  # noqa: E402
from firebase_admin import credentials  # noqa: E402

from config.logging_config import configure_logging  # noqa: E402
from reviewer_access import ReviewerClaimService, parse_boolean  # noqa: E402


def initialize_firebase(project: str | None, service_account: str | None) -> None:
    """Initialize the default Firebase app."""
    if project:
        os.environ["GCLOUD_PROJECT"] = project
        os.environ["GOOGLE_CLOUD_PROJECT"] = project

    key_path = service_account or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if key_path:
        resolved = Path(key_path).expanduser().resolve()
        cred = credentials.Certificate(str(resolved))
        options = {"projectId": project or cred.project_id}
        firebase_admin.initialize_app(cred, options)
    else:
        firebase_admin.initialize_app(options={"projectId": project} if project else None)


def main() -> int:
    parser = argparse.ArgumentParser(description="Set the reviewer custom claim on a user")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--uid", help="Firebase user id")
    target.add_argument("--email", help="User email address")
    parser.add_argument("--reviewer", default=None, help="true or false (default: true)")
    parser.add_argument("--admin", default=None, help="true or false (default: unchanged)")
    parser.add_argument("--project", default=None, help="Google Cloud project id")
    parser.add_argument("--service-account", default=None, help="Service account key path")
    args = parser.parse_args()

    configure_logging("WARNING", json_output=False)

    try:
        reviewer = parse_boolean(args.reviewer, True)
        admin = parse_boolean(args.admin, None)
        initialize_firebase(args.project, args.service_account)
        update = ReviewerClaimService().set_reviewer_claim(
            uid=args.uid, email=args.email, reviewer=reviewer, admin=admin,
        )
    except Exception as e:
        print("Failed to update reviewer claim.", file=sys.stderr)
        print(str(e), file=sys.stderr)
        return 1

    print("Updated custom claims successfully.")
    print(json.dumps(update.to_dict(), indent=2))
    print("Ask the user to sign out/in or refresh ID token for claim changes to take effect.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
