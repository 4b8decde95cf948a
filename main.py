"""
Cloud Functions entry point.

The Functions runtime imports this module and registers every decorated
function it exposes.
"""

import os
import sys

# Add the 'src' directory to Python path so imports work correctly
project_root = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(project_root, 'src')

if src_path not in sys.path:
    sys.path.insert(0, src_path)

from submissions.firebase_trigger import notify_submission_for_review  # noqa: E402

__all__ = ["notify_submission_for_review"]
