"""
Commit and pull-request message generation utilities.

Keeps the wording of every message the engine writes to the repository
in one place.
"""

from docpush.core.logging import get_logger

logger = get_logger(__name__)


def generate_commit_message(action: str, subject: str) -> str:
    """
    Generate a commit message for a draft or media change.

    Args:
        action: Type of action (create, update, upload)
        subject: Draft title or uploaded file name

    Returns:
        Formatted commit message

    Example:
        >>> generate_commit_message("create", "Getting Started")
        'Draft: Getting Started'
    """
    if action == "create":
        return f"Draft: {subject}"
    if action == "update":
        return f"Update: {subject}"
    if action == "upload":
        return f"Upload image: {subject}"

    logger.debug(f"Unknown commit action '{action}', using generic message")
    return f"Modify: {subject}"


def generate_pull_request(title: str, doc_path: str) -> tuple[str, str]:
    """
    Generate the title and body of the pull request that publishes a draft.

    Args:
        title: Draft title
        doc_path: Target document path

    Returns:
        Tuple of (pull request title, pull request body)
    """
    return f"Docs: {title}", f"Approved documentation update for `{doc_path}`"


def format_rejection_comment(reason: str) -> str:
    """Format the comment recorded when a draft is rejected with a reason."""
    return f"Rejected: {reason.strip()}"
