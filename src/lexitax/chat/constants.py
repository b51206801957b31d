"""Chat session constants."""

DEFAULT_CONVERSATION_TITLE = "New Conversation"
TITLE_MAX_LENGTH = 50
TITLE_ELLIPSIS = "..."

GUEST_QUERY_LIMIT = 3


def derive_title(text: str) -> str:
    """First TITLE_MAX_LENGTH characters of text, with an ellipsis if it was cut."""
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return text
