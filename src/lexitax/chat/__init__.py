"""Local chat session state: conversations, guest quota and answer providers."""
