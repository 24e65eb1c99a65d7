"""Conversations with a chat-completions endpoint, with function tools and attached files."""

__version__ = "0.1.0"
__all__ = ["client", "demo", "models", "service"]