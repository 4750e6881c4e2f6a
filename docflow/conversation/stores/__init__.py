"""Conversation stores."""

from docflow.conversation.store import ConversationStore
from docflow.conversation.stores.inmemory import InMemoryConversationStore

__all__ = [
    "ConversationStore",
    "InMemoryConversationStore",
]
