"""Guided conversations: sessions, question flow and the conversation engine."""
