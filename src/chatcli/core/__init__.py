from .session import ChatSession, SessionState

__all__ = ["ChatSession", "SessionState"]
