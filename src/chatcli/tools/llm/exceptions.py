import json
from typing import Optional


class ChatError(Exception):
    """Base exception for chat-completion errors."""
    pass

class AuthError(ChatError):
    """Raised when no API credential is available."""
    pass

class TransportError(ChatError):
    """Raised when the request cannot reach the chat-completion service."""
    pass

class DecodeError(ChatError):
    """Raised when the response body is not a usable chat completion."""
    pass

class ApiError(ChatError):
    """Raised when the service answers with a non-success status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        self.detail = _error_detail(body)
        super().__init__(f"API request failed with status {status}: {self.detail}")


def _error_detail(body: str) -> str:
    """Pull the message out of an OpenAI style error envelope, else return the body."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return body
    error = data.get("error") if isinstance(data, dict) else None
    message: Optional[str] = None
    if isinstance(error, dict):
        message = error.get("message")
    elif isinstance(error, str):
        message = error
    return message or body
