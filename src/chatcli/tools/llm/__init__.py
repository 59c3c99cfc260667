from .client import LLMClient
from .config import LLMConfig
from .exceptions import ChatError, AuthError, TransportError, ApiError, DecodeError
from .types import Message, Conversation, LLMRequest, LLMResponse, Role

__all__ = [
    'LLMClient',
    'LLMConfig',
    'ChatError',
    'AuthError',
    'TransportError',
    'ApiError',
    'DecodeError',
    'Message',
    'Conversation',
    'LLMRequest',
    'LLMResponse',
    'Role'
]
