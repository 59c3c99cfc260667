from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"

@dataclass
class Message:
    """Represents a single message in the conversation with the LLM."""
    role: str  # "system", "user", or "assistant"
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}

@dataclass
class LLMRequest:
    """Represents a request to the chat-completion API."""
    model: str
    messages: List[Message]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens
        return payload

@dataclass
class LLMResponse:
    """Represents a response from the chat-completion API."""
    message: Message
    raw_response: Dict[str, Any]

    @property
    def content(self) -> str:
        return self.message.content

@dataclass
class Conversation:
    """Ordered message history sent with every request of a session."""
    messages: List[Message] = field(default_factory=list)

    @classmethod
    def start(cls, system_message: Optional[str] = None) -> "Conversation":
        conversation = cls()
        if system_message:
            conversation.append(Message(role=Role.SYSTEM.value, content=system_message))
        return conversation

    def append(self, message: Message) -> None:
        self.messages.append(message)

    def add_user(self, content: str) -> Message:
        message = Message(role=Role.USER.value, content=content)
        self.append(message)
        return message

    def snapshot(self) -> List[Message]:
        return list(self.messages)

    def __len__(self) -> int:
        return len(self.messages)


# Wire shape of a chat completion; only the fields the client reads.
class _WireMessage(BaseModel):
    role: str = Role.ASSISTANT.value
    content: str

class _WireChoice(BaseModel):
    message: _WireMessage

class ChatCompletionPayload(BaseModel):
    choices: List[_WireChoice] = Field(min_length=1)

    def first_message(self) -> Message:
        wire = self.choices[0].message
        return Message(role=wire.role, content=wire.content)
