from dataclasses import dataclass
from typing import Optional

@dataclass
class LLMConfig:
    """Configuration for chat-completion API calls."""
    api_key: Optional[str] = None
    base_url: str = "https://api.openai.com/v1"
    model_name: str = "gpt-3.5-turbo"
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    default_system_message: Optional[str] = None
    timeout: Optional[float] = None
