import json
import logging
from typing import Optional, List, Sequence

import requests
from pydantic import ValidationError

from .config import LLMConfig
from .exceptions import AuthError, TransportError, ApiError, DecodeError
from .types import ChatCompletionPayload, Message, LLMRequest, LLMResponse, Role

logger = logging.getLogger(__name__)


class LLMClient:
    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or LLMConfig()
        if not self.config.api_key:
            raise AuthError("OPENAI_API_KEY is not set; export it or add it to a .env file")
        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/chat/completions"

    def _build_messages(self, prompt: str, system_message: Optional[str] = None) -> List[Message]:
        """Build messages list for a one-off completion."""
        messages = []
        system = system_message or self.config.default_system_message
        if system:
            messages.append(Message(role=Role.SYSTEM.value, content=system))
        messages.append(Message(role=Role.USER.value, content=prompt))
        return messages

    def _build_request(self, messages: Sequence[Message]) -> LLMRequest:
        """Build the request object for the API call."""
        return LLMRequest(
            model=self.config.model_name,
            messages=list(messages),
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

    def _make_request(self, request: LLMRequest) -> str:
        """Make the actual API request and return the raw response body."""
        logger.debug(
            "POST %s model=%s messages=%d", self.endpoint, request.model, len(request.messages)
        )
        try:
            response = requests.post(
                self.endpoint,
                headers=self.headers,
                data=json.dumps(request.to_payload()),
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Request to %s failed: %s", self.endpoint, e)
            raise TransportError(f"Failed to connect to chat service: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            logger.warning("Chat service returned status %s", response.status_code)
            raise ApiError(response.status_code, response.text)

        return response.text

    def _parse_response(self, body: str) -> LLMResponse:
        """Parse the API response into a structured format."""
        try:
            response_data = json.loads(body)
        except json.JSONDecodeError as e:
            logger.debug("Undecodable response body: %r", body)
            raise DecodeError(f"Response is not valid JSON: {e}") from e

        try:
            payload = ChatCompletionPayload.model_validate(response_data)
        except ValidationError as e:
            raise DecodeError(
                f"Response has no reply at choices[0].message.content ({e.error_count()} validation errors)"
            ) from e

        return LLMResponse(message=payload.first_message(), raw_response=response_data)

    def chat(self, messages: Sequence[Message]) -> LLMResponse:
        """
        Send a full message history and return the assistant's reply.

        Args:
            messages: Ordered conversation, ending with the newest user message

        Returns:
            LLMResponse holding the reply message and the decoded body

        Raises:
            ValueError: If messages is empty
            TransportError: If the service cannot be reached
            ApiError: If the service answers with a non-success status
            DecodeError: If the body is not a chat completion
        """
        if not messages:
            raise ValueError("At least one message is required")
        request = self._build_request(messages)
        body = self._make_request(request)
        return self._parse_response(body)

    def complete(self, prompt: str, system_message: Optional[str] = None) -> LLMResponse:
        """Get a completion for a single prompt, with the configured system message if any."""
        return self.chat(self._build_messages(prompt, system_message))
