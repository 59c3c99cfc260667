import json
from collections import deque

import pytest


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


def completion(content, role="assistant"):
    return json.dumps({"choices": [{"index": 0, "message": {"role": role, "content": content}}]})


class RecordingPost:
    """Stands in for requests.post: replays queued replies and records each call."""

    def __init__(self):
        self.replies = deque()
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def __call__(self, url, headers=None, data=None, timeout=None):
        self.calls.append({
            "url": url,
            "headers": headers,
            "payload": json.loads(data),
            "timeout": timeout,
        })
        reply = self.replies.popleft()
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, FakeResponse):
            return reply
        return FakeResponse(200, completion(reply))

    @property
    def sent_messages(self):
        return [call["payload"]["messages"] for call in self.calls]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CHATCLI_MODEL", "CHATCLI_BASE_URL", "CHATCLI_SYSTEM_MESSAGE", "CHATCLI_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    # keep a developer's .env out of the test run
    monkeypatch.setattr("chatcli.config.settings.load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def fake_post(monkeypatch):
    recorder = RecordingPost()
    monkeypatch.setattr("chatcli.tools.llm.client.requests.post", recorder)
    return recorder
