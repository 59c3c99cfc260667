import logging
import sys
from enum import Enum
from typing import Optional, TextIO

from chatcli.tools.llm.client import LLMClient
from chatcli.tools.llm.exceptions import ChatError
from chatcli.tools.llm.types import Conversation

logger = logging.getLogger(__name__)

SENTINELS = frozenset({"quit", "exit"})

class SessionState(Enum):
    PROMPTING = "prompting"
    AWAITING_REPLY = "awaiting_reply"
    TERMINATED = "terminated"


class ChatSession:
    """
    Drives one run of the client: a single exchange, or a prompt/reply loop
    that keeps the conversation history between turns.
    """

    def __init__(
        self,
        client: LLMClient,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        prompt: str = "You: ",
        reply_label: str = "ChatGPT: ",
    ):
        self.client = client
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.prompt = prompt
        self.reply_label = reply_label
        self.conversation = Conversation.start(client.config.default_system_message)
        self.state = SessionState.PROMPTING

    @property
    def decorated(self) -> bool:
        """Prompts and labels are only shown to a person at a terminal."""
        isatty = getattr(self.stdin, "isatty", None)
        return bool(isatty and isatty())

    def run_single(self, text: str) -> int:
        """Send one message and print the reply. Returns the exit status."""
        try:
            response = self.client.complete(text)
        except ChatError as e:
            self._report(e)
            return 1
        self._write(response.content + "\n")
        return 0

    def run_interactive(self) -> int:
        """Prompt, send, print until a sentinel word or end of input."""
        self.state = SessionState.PROMPTING
        while self.state is not SessionState.TERMINATED:
            try:
                if self.state is SessionState.PROMPTING:
                    self.state = self._prompt()
                elif self.state is SessionState.AWAITING_REPLY:
                    self.state = self._exchange()
            except KeyboardInterrupt:
                # Ctrl-C ends the session like end of input
                self._write("\n")
                self.state = SessionState.TERMINATED
            except UnicodeDecodeError as e:
                print(f"Error: standard input is not valid text ({e.reason})", file=self.stderr)
                self.state = SessionState.TERMINATED
        logger.debug("Session ended after %d messages", len(self.conversation))
        return 0

    def _prompt(self) -> SessionState:
        if self.decorated:
            self._write(self.prompt)
        line = self.stdin.readline()
        if not line:
            return SessionState.TERMINATED
        text = line.strip()
        if text.lower() in SENTINELS:
            return SessionState.TERMINATED
        if not text:
            return SessionState.PROMPTING
        self.conversation.add_user(text)
        return SessionState.AWAITING_REPLY

    def _exchange(self) -> SessionState:
        try:
            response = self.client.chat(self.conversation.snapshot())
        except ChatError as e:
            # the unanswered user turn stays in the history
            self._report(e)
            return SessionState.PROMPTING
        self.conversation.append(response.message)
        label = self.reply_label if self.decorated else ""
        self._write(f"{label}{response.content}\n")
        return SessionState.PROMPTING

    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def _report(self, error: ChatError) -> None:
        print(f"Error: {error}", file=self.stderr)
