import argparse
import logging
import sys
from typing import List, Optional, TextIO

from chatcli import __version__
from chatcli.config.settings import ConfigurationError, configure_logging, load_settings
from chatcli.core.session import ChatSession
from chatcli.tools.llm.client import LLMClient
from chatcli.tools.llm.exceptions import ChatError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatcli",
        description="Send a message to a chat-completion API and print the reply.",
    )
    parser.add_argument("message", nargs="?", help="Message to send (default: read standard input)")
    parser.add_argument("-i", "--interactive", action="store_true", help="Chat until 'quit', 'exit' or end of input")
    parser.add_argument("--model", default=None, help="Model name (default: $CHATCLI_MODEL or gpt-3.5-turbo)")
    parser.add_argument("--base-url", default=None, help="API base URL (default: https://api.openai.com/v1)")
    parser.add_argument("--system", default=None, help="System message sent ahead of the conversation")
    parser.add_argument("--temperature", type=float, default=None, help="Sampling temperature")
    parser.add_argument("--max-tokens", type=int, default=None, help="Upper bound on reply tokens")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: none)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests to standard error")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Error: {e}", file=stderr)
        return 2
    settings = settings.with_overrides(
        model_name=args.model,
        base_url=args.base_url,
        default_system_message=args.system,
        temperature=args.temperature,
        max_tokens=args.max_tokens,
        timeout=args.timeout,
    )
    configure_logging(settings, verbose=args.verbose)

    try:
        client = LLMClient(settings.llm_settings)
    except ChatError as e:
        print(f"Error: {e}", file=stderr)
        return 1

    session = ChatSession(client, stdin=stdin, stdout=stdout, stderr=stderr)

    if args.interactive:
        return session.run_interactive()

    if args.message is not None:
        text = args.message.strip()
    else:
        logger.debug("Reading message from standard input")
        text = stdin.read().strip()
    if not text:
        print("Error: no message given on the command line or standard input", file=stderr)
        return 2
    return session.run_single(text)
