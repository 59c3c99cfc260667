import logging
import os
from dataclasses import dataclass, field, replace
from typing import Dict, Any, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from chatcli.tools.llm.config import LLMConfig

API_KEY_ENV = "OPENAI_API_KEY"

DEFAULT_LOGGING_SETTINGS = {
    "level": "WARNING",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
}

class ConfigurationError(ValueError):
    """Raised when an environment setting has an unusable value."""
    pass

@dataclass
class AppSettings:
    """Configuration settings for the chat client."""
    llm_settings: LLMConfig = field(default_factory=LLMConfig)
    logging_settings: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_LOGGING_SETTINGS))

    def with_overrides(self, **overrides: Any) -> "AppSettings":
        """Return a copy with every non-None override applied to the LLM settings."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, llm_settings=replace(self.llm_settings, **changes))


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
    dotenv_path: Optional[str] = None,
) -> AppSettings:
    """
    Build settings from the process environment.

    A .env file (dotenv_path, else the nearest one above the working
    directory) is loaded first when use_dotenv is set; variables already in
    the environment take precedence over it. The API key may be missing here,
    the client refuses to start without one.
    """
    if use_dotenv:
        load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)
    env = os.environ if environ is None else environ

    defaults = LLMConfig()
    llm_settings = LLMConfig(
        api_key=env.get(API_KEY_ENV) or None,
        base_url=env.get("CHATCLI_BASE_URL") or defaults.base_url,
        model_name=env.get("CHATCLI_MODEL") or defaults.model_name,
        default_system_message=env.get("CHATCLI_SYSTEM_MESSAGE") or None,
    )
    logging_settings = dict(DEFAULT_LOGGING_SETTINGS)
    if env.get("CHATCLI_LOG_LEVEL"):
        level = env["CHATCLI_LOG_LEVEL"].strip().upper()
        # getLevelName maps known names to ints, anything else to "Level X"
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError(
                f"CHATCLI_LOG_LEVEL={env['CHATCLI_LOG_LEVEL']!r} is not a logging level; "
                "use DEBUG, INFO, WARNING, ERROR or CRITICAL"
            )
        logging_settings["level"] = level
    return AppSettings(llm_settings=llm_settings, logging_settings=logging_settings)


def configure_logging(settings: AppSettings, verbose: bool = False) -> None:
    # basicConfig writes to stderr, stdout is reserved for replies
    level = logging.DEBUG if verbose else settings.logging_settings.get("level", "WARNING")
    logging.basicConfig(level=level, format=settings.logging_settings["format"], force=True)
    # urllib3 is chatty at DEBUG and would echo request lines
    logging.getLogger("urllib3").setLevel(logging.WARNING)
