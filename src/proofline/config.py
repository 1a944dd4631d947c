# src/proofline/config.py

"""Server configuration.

Read from a YAML (or JSON) file, validated with pydantic, and handed to the
rest of the code as immutable dataclasses.
"""

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel

from proofline.llms.config import DEFAULT_MAX_TOKENS, DEFAULT_MODELS, LLMConfig
from proofline.ratelimit.gate import RateGateConfig

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "proofline"
DEFAULT_CONFIG_FILES = (CONFIG_DIR / "config.yaml", CONFIG_DIR / "config.json")
DEFAULT_DATABASE = str(Path(tempfile.gettempdir()) / "proofline.db")


class ConfigFile(BaseModel):
    """On-disk schema. Every key is optional."""

    key: str | None = None
    provider: Literal["openai", "anthropic"] = "openai"
    model: str | None = None
    timeout: float = 30.0
    max_retries: int = 3
    max_tokens: int = DEFAULT_MAX_TOKENS
    database: str = DEFAULT_DATABASE
    log_file: str = "proofline.log"
    log_level: str = "INFO"
    rate_per_minute: float = 1.0
    burst: int = 200
    prompt_dir: str | None = None
    prompt_version: str = "1.0"

    class Config:
        extra = "forbid"


@dataclass(frozen=True)
class ServerConfig:
    """Everything needed to assemble a server. Immutable."""

    llm: LLMConfig
    rate: RateGateConfig = field(default_factory=RateGateConfig)
    database: str = DEFAULT_DATABASE
    log_file: str = "proofline.log"
    log_level: str = "INFO"
    prompt_dir: str | None = None
    prompt_version: str = "1.0"


def _find_config_file() -> Path | None:
    for candidate in DEFAULT_CONFIG_FILES:
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | Path | None = None) -> ServerConfig:
    """Load configuration.

    Args:
        path: Explicit config file. When None, the default locations under
            ``~/.config/proofline`` are tried and built-in defaults are used
            if neither exists.

    Raises:
        FileNotFoundError: If an explicit ``path`` does not exist.
        pydantic.ValidationError: If the file has unknown or invalid keys.
    """
    file_path = Path(path) if path is not None else _find_config_file()

    data: dict = {}
    if file_path is not None:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded config from %s", file_path)
    else:
        logger.info("No config file found, using defaults")

    parsed = ConfigFile(**data)
    return ServerConfig(
        llm=LLMConfig.for_provider(
            parsed.provider,
            parsed.model,
            api_key=parsed.key,
            timeout=parsed.timeout,
            max_retries=parsed.max_retries,
            max_tokens=parsed.max_tokens,
        ),
        rate=RateGateConfig(rate_per_minute=parsed.rate_per_minute, burst=parsed.burst),
        database=parsed.database,
        log_file=parsed.log_file,
        log_level=parsed.log_level,
        prompt_dir=parsed.prompt_dir,
        prompt_version=parsed.prompt_version,
    )
