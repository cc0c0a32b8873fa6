"""Configuration module for the proxy."""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        self.missing = list(missing or [])
        super().__init__(message)


class ConfigMeta(type):
    """Metaclass to prevent direct instantiation and enforce singleton attributes."""

    def __call__(cls, *args: object, **kwargs: object) -> None:
        """Prevent direct instantiation."""
        raise TypeError("Config cannot be instantiated directly. Use class attributes.")


class Config(metaclass=ConfigMeta):
    """Fixed design constants. Access attributes directly via the class."""

    # =========================================================================
    # Server Configuration
    # =========================================================================
    DEFAULT_PORT: int = 3000
    DEFAULT_HOST: str = "0.0.0.0"
    DEFAULT_MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024

    # =========================================================================
    # Upstream Knowledge Base Configuration
    # =========================================================================
    DEFAULT_UPSTREAM_BASE_URL: str = "https://backend.vgvishesh.com"
    API_KEY_HEADER: str = "x-api-key"
    LIST_TIMEOUT_SECONDS: float = 8.0
    DEFAULT_KNOWLEDGE_BASE_NAME: str = "New Knowledge Base"

    # =========================================================================
    # Chat Pipeline Configuration
    # =========================================================================
    TOP_K: int = 5  # Not a request parameter
    NO_EVIDENCE_ANSWER: str = "No relevant information found."
    CHUNK_LOG_PREVIEW_CHARS: int = 80

    # =========================================================================
    # LLM Configuration
    # =========================================================================
    GEMINI_MODEL_NAME: str = "gemini-2.5-flash"


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_str(environ: Mapping[str, str], name: str) -> Optional[str]:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings, resolved once at startup.

    Attributes:
        upstream_base_url: Base URL of the knowledge-base service
        retrieval_api_key: Key sent as ``x-api-key`` to the knowledge-base service
        default_knowledge_base_id: Knowledge base queried by the chat endpoint
        llm_api_key: Gemini API key
        listen_port: Port of the standalone listener
        max_upload_bytes: Upper bound on a request body
        llm_model_name: Gemini model used for answers
    """

    retrieval_api_key: str
    upstream_base_url: str = Config.DEFAULT_UPSTREAM_BASE_URL
    default_knowledge_base_id: Optional[str] = None
    llm_api_key: Optional[str] = None
    listen_port: int = Config.DEFAULT_PORT
    max_upload_bytes: int = Config.DEFAULT_MAX_UPLOAD_BYTES
    llm_model_name: str = Config.GEMINI_MODEL_NAME

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Resolve the configuration from environment variables.

        Args:
            environ: Mapping to read from, ``os.environ`` when omitted

        Returns:
            The resolved configuration

        Raises:
            ConfigError: If ``API_KEY`` is missing or a numeric option is malformed
        """
        if environ is None:
            environ = os.environ

        retrieval_api_key = _env_str(environ, "API_KEY")
        if retrieval_api_key is None:
            raise ConfigError(
                "Missing required configuration: API_KEY", missing=["API_KEY"]
            )

        return cls(
            retrieval_api_key=retrieval_api_key,
            upstream_base_url=(
                _env_str(environ, "UPSTREAM_BASE_URL")
                or Config.DEFAULT_UPSTREAM_BASE_URL
            ).rstrip("/"),
            default_knowledge_base_id=_env_str(environ, "KNOWLEDGE_BASE_ID"),
            llm_api_key=_env_str(environ, "GEMINI_API_KEY"),
            listen_port=_env_int(environ, "PORT", Config.DEFAULT_PORT),
            max_upload_bytes=_env_int(
                environ, "MAX_UPLOAD_BYTES", Config.DEFAULT_MAX_UPLOAD_BYTES
            ),
            llm_model_name=_env_str(environ, "GEMINI_MODEL") or Config.GEMINI_MODEL_NAME,
        )

    def missing_chat_settings(self) -> List[str]:
        """Names of the environment variables the chat endpoint needs but lacks."""
        missing = []
        if not self.default_knowledge_base_id:
            missing.append("KNOWLEDGE_BASE_ID")
        if not self.llm_api_key:
            missing.append("GEMINI_API_KEY")
        return missing
