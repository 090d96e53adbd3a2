import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


# --- Defaults ---
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_MONGODB_DB = "newsanalyzer"
DEFAULT_MONGODB_COLLECTION = "news"
DEFAULT_PORT = 5000
DEFAULT_HISTORY_LIMIT = 10
# --- End defaults ---


class ConfigError(RuntimeError):
    """Raised when a required setting is missing at startup."""


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str]
    openai_model: str = DEFAULT_OPENAI_MODEL
    llm_request_timeout: float = 60.0
    mongodb_uri: Optional[str] = None
    mongodb_db: str = DEFAULT_MONGODB_DB
    mongodb_collection: str = DEFAULT_MONGODB_COLLECTION
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        if load_env_file:
            load_dotenv()
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            openai_model=os.environ.get("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            llm_request_timeout=float(os.environ.get("LLM_REQUEST_TIMEOUT", "60")),
            mongodb_uri=os.environ.get("MONGODB_URI") or None,
            mongodb_db=os.environ.get("MONGODB_DB", DEFAULT_MONGODB_DB),
            mongodb_collection=os.environ.get("MONGODB_COLLECTION", DEFAULT_MONGODB_COLLECTION),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", str(DEFAULT_PORT))),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            history_limit=int(os.environ.get("HISTORY_LIMIT", str(DEFAULT_HISTORY_LIMIT))),
        )

    def require_model_key(self) -> str:
        if not self.openai_api_key:
            raise ConfigError("OPENAI_API_KEY is not set in environment variables")
        return self.openai_api_key
