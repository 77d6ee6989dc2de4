"""
Runtime configuration read from environment variables.

Variables
---------
VOYAGE_API_KEY       API key for the Voyage AI embeddings endpoint (required
                     only when the Voyage provider is built).
VOYAGE_MODEL         Embedding model name (default 'voyage-3-large').
VOYAGE_BASE_URL      Embeddings endpoint (default the public Voyage API).
EMBEDDING_DIMENSION  Vector dimensionality enforced by the vector store (default 1024).
EMBEDDING_TIMEOUT    HTTP timeout in seconds for a single embedding call (default 60).
LOG_LEVEL            loguru level for 'configure_logging' (default 'INFO').
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

DEFAULT_VOYAGE_MODEL = "voyage-3-large"
DEFAULT_VOYAGE_BASE_URL = "https://api.voyageai.com/v1/embeddings"
DEFAULT_EMBEDDING_DIMENSION = 1024


class Settings(BaseModel):
    voyage_api_key: str = ""
    voyage_model: str = DEFAULT_VOYAGE_MODEL
    voyage_base_url: str = DEFAULT_VOYAGE_BASE_URL
    embedding_dimension: int = Field(default=DEFAULT_EMBEDDING_DIMENSION, gt=0)
    embedding_timeout: float = Field(default=60.0, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from 'environ' (defaults to 'os.environ'). Unset variables keep their defaults."""
        env = os.environ if environ is None else environ
        mapping = {
            "voyage_api_key": "VOYAGE_API_KEY",
            "voyage_model": "VOYAGE_MODEL",
            "voyage_base_url": "VOYAGE_BASE_URL",
            "embedding_dimension": "EMBEDDING_DIMENSION",
            "embedding_timeout": "EMBEDDING_TIMEOUT",
            "log_level": "LOG_LEVEL",
        }
        values = {field: env[name] for field, name in mapping.items() if env.get(name)}
        return cls.model_validate(values)
