from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
import os

from .constants import CatalogConfig, OracleConfig, SchemaConfig
from ..core.exceptions import InvalidConfigurationError
from ..utils.helpers import str_to_bool

DEFAULT_DATA_DIR = "generated_data"


def _parse_int(raw: str | None, default: int, name: str) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as e:
        raise InvalidConfigurationError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class PipelineSettings:
    api_key: str
    model: str
    base_url: str
    catalog_url: str
    data_dir: Path
    schema_version: str
    request_timeout: int
    max_retries: int
    debug: bool

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PipelineSettings":
        env = dict(environ) if environ is not None else os.environ
        api_key = env.get("OPENROUTER_API_KEY", "").strip()
        model = env.get("LLM_MODEL", "").strip() or OracleConfig.DEFAULT_MODEL
        base_url = (env.get("LLM_BASE_URL", "").strip() or OracleConfig.BASE_URL).rstrip("/")
        catalog_url = env.get("CATALOG_URL", "").strip() or CatalogConfig.OUTLINES_URL
        data_dir = Path(env.get("DATA_DIR", "").strip() or DEFAULT_DATA_DIR)
        schema_version = env.get("SCHEMA_VERSION", "").strip() or SchemaConfig.SCHEMA_VERSION
        request_timeout = _parse_int(env.get("REQUEST_TIMEOUT"), 60, "REQUEST_TIMEOUT")
        max_retries = _parse_int(env.get("MAX_RETRIES"), 2, "MAX_RETRIES")
        debug = str_to_bool(env.get("DEBUG", "False"))
        return cls(
            api_key=api_key,
            model=model,
            base_url=base_url,
            catalog_url=catalog_url,
            data_dir=data_dir,
            schema_version=schema_version,
            request_timeout=request_timeout,
            max_retries=max_retries,
            debug=debug,
        )

    def require_api_key(self) -> None:
        if not self.api_key:
            raise InvalidConfigurationError("Missing OPENROUTER_API_KEY environment variable")
