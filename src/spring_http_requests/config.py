"""Generator configuration.

Defaults cover Spring MVC; a YAML file can override any of them.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from spring_http_requests.errors import ConfigError

REQUEST_PARAM = "org.springframework.web.bind.annotation.RequestParam"
REQUEST_BODY = "org.springframework.web.bind.annotation.RequestBody"

FILE_TYPE_NAMES = ["MultipartFile"]

CONTENT_TYPE = "Content-Type"
JSON_CONTENT_TYPE = "application/json"
MULTIPART_CONTENT_TYPE = "multipart/form-data"
BOUNDARY = "boundary"

CONFIG_ENV_VAR = "SPRING_HTTP_REQUESTS_CONFIG"


class GeneratorConfig(BaseModel):
    """Names the classifier recognizes and the tokens the synthesizer emits."""

    query_annotation: str = REQUEST_PARAM
    body_annotation: str = REQUEST_BODY
    file_type_names: list[str] = FILE_TYPE_NAMES
    boundary: str = BOUNDARY


def load_config(path: Path | None = None) -> GeneratorConfig:
    """Load config from a YAML file, the env var, or fall back to defaults."""
    if path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        if not env_path:
            return GeneratorConfig()
        path = Path(env_path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
        return GeneratorConfig(**data)
    except (yaml.YAMLError, TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
