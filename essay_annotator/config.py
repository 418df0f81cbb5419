from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional
import os

import yaml

from essay_annotator.errors import ConfigError

API_KEY_ENV = "ANTHROPIC_API_KEY"


@dataclass
class AnnotatorConfig:
    api_key: Optional[str] = None
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048
    temperature: float = 0.2     # low temp so originalText stays verbatim
    max_retries: int = 3
    min_request_interval: float = 0.3
    min_essay_chars: int = 50
    words_per_minute: int = 180


def _coerce(key: str, default: Any, value: Any) -> Any:
    """Check one YAML value against the type of its default."""
    if default is None or isinstance(default, str):
        # api_key may be left unset; model must be text
        if (value is None and default is None) or isinstance(value, str):
            return value
        raise ConfigError(f"Config key '{key}' expects str, got {value!r}")

    if value is None or isinstance(value, bool):
        raise ConfigError(f"Config key '{key}' expects {type(default).__name__}, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Config key '{key}' expects {type(default).__name__}, got {value!r}")
    if isinstance(default, int):
        if not number.is_integer():
            raise ConfigError(f"Config key '{key}' expects a whole number, got {value!r}")
        return int(number)
    return number


def config_from_dict(data: Dict[str, Any]) -> AnnotatorConfig:
    known = {f.name: f for f in fields(AnnotatorConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    values = {key: _coerce(key, known[key].default, value) for key, value in data.items()}
    return AnnotatorConfig(**values)


def load_config(path: Optional[str] = None) -> AnnotatorConfig:
    """
    Load configuration from a YAML file, falling back to defaults.

    The API key comes from the file if set there, otherwise from
    ANTHROPIC_API_KEY.
    """
    data: Dict[str, Any] = {}
    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be a mapping")

    config = config_from_dict(data)
    if not config.api_key:
        config.api_key = os.environ.get(API_KEY_ENV)
    return config
