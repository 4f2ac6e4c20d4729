"""Handles the parsing and validation of the TransResolve configuration file."""

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .orchestrator import ScanLimits

logger = logging.getLogger(__name__)

FallbackProvider = Literal["http", "mock", "local", "none"]


class DictionarySettings(BaseModel):
    """Where translation files live and which language to load."""

    model_config = ConfigDict(extra="forbid")

    directory: str = "translations"
    language: str = "en"
    locale: str | None = None


class RenderSettings(BaseModel):
    """How resolved patterns are written back."""

    model_config = ConfigDict(extra="forbid")

    mode: Literal["text", "chip"] = "text"
    escape: bool = False
    defer_unknown_keys: bool = False


class FallbackSettings(BaseModel):
    """Settings for the async fallback resolver and its client."""

    model_config = ConfigDict(extra="forbid")

    provider: FallbackProvider = "none"
    endpoint: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=10.0, gt=0)
    debounce: float = Field(default=0.3, ge=0)
    retry_delay: float = Field(default=0.5, ge=0)
    max_retries: int = Field(default=1, ge=0, le=1)
    max_text_length: int = Field(default=2000, gt=0)


class TransResolveConfig(BaseModel):
    """The root configuration for TransResolve."""

    dictionary: DictionarySettings = Field(default_factory=DictionarySettings)
    limits: ScanLimits = Field(default_factory=ScanLimits)
    render: RenderSettings = Field(default_factory=RenderSettings)
    fallback: FallbackSettings = Field(default_factory=FallbackSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransResolveConfig":
        """
        Create a TransResolveConfig from a dictionary.

        Missing sections fall back to their defaults. A section given as
        `null` is treated as empty.

        Raises:
            ValueError: If any section fails validation.

        """
        sections = {name: value for name, value in data.items() if value is not None}
        unknown = sorted(set(sections) - set(cls.model_fields))
        if unknown:
            logger.warning("Ignoring unknown configuration sections: %s", ", ".join(unknown))
            for name in unknown:
                sections.pop(name)

        try:
            return cls(**sections)
        except ValidationError as e:
            msg = f"Invalid or missing configuration: {e}"
            raise ValueError(msg) from e


class StrictSingleQuoteLoader(yaml.SafeLoader):
    """
    A custom YAML loader that enforces the use of single quotes for all strings.

    It raises an error if any double-quoted strings are found.
    """


def _construct_scalar(loader: StrictSingleQuoteLoader, node: yaml.ScalarNode) -> Any:  # noqa: ANN401
    """Construct a scalar node, but first check its style."""
    if node.style == '"':
        line = node.start_mark.line + 1
        col = node.start_mark.column + 1
        msg = f"Double-quoted string found at line {line}, column {col}. Please use single quotes (') instead."
        raise yaml.YAMLError(msg)
    return loader.construct_scalar(node)


StrictSingleQuoteLoader.add_constructor("tag:yaml.org,2002:str", _construct_scalar)


def load_config(config_path: str | Path) -> TransResolveConfig:
    """
    Load, parse, and validate the YAML configuration file.

    Args:
        config_path: The path to the config.yaml file.

    Returns:
        A TransResolveConfig object representing the validated configuration.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If there is a syntax error in the YAML file.
        ValueError: If the configuration is invalid.

    """
    path = Path(config_path)
    if not path.is_file():
        msg = f"Configuration file not found at: {config_path}"
        raise FileNotFoundError(msg)

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.load(f, Loader=StrictSingleQuoteLoader)  # noqa: S506
    except yaml.YAMLError as e:
        msg = f"Error parsing YAML config file: {e}"
        raise yaml.YAMLError(msg) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = "Invalid or missing configuration: config file must be a YAML mapping (dictionary)."
        raise ValueError(msg)

    return TransResolveConfig.from_dict(data)
