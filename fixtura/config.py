"""
Configuration loading for the fixture builder.

Supports YAML-based builder configuration files.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class BuilderConfig(BaseModel):
    """Configuration for the fixture builder."""

    # Methods whose names start with one of these become tests
    test_prefixes: list[str] = Field(default_factory=lambda: ["test"], min_length=1)

    # Underscore-prefixed methods may be tests too
    include_private: bool = True

    # Display names cut longer string arguments short
    max_string_length: int = Field(default=40, gt=3)

    @field_validator("test_prefixes", mode="before")
    @classmethod
    def single_prefix_as_list(cls, v: Any) -> Any:
        """Accept a single prefix string."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("test_prefixes")
    @classmethod
    def prefixes_not_empty(cls, v: list[str]) -> list[str]:
        """Validate that no prefix is empty."""
        if not all(v):
            raise ValueError("test_prefixes must not contain empty strings")
        return v


class BuilderConfigLoader:
    """Load and validate builder configurations from YAML files."""

    @classmethod
    def from_yaml(cls, path: str | Path) -> BuilderConfig:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            BuilderConfig loaded from file
        """
        path = Path(path)
        if not path.exists():
            msg = f"Configuration file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = yaml.safe_load(f) or {}

        return cls._parse_config(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BuilderConfig:
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            BuilderConfig from dictionary
        """
        return cls._parse_config(data)

    @classmethod
    def _parse_config(cls, data: dict[str, Any]) -> BuilderConfig:
        """Parse configuration dictionary into BuilderConfig."""
        if not isinstance(data, dict):
            msg = f"Configuration must be a mapping, got {type(data).__name__}"
            raise ValueError(msg)

        return BuilderConfig.model_validate(data)

    @classmethod
    def generate_sample_config(cls) -> str:
        """
        Generate a sample YAML configuration file.

        Returns:
            YAML string for sample configuration
        """
        sample = {
            "test_prefixes": ["test", "check"],
            "include_private": False,
            "max_string_length": 40,
        }
        return yaml.dump(sample, default_flow_style=False, sort_keys=False)
