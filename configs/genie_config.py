#!/usr/bin/env python3
"""YAML configuration document for the release notes pipeline.

Example `.release-genie.yml`:

    docs:
      changelog:
        path: CHANGELOG.md
        section_id: changelog
      readme:
        path: README.md
        section_id: whats-new
    github:
      mode: pull-request      # or "commit"
      base_branch: main
    llm:
      model: anthropic.claude-3-sonnet-20240229-v1:0
      temperature: 0.3

Every key is optional. A missing file yields the defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from configs.config import Config
from utils.preconditions import PreconditionError

logger = logging.getLogger(__name__)

PublishMode = Literal["pull-request", "commit"]


class DocTarget(BaseModel):
    """A document and the marker-delimited section inside it."""

    path: str = Field(..., min_length=1, description="Path to the document, relative to the repo root")
    section_id: str = Field(..., min_length=1, description="Section id used in the START/END markers")

    model_config = {"extra": "ignore"}


class DocsSettings(BaseModel):
    changelog: Optional[DocTarget] = None
    readme: Optional[DocTarget] = None

    model_config = {"extra": "ignore"}


class GithubSettings(BaseModel):
    mode: PublishMode = Config.DEFAULT_MODE
    base_branch: str = Config.DEFAULT_BASE_BRANCH

    model_config = {"extra": "ignore"}

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value):
        # Anything other than "commit" publishes through a pull request.
        return "commit" if value == "commit" else "pull-request"

    @field_validator("base_branch", mode="before")
    @classmethod
    def _default_base(cls, value):
        return value or Config.DEFAULT_BASE_BRANCH


class LLMSettings(BaseModel):
    model: Optional[str] = None
    temperature: float = Config.LLM_TEMPERATURE

    model_config = {"extra": "ignore", "protected_namespaces": ()}

    @field_validator("temperature", mode="before")
    @classmethod
    def _default_temperature(cls, value):
        return Config.LLM_TEMPERATURE if value is None else value


class GenieConfig(BaseModel):
    docs: DocsSettings = Field(default_factory=DocsSettings)
    github: GithubSettings = Field(default_factory=GithubSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)

    model_config = {"extra": "ignore"}

    @field_validator("docs", "github", "llm", mode="before")
    @classmethod
    def _empty_block(cls, value):
        # `github:` with no children parses as None
        return {} if value is None else value


def load_config(config_path: str) -> GenieConfig:
    """Load the YAML config, or return defaults when the file does not exist.

    Raises:
        PreconditionError: If the file exists but is not valid YAML or does not match the schema
    """
    path = Path(config_path)
    if not path.exists():
        logger.info(f"Config file {config_path} not found, using defaults.")
        return GenieConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise PreconditionError(f"Invalid YAML in {config_path}: {e}", code="CONFIG")
    if data is None:
        return GenieConfig()
    if not isinstance(data, dict):
        raise PreconditionError(f"Config file {config_path} must contain a mapping at the top level", code="CONFIG")
    try:
        return GenieConfig.model_validate(data)
    except ValidationError as e:
        raise PreconditionError(f"Invalid config in {config_path}: {e}", code="CONFIG")
