"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:      str = "mdspec"
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    output_dir:    str = Field(default="dist",     description="Directory for converted JSON documents")
    max_code_line_length:   int = Field(default=81,  ge=1, description="Longest code line before a warning")
    initial_indentation:    int = Field(default=540, ge=0, description="Left indent step for notes and lists")
    list_level_indentation: int = Field(default=360, ge=0, description="Extra indent per list level")
    table_indentation:      int = Field(default=360, ge=0, description="Default table indentation")
    log_level: str  = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")
    strict:    bool = Field(default=False, description="Exit non-zero when errors were reported")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSPEC_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSPEC_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
