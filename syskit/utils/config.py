import os
import logging
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()

CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"
CONFIG_PATH_ENV = "SYSKIT_CONFIG"
API_LEVEL_ENV = "SYSKIT_API_LEVEL"


def resolve_dirs(config: Dict[str, Any], base_dir: str) -> Dict[str, Any]:
    """Resolve every *_dir and *_path value under `base_dir`. Returns a new dict."""
    base_path = Path(base_dir).resolve()
    resolved = dict(config)
    for key, value in config.items():
        if isinstance(value, str) and (key.endswith("_dir") or key.endswith("_path")):
            resolved[key] = str((base_path / value).resolve())
    return resolved


class SyskitSettings(BaseModel):
    debug: bool = False
    data_dir: str = Field(..., description="Base directory for all storage.")
    storage_root_dir: str = Field(..., description="Root of the shared storage tree.")
    catalog_dir: str = Field(..., description="Catalog index and blob directory.")
    api_level: int = Field(..., description="Host API level used to detect the tier.")
    replace_existing: bool = Field(False, description="Delete previous catalog records on save.")

    @field_validator("api_level")
    @classmethod
    def validate_api_level(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"api_level must be positive, got {v}")
        return v


def setup_logging(debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    config_path = config_path or os.getenv(CONFIG_PATH_ENV) or CONFIG_PATH
    with open(config_path, "r") as f:
        yaml_config = yaml.safe_load(f) or {}

    if os.getenv(API_LEVEL_ENV):
        yaml_config["api_level"] = int(os.getenv(API_LEVEL_ENV))

    data_dir = os.path.abspath(yaml_config.get("data_dir") or ".")
    yaml_config["data_dir"] = data_dir
    yaml_config = resolve_dirs(yaml_config, data_dir)

    setup_logging(debug=yaml_config.get("debug", False))

    return yaml_config


def load_settings(config_path: Optional[str] = None) -> SyskitSettings:
    return SyskitSettings(**load_config(config_path))
