"""Global configuration: constants and layered settings.

Settings resolve, lowest precedence first, from field defaults, the
environment profile, ``<project>/.switchbox/config.json``,
``<project>/.env`` and the process environment.  The merged raw values
are validated into a :class:`Settings` model.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Legal module capacities per box type
BOX_MODULE_CAPACITIES: dict[str, tuple[int, ...]] = {
    "55 Box": (1, 2),
    "Rectangular Box": (1, 2, 3, 4, 5, 6),
}

# Box color meaning "no color constraint"
NO_COLOR = "none"

# Number of products returned for an empty search query
DEFAULT_SEARCH_LIMIT = 20

# Placeholder auxiliary part prices (not looked up from the catalog)
DEFAULT_FRAME_PRICE = 25.0
DEFAULT_ADAPTER_PRICE = 15.0

DEFAULT_CSV_NAME = "switch-project"

# Per-environment overrides, applied above the field defaults
_PROFILES: dict[str, dict[str, str]] = {
    "development": {"SWITCHBOX_LOG_LEVEL": "DEBUG"},
    "production": {"SWITCHBOX_LOG_LEVEL": "WARNING"},
    "testing": {"SWITCHBOX_LOG_LEVEL": "DEBUG", "SWITCHBOX_CATALOG_PATH": ""},
}


class Settings(BaseModel):
    """Validated switchbox settings.

    Fields are addressed by their ``SWITCHBOX_*`` key (the alias) in
    every configuration layer.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    env: str = Field("development", alias="SWITCHBOX_ENV", description="Environment profile")
    log_level: str = Field("INFO", alias="SWITCHBOX_LOG_LEVEL", description="Logging level")
    catalog_path: str = Field(
        "", alias="SWITCHBOX_CATALOG_PATH",
        description="JSON product catalog (empty = embedded catalog)",
    )
    search_limit: int = Field(
        DEFAULT_SEARCH_LIMIT, ge=1, alias="SWITCHBOX_SEARCH_LIMIT",
        description="Results for an empty search query",
    )
    frame_price: float = Field(
        DEFAULT_FRAME_PRICE, ge=0, alias="SWITCHBOX_FRAME_PRICE",
        description="Placeholder frame unit price",
    )
    adapter_price: float = Field(
        DEFAULT_ADAPTER_PRICE, ge=0, alias="SWITCHBOX_ADAPTER_PRICE",
        description="Placeholder adapter unit price",
    )
    currency: str = Field(
        "ILS", min_length=1, alias="SWITCHBOX_CURRENCY",
        description="Currency code for rendered prices",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def keys(cls) -> dict[str, str]:
        """Map every ``SWITCHBOX_*`` key to its description."""
        return {f.alias: f.description or "" for f in cls.model_fields.values() if f.alias}

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> Settings:
        """Validate merged layer values.

        Unknown keys are ignored.  A value that fails validation is
        logged and replaced by the field default.
        """
        known = {k: v for k, v in raw.items() if k in cls.keys()}
        try:
            return cls.model_validate(known)
        except ValidationError as exc:
            rejected = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
            for key in sorted(rejected):
                logger.warning("Invalid value for %s: %r, using default", key, known.get(key))
            return cls.model_validate({k: v for k, v in known.items() if k not in rejected})

    def resolve_catalog_path(self, project_path: str | Path | None = None) -> Path | None:
        """Catalog file location; relative paths are taken from *project_path*."""
        if not self.catalog_path:
            return None
        path = Path(self.catalog_path)
        if not path.is_absolute() and project_path is not None:
            path = Path(project_path) / path
        return path


class ConfigManager:
    """Collect raw configuration layers for a project and validate them."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.environ = os.environ if environ is None else environ

    def generate_env_template(self, project_path: str | Path) -> Path:
        """Write ``.env.example`` listing every key with its default."""
        env_path = Path(project_path) / ".env.example"
        lines = ["# Switchbox Configuration Template", "# Copy to .env and fill in values", ""]
        for field in Settings.model_fields.values():
            lines += [f"# {field.description}", f"{field.alias}={field.default}", ""]
        env_path.write_text("\n".join(lines), encoding="utf-8")
        return env_path

    def load_config(self, project_path: str | Path | None = None) -> dict[str, str]:
        """Return the merged raw ``SWITCHBOX_*`` values as strings.

        The profile is chosen from the highest layer that names
        ``SWITCHBOX_ENV``.
        """
        root = Path(project_path) if project_path is not None else None
        file_layers: list[tuple[str, dict[str, str]]] = []
        if root is not None:
            file_layers.append(("config.json", _read_json_layer(root / ".switchbox" / "config.json")))
            file_layers.append((".env", _read_env_layer(root / ".env")))
        environ_layer = {k: self.environ[k] for k in Settings.keys() if k in self.environ}

        defaults = {
            f.alias: str(f.default) for f in Settings.model_fields.values() if f.alias
        }
        env_name = defaults["SWITCHBOX_ENV"]
        for _, layer in [*file_layers, ("environment", environ_layer)]:
            env_name = layer.get("SWITCHBOX_ENV", env_name)
        profile = {"SWITCHBOX_ENV": env_name, **_PROFILES.get(env_name, {})}

        config: dict[str, str] = {}
        layers = [("defaults", defaults), (f"profile {env_name}", profile),
                  *file_layers, ("environment", environ_layer)]
        for source, layer in layers:
            for key, value in layer.items():
                if key not in defaults:
                    logger.debug("Ignoring unknown config key %s from %s", key, source)
                    continue
                config[key] = value
        return config

    def load_settings(self, project_path: str | Path | None = None) -> Settings:
        return Settings.from_raw(self.load_config(project_path))

    def list_keys(self) -> dict[str, str]:
        """Return every known key with its description."""
        return Settings.keys()


def _read_json_layer(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read %s", path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", path)
        return {}
    return {str(k): str(v) for k, v in data.items()}


def _read_env_layer(path: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines; ``export`` prefixes and matching quotes are stripped."""
    if not path.is_file():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        logger.warning("Could not read %s", path, exc_info=True)
        return {}
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip().removeprefix("export ").strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key] = value
    return values
