"""
Schematic settings.

The defaults describe the Angular module convention: an ``@NgModule``
decorator whose ``imports`` array receives the new symbol.
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from ngimport.services.config_service import ConfigService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchematicSettings:
    decorator_name: str = "NgModule"
    property_name: str = "imports"
    entry_indent: str = "    "
    quote: str = "'"


DEFAULT_SETTINGS = SchematicSettings()


def load_settings(config_path: Optional[Path] = None) -> SchematicSettings:
    """
    Build settings from the ``schematic`` section of a JSON config file.

    Missing file or section -> defaults. Unknown keys are ignored.
    """
    service = ConfigService(config_path=config_path)
    service.load()
    section = service.get("schematic", {})
    if not isinstance(section, dict):
        raise ValueError("'schematic' config section must be an object")

    known = {f.name for f in fields(SchematicSettings)}
    overrides = {}
    for key, value in section.items():
        if key not in known:
            logger.warning(f"Ignoring unknown schematic setting: {key}")
            continue
        if not isinstance(value, str):
            raise ValueError(f"Setting '{key}' must be a string")
        overrides[key] = value

    return replace(DEFAULT_SETTINGS, **overrides)
