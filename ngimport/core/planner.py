"""
Edit planning for the import-and-add-module rule.

Produces at most two insertions, both positioned against the original text:
  1. the import line, after the last top-level import (or at offset 0),
  2. the new entry, after the last element of the ``imports`` array.

Known limitations, kept on purpose until product confirms otherwise:
  - an empty ``imports: []`` is never populated,
  - an import only counts as present when its clause is exactly
    ``{ Symbol }``, so aliased or multi-name imports get a duplicate line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ngimport.config.settings import DEFAULT_SETTINGS, SchematicSettings
from ngimport.core.locator import (
    array_elements,
    find_decorator,
    find_property_array,
    has_named_import,
    last_import_end,
    text_matches,
)
from ngimport.core.source import SourceFile

logger = logging.getLogger(__name__)

LEFT = "left"
RIGHT = "right"


@dataclass(frozen=True)
class Insertion:
    position: int
    text: str
    side: str


def plan_import(
    source: SourceFile,
    symbol: str,
    module: str,
    settings: SchematicSettings = DEFAULT_SETTINGS,
) -> List[Insertion]:
    if has_named_import(source, symbol, module, settings.quote):
        logger.debug(f"{symbol} already imported from {module}")
        return []
    q = settings.quote
    statement = f"\nimport {{ {symbol} }} from {q}{module}{q};\n"
    return [Insertion(last_import_end(source), statement, LEFT)]


def plan_array_entry(
    source: SourceFile,
    symbol: str,
    settings: SchematicSettings = DEFAULT_SETTINGS,
) -> List[Insertion]:
    decorator = find_decorator(source, settings.decorator_name)
    if decorator is None:
        return []
    array = find_property_array(source, decorator, settings.property_name)
    if array is None:
        return []
    elements = array_elements(array)
    if not elements:
        return []
    if any(text_matches(source, el, symbol) for el in elements):
        logger.debug(f"{symbol} already listed in {settings.property_name}")
        return []
    entry = f",\n{settings.entry_indent}{symbol}"
    return [Insertion(source.end(elements[-1]), entry, RIGHT)]


def plan_edits(
    source: SourceFile,
    symbol: str,
    module: str,
    settings: SchematicSettings = DEFAULT_SETTINGS,
) -> List[Insertion]:
    """Insertions needed so ``symbol`` is imported and listed; may be empty."""
    return plan_import(source, symbol, module, settings) + plan_array_entry(source, symbol, settings)
