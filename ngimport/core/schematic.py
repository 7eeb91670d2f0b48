"""
Import-and-add-module schematic.

``main(options)`` returns a rule that, applied to a source Tree, makes sure
the module file imports ``options.imported_symbol`` from
``options.import_source`` and lists it in the ``@NgModule`` ``imports``
array. Rules are plain callables ``rule(tree, context) -> tree`` so they
compose with chain().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional

from ngimport.config.settings import DEFAULT_SETTINGS, SchematicSettings
from ngimport.core.applicator import apply_insertions
from ngimport.core.planner import plan_edits
from ngimport.core.source import SourceFile
from ngimport.core.tree import MissingFileError, Tree, decode_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportOptions:
    """Which module file to edit, and what to import into it."""

    module_path: str
    imported_symbol: str
    import_source: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ImportOptions":
        """Build from pipeline options keyed ``module`` / ``import`` / ``from``."""
        return cls(
            module_path=str(data.get("module", "")),
            imported_symbol=str(data.get("import", "")),
            import_source=str(data.get("from", "")),
        )


@dataclass
class SchematicContext:
    """Collaborators shared by the rules of one run."""

    logger: logging.Logger = field(default_factory=lambda: logger)
    settings: SchematicSettings = DEFAULT_SETTINGS


Rule = Callable[[Tree, SchematicContext], Tree]


def chain(rules: Iterable[Rule]) -> Rule:
    """Compose rules into one that applies them in order."""
    rules = list(rules)

    def run(tree: Tree, context: SchematicContext) -> Tree:
        for rule in rules:
            tree = rule(tree, context)
        return tree

    return run


def import_and_add_module(options: ImportOptions) -> Rule:
    """Rule importing the symbol and adding it to the NgModule imports."""

    def rule(tree: Tree, context: SchematicContext) -> Tree:
        path = options.module_path
        data = tree.read(path)
        if data is None:
            raise MissingFileError(path)

        source = SourceFile(path, decode_source(path, data))
        insertions = plan_edits(
            source,
            options.imported_symbol,
            options.import_source,
            context.settings,
        )
        apply_insertions(tree, path, insertions)
        return tree

    return rule


def main(options: ImportOptions, log: Optional[logging.Logger] = None) -> Rule:
    (log or logger).info("Adding module to core module")
    return chain([import_and_add_module(options)])


def run_schematic(
    tree: Tree,
    options: ImportOptions,
    context: Optional[SchematicContext] = None,
) -> Tree:
    """Apply main(options) to ``tree``; convenience for callers and tests."""
    context = context or SchematicContext()
    return main(options, context.logger)(tree, context)
