"""
ngimport command line entry point.

Runs the import-and-add-module schematic against a workspace directory.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ngimport.config.settings import load_settings
from ngimport.core.schematic import ImportOptions, SchematicContext, main as schematic_main
from ngimport.core.tree import SchematicsError, WorkspaceTree
from ngimport.services.config_service import DEFAULT_CONFIG_NAME
from ngimport.services.file_service import FileService
from ngimport.utils.path_utils import resolve_base_dir, workspace_relative

logger = logging.getLogger(__name__)

__version__ = "1.0.0"


def _create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ngimport",
        description="Import a module and add it to the imports of an NgModule",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ngimport --module src/app/core/core.module.ts --import HttpClientModule --from @angular/common/http
  ngimport --module src/app/app.module.ts --import SharedModule --from ./shared/shared.module --dry-run
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ngimport {__version__}"
    )
    parser.add_argument(
        "--module",
        required=True,
        help="Module file to edit: relative to the workspace, or absolute inside it"
    )
    parser.add_argument(
        "--import",
        dest="symbol",
        required=True,
        help="Symbol to import and add to the imports array"
    )
    parser.add_argument(
        "--from",
        dest="source",
        required=True,
        help="Module specifier to import the symbol from"
    )
    parser.add_argument(
        "--dir",
        type=str,
        help="Workspace root (default: current directory)"
    )
    parser.add_argument(
        "--config",
        type=str,
        help=f"JSON config file (default: <workspace>/{DEFAULT_CONFIG_NAME})"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the changes instead of writing them"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = _create_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    base_dir = resolve_base_dir(args.dir)
    config_path = Path(args.config) if args.config else base_dir / DEFAULT_CONFIG_NAME

    try:
        settings = load_settings(config_path)
    except ValueError as e:
        logger.error(str(e))
        return 1

    tree = WorkspaceTree(FileService(base_dir))
    context = SchematicContext(settings=settings)

    try:
        options = ImportOptions(
            module_path=workspace_relative(base_dir, args.module),
            imported_symbol=args.symbol,
            import_source=args.source,
        )
        rule = schematic_main(options, context.logger)
        rule(tree, context)
        changes = tree.flush(dry_run=args.dry_run)
    except SchematicsError as e:
        logger.error(str(e))
        return 1

    if args.dry_run:
        for _, diff in changes:
            sys.stdout.write(diff)
    if not changes:
        logger.info("Nothing to change")
    return 0


if __name__ == "__main__":
    sys.exit(main())
