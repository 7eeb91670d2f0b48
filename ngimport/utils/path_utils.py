import os
from pathlib import Path
from typing import Optional, Union

from ngimport.core.tree import SandboxViolationError

def resolve_base_dir(
    cli_arg: Optional[str] = None,
    cwd: Optional[Union[str, Path]] = None
) -> Path:
    """
    Resolves the absolute workspace root.

    Priority:
    1. CLI argument (--dir)
    2. Current working directory (cwd)

    Returns:
        Path: Absolute, resolved path to the workspace root.
    """
    if cli_arg:
        # Expand user (~) and resolve absolute path
        return Path(cli_arg).expanduser().resolve()
    return Path(cwd or os.getcwd()).resolve()

def is_safe_path(base_dir: Path, target_path: Path) -> bool:
    """
    Verifies that target_path is within base_dir or is base_dir itself.
    Prevents path traversal attacks.
    """
    base = base_dir.resolve()
    target = target_path.resolve()
    return target == base or base in target.parents

def workspace_relative(base_dir: Path, path: str) -> str:
    """
    Express a module path relative to base_dir.

    Relative paths are returned as given.

    Raises:
        SandboxViolationError: If an absolute path lies outside base_dir
    """
    p = Path(path).expanduser()
    if not p.is_absolute():
        return path
    base = base_dir.resolve()
    target = p.resolve()
    if not is_safe_path(base, target):
        raise SandboxViolationError(f"Sandbox Violation: {target} outside workspace root")
    return target.relative_to(base).as_posix()
