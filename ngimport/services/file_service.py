"""
File Service

Service class for workspace file access.
All paths are resolved against a base directory and must stay inside it.
"""

import logging
from pathlib import Path
from typing import Optional

from ngimport.core.tree import SandboxViolationError
from ngimport.utils.path_utils import is_safe_path

logger = logging.getLogger("NgImport.FileService")


class FileService:
    """
    Service class for file operations.

    Provides sandboxed, logged file operations:
    - read/write as bytes
    - delete
    """

    def __init__(self, base_dir: Path):
        """
        Initialize file service.

        Args:
            base_dir: Workspace root; every path is resolved against it
        """
        self.base_dir = Path(base_dir).resolve()
        logger.debug(f"FileService initialized (base_dir: {self.base_dir})")

    def read_bytes(self, path: str) -> Optional[bytes]:
        """
        Read raw file content.

        Args:
            path: File path relative to base_dir

        Returns:
            File content or None if the file does not exist
        """
        p = self._resolve_path(path)
        if not p.is_file():
            logger.debug(f"File not found: {path}")
            return None
        try:
            return p.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            return None

    def write_bytes(self, path: str, data: bytes) -> bool:
        """
        Write raw file content, creating parent directories.

        Returns:
            True if successful
        """
        p = self._resolve_path(path)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
            logger.debug(f"File written: {path}")
            return True
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            return False

    def delete(self, path: str) -> bool:
        """
        Delete a file.

        Returns:
            True if successful
        """
        p = self._resolve_path(path)
        if not p.is_file():
            logger.warning(f"Path does not exist: {path}")
            return False
        try:
            p.unlink()
            logger.debug(f"Deleted: {path}")
            return True
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}")
            return False

    def _resolve_path(self, path: str) -> Path:
        """
        Resolve path relative to base_dir.

        Raises:
            SandboxViolationError: If the path escapes base_dir
        """
        p = Path(path)
        resolved = p.resolve() if p.is_absolute() else (self.base_dir / p).resolve()
        if not is_safe_path(self.base_dir, resolved):
            raise SandboxViolationError(f"Sandbox Violation: {resolved} outside workspace root")
        return resolved
