"""
Source Tree for ngimport.

A small recorder-style virtual file tree. Rules never touch the disk:
they read file contents from a Tree, open an UpdateRecorder, queue
positional edits against the original text and commit the recorder back.

  - Offsets are character offsets into the decoded UTF-8 text.
  - Edits are positioned against the ORIGINAL text, so several edits can be
    computed up front and queued in any order.
  - At a single offset, insert_left text lands before insert_right text;
    otherwise call order is preserved.

WorkspaceTree layers this over a directory on disk and stages changes in
memory until flush() is called.
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class SchematicsError(Exception):
    """Base error for tree and rule failures."""


class MissingFileError(SchematicsError):
    """Raised when a rule targets a file that is not in the tree."""

    def __init__(self, path: str):
        super().__init__(f"File {path} does not exist.")
        self.path = path


class ContentConflictError(SchematicsError):
    """Raised when queued edits overlap or fall outside the file."""


class SandboxViolationError(SchematicsError):
    """Raised when a path resolves outside the workspace root."""


class SourceDecodeError(SchematicsError):
    """Raised when a file's content is not valid UTF-8."""


def decode_source(path: str, data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SourceDecodeError(f"File {path} is not valid UTF-8: {e}") from e


def _normalize_path(path: Union[str, Path]) -> str:
    p = str(path).replace("\\", "/")
    parts = [seg for seg in p.split("/") if seg not in ("", ".")]
    return "/" + "/".join(parts)


# ----------------------------------------------------------------------
# UPDATE RECORDER
# ----------------------------------------------------------------------

_LEFT = 0
_RIGHT = 1
_REMOVE = 2


@dataclass
class _Edit:
    position: int
    kind: int
    seq: int
    text: str = ""
    length: int = 0


class UpdateRecorder:
    """Buffers edits for one file until Tree.commit_update() applies them."""

    def __init__(self, path: str, original: str):
        self.path = path
        self._original = original
        self._edits: List[_Edit] = []

    def _check_position(self, position: int) -> None:
        if position < 0 or position > len(self._original):
            raise ContentConflictError(
                f"Position {position} is out of range for {self.path} "
                f"(length {len(self._original)})"
            )

    def insert_left(self, position: int, text: str) -> "UpdateRecorder":
        """Insert text attached to whatever precedes ``position``."""
        self._check_position(position)
        self._edits.append(_Edit(position, _LEFT, len(self._edits), text=text))
        return self

    def insert_right(self, position: int, text: str) -> "UpdateRecorder":
        """Insert text attached to whatever follows ``position``."""
        self._check_position(position)
        self._edits.append(_Edit(position, _RIGHT, len(self._edits), text=text))
        return self

    def remove(self, position: int, length: int) -> "UpdateRecorder":
        if length < 0:
            raise ContentConflictError(f"Negative removal length {length}")
        self._check_position(position)
        self._check_position(position + length)
        self._edits.append(_Edit(position, _REMOVE, len(self._edits), length=length))
        return self

    @property
    def edit_count(self) -> int:
        return len(self._edits)

    def apply(self) -> str:
        """Return the original text with every queued edit applied."""
        text = self._original
        out: List[str] = []
        cursor = 0
        for edit in sorted(self._edits, key=lambda e: (e.position, e.kind, e.seq)):
            if edit.position < cursor:
                raise ContentConflictError(
                    f"Edit at {edit.position} overlaps a removed range in {self.path}"
                )
            out.append(text[cursor:edit.position])
            cursor = edit.position
            if edit.kind == _REMOVE:
                cursor = edit.position + edit.length
            else:
                out.append(edit.text)
        out.append(text[cursor:])
        return "".join(out)


# ----------------------------------------------------------------------
# TREE
# ----------------------------------------------------------------------

class Tree:
    """
    In-memory file tree.

    Paths are normalized to absolute POSIX form ("src/a.ts" -> "/src/a.ts").
    """

    def __init__(self, files: Optional[Dict[str, Union[str, bytes]]] = None):
        self._files: Dict[str, bytes] = {}
        self._originals: Dict[str, Optional[bytes]] = {}
        for path, content in (files or {}).items():
            data = content.encode("utf-8") if isinstance(content, str) else content
            self._files[_normalize_path(path)] = data

    # ---- read side ----------------------------------------------------
    def _load(self, path: str) -> Optional[bytes]:
        return self._files.get(path)

    def read(self, path: Union[str, Path]) -> Optional[bytes]:
        return self._load(_normalize_path(path))

    def read_text(self, path: Union[str, Path], encoding: str = "utf-8") -> Optional[str]:
        data = self.read(path)
        return data.decode(encoding) if data is not None else None

    def exists(self, path: Union[str, Path]) -> bool:
        return self.read(path) is not None

    # ---- write side ---------------------------------------------------
    def _store(self, path: str, data: Optional[bytes]) -> None:
        if path not in self._originals:
            self._originals[path] = self._load(path)
        if data is None:
            self._files.pop(path, None)
        else:
            self._files[path] = data

    def create(self, path: Union[str, Path], content: Union[str, bytes]) -> None:
        key = _normalize_path(path)
        if self._load(key) is not None:
            raise SchematicsError(f"Path {key} already exists.")
        self._store(key, content.encode("utf-8") if isinstance(content, str) else content)

    def overwrite(self, path: Union[str, Path], content: Union[str, bytes]) -> None:
        key = _normalize_path(path)
        if self._load(key) is None:
            raise MissingFileError(key)
        self._store(key, content.encode("utf-8") if isinstance(content, str) else content)

    def delete(self, path: Union[str, Path]) -> None:
        key = _normalize_path(path)
        if self._load(key) is None:
            raise MissingFileError(key)
        self._store(key, None)

    def begin_update(self, path: Union[str, Path]) -> UpdateRecorder:
        key = _normalize_path(path)
        data = self._load(key)
        if data is None:
            raise MissingFileError(key)
        return UpdateRecorder(key, decode_source(key, data))

    def commit_update(self, recorder: UpdateRecorder) -> None:
        if recorder.edit_count == 0:
            logger.debug(f"No edits queued for {recorder.path}")
            return
        updated = recorder.apply()
        self._store(recorder.path, updated.encode("utf-8"))
        logger.debug(f"Committed {recorder.edit_count} edit(s) to {recorder.path}")

    def changed_paths(self) -> List[str]:
        """Paths whose current content differs from what was first loaded."""
        return sorted(
            path for path, before in self._originals.items()
            if before != self._files.get(path)
        )

    def diff(self, path: Union[str, Path]) -> str:
        """Unified diff between the loaded and current content of ``path``."""
        key = _normalize_path(path)
        before = self._originals.get(key, self._load(key))
        after = self._files.get(key)
        before_lines = before.decode("utf-8").splitlines(keepends=True) if before else []
        after_lines = after.decode("utf-8").splitlines(keepends=True) if after else []
        return "".join(
            difflib.unified_diff(
                before_lines,
                after_lines,
                fromfile=f"a{key}",
                tofile=f"b{key}",
            )
        )


class WorkspaceTree(Tree):
    """
    Tree backed by a workspace directory.

    Files are read lazily through a FileService; every change stays in
    memory until flush().
    """

    def __init__(self, file_service):
        super().__init__()
        self.file_service = file_service
        self._missing: set = set()

    def _load(self, path: str) -> Optional[bytes]:
        if path in self._files:
            return self._files[path]
        if path in self._missing or path in self._originals:
            return None
        data = self.file_service.read_bytes(path.lstrip("/"))
        if data is None:
            self._missing.add(path)
            return None
        self._files[path] = data
        return data

    def flush(self, dry_run: bool = False) -> List[Tuple[str, str]]:
        """
        Write staged changes to disk.

        Returns a list of ``(path, unified_diff)`` for every changed file.
        With ``dry_run`` nothing is written.
        """
        results: List[Tuple[str, str]] = []
        for path in self.changed_paths():
            results.append((path, self.diff(path)))
            if dry_run:
                logger.info(f"[dry-run] Would update {path}")
                continue
            data = self._files.get(path)
            if data is None:
                ok = self.file_service.delete(path.lstrip("/"))
            else:
                ok = self.file_service.write_bytes(path.lstrip("/"), data)
            if not ok:
                raise SchematicsError(f"Failed to write {path}")
            logger.info(f"Updated {path}")
        if not dry_run:
            for path in list(self._originals):
                self._originals.pop(path)
        return results
