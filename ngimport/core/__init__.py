# Core modules
# Tree layer only; services import ngimport.core.tree while config is still loading.
from .tree import (
    Tree,
    WorkspaceTree,
    UpdateRecorder,
    SchematicsError,
    MissingFileError,
)

__all__ = [
    "Tree",
    "WorkspaceTree",
    "UpdateRecorder",
    "SchematicsError",
    "MissingFileError",
]
