import logging
from typing import Iterable

from ngimport.core.planner import LEFT, RIGHT, Insertion
from ngimport.core.tree import SchematicsError, Tree

logger = logging.getLogger(__name__)


def apply_insertions(tree: Tree, path: str, insertions: Iterable[Insertion]) -> int:
    """
    Queue every insertion on one recorder and commit it as a single update.

    Returns the number of insertions applied.
    """
    recorder = tree.begin_update(path)
    for insertion in insertions:
        if insertion.side == LEFT:
            recorder.insert_left(insertion.position, insertion.text)
        elif insertion.side == RIGHT:
            recorder.insert_right(insertion.position, insertion.text)
        else:
            raise SchematicsError(f"Unknown insertion side: {insertion.side!r}")
    tree.commit_update(recorder)
    logger.debug(f"{recorder.edit_count} insertion(s) committed to {path}")
    return recorder.edit_count
