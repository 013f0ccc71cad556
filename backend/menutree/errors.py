"""
menutree/errors.py

Error taxonomy for menu tree operations.

ValidationError, PrecedenceError, ConflictError and NotFoundError are raised
while planning, before anything is written. PartialFailureError is the only
one raised after writes have started.
"""
from typing import Dict, List, Optional


class MenuTreeError(Exception):
    """Base class; message is safe to show to an admin user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MenuTreeError):
    """Cycle, cross-site move, bad index, unknown locale or invalid path."""


class PrecedenceError(MenuTreeError):
    """A locale cannot be enabled while an ancestor has it disabled."""

    def __init__(self, message: str, node_id: str, parent_id: str, locale: str):
        super().__init__(message)
        self.node_id = node_id
        self.parent_id = parent_id
        self.locale = locale


class ConflictError(MenuTreeError):
    """Delete attempted on a node that still has children."""

    def __init__(self, message: str, node_id: str, child_ids: List[str]):
        super().__init__(message)
        self.node_id = node_id
        self.child_ids = child_ids


class NotFoundError(MenuTreeError):
    """The referenced node is not (or no longer) in the snapshot or store."""

    def __init__(self, node_id: str, message: Optional[str] = None):
        super().__init__(message or f"Menu {node_id} not found")
        self.node_id = node_id


class PartialFailureError(MenuTreeError):
    """Some updates of a fan-out failed after others were written.

    Nothing is rolled back. The stored tree may violate its invariants until
    the next successful mutation; callers should reload it.
    """

    def __init__(self, succeeded: List[str], failed: Dict[str, str]):
        super().__init__(
            f"{len(failed)} of {len(succeeded) + len(failed)} menu updates failed; "
            f"reload the menu tree"
        )
        self.succeeded = succeeded
        self.failed = failed
