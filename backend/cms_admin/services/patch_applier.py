"""
Patch applier - the "apply" half of plan/apply

Issues one independent NodeStore.update per node. There is no transaction
around the set: a failure part-way leaves the earlier writes in place and is
reported as PartialFailureError.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from menutree.errors import PartialFailureError
from menutree.types import MenuPatch

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, Exception] = field(default_factory=dict)


def _documents(
    patches: List[MenuPatch], extra: Optional[Dict[str, Dict[str, Any]]],
) -> List[Tuple[str, Dict[str, Any]]]:
    """One update document per node: the patch fields plus any extra fields."""
    docs: Dict[str, Dict[str, Any]] = {}
    for patch in patches:
        docs.setdefault(patch.id, {}).update(patch.as_update())
    for node_id, changes in (extra or {}).items():
        docs.setdefault(node_id, {}).update(changes)
    return [(node_id, changes) for node_id, changes in docs.items() if changes]


def _apply_one(store, node_id: str, changes: Dict[str, Any], actor_id: Optional[str]) -> None:
    changes = dict(changes)
    if actor_id is not None:
        changes["updated_by"] = actor_id
    store.update(node_id, changes)


def apply_patches(
    store,
    patches: List[MenuPatch],
    max_workers: int = 1,
    actor_id: Optional[str] = None,
    extra: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ApplyResult:
    """Write patches to store.

    extra maps node ids to non-structural fields (labels, path, ...) written
    in the same update call as that node's patch, so they succeed or fail
    together with it.

    Calls run concurrently when the store allows it and max_workers > 1,
    otherwise one after another. Every node is attempted even after a
    failure.

    Raises:
        The original exception when every call failed.
        PartialFailureError when some calls failed and some succeeded.
    """
    result = ApplyResult()
    documents = _documents(patches, extra)
    if not documents:
        return result

    concurrent = getattr(store, "supports_concurrent_writes", False) and max_workers > 1
    if concurrent:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(documents))) as pool:
            futures = [
                (node_id, pool.submit(_apply_one, store, node_id, changes, actor_id))
                for node_id, changes in documents
            ]
            for node_id, future in futures:
                error = future.exception()
                if error is None:
                    result.succeeded.append(node_id)
                else:
                    result.failed[node_id] = error
    else:
        for node_id, changes in documents:
            try:
                _apply_one(store, node_id, changes, actor_id)
            except Exception as e:
                result.failed[node_id] = e
            else:
                result.succeeded.append(node_id)

    if result.failed:
        for node_id, error in result.failed.items():
            logger.error(f"Menu update failed for {node_id}: {error}")
        if not result.succeeded:
            raise next(iter(result.failed.values()))
        raise PartialFailureError(
            succeeded=list(result.succeeded),
            failed={node_id: str(e) for node_id, e in result.failed.items()},
        )

    logger.info(f"Applied {len(result.succeeded)} menu update(s)")
    return result
