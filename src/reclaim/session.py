"""Per-session holder for scan snapshots and the user's selection.

The engine itself is stateless; a ScanSession is owned by whoever presents
results. Each scan replaces a snapshot wholesale, and successful deletes
remove the deleted path from every snapshot.
"""

import logging
from threading import Event
from typing import Callable

from pydantic import BaseModel, Field

from reclaim.cleaner import DELETE_OPERATIONS, run_batch_delete
from reclaim.models import (
    BatchProgress,
    BatchSummary,
    CacheEntry,
    DeleteResult,
    DeveloperCache,
    DuplicateGroup,
    LargeAppData,
    LargeFile,
    OrphanFile,
)

log = logging.getLogger(__name__)


class ScanSession(BaseModel):
    """Scan results and selection for one presentation session."""

    caches: tuple[CacheEntry, ...] = ()
    developer_caches: tuple[DeveloperCache, ...] = ()
    orphans: tuple[OrphanFile, ...] = ()
    app_data: tuple[LargeAppData, ...] = ()
    large_files: tuple[LargeFile, ...] = ()
    duplicates: tuple[DuplicateGroup, ...] = ()
    selection: set[str] = Field(default_factory=set)

    def record(self, kind: str, results: list) -> None:
        """Replace the snapshot for kind with fresh scan results."""
        if kind not in DELETE_OPERATIONS:
            raise ValueError(f"Unknown result kind: {kind}")
        setattr(self, _field(kind), tuple(results))

    def select(self, *paths: str) -> None:
        self.selection.update(paths)

    def deselect(self, *paths: str) -> None:
        self.selection.difference_update(paths)

    def names(self, kind: str) -> dict[str, str]:
        """Deletable items of a snapshot as display names keyed by path."""
        if kind == "duplicates":
            # The first copy of each group is always kept.
            return {f.path: f.name for g in self.duplicates for f in g.wasted_files}
        return {item.path: item.name for item in getattr(self, _field(kind))}

    def apply_delete(self, result: DeleteResult) -> None:
        """
        Drop a successfully deleted path from every snapshot.

        Duplicate groups lose the member; groups left with fewer than two
        members disappear. Developer caches are emptied, not removed, so the
        entry stays with a size of 0.
        """
        if not result.success:
            return

        path = result.path
        self.selection.discard(path)
        self.caches = tuple(c for c in self.caches if c.path != path)
        self.orphans = tuple(o for o in self.orphans if o.path != path)
        self.app_data = tuple(a for a in self.app_data if a.path != path)
        self.large_files = tuple(f for f in self.large_files if f.path != path)
        self.developer_caches = tuple(
            c.model_copy(update={"size": 0}) if c.path == path else c for c in self.developer_caches
        )

        groups = []
        for group in self.duplicates:
            files = [f for f in group.files if f.path != path]
            if len(files) == len(group.files):
                groups.append(group)
            elif len(files) >= 2:
                groups.append(
                    DuplicateGroup(hash=group.hash, file_size=group.file_size, files=files)
                )
        self.duplicates = tuple(groups)

    def delete_selected(
        self,
        kind: str,
        progress_callback: Callable[[BatchProgress], None] | None = None,
        cancel: Event | None = None,
    ) -> BatchSummary:
        """
        Delete every selected path of kind, serially, in snapshot order.

        Successful paths leave the selection and the snapshots; failed
        paths stay selected.
        """
        operation = DELETE_OPERATIONS[kind]
        names = self.names(kind)
        paths = [p for p in names if p in self.selection]

        def on_progress(progress: BatchProgress) -> None:
            self.apply_delete(progress.result)
            if progress_callback:
                progress_callback(progress)

        summary = run_batch_delete(paths, operation, names, on_progress, cancel)
        log.info(
            "Deleted %d of %d %s (%d failed)",
            summary.success_count,
            len(paths),
            kind,
            summary.fail_count,
        )
        return summary


def _field(kind: str) -> str:
    return "developer_caches" if kind == "developer" else kind
