"""
Batch promotion of pending objects to the approved folder.

Given a list of identifiers (member addresses), moves each one's pending
object into approved. Identifiers are processed independently: a failure
on one is recorded and never stops the rest of the batch.
"""
import logging
import time
from typing import Iterable, List

from poi_gateway.storage.folder_index import FolderIndex
from poi_gateway.storage.models import ErrorRecord, Folder, SkipRecord, SyncResult
from poi_gateway.storage.move import MoveEngine
from poi_gateway.utils.logging import log_sync_completed
from poi_gateway.utils.metrics import sync_items_total

logger = logging.getLogger(__name__)

NO_PENDING_OBJECT = "no pending object"


class SyncService:
    """
    Coordinates pending -> approved promotion for a batch of identifiers.

    Re-running with the same identifiers is safe: anything already moved is
    no longer in pending and comes back as skipped.
    """

    def __init__(
        self,
        index: FolderIndex,
        mover: MoveEngine,
        batch_limit: int = 50,
        source: Folder = Folder.PENDING,
        target: Folder = Folder.APPROVED
    ):
        self._index = index
        self._mover = mover
        self._batch_limit = batch_limit
        self._source = source
        self._target = target

    def _prepare(self, identifiers: Iterable[str]) -> List[str]:
        """Truncate to the batch limit, then drop repeats keeping first occurrence."""
        batch = list(identifiers)[:self._batch_limit]
        seen = set()
        unique = []
        for identifier in batch:
            if identifier in seen:
                continue
            seen.add(identifier)
            unique.append(identifier)
        return unique

    async def sync(self, identifiers: Iterable[str]) -> SyncResult:
        """
        Promote each identifier's pending object to approved.

        Args:
            identifiers: Caller-supplied identifiers; anything beyond the
                batch limit is ignored

        Returns:
            SyncResult partitioning every processed identifier into
            moved, skipped or errors

        Raises:
            UpstreamError: If the pending folder cannot be listed at all
        """
        start_time = time.time()
        batch = self._prepare(identifiers)
        result = SyncResult()

        if not batch:
            return result

        # One listing for the whole batch
        pending = await self._index.index_folder(self._source)

        for identifier in batch:
            obj = pending.get(identifier)
            if obj is None:
                result.skipped.append(SkipRecord(identifier=identifier, reason=NO_PENDING_OBJECT))
                sync_items_total.labels(outcome="skipped").inc()
                continue

            try:
                record = await self._mover.move(obj, self._target)
            except Exception as e:
                logger.warning(f"Sync failed for {identifier}: {e}")
                result.errors.append(ErrorRecord(identifier=identifier, error=str(e)))
                sync_items_total.labels(outcome="error").inc()
                continue

            # Report the caller's identifier even if the name's split differs
            record.identifier = identifier
            result.moved.append(record)
            sync_items_total.labels(outcome="moved").inc()

        log_sync_completed(
            logger,
            requested=len(batch),
            moved=len(result.moved),
            skipped=len(result.skipped),
            errors=len(result.errors),
            duration_ms=(time.time() - start_time) * 1000
        )
        return result
