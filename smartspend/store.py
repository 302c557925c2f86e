"""
Record Store

The ordered list of extracted receipts for the current session and the
single source of truth for every chart, number and AI summary.

DESIGN DECISION: The store is an immutable value. `append` and `clear`
return a new store, so a snapshot handed to the aggregator or to an AI
call can never change underneath it.
"""

from typing import Iterable

from pydantic import BaseModel, ConfigDict

from smartspend.models.receipt import ReceiptRecord


class RecordStore(BaseModel):
    """
    Append-only (within a session) sequence of receipt records.

    No deduplication: uploading the same receipt twice yields two records.
    """
    model_config = ConfigDict(frozen=True)

    records: tuple[ReceiptRecord, ...] = ()

    def append(self, batch: Iterable[ReceiptRecord]) -> "RecordStore":
        """Concatenate `batch` after the existing records, order preserved."""
        batch = tuple(batch)
        if not batch:
            return self
        return RecordStore(records=self.records + batch)

    def clear(self) -> "RecordStore":
        """
        Discard every record.

        Destructive and not undoable: callers get explicit user
        confirmation first.
        """
        return RecordStore()

    def snapshot(self) -> tuple[ReceiptRecord, ...]:
        return self.records

    @property
    def is_empty(self) -> bool:
        return not self.records

    def __len__(self) -> int:
        return len(self.records)
