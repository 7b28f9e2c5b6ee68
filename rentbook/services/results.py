from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ItemStatus(str, Enum):
    """Outcome of one item inside a batch operation."""

    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ItemResult:
    """
    Result for a single tenant or rent record processed by a batch.

    Either `record` (for DONE) or `error` (for FAILED) is set.
    """

    status: ItemStatus
    tenant_id: int | None = None
    tenant_name: str | None = None
    contact_number: str | None = None
    record: Any = None
    rent_id: int | None = None
    error: str | None = None

    @classmethod
    def done(cls, record, **info) -> "ItemResult":
        return cls(status=ItemStatus.DONE, record=record, **info)

    @classmethod
    def skipped(cls, **info) -> "ItemResult":
        return cls(status=ItemStatus.SKIPPED, **info)

    @classmethod
    def failed(cls, error: str, **info) -> "ItemResult":
        return cls(status=ItemStatus.FAILED, error=error, **info)


@dataclass
class BatchResult:
    """Ordered per-item results of a best-effort batch."""

    items: list[ItemResult] = field(default_factory=list)

    def add(self, item: ItemResult) -> None:
        self.items.append(item)

    def _with(self, status):
        return [i for i in self.items if i.status == status]

    @property
    def done(self) -> list[ItemResult]:
        return self._with(ItemStatus.DONE)

    @property
    def skipped(self) -> list[ItemResult]:
        return self._with(ItemStatus.SKIPPED)

    @property
    def failed(self) -> list[ItemResult]:
        return self._with(ItemStatus.FAILED)

    @property
    def total(self) -> int:
        return len(self.items)
