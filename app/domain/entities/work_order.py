"""WorkOrderRef — the source job an assignment schedules pieces of."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WorkOrderRef:
    id: str
    display_id: str | None
    item_code: str | None
    customer: str | None
    quantity: int = 0

    @property
    def label(self) -> str:
        return self.display_id or self.id

    def search_fields(self) -> list[str]:
        return [f for f in (self.display_id, self.id, self.item_code, self.customer) if f]
