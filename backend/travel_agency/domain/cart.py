"""Cart value object held in the customer's session.

The cart never touches storage. It is rebuilt from the session payload at
the start of a request and written back at the end.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from travel_agency.domain import pricing


@dataclass
class CartItem:
    package_id: UUID
    title: str
    people_count: int
    unit_price: Decimal

    def __post_init__(self) -> None:
        if self.people_count < 1:
            raise ValueError("Cart item people count must be at least 1")

    @property
    def line_total(self) -> Decimal:
        return pricing.line_total(self.unit_price, self.people_count)

    def to_dict(self) -> dict[str, Any]:
        return {
            "package_id": str(self.package_id),
            "title": self.title,
            "people_count": self.people_count,
            "unit_price": str(self.unit_price),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartItem":
        return cls(
            package_id=UUID(str(data["package_id"])),
            title=data.get("title", ""),
            people_count=int(data["people_count"]),
            unit_price=Decimal(str(data["unit_price"])),
        )


@dataclass
class Cart:
    items: list[CartItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, package_id: UUID) -> Optional[CartItem]:
        return next((i for i in self.items if i.package_id == package_id), None)

    def stage(self, package_id: UUID, title: str, unit_price: Decimal, count: int) -> CartItem:
        """Add a package, or grow the quantity of one already staged.

        Counts below 1 stage a single seat. The title and price snapshot is
        taken when the package is first staged.
        """
        count = max(1, count)
        existing = self.find(package_id)
        if existing is not None:
            existing.people_count += count
            return existing
        item = CartItem(package_id=package_id, title=title, people_count=count, unit_price=unit_price)
        self.items.append(item)
        return item

    def remove(self, package_id: UUID) -> None:
        self.items = [i for i in self.items if i.package_id != package_id]

    def clear(self) -> None:
        self.items = []

    @property
    def total(self) -> Decimal:
        return pricing.grand_total((i.unit_price, i.people_count) for i in self.items)

    def to_session(self) -> list[dict[str, Any]]:
        return [i.to_dict() for i in self.items]

    @classmethod
    def from_session(cls, payload: Optional[list[dict[str, Any]]]) -> "Cart":
        return cls(items=[CartItem.from_dict(d) for d in payload or []])
