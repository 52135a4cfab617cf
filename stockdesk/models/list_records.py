# Rev 1.0.0

"""Typed rows shown by the product, inventory and audit list screens."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional


def _opt_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def _opt_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass(frozen=True)
class ProductRecord:
    id: int
    name: str
    unit: str
    price: float
    category: str
    source_type: str
    subcategory_id: Optional[int]
    location_id: Optional[int]
    min_stock_threshold: Optional[float]
    product_formula_id: Optional[int]
    subcategory_name: Optional[str] = None
    location_name: Optional[str] = None
    product_formula_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ProductRecord":
        return cls(
            id=int(row["id"]),
            name=row["name"],
            unit=row.get("unit") or "",
            price=float(row.get("price") or 0),
            category=row["category"],
            source_type=row.get("source_type") or "",
            subcategory_id=_opt_int(row.get("subcategory_id")),
            location_id=_opt_int(row.get("location_id")),
            min_stock_threshold=_opt_float(row.get("min_stock_threshold")),
            product_formula_id=_opt_int(row.get("product_formula_id")),
            subcategory_name=row.get("subcategory_name"),
            location_name=row.get("location_name"),
            product_formula_name=row.get("product_formula_name"),
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InventoryEntryRecord:
    id: int
    product_id: int
    quantity: float
    entry_type: str
    timestamp: str
    user_id: Optional[int]
    location_id: Optional[int]
    notes: Optional[str] = None
    reference_id: Optional[str] = None
    product_name: Optional[str] = None
    location_name: Optional[str] = None
    username: Optional[str] = None

    @property
    def is_inbound(self) -> bool:
        return self.entry_type.endswith("_in")

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "InventoryEntryRecord":
        return cls(
            id=int(row["id"]),
            product_id=int(row["product_id"]),
            quantity=float(row["quantity"]),
            entry_type=row["entry_type"],
            timestamp=row.get("timestamp") or row.get("created_at") or "",
            user_id=_opt_int(row.get("user_id")),
            location_id=_opt_int(row.get("location_id")),
            notes=row.get("notes"),
            reference_id=row.get("reference_id"),
            product_name=row.get("product_name"),
            location_name=row.get("location_name"),
            username=row.get("username"),
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AuditLogRecord:
    id: int
    entry_id: Optional[int]
    action: str
    user_id: Optional[int]
    timestamp: str
    is_flag: bool
    reason: Optional[str] = None
    username: Optional[str] = None
    product_name: Optional[str] = None
    location_name: Optional[str] = None
    entry_reference_id: Optional[str] = None
    old_data: Optional[Dict[str, Any]] = None
    new_data: Optional[Dict[str, Any]] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AuditLogRecord":
        return cls(
            id=int(row["id"]),
            entry_id=_opt_int(row.get("entry_id")),
            action=str(row["action"]).lower(),
            user_id=_opt_int(row.get("user_id")),
            timestamp=row.get("timestamp") or "",
            is_flag=bool(row.get("is_flag")),
            reason=row.get("reason"),
            username=row.get("username"),
            product_name=row.get("product_name"),
            location_name=row.get("location_name"),
            entry_reference_id=row.get("entry_reference_id"),
            old_data=row.get("old_data"),
            new_data=row.get("new_data"),
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
