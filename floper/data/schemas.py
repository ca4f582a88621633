"""
Record kind schemas: field typing and spreadsheet ↔ storage column naming.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from floper.config import (
    STOCK_TABLE, SALES_TABLE, PERSONNEL_TABLE,
    STOCK_COLUMN_MAP, SALES_COLUMN_MAP, PERSONNEL_COLUMN_MAP,
)


class KindName(str, Enum):
    STOCK = "stock"
    SALES = "sales"
    PERSONNEL = "personnel"


@dataclass(frozen=True)
class RecordKind:
    """Describes one record kind stored in its own remote table."""
    name: KindName
    table: str
    column_map: dict[str, str]                       # domain field → storage column
    int_fields: tuple[str, ...] = ()
    float_fields: tuple[str, ...] = ()
    label: str = ""
    # Fields summed by the default summary (may be text fields parsed at aggregation time)
    quantity_field: str | None = None
    amount_field: str | None = None
    group_fields: tuple[str, ...] = field(default_factory=tuple)

    @property
    def fields(self) -> list[str]:
        return list(self.column_map.keys())

    @property
    def numeric_fields(self) -> tuple[str, ...]:
        return self.int_fields + self.float_fields

    @property
    def text_fields(self) -> list[str]:
        return [f for f in self.column_map if f not in self.numeric_fields]

    @property
    def storage_to_domain(self) -> dict[str, str]:
        return {v: k for k, v in self.column_map.items()}


STOCK = RecordKind(
    name=KindName.STOCK,
    table=STOCK_TABLE,
    column_map=STOCK_COLUMN_MAP,
    label="Stock",
    quantity_field="Envanter",
    group_fields=("Marka", "Ürün Grubu", "Sezon"),
)

SALES = RecordKind(
    name=KindName.SALES,
    table=SALES_TABLE,
    column_map=SALES_COLUMN_MAP,
    int_fields=("Satış Miktarı",),
    label="Sales",
    quantity_field="Satış Miktarı",
    group_fields=("Marka", "Ürün Grubu"),
)

PERSONNEL = RecordKind(
    name=KindName.PERSONNEL,
    table=PERSONNEL_TABLE,
    column_map=PERSONNEL_COLUMN_MAP,
    int_fields=("satisAdeti",),
    float_fields=("satisFiyati",),
    label="Personnel Sales",
    quantity_field="satisAdeti",
    amount_field="satisFiyati",
    group_fields=("personelAdi", "marka"),
)

KINDS: dict[KindName, RecordKind] = {k.name: k for k in (STOCK, SALES, PERSONNEL)}


def get_kind(name: str | KindName) -> RecordKind:
    """Look up a record kind by name; raises ValueError for unknown names."""
    return KINDS[KindName(name)]
