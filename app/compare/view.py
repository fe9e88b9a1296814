# app/compare/view.py
from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from app.compare.models import LaptopRecord
from app.compare.ranker import DIFFERENT_PROCESSORS_NOTE, Rank, rank_values
from app.compare.specs import (
    SPECIFICATIONS,
    SpecDefinition,
    SpecValue,
    best_price,
    format_value,
    group_by_category,
)
from app.compare.store import MAX_COMPARE_ITEMS
from app.utils.money import format_inr

MAX_FEATURES = 10


@dataclass
class Cell:
    laptop_id: str
    value: SpecValue
    display: str
    rank: Rank
    annotation: Optional[str] = None


@dataclass
class Row:
    label: str
    value_type: str
    unit: Optional[str]
    cells: List[Cell]


@dataclass
class Section:
    category: str
    title: str
    rows: List[Row]


@dataclass
class LaptopSummary:
    id: str
    title: str
    brand: str
    series: str
    image: Optional[str]
    best_price: float
    all_time_low_price: float


@dataclass
class PurchaseOption:
    source: str
    price: str
    url: str
    rating: float


@dataclass
class ComparisonTable:
    laptops: List[LaptopSummary] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    features: Dict[str, List[str]] = field(default_factory=dict)
    purchase_options: Dict[str, List[PurchaseOption]] = field(default_factory=dict)
    slots_remaining: int = MAX_COMPARE_ITEMS

    @property
    def is_empty(self) -> bool:
        return not self.laptops

    def row(self, label: str) -> Optional[Row]:
        for s in self.sections:
            for r in s.rows:
                if r.label == label:
                    return r
        return None

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["is_empty"] = self.is_empty
        return out


def _row(spec: SpecDefinition, laptops: Sequence[LaptopRecord]) -> Row:
    values = spec.values_for(laptops)
    ranks = rank_values(spec.value_type, values)
    cells = [
        Cell(
            laptop_id=lap.id,
            value=value,
            display=format_value(spec, value),
            rank=rank,
            annotation=DIFFERENT_PROCESSORS_NOTE if rank == Rank.INCOMPARABLE else None,
        )
        for lap, value, rank in zip(laptops, values, ranks)
    ]
    return Row(label=spec.label, value_type=spec.value_type.value, unit=spec.unit, cells=cells)


def _summary(laptop: LaptopRecord) -> LaptopSummary:
    images = laptop.details.image_links
    return LaptopSummary(
        id=laptop.id,
        title=laptop.title,
        brand=laptop.brand,
        series=laptop.series,
        image=images[0] if images else None,
        best_price=best_price(laptop),
        all_time_low_price=laptop.all_time_low_price,
    )


def build_comparison(
    laptops: Sequence[LaptopRecord],
    max_items: int = MAX_COMPARE_ITEMS,
    specs: Sequence[SpecDefinition] = SPECIFICATIONS,
) -> ComparisonTable:
    """
    Assemble the side-by-side table for the resolved laptops, in the order given.
    Hidden rows and empty categories are left out.
    """
    laptops = list(laptops)
    table = ComparisonTable(slots_remaining=max(0, max_items - len(laptops)))
    if not laptops:
        return table

    table.laptops = [_summary(lap) for lap in laptops]
    for category, category_specs in group_by_category(laptops, specs).items():
        if not category_specs:
            continue
        table.sections.append(
            Section(
                category=category.value,
                title=category.heading,
                rows=[_row(spec, laptops) for spec in category_specs],
            )
        )

    for lap in laptops:
        if lap.details.features:
            table.features[lap.id] = lap.details.features[:MAX_FEATURES]
        table.purchase_options[lap.id] = [
            PurchaseOption(
                source=o.source,
                price=format_inr(o.price) if o.price > 0 else "N/A",
                url=o.url,
                rating=o.rating,
            )
            for o in lap.offers
        ]
    return table
