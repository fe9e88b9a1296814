# app/compare/specs.py
"""
Specification registry for side-by-side comparison.

Each SpecDefinition maps a LaptopRecord to one display-ready raw value. Accessors
prefer the structured field, then the vendor detail sheet, then a sentinel:
"N/A" for text, 0 for numbers. Rows where every compared laptop is empty are
hidden (see ``visible_specs``).
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from app.compare.models import LaptopRecord
from app.utils.money import format_inr
from app.utils.numbers import first_float, first_int, is_blank_number, leading_float, number_text

SpecValue = Union[str, int, float]

NA = "N/A"


class ValueType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    PRICE = "price"
    PROCESSOR_FAMILY = "processorFamily"
    RATING = "rating"


class Category(str, Enum):
    BASIC = "basic"
    PERFORMANCE = "performance"
    DISPLAY = "display"
    CONNECTIVITY = "connectivity"
    PHYSICAL = "physical"
    PRICE = "price"
    RATING = "rating"

    @property
    def heading(self) -> str:
        return CATEGORY_TITLES[self]


CATEGORY_TITLES = {
    Category.BASIC: "Basic Information",
    Category.PERFORMANCE: "Performance & Hardware",
    Category.DISPLAY: "Display",
    Category.CONNECTIVITY: "Connectivity & OS",
    Category.PHYSICAL: "Physical Specifications",
    Category.PRICE: "Pricing",
    Category.RATING: "Ratings & Reviews",
}


@dataclass(frozen=True)
class SpecDefinition:
    label: str
    value_type: ValueType
    category: Category
    extract: Callable[[LaptopRecord], SpecValue]
    unit: Optional[str] = None

    def value_of(self, laptop: LaptopRecord) -> SpecValue:
        return self.extract(laptop)

    def values_for(self, laptops: Sequence[LaptopRecord]) -> List[SpecValue]:
        return [self.extract(lap) for lap in laptops]


# ---------- Accessor helpers ----------

def _detail(laptop: LaptopRecord, *names: str) -> str:
    """First non-empty detail among names; lists are joined, an empty list is N/A."""
    for name in names:
        value = laptop.details.get(name)
        if not value:
            continue
        if isinstance(value, list):
            return ", ".join(value)
        return value
    return NA


def _detail_key(*names: str) -> Callable[[LaptopRecord], str]:
    return lambda laptop: _detail(laptop, *names)


def _processor(laptop: LaptopRecord) -> str:
    proc = laptop.processor
    if proc.name and proc.generation:
        return f"{proc.name} {proc.generation}th Gen {proc.variant or ''}".strip()
    return _detail(laptop, "Processor Type")


def _ram_size(laptop: LaptopRecord) -> int:
    if laptop.memory.size_gb:
        return int(laptop.memory.size_gb)
    return first_int(laptop.details.get("RAM Size")) or 0


def _storage_size(laptop: LaptopRecord) -> int:
    if laptop.storage.size_gb:
        return int(laptop.storage.size_gb)
    return first_int(laptop.details.get("Hard Drive Size")) or 0


def _display_size(laptop: LaptopRecord) -> float:
    if laptop.display_inches:
        return laptop.display_inches
    raw = laptop.details.get("Standing screen display size")
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    return first_float(raw) or 0


def _memory_technology(laptop: LaptopRecord) -> str:
    if laptop.memory.type:
        return laptop.memory.type.upper()
    return _detail(laptop, "Memory Technology")


def _storage_type(laptop: LaptopRecord) -> str:
    if laptop.storage.type:
        return laptop.storage.type.upper()
    return _detail(laptop, "Hard Disk Description")


def _graphics(laptop: LaptopRecord) -> str:
    coprocessor = _detail(laptop, "Graphics Coprocessor")
    if coprocessor != NA:
        return coprocessor
    return laptop.gpu or NA


def best_price(laptop: LaptopRecord) -> float:
    """Lowest positive storefront price, else the all-time low, else 0."""
    prices = [o.price for o in laptop.offers if o.price and o.price > 0]
    if prices:
        return min(prices)
    return laptop.all_time_low_price or 0


def _rating(source: str) -> Callable[[LaptopRecord], float]:
    def extract(laptop: LaptopRecord) -> float:
        offer = laptop.offer(source)
        return (offer.rating if offer else 0) or 0
    return extract


def _rating_count(source: str) -> Callable[[LaptopRecord], str]:
    def extract(laptop: LaptopRecord) -> str:
        offer = laptop.offer(source)
        return str(offer.rating_count or "0") if offer else "0"
    return extract


def _spec(label, value_type, category, extract, unit=None) -> SpecDefinition:
    return SpecDefinition(label=label, value_type=value_type, category=category, extract=extract, unit=unit)


S, N, P, R = ValueType.STRING, ValueType.NUMBER, ValueType.PRICE, ValueType.RATING

# ---------- Registry (display order) ----------

SPECIFICATIONS: List[SpecDefinition] = [
    # Basic
    _spec("Brand", S, Category.BASIC, lambda lap: lap.brand or NA),
    _spec("Series", S, Category.BASIC, lambda lap: lap.series or NA),
    _spec("Model", S, Category.BASIC, _detail_key("Item model number")),
    _spec("Color", S, Category.BASIC, _detail_key("Colour")),
    _spec("Manufacturer", S, Category.BASIC, _detail_key("Manufacturer")),
    # Performance
    _spec("Processor", ValueType.PROCESSOR_FAMILY, Category.PERFORMANCE, _processor),
    _spec("Processor Brand", S, Category.PERFORMANCE, _detail_key("Processor Brand")),
    _spec("Processor Speed", S, Category.PERFORMANCE, _detail_key("Processor Speed")),
    _spec("Processor Count", S, Category.PERFORMANCE, _detail_key("Processor Count")),
    _spec("RAM Size", N, Category.PERFORMANCE, _ram_size, unit="GB"),
    _spec("Memory Technology", S, Category.PERFORMANCE, _memory_technology),
    _spec("Computer Memory Type", S, Category.PERFORMANCE, _detail_key("Computer Memory Type")),
    _spec("Maximum Memory Supported", S, Category.PERFORMANCE, _detail_key("Maximum Memory Supported")),
    _spec("Storage Size", N, Category.PERFORMANCE, _storage_size, unit="GB"),
    _spec("Storage Type", S, Category.PERFORMANCE, _storage_type),
    _spec("Hard Drive Interface", S, Category.PERFORMANCE, _detail_key("Hard Drive Interface")),
    _spec("Graphics", S, Category.PERFORMANCE, _graphics),
    _spec("GPU Version", S, Category.PERFORMANCE, lambda lap: lap.gpu_variant or NA),
    _spec("Graphics Brand", S, Category.PERFORMANCE, _detail_key("Graphics Chipset Brand")),
    _spec("Graphics Card Description", S, Category.PERFORMANCE, _detail_key("Graphics Card Description")),
    _spec("Graphics RAM Type", S, Category.PERFORMANCE, _detail_key("Graphics RAM Type")),
    # Display
    _spec("Display Size", N, Category.DISPLAY, _display_size, unit="inches"),
    _spec("Screen Resolution", S, Category.DISPLAY, _detail_key("Screen Resolution", "Resolution")),
    # Connectivity
    _spec("Operating System", S, Category.CONNECTIVITY, _detail_key("Operating System")),
    _spec("Connectivity Type", S, Category.CONNECTIVITY, _detail_key("Connectivity Type")),
    _spec("Wireless Type", S, Category.CONNECTIVITY, _detail_key("Wireless Type")),
    _spec("HDMI Ports", S, Category.CONNECTIVITY, _detail_key("Number of HDMI Ports")),
    _spec("Audio Details", S, Category.CONNECTIVITY, _detail_key("Audio Details")),
    # Physical
    _spec("Weight", S, Category.PHYSICAL, _detail_key("Item Weight")),
    _spec("Dimensions", S, Category.PHYSICAL, _detail_key("Product Dimensions", "Item Dimensions LxWxH")),
    _spec("Form Factor", S, Category.PHYSICAL, _detail_key("Form Factor")),
    _spec("Item Height", S, Category.PHYSICAL, _detail_key("Item Height")),
    _spec("Item Width", S, Category.PHYSICAL, _detail_key("Item Width")),
    _spec("Battery", S, Category.PHYSICAL, _detail_key("Lithium Battery Energy Content")),
    _spec("Battery Type", S, Category.PHYSICAL, _detail_key("Batteries")),
    _spec("Number of Lithium Ion Cells", S, Category.PHYSICAL, _detail_key("Number of Lithium Ion Cells")),
    # Price
    _spec("Current Best Price", P, Category.PRICE, best_price),
    _spec("Base Price (MRP)", P, Category.PRICE, lambda lap: lap.base_price or 0),
    _spec("All Time Low Price", P, Category.PRICE, lambda lap: lap.all_time_low_price or 0),
    # Rating
    _spec("Amazon Rating", R, Category.RATING, _rating("amazon")),
    _spec("Amazon Reviews Count", S, Category.RATING, _rating_count("amazon")),
    _spec("Flipkart Rating", R, Category.RATING, _rating("flipkart")),
    _spec("Flipkart Reviews Count", S, Category.RATING, _rating_count("flipkart")),
]

SPECS_BY_LABEL: Dict[str, SpecDefinition] = {s.label: s for s in SPECIFICATIONS}


# ---------- Visibility ----------

def is_empty_value(value: Optional[SpecValue]) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == "" or value in (NA, "n/a")
    return is_blank_number(value)


def should_hide(spec: SpecDefinition, laptops: Sequence[LaptopRecord]) -> bool:
    return all(is_empty_value(v) for v in spec.values_for(laptops))


def visible_specs(
    laptops: Sequence[LaptopRecord],
    specs: Sequence[SpecDefinition] = SPECIFICATIONS,
) -> List[SpecDefinition]:
    return [s for s in specs if not should_hide(s, laptops)]


def group_by_category(
    laptops: Sequence[LaptopRecord],
    specs: Sequence[SpecDefinition] = SPECIFICATIONS,
) -> Dict[Category, List[SpecDefinition]]:
    """Visible specs per category, every category present, in category order."""
    grouped: Dict[Category, List[SpecDefinition]] = {c: [] for c in Category}
    for spec in visible_specs(laptops, specs):
        grouped[spec.category].append(spec)
    return grouped


# ---------- Formatting ----------

def format_value(spec: SpecDefinition, value: SpecValue) -> str:
    if spec.value_type in (ValueType.PRICE, ValueType.RATING) or (spec.value_type == ValueType.NUMBER and spec.unit):
        num = leading_float(value)
        if math.isnan(num) or num == 0:
            return NA
        if spec.value_type == ValueType.PRICE:
            return format_inr(num)
        if spec.value_type == ValueType.RATING:
            return f"{number_text(num)}/5"
        return f"{number_text(num)} {spec.unit}"
    if isinstance(value, float):
        text = number_text(value)
    else:
        text = str(value)
    return NA if text in ("0", "") else text
