# app/compare/models.py
"""
Laptop records and compare stubs.

Two shapes come in: the backend's nested document (``_id``, ``specs.*``,
``sites``) and the flat form this package persists. Both parse into the same
models; the backend shape is flattened in a ``mode="before"`` validator.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.utils.money import parse_price_to_int
from app.utils.numbers import lenient_number

DetailValue = Union[str, List[str]]

UNKNOWN = "Unknown"


def _as_text(v: Any) -> Optional[str]:
    if v is None:
        return None
    return str(v).strip()


def _as_detail(v: Any) -> Optional[DetailValue]:
    if v is None:
        return None
    if isinstance(v, (list, tuple)):
        return [str(x) for x in v if x is not None]
    return str(v)


def _as_str_list(v: Any) -> List[str]:
    if v is None or v == "":
        return []
    if isinstance(v, str):
        return [v]
    if not isinstance(v, (list, tuple)):
        raise ValueError(f"expected a list of strings, got {type(v).__name__}")
    return [str(x) for x in v if x]


def _as_dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


# ---------- Detail bag ----------

class DetailBag(BaseModel):
    """
    Vendor specification sheet.

    A handful of keys are common enough to be real fields; anything else the
    listing carried ("Item Height", "Wireless Type", ...) lands in
    ``model_extra``. ``get()`` looks both up by the vendor's display name.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    image_links: List[str] = Field(default_factory=list, alias="imageLinks")
    features: List[str] = Field(default_factory=list, alias="Features")
    processor_type: Optional[DetailValue] = Field(None, alias="Processor Type")
    ram_size: Optional[DetailValue] = Field(None, alias="RAM Size")
    hard_drive_size: Optional[DetailValue] = Field(None, alias="Hard Drive Size")
    screen_size: Optional[DetailValue] = Field(None, alias="Standing screen display size")
    operating_system: Optional[DetailValue] = Field(None, alias="Operating System")
    item_weight: Optional[DetailValue] = Field(None, alias="Item Weight")

    @field_validator("image_links", "features", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> List[str]:
        return _as_str_list(v)

    @field_validator(
        "processor_type", "ram_size", "hard_drive_size", "screen_size",
        "operating_system", "item_weight", mode="before",
    )
    @classmethod
    def _details(cls, v: Any) -> Optional[DetailValue]:
        return _as_detail(v)

    def get(self, name: str) -> Optional[DetailValue]:
        attr = _DETAIL_ALIASES.get(name)
        if attr is not None:
            return getattr(self, attr)
        return _as_detail((self.model_extra or {}).get(name))


_DETAIL_ALIASES = {f.alias: name for name, f in DetailBag.model_fields.items() if f.alias}


# ---------- Record parts ----------

class Processor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    generation: Optional[str] = Field(None, alias="gen")
    variant: Optional[str] = None

    @field_validator("name", "generation", "variant", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        return _as_text(v)


class Capacity(BaseModel):
    size_gb: Optional[float] = None
    type: Optional[str] = None

    @field_validator("size_gb", mode="before")
    @classmethod
    def _size(cls, v: Any) -> Optional[float]:
        return lenient_number(v)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v: Any) -> Optional[str]:
        return _as_text(v)


class Offer(BaseModel):
    """One storefront listing of the laptop (amazon, flipkart)."""
    model_config = ConfigDict(populate_by_name=True)

    source: str = ""
    price: float = 0
    url: str = Field("", alias="link")
    rating: float = 0
    rating_count: Union[int, str] = Field(0, alias="ratingCount")
    list_price: Optional[float] = Field(None, alias="basePrice")

    @field_validator("source", mode="before")
    @classmethod
    def _source(cls, v: Any) -> str:
        return (_as_text(v) or "").lower()

    @field_validator("url", mode="before")
    @classmethod
    def _url(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("price", "rating", mode="before")
    @classmethod
    def _num(cls, v: Any) -> float:
        return lenient_number(v) or 0

    @field_validator("list_price", mode="before")
    @classmethod
    def _list_price(cls, v: Any) -> Optional[float]:
        return lenient_number(v)

    @field_validator("rating_count", mode="before")
    @classmethod
    def _count(cls, v: Any) -> Union[int, str]:
        if v is None or v == "":
            return 0
        if isinstance(v, bool):
            return int(v)
        if isinstance(v, (int, float)):
            return int(v)
        return str(v)


# ---------- Laptop record ----------

class LaptopRecord(BaseModel):
    """Full laptop entity as served by ``GET /api/laptop/{id}``."""

    id: str
    brand: str = ""
    series: str = ""
    headline: str = ""
    processor: Processor = Field(default_factory=Processor)
    memory: Capacity = Field(default_factory=Capacity)
    storage: Capacity = Field(default_factory=Capacity)
    display_inches: Optional[float] = None
    gpu: Optional[str] = None
    gpu_variant: Optional[str] = None
    base_price: Optional[float] = None
    details: DetailBag = Field(default_factory=DetailBag)
    offers: List[Offer] = Field(default_factory=list)
    all_time_low_price: float = 0

    @model_validator(mode="before")
    @classmethod
    def _flatten_backend_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "specs" not in data:
            return data
        specs = _as_dict(data.get("specs"))
        ram = _as_dict(specs.get("ram"))
        storage = _as_dict(specs.get("storage"))
        return {
            "id": data.get("_id") or data.get("id"),
            "brand": specs.get("brand") or data.get("brand") or "",
            "series": specs.get("series") or data.get("series") or "",
            "headline": specs.get("head") or "",
            "processor": _as_dict(specs.get("processor")),
            "memory": {"size_gb": ram.get("size"), "type": ram.get("type")},
            "storage": {"size_gb": storage.get("size"), "type": storage.get("type")},
            "display_inches": specs.get("displayInch"),
            "gpu": specs.get("gpu"),
            "gpu_variant": specs.get("gpuVersion"),
            "base_price": specs.get("basePrice"),
            "details": _as_dict(specs.get("details")),
            "offers": data.get("sites") or [],
            "all_time_low_price": data.get("allTimeLowPrice"),
        }

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> str:
        text = _as_text(v)
        if not text:
            raise ValueError("laptop id is required")
        return text

    @field_validator("brand", "series", "headline", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("gpu", "gpu_variant", mode="before")
    @classmethod
    def _gpu(cls, v: Any) -> Optional[str]:
        return _as_text(v) or None

    @field_validator("display_inches", "base_price", mode="before")
    @classmethod
    def _optional_num(cls, v: Any) -> Optional[float]:
        return lenient_number(v)

    @field_validator("all_time_low_price", mode="before")
    @classmethod
    def _atl(cls, v: Any) -> float:
        return lenient_number(v) or 0

    @property
    def title(self) -> str:
        return self.headline or f"{self.brand} {self.series}".strip()

    def offer(self, source: str) -> Optional[Offer]:
        for o in self.offers:
            if o.source == source:
                return o
        return None

    def to_blob(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ---------- Compare stub ----------

class CompareStub(BaseModel):
    """
    What gets added to the comparison before the full record is known:
    identity plus just enough to draw a thumbnail.
    """

    id: str
    brand: str = UNKNOWN
    series: str = UNKNOWN
    headline: str = ""
    thumbnail_urls: List[str] = Field(default_factory=list)
    reference_price: float = 0

    @model_validator(mode="before")
    @classmethod
    def _from_compare_item(cls, data: Any) -> Any:
        # shape the web client kept in local storage
        if not isinstance(data, dict) or "_id" not in data:
            return data
        specs = _as_dict(data.get("specs"))
        details = _as_dict(specs.get("details"))
        return {
            "id": data.get("_id"),
            "brand": data.get("brand"),
            "series": data.get("series"),
            "headline": specs.get("head") or "",
            "thumbnail_urls": details.get("imageLinks") or [],
            "reference_price": data.get("allTimeLowPrice"),
        }

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> str:
        text = _as_text(v)
        if not text:
            raise ValueError("stub id is required")
        return text

    @field_validator("brand", "series", mode="before")
    @classmethod
    def _display(cls, v: Any) -> str:
        return _as_text(v) or UNKNOWN

    @field_validator("headline", mode="before")
    @classmethod
    def _headline(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("thumbnail_urls", mode="before")
    @classmethod
    def _thumbs(cls, v: Any) -> List[str]:
        return _as_str_list(v)

    @field_validator("reference_price", mode="before")
    @classmethod
    def _price(cls, v: Any) -> float:
        if v is None or isinstance(v, bool):
            return 0
        if isinstance(v, (int, float)):
            return float(v) if v > 0 else 0
        return float(parse_price_to_int(str(v)) or 0)

    @classmethod
    def from_record(cls, record: LaptopRecord) -> "CompareStub":
        prices = [o.price for o in record.offers if o.price > 0]
        return cls(
            id=record.id,
            brand=record.brand,
            series=record.series,
            headline=record.headline,
            thumbnail_urls=record.details.image_links,
            reference_price=min(prices) if prices else record.all_time_low_price,
        )

    def to_blob(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
