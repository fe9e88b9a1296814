from app.compare.models import LaptopRecord
from app.compare.specs import (
    NA,
    SPECIFICATIONS,
    SPECS_BY_LABEL,
    Category,
    format_value,
    group_by_category,
    is_empty_value,
    should_hide,
)
from conftest import record


def value(label, laptop):
    return SPECS_BY_LABEL[label].value_of(laptop)


def bare(**fields):
    return LaptopRecord(id="x", **fields)


def test_registry_shape():
    assert len(SPECIFICATIONS) == len(SPECS_BY_LABEL)
    assert [c for c in Category][0] is Category.BASIC
    assert SPECS_BY_LABEL["RAM Size"].unit == "GB"
    assert SPECS_BY_LABEL["Display Size"].unit == "inches"


def test_structured_values():
    hp = record("hp-victus")
    assert value("Brand", hp) == "HP"
    assert value("Processor", hp) == "Intel Core i5 12th Gen 12450H"
    assert value("RAM Size", hp) == 16
    assert value("Memory Technology", hp) == "DDR4"
    assert value("Storage Type", hp) == "SSD"
    assert value("Display Size", hp) == 15.6
    assert value("Graphics", hp) == "NVIDIA GeForce RTX 3050"
    assert value("GPU Version", hp) == "4 GB GDDR6"
    assert value("Color", hp) == "Mica Silver"
    assert value("Weight", hp) == "2.3 kg"


def test_detail_fallbacks():
    lap = LaptopRecord.model_validate({
        "id": "x",
        "details": {
            "Processor Type": "Core i3",
            "RAM Size": "8 GB",
            "Hard Drive Size": "256 GB",
            "Standing screen display size": ["14 Inches", "35.6 cm"],
            "Connectivity Type": ["Wi-Fi", "Bluetooth"],
            "Wireless Type": [],
        },
    })
    assert value("Processor", lap) == "Core i3"
    assert value("RAM Size", lap) == 8
    assert value("Storage Size", lap) == 256
    assert value("Display Size", lap) == 14.0
    assert value("Connectivity Type", lap) == "Wi-Fi, Bluetooth"
    assert value("Wireless Type", lap) == NA
    assert value("Model", lap) == NA


def test_prices_and_ratings():
    asus = record("asus-tuf")
    assert value("Current Best Price", asus) == 61990
    assert value("Base Price (MRP)", asus) == 79999
    assert value("All Time Low Price", asus) == 59990
    assert value("Amazon Rating", asus) == 4.4
    assert value("Flipkart Reviews Count", asus) == "1,204"

    hp = record("hp-victus")
    assert value("Flipkart Rating", hp) == 0
    assert value("Flipkart Reviews Count", hp) == "0"

    no_offers = bare(all_time_low_price=42000)
    assert value("Current Best Price", no_offers) == 42000
    assert value("Current Best Price", bare()) == 0


def test_empty_values():
    for empty in (None, "", "  ", "N/A", "n/a", 0, 0.0, float("nan")):
        assert is_empty_value(empty)
    for present in ("0 GB", 4.2, "Windows"):
        assert not is_empty_value(present)


def test_hidden_rows():
    laptops = [record("hp-victus"), record("asus-tuf")]
    assert should_hide(SPECS_BY_LABEL["Model"], laptops)
    assert not should_hide(SPECS_BY_LABEL["Operating System"], laptops)

    groups = group_by_category(laptops)
    assert list(groups) == list(Category)
    labels = [s.label for s in groups[Category.BASIC]]
    assert labels == ["Brand", "Series", "Color"]
    assert groups[Category.DISPLAY][0].label == "Display Size"


def test_hidden_row_shows_when_any_laptop_has_value():
    with_model = bare(details={"Item model number": "15-fb0000"})
    assert not should_hide(SPECS_BY_LABEL["Model"], [bare(), with_model])


def test_formatting():
    assert format_value(SPECS_BY_LABEL["Current Best Price"], 123456) == "₹1,23,456"
    assert format_value(SPECS_BY_LABEL["Amazon Rating"], 4.2) == "4.2/5"
    assert format_value(SPECS_BY_LABEL["Amazon Rating"], 0) == NA
    assert format_value(SPECS_BY_LABEL["RAM Size"], 16) == "16 GB"
    assert format_value(SPECS_BY_LABEL["Display Size"], 15.6) == "15.6 inches"
    assert format_value(SPECS_BY_LABEL["Brand"], "HP") == "HP"
    assert format_value(SPECS_BY_LABEL["Brand"], NA) == NA
