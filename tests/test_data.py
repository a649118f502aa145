import json
from decimal import Decimal

import pytest

from app.data import (
    LOCATIONS, MenuCatalog, get_all_categories, get_location, load_catalog,
    normalize_menu_item, parse_catalog, parse_category,
)
from app.errors import CatalogError, UnknownCategoryError, UnknownMenuItemError
from app.models import Category

from conftest import make_item


def test_bundled_catalog_loads():
    catalog = load_catalog()

    assert len(catalog) == 24
    assert len({item.id for item in catalog}) == 24
    assert [cat for cat, _ in catalog.grouped()] == list(Category)


def test_bundled_catalog_lookups():
    catalog = load_catalog()

    single = catalog.get("single-smash")
    assert single.price == Decimal("9.00")
    assert single.category == Category.BEEF
    assert single.price_display == "$9.00"
    assert [i.id for i in catalog.by_category("sides")] == [
        "oregon-fries", "sweet-potato-fries", "tater-tots", "secret-sauces",
    ]
    assert all(item.featured for item in catalog.featured())
    assert catalog.get("missing") is None
    with pytest.raises(UnknownMenuItemError):
        catalog.require("missing")


def test_normalize_admin_shape():
    item = normalize_menu_item({
        "id": "oregon-fries",
        "name": "Oregon Fries",
        "description": "Classic fries with secret seasoning.",
        "price": "3.50",
        "category": "sides",
        "imagePath": "/images/IMG_6434.webp",
        "featured": True,
    }, section="sides")

    assert item.price == Decimal("3.50")
    assert item.image == "/images/IMG_6434.webp"
    assert item.featured is True


def test_normalize_legacy_shape():
    item = normalize_menu_item({
        "id": 18,
        "name": "Oregon Fries",
        "price": 3.5,
        "description": "Classic fries with secret seasoning.",
        "category": "sides",
        "image": "/images/IMG_6434.webp",
    })

    assert item.id == "18"
    assert item.price == Decimal("3.50")
    assert str(item.price) == "3.50"
    assert item.image == "/images/IMG_6434.webp"
    assert item.featured is False


def test_normalize_float_price_avoids_binary_artifacts():
    # Decimal(0.1) 会得到 0.1000000000000000055511...
    item = normalize_menu_item({
        "id": 21, "name": "Secret Sauces", "price": 0.1,
        "description": "Extra side of sauce.", "category": "sides", "image": "/images/x.webp",
    })
    assert item.price == Decimal("0.10")


@pytest.mark.parametrize("price", ["abc", "-1.00", "1.999", None, True, "NaN", "1e30", 10**30])
def test_normalize_rejects_bad_prices(price):
    with pytest.raises(CatalogError):
        normalize_menu_item({
            "id": "x", "name": "X", "price": price, "description": "Something tasty.",
            "category": "beef", "image": "/images/x.webp",
        })


def test_normalize_rejects_section_mismatch():
    with pytest.raises(CatalogError, match="does not match section"):
        normalize_menu_item({
            "id": "x", "name": "X", "price": "1.00", "description": "Something tasty.",
            "category": "beef", "imagePath": "/images/x.webp",
        }, section="sides")


def test_catalog_rejects_duplicate_ids():
    with pytest.raises(CatalogError) as exc:
        MenuCatalog([make_item("a"), make_item("b"), make_item("a")])
    assert exc.value.errors == ["Duplicate ID found: a"]


def test_parse_catalog_collects_every_error():
    data = {
        "beef": [
            {"id": "ok", "name": "Ok", "price": "1.00", "description": "Fine item.",
             "category": "beef", "imagePath": "/images/ok.webp"},
            {"id": "bad-price", "name": "Bad", "price": "x", "description": "Bad item.",
             "category": "beef", "imagePath": "/images/bad.webp"},
            {"id": "no-name", "price": "2.00", "description": "No name here.",
             "category": "beef", "imagePath": "/images/n.webp"},
        ],
    }
    with pytest.raises(CatalogError) as exc:
        parse_catalog(data)
    assert len(exc.value.errors) == 2
    assert "Bad" in exc.value.errors[0]


def test_parse_catalog_reports_out_of_range_price():
    with pytest.raises(CatalogError) as exc:
        parse_catalog([
            {"id": "huge", "name": "Huge", "price": "1e30", "description": "Too expensive.",
             "category": "beef", "imagePath": "/images/huge.webp"},
        ])
    assert exc.value.errors == ["item 1 (Huge): invalid price: '1e30'"]


def test_parse_catalog_flat_list():
    catalog = parse_catalog([
        {"id": 1, "name": "Single Smash", "price": 9, "description": "Single patty.",
         "category": "beef", "image": "/images/IMG_6434.webp"},
        {"id": 22, "name": "Soda & Water", "price": 2, "description": "Can of soda.",
         "category": "beverages", "image": "/images/IMG_6434.webp"},
    ])
    assert [item.id for item in catalog] == ["1", "22"]
    assert catalog.get("1").price == Decimal("9.00")


def test_parse_catalog_rejects_unknown_section():
    with pytest.raises(CatalogError, match="unknown category section"):
        parse_catalog({"desserts": []})


def test_exported_records_load_back():
    catalog = load_catalog()
    reloaded = parse_catalog(catalog.to_records())

    assert [item.id for item in reloaded] == [item.id for item in catalog]
    assert [item.price for item in reloaded] == [item.price for item in catalog]


def test_load_catalog_invalid_json(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="Failed to load menu data"):
        load_catalog(path)


def test_load_catalog_from_custom_file(tmp_path):
    path = tmp_path / "menu.json"
    path.write_text(json.dumps({"kids": [
        {"id": "mini-smash", "name": "Mini Smash & Fries", "price": "8.00",
         "description": "Includes fries.", "category": "kids",
         "imagePath": "/images/IMG_6435.webp", "featured": False},
    ]}), encoding="utf-8")

    catalog = load_catalog(path)
    assert len(catalog) == 1
    assert [cat for cat, _ in catalog.grouped()] == [Category.KIDS]


def test_parse_category():
    assert parse_category("BEEF") == Category.BEEF
    assert parse_category(Category.KIDS) == Category.KIDS
    with pytest.raises(UnknownCategoryError):
        parse_category("desserts")


def test_categories_and_locations():
    assert get_all_categories()[0] == {"value": "beef", "label": "Beef Burgers"}
    assert len(LOCATIONS) == 2
    assert get_location("salem").coming_soon is True
    assert get_location("nowhere") is None
