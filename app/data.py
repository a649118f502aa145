"""
菜单数据与门店信息

功能:
1. 加载随站点打包的菜单 JSON（启动时加载一次，运行期间只读）
2. 字段归一化 - 兼容 price 字符串/数字、image/imagePath、数字/字符串 id
3. 按分类 / id 查询、推荐菜品
"""
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterator
from pydantic import ValidationError

from app.config import MENU_DATA_PATH
from app.errors import CatalogError, UnknownCategoryError, UnknownMenuItemError
from app.models import CENT, CATEGORY_LABELS, Category, Location, MenuItem

logger = logging.getLogger(__name__)


def _normalize_id(raw_id: Any) -> str:
    if isinstance(raw_id, bool) or raw_id is None:
        raise CatalogError(f"invalid id: {raw_id!r}")
    if isinstance(raw_id, int):
        return str(raw_id)
    if isinstance(raw_id, str) and raw_id.strip():
        return raw_id.strip()
    raise CatalogError(f"invalid id: {raw_id!r}")


def _normalize_price(raw_price: Any) -> Decimal:
    # float 先转 str，避免二进制浮点误差带入 Decimal
    if isinstance(raw_price, bool) or raw_price is None:
        raise CatalogError(f"invalid price: {raw_price!r}")
    if isinstance(raw_price, float):
        raw_price = repr(raw_price)
    try:
        price = Decimal(str(raw_price).strip())
    except InvalidOperation:
        raise CatalogError(f"invalid price: {raw_price!r}")
    if not price.is_finite() or price < 0:
        raise CatalogError(f"invalid price: {raw_price!r}")
    try:
        quantized = price.quantize(CENT)
    except InvalidOperation:
        # 超出 Decimal 默认精度（如 "1e30"）
        raise CatalogError(f"invalid price: {raw_price!r}")
    if price != quantized:
        raise CatalogError(f"price has more than 2 decimals: {raw_price!r}")
    return quantized


def normalize_menu_item(raw: dict, section: str | None = None) -> MenuItem:
    """
    将一条原始菜单记录转换为 MenuItem

    兼容两种数据格式:
    - 管理后台格式: price 为 "9.00" 字符串, 图片字段为 imagePath
    - 旧版菜单格式: price 为数字, 图片字段为 image, id 为数字
    section 为记录所在的分类分组（分组格式文件），需与记录的 category 一致
    """
    if not isinstance(raw, dict):
        raise CatalogError(f"menu record must be an object, got {type(raw).__name__}")

    category = raw.get("category") or section
    if section is not None and category != section:
        raise CatalogError(f"category {category!r} does not match section {section!r}")

    image = raw.get("imagePath") or raw.get("image")
    try:
        return MenuItem(
            id=_normalize_id(raw.get("id")),
            name=raw.get("name"),
            description=raw.get("description"),
            price=_normalize_price(raw.get("price")),
            category=category,
            image=image,
            featured=raw.get("featured", False),
        )
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise CatalogError(f"invalid fields: {fields}")


class MenuCatalog:
    """菜单目录 - 不可变，按 id 唯一"""

    def __init__(self, items: list[MenuItem]):
        seen: set[str] = set()
        duplicates = []
        for item in items:
            if item.id in seen:
                duplicates.append(f"Duplicate ID found: {item.id}")
            seen.add(item.id)
        if duplicates:
            raise CatalogError("menu catalog has duplicate ids", duplicates)

        self._items = tuple(items)
        self._by_id = {item.id: item for item in items}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self._items)

    @property
    def items(self) -> tuple[MenuItem, ...]:
        return self._items

    def get(self, item_id: str) -> MenuItem | None:
        """根据id获取菜单项"""
        return self._by_id.get(str(item_id))

    def require(self, item_id: str) -> MenuItem:
        item = self.get(item_id)
        if item is None:
            raise UnknownMenuItemError(str(item_id))
        return item

    def by_category(self, category: Category | str) -> list[MenuItem]:
        """根据分类获取菜单"""
        cat = parse_category(category)
        return [item for item in self._items if item.category == cat]

    def grouped(self) -> list[tuple[Category, list[MenuItem]]]:
        """按分类分组，跳过没有菜品的分类"""
        groups = []
        for cat in Category:
            items = self.by_category(cat)
            if items:
                groups.append((cat, items))
        return groups

    def featured(self) -> list[MenuItem]:
        return [item for item in self._items if item.featured]

    def to_records(self) -> dict[str, list[dict]]:
        """导出为管理后台的分组 JSON 格式"""
        records: dict[str, list[dict]] = {cat.value: [] for cat in Category}
        for item in self._items:
            records[item.category.value].append({
                "id": item.id,
                "name": item.name,
                "description": item.description,
                "price": str(item.price),
                "category": item.category.value,
                "imagePath": item.image,
                "featured": item.featured,
            })
        return records


def parse_category(category: Category | str) -> Category:
    if isinstance(category, Category):
        return category
    try:
        return Category(str(category).lower())
    except ValueError:
        raise UnknownCategoryError(str(category))


def get_all_categories() -> list[dict]:
    """获取所有分类"""
    return [{"value": c.value, "label": CATEGORY_LABELS[c]} for c in Category]


def parse_catalog(data: Any) -> MenuCatalog:
    """
    解析菜单数据

    支持分组格式 {"beef": [...], ...} 和扁平列表格式 [{..., "category": "beef"}]
    所有错误一次性收集后抛出
    """
    if isinstance(data, dict):
        records = []
        for section, items in data.items():
            if section not in {c.value for c in Category}:
                raise CatalogError(f"unknown category section: {section}")
            if not isinstance(items, list):
                raise CatalogError(f'category "{section}" must be an array')
            records.extend((section, raw) for raw in items)
    elif isinstance(data, list):
        records = [(None, raw) for raw in data]
    else:
        raise CatalogError("menu data must be an object or an array")

    items: list[MenuItem] = []
    errors: list[str] = []
    for index, (section, raw) in enumerate(records):
        try:
            items.append(normalize_menu_item(raw, section))
        except CatalogError as e:
            name = raw.get("name") if isinstance(raw, dict) else None
            errors.append(f"item {index + 1} ({name or 'unnamed'}): {e.message}")

    if errors:
        raise CatalogError("menu catalog has invalid items", errors)
    return MenuCatalog(items)


def load_catalog(path: Path | str = MENU_DATA_PATH) -> MenuCatalog:
    """从 JSON 文件加载菜单目录"""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("[Catalog] failed to load menu data %s: %s", path, e)
        raise CatalogError(f"Failed to load menu data: {e}")

    try:
        catalog = parse_catalog(data)
    except CatalogError as e:
        for err in e.errors:
            logger.error("[Catalog] %s", err)
        raise

    logger.info("[Catalog] loaded %d menu items from %s", len(catalog), path)
    return catalog


# ============ 门店数据 ============

LOCATIONS: list[Location] = [
    Location(
        slug="albany",
        name="Albany",
        address="520 Pacific Blvd SW, Albany, OR 97321",
        hours="Tuesday - Sunday: 11:00 AM - 8:00 PM",
        note="Closed Mondays",
        phone="(541) 971-5056",
        phone_href="tel:+15419715056",
        maps_url="https://maps.google.com/?q=520+Pacific+Blvd+SW+Albany+OR+97321",
    ),
    Location(
        slug="salem",
        name="Salem",
        address="Location Coming Soon",
        hours="Opening Soon - Stay Tuned!",
        coming_soon=True,
    ),
]


def get_location(slug: str) -> Location | None:
    for location in LOCATIONS:
        if location.slug == slug:
            return location
    return None
