"""
菜单管理服务

功能:
1. 菜单项字段校验 - id/名称/描述/价格/分类/图片路径/推荐标记
2. 菜单草稿 - 在内存中新增、修改、删除菜单项并导出 JSON

草稿仅用于预览，不会写回站点的菜单数据文件
"""
import copy
import json
import logging
import re
import time
import uuid
from typing import Any, Callable, Optional

from app.config import SESSION_IDLE_TIMEOUT_SECONDS
from app.data import MenuCatalog
from app.errors import DraftNotFoundError, MenuItemValidationError, UnknownCategoryError
from app.models import Category

logger = logging.getLogger(__name__)

ID_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
PRICE_PATTERN = re.compile(r"^[0-9]+\.[0-9]{2}$")
IMAGE_EXT_PATTERN = re.compile(r"\.(jpg|jpeg|png|webp|JPG|JPEG|PNG|WEBP)$")
IMAGE_PREFIX = "/images/"

CATEGORY_VALUES = [c.value for c in Category]

PREVIEW_NOTE = "(Note: This is a preview only. In production, this would save to the server.)"


def _text_error(value: Any, label: str) -> Optional[str]:
    """必填文本字段: 缺失或空白为 required，非字符串单独报类型错误"""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return f"{label} is required"
    if not isinstance(value, str):
        return f"{label} must be a string"
    return None


def validate_menu_item(item: dict) -> list[str]:
    """校验菜单项，返回错误列表（为空表示通过）"""
    errors: list[str] = []

    item_id = item.get("id")
    error = _text_error(item_id, "ID")
    if error:
        errors.append(error)
    elif not ID_PATTERN.match(item_id):
        errors.append("ID must be lowercase letters, numbers, and hyphens only (e.g., 'classic-smash')")

    name = item.get("name")
    error = _text_error(name, "Name")
    if error:
        errors.append(error)
    elif len(name) > 100:
        errors.append("Name must be 100 characters or less")

    description = item.get("description")
    error = _text_error(description, "Description")
    if error:
        errors.append(error)
    elif len(description) < 10:
        errors.append("Description must be at least 10 characters")
    elif len(description) > 200:
        errors.append("Description must be 200 characters or less")

    price = item.get("price")
    error = _text_error(price, "Price")
    if error:
        errors.append(error)
    elif not PRICE_PATTERN.match(price):
        errors.append("Price must be in format XX.XX (e.g., '10.99') without dollar sign")

    category = item.get("category")
    error = _text_error(category, "Category")
    if error:
        errors.append(error)
    elif category not in CATEGORY_VALUES:
        errors.append(f"Category must be one of: {', '.join(CATEGORY_VALUES)}")

    image_path = item.get("imagePath")
    error = _text_error(image_path, "Image path")
    if error:
        errors.append(error)
    elif not image_path.startswith(IMAGE_PREFIX):
        errors.append("Image path must start with '/images/'")
    elif not IMAGE_EXT_PATTERN.search(image_path):
        errors.append("Image path must end with a valid image extension")

    if not isinstance(item.get("featured"), bool):
        errors.append("Featured must be true or false")

    return errors


def new_item_template(category: str = Category.BEEF.value) -> dict:
    """新建菜单项的默认值"""
    return {
        "id": "",
        "name": "",
        "description": "",
        "price": "",
        "category": category,
        "imagePath": IMAGE_PREFIX,
        "featured": False,
    }


class MenuDraft:
    """菜单草稿 - 分组格式的菜单数据副本"""

    FIELDS = ("id", "name", "description", "price", "category", "imagePath", "featured")

    def __init__(self, draft_id: str, records: dict[str, list[dict]], now: float):
        self.draft_id = draft_id
        self.records = {cat: copy.deepcopy(records.get(cat, [])) for cat in CATEGORY_VALUES}
        self.last_seen = now

    def find(self, item_id: str) -> Optional[tuple[str, int]]:
        """返回 (分类, 下标)"""
        for category, items in self.records.items():
            for index, item in enumerate(items):
                if item.get("id") == item_id:
                    return category, index
        return None

    def save_item(self, item: dict) -> str:
        """
        保存菜单项: 同分类下已存在则原地替换，否则追加

        返回 "updated" 或 "created"
        """
        record = {field: item.get(field) for field in self.FIELDS}
        errors = validate_menu_item(record)
        if not errors:
            found = self.find(record["id"])
            if found and found[0] != record["category"]:
                errors.append(f"Duplicate ID found: {record['id']} (already in {found[0]})")
        if errors:
            raise MenuItemValidationError(errors)

        items = self.records[record["category"]]
        found = self.find(record["id"])
        if found:
            items[found[1]] = record
            return "updated"
        items.append(record)
        return "created"

    def delete_item(self, category: str, item_id: str) -> bool:
        if category not in self.records:
            raise UnknownCategoryError(category)
        items = self.records[category]
        remaining = [item for item in items if item.get("id") != item_id]
        self.records[category] = remaining
        return len(remaining) != len(items)

    def item_count(self) -> int:
        return sum(len(items) for items in self.records.values())

    def export(self) -> str:
        """导出为与站点数据文件相同格式的 JSON"""
        return json.dumps(self.records, ensure_ascii=False, indent=2)


class DraftRegistry:
    """菜单草稿注册表"""

    def __init__(
        self,
        catalog: MenuCatalog,
        idle_timeout: float = SESSION_IDLE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.catalog = catalog
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._drafts: dict[str, MenuDraft] = {}

    def __len__(self) -> int:
        return len(self._drafts)

    def create(self) -> MenuDraft:
        self.prune()
        draft = MenuDraft(uuid.uuid4().hex, self.catalog.to_records(), self._clock())
        self._drafts[draft.draft_id] = draft
        logger.info("[Admin] created menu draft %s", draft.draft_id)
        return draft

    def get(self, draft_id: str) -> MenuDraft:
        draft = self._drafts.get(draft_id)
        if draft is None:
            raise DraftNotFoundError(draft_id)
        draft.last_seen = self._clock()
        return draft

    def prune(self, now: Optional[float] = None) -> int:
        now = self._clock() if now is None else now
        expired = [did for did, d in self._drafts.items() if now - d.last_seen > self.idle_timeout]
        for did in expired:
            del self._drafts[did]
        return len(expired)
