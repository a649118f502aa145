"""数据模型定义"""
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.config import CURRENCY_SYMBOL

CENT = Decimal("0.01")


class Category(str, Enum):
    """菜单分类（按页面展示顺序）"""
    BEEF = "beef"
    SPECIALTY = "specialty"
    ALTERNATIVE = "alternative"
    KIDS = "kids"
    SIDES = "sides"
    BEVERAGES = "beverages"


CATEGORY_LABELS: dict[Category, str] = {
    Category.BEEF: "Beef Burgers",
    Category.SPECIALTY: "Specialty",
    Category.ALTERNATIVE: "Alternative",
    Category.KIDS: "Kids",
    Category.SIDES: "Sides",
    Category.BEVERAGES: "Beverages",
}


def format_money(amount: Decimal) -> str:
    """金额保留两位小数（仅用于展示，累加过程不做舍入）"""
    return str(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def format_price(amount: Decimal) -> str:
    """带货币符号的价格，如 $9.00"""
    return f"{CURRENCY_SYMBOL}{format_money(amount)}"


class MenuItem(BaseModel):
    """菜单项（只读）"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    price: Decimal = Field(ge=0)
    category: Category
    image: str
    featured: bool = False

    @property
    def category_label(self) -> str:
        return CATEGORY_LABELS[self.category]

    @property
    def price_display(self) -> str:
        return format_price(self.price)

    @field_serializer("price")
    def _serialize_price(self, price: Decimal) -> str:
        return format_money(price)


class Location(BaseModel):
    """门店信息"""
    slug: str
    name: str
    address: str
    hours: str
    note: Optional[str] = None
    phone: Optional[str] = None
    phone_href: Optional[str] = None
    maps_url: Optional[str] = None
    coming_soon: bool = False


# ============ 购物车视图 ============

class CartLineView(BaseModel):
    """购物车行（展示用）"""
    item_id: str
    name: str
    image: str
    unit_price: str
    quantity: int
    line_total: str
    line_total_display: str


class CartView(BaseModel):
    """购物车快照 - 提供给页面渲染的只读数据"""
    session_id: str
    lines: list[CartLineView] = []
    subtotal: str = "0.00"
    subtotal_display: str = f"{CURRENCY_SYMBOL}0.00"
    total_items: int = 0
    is_open: bool = False
    can_checkout: bool = False


class CheckoutReceipt(BaseModel):
    """模拟下单结果（占位实现，不会真正提交订单）"""
    session_id: str
    lines: list[CartLineView]
    total: str
    total_display: str
    total_items: int
    message: str
    placeholder: bool = True


# ============ 分类导航 ============

class SectionBounds(BaseModel):
    """分类区块在视口中的位置"""
    id: str
    top: float
    bottom: float


class ScrollCommand(BaseModel):
    """点击分类后页面需要执行的滚动"""
    top: float
    behavior: str = "smooth"


class CategoryState(BaseModel):
    """分类导航状态"""
    active_category: str
    last_scroll_y: float = 0.0
    suppressed: bool = False
    scroll: Optional[ScrollCommand] = None


# ============ API请求模型 ============

class AddToCartRequest(BaseModel):
    """添加到购物车请求"""
    item_id: str


class UpdateQuantityRequest(BaseModel):
    """修改数量请求，delta 可为任意整数"""
    delta: int


class ToggleCartRequest(BaseModel):
    """打开/关闭购物车面板，open 为空时切换"""
    open: Optional[bool] = None


class ScrollReportRequest(BaseModel):
    """页面滚动上报"""
    scroll_y: float = 0.0
    sections: list[SectionBounds]


class CategoryClickRequest(BaseModel):
    """点击分类标签"""
    category: str
    section_top: Optional[float] = None
    page_offset: float = 0.0


class ContactMessage(BaseModel):
    """联系表单"""
    name: str = ""
    email: str = ""
    message: str = ""
