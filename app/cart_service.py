"""
购物车服务

功能:
1. 购物车管理 - 添加/增减数量/删除商品
2. 价格计算 - 小计、商品总数
3. 结算 - 占位实现，计算总价后清空购物车，不发送订单

购物车只存在于内存中，随菜单会话一起创建和销毁
"""
import logging
from decimal import Decimal
from typing import Optional

from app.errors import EmptyCartError
from app.models import CartLineView, CheckoutReceipt, MenuItem, format_money, format_price

logger = logging.getLogger(__name__)


class CartLine:
    """购物车行: 菜单项 + 数量（数量始终 >= 1）"""

    __slots__ = ("item", "quantity")

    def __init__(self, item: MenuItem, quantity: int = 1):
        self.item = item
        self.quantity = quantity

    @property
    def line_total(self) -> Decimal:
        return self.item.price * self.quantity

    def view(self) -> CartLineView:
        return CartLineView(
            item_id=self.item.id,
            name=self.item.name,
            image=self.item.image,
            unit_price=format_money(self.item.price),
            quantity=self.quantity,
            line_total=format_money(self.line_total),
            line_total_display=format_price(self.line_total),
        )

    def __repr__(self) -> str:
        return f"CartLine({self.item.id!r}, quantity={self.quantity})"


class CartStore:
    """
    购物车

    每个商品 id 只对应一行；行的顺序为首次加入的顺序，
    重复加入时原地增加数量
    """

    def __init__(self):
        # dict 保持插入顺序
        self._lines: dict[str, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get_line(self, item_id: str) -> Optional[CartLine]:
        return self._lines.get(str(item_id))

    def add_item(self, item: MenuItem) -> CartLine:
        """添加商品: 已存在则数量 +1，否则追加新行"""
        line = self._lines.get(item.id)
        if line:
            line.quantity += 1
        else:
            line = CartLine(item)
            self._lines[item.id] = line
        return line

    def update_quantity(self, item_id: str, delta: int) -> Optional[int]:
        """
        修改商品数量

        返回修改后的数量（0 表示该行已删除）；
        购物车中没有该商品时不做任何修改并返回 None
        """
        item_id = str(item_id)
        line = self._lines.get(item_id)
        if line is None:
            logger.debug("[Cart] update_quantity ignored, item %s not in cart (delta=%+d)", item_id, delta)
            return None

        new_quantity = line.quantity + delta
        if new_quantity > 0:
            line.quantity = new_quantity
            return new_quantity

        del self._lines[item_id]
        return 0

    def remove_item(self, item_id: str) -> bool:
        """删除整行"""
        line = self.get_line(item_id)
        if line is None:
            logger.debug("[Cart] remove_item ignored, item %s not in cart", item_id)
            return False
        self.update_quantity(line.item.id, -line.quantity)
        return True

    def subtotal(self) -> Decimal:
        """小计 = sum(单价 * 数量)，每次调用重新计算"""
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def total_item_count(self) -> int:
        """商品总件数（角标显示）"""
        return sum(line.quantity for line in self._lines.values())

    def clear(self) -> None:
        self._lines.clear()


class CheckoutService:
    """
    结算服务（占位实现）

    只计算总价并返回确认信息，然后清空购物车、关闭购物车面板。
    不发送订单、不保存数据、不涉及支付
    """

    def checkout(self, session) -> CheckoutReceipt:
        cart: CartStore = session.cart
        if cart.is_empty:
            raise EmptyCartError()

        total = cart.subtotal()
        receipt = CheckoutReceipt(
            session_id=session.session_id,
            lines=[line.view() for line in cart.lines()],
            total=format_money(total),
            total_display=format_price(total),
            total_items=cart.total_item_count(),
            message=f"Order placed! Total: {format_price(total)}",
        )

        cart.clear()
        session.toggle_cart(False)

        logger.info(
            "[Checkout] placeholder order for session %s: %d items, total %s",
            session.session_id, receipt.total_items, receipt.total,
        )
        return receipt


# 单例实例
checkout_service = CheckoutService()
