"""
菜单会话服务

功能:
1. 菜单会话 - 每次打开菜单页创建一个会话，持有购物车和分类导航状态
2. 会话注册表 - 按 session_id 查找，清理长时间不活跃的会话

会话只保存在内存中，刷新页面即开始新的会话
"""
import logging
import time
import uuid
from typing import Callable, Optional

from app.cart_service import CartLine, CartStore
from app.category_tracker import CategoryTracker
from app.config import SESSION_IDLE_TIMEOUT_SECONDS
from app.data import MenuCatalog
from app.errors import SessionNotFoundError
from app.models import CartView, format_money, format_price

logger = logging.getLogger(__name__)


class MenuSession:
    """一次菜单页访问的状态"""

    def __init__(self, session_id: str, catalog: MenuCatalog, tracker: CategoryTracker, now: float):
        self.session_id = session_id
        self.catalog = catalog
        self.cart = CartStore()
        self.tracker = tracker
        self.cart_open = False
        self.created_at = now
        self.last_seen = now

    def add_item(self, item_id: str) -> CartLine:
        """加入购物车并打开购物车面板"""
        item = self.catalog.require(item_id)
        line = self.cart.add_item(item)
        self.cart_open = True
        return line

    def update_quantity(self, item_id: str, delta: int) -> Optional[int]:
        return self.cart.update_quantity(item_id, delta)

    def toggle_cart(self, open: Optional[bool] = None) -> bool:
        self.cart_open = (not self.cart_open) if open is None else open
        return self.cart_open

    def view(self) -> CartView:
        subtotal = self.cart.subtotal()
        return CartView(
            session_id=self.session_id,
            lines=[line.view() for line in self.cart.lines()],
            subtotal=format_money(subtotal),
            subtotal_display=format_price(subtotal),
            total_items=self.cart.total_item_count(),
            is_open=self.cart_open,
            can_checkout=not self.cart.is_empty,
        )


class SessionRegistry:
    """菜单会话注册表（由 app.state 持有）"""

    def __init__(
        self,
        catalog: MenuCatalog,
        idle_timeout: float = SESSION_IDLE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.catalog = catalog
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._sessions: dict[str, MenuSession] = {}
        # 分类顺序与菜单页展示的分组一致
        self._categories = [cat.value for cat, _ in catalog.grouped()]

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self) -> MenuSession:
        """创建新会话（顺便清理过期会话）"""
        self.prune()
        now = self._clock()
        session_id = uuid.uuid4().hex
        tracker = CategoryTracker(self._categories, clock=self._clock)
        session = MenuSession(session_id, self.catalog, tracker, now)
        self._sessions[session_id] = session
        logger.debug("[Session] created %s (%d active)", session_id, len(self._sessions))
        return session

    def get(self, session_id: str) -> MenuSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.last_seen = self._clock()
        return session

    def drop(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def prune(self, now: Optional[float] = None) -> int:
        """删除空闲超时的会话，返回删除数量"""
        now = self._clock() if now is None else now
        expired = [
            sid for sid, session in self._sessions.items()
            if now - session.last_seen > self.idle_timeout
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("[Session] pruned %d idle sessions", len(expired))
        return len(expired)
