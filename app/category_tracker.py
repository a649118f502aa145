"""
分类导航状态

根据页面上报的区块位置计算当前可见的分类，
并在点击分类标签时给出平滑滚动的目标位置。

点击触发的平滑滚动过程中会产生大量滚动事件，此时暂停按滚动重算，
直到滚动到达目标位置或超过屏蔽时长，避免刚点击的分类被覆盖
"""
import time
from typing import Callable, Iterable, Optional

from app.config import (
    CATEGORY_HEADER_OFFSET_PX,
    CATEGORY_REFERENCE_LINE_PX,
    CATEGORY_SCROLL_SUPPRESS_SECONDS,
)
from app.errors import UnknownCategoryError
from app.models import CategoryState, ScrollCommand, SectionBounds

# 判断滚动已到达目标位置的容差（像素）
TARGET_TOLERANCE_PX = 2.0


class CategoryTracker:
    """分类导航跟踪器"""

    def __init__(
        self,
        categories: Iterable[str],
        active_category: Optional[str] = None,
        reference_line: float = CATEGORY_REFERENCE_LINE_PX,
        header_offset: float = CATEGORY_HEADER_OFFSET_PX,
        suppress_seconds: float = CATEGORY_SCROLL_SUPPRESS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.categories = list(categories)
        if not self.categories:
            raise ValueError("CategoryTracker needs at least one category")
        if active_category is not None and active_category not in self.categories:
            raise UnknownCategoryError(active_category)

        self.active_category = active_category or self.categories[0]
        self.last_scroll_y = 0.0
        self.reference_line = reference_line
        self.header_offset = header_offset
        self.suppress_seconds = suppress_seconds
        self._clock = clock
        self._suppress_until: Optional[float] = None
        self._scroll_target: Optional[float] = None

    @property
    def suppressed(self) -> bool:
        if self._suppress_until is None:
            return False
        if self._clock() >= self._suppress_until:
            self._end_suppression()
            return False
        return True

    def _end_suppression(self) -> None:
        self._suppress_until = None
        self._scroll_target = None

    def section_at_reference_line(self, sections: Iterable[SectionBounds]) -> Optional[str]:
        """返回跨越参考线的第一个区块 id，没有则返回 None"""
        for section in sections:
            if section.top <= self.reference_line <= section.bottom:
                return section.id
        return None

    def on_scroll(self, sections: Iterable[SectionBounds], scroll_y: float = 0.0) -> str:
        """
        处理滚动事件

        sections 为各分类区块相对视口的上下边界。
        没有区块跨越参考线时（第一个区块之上或最后一个之后）保持原分类
        """
        self.last_scroll_y = scroll_y

        if self._scroll_target is not None and abs(scroll_y - self._scroll_target) <= TARGET_TOLERANCE_PX:
            self._end_suppression()
        elif self.suppressed:
            return self.active_category

        current = self.section_at_reference_line(sections)
        if current is not None and current in self.categories:
            self.active_category = current
        return self.active_category

    def on_click(
        self,
        category: str,
        section_top: Optional[float] = None,
        page_offset: float = 0.0,
    ) -> Optional[ScrollCommand]:
        """
        点击分类标签: 立即切换分类

        已知区块位置时返回滚动指令，目标位置扣除吸顶头部的高度
        """
        if category not in self.categories:
            raise UnknownCategoryError(category)

        self.active_category = category
        if section_top is None:
            self._end_suppression()
            return None

        target = max(0.0, section_top + page_offset - self.header_offset)
        self._scroll_target = target
        self._suppress_until = self._clock() + self.suppress_seconds
        return ScrollCommand(top=target)

    def state(self, scroll: Optional[ScrollCommand] = None) -> CategoryState:
        return CategoryState(
            active_category=self.active_category,
            last_scroll_y=self.last_scroll_y,
            suppressed=self.suppressed,
            scroll=scroll,
        )
