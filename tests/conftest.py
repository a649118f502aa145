from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.data import MenuCatalog
from app.models import Category, MenuItem
from app.session_service import SessionRegistry


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_item(item_id="single-smash", price="9.00", category=Category.BEEF, **kwargs) -> MenuItem:
    """构造测试用菜单项，未指定的字段使用默认值"""
    return MenuItem(
        id=item_id,
        name=kwargs.get("name", item_id.replace("-", " ").title()),
        description=kwargs.get("description", "A test menu item."),
        price=Decimal(price),
        category=category,
        image=kwargs.get("image", "/images/test.webp"),
        featured=kwargs.get("featured", False),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def small_catalog():
    return MenuCatalog([
        make_item("single-smash", "9.00"),
        make_item("bacon-smash", "13.00"),
        make_item("oregon-fries", "3.50", Category.SIDES),
        make_item("secret-sauces", "0.75", Category.SIDES),
        make_item("soda-water", "2.00", Category.BEVERAGES),
    ])


@pytest.fixture
def registry(small_catalog, clock):
    return SessionRegistry(small_catalog, idle_timeout=60, clock=clock)


@pytest.fixture
def client():
    from app.main import app

    with TestClient(app) as client:
        yield client
