"""
站点配置

功能:
1. 从 .env / 环境变量读取配置
2. 提供各组件的默认参数（测试时可直接传入覆盖）
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

APP_DIR = Path(__file__).parent
TEMPLATES_DIR = APP_DIR / "templates"
STATIC_DIR = APP_DIR / "static"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


SITE_NAME = os.getenv("SITE_NAME", "Smash Burgers")
CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", "info@smashburgers.com")
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 菜单数据文件
MENU_DATA_PATH = Path(os.getenv("MENU_DATA_PATH", str(APP_DIR / "data" / "menu_items.json")))

# 分类导航: 参考线距视口顶部的距离、点击跳转时的吸顶头部偏移
CATEGORY_REFERENCE_LINE_PX = _env_float("CATEGORY_REFERENCE_LINE_PX", 200.0)
CATEGORY_HEADER_OFFSET_PX = _env_float("CATEGORY_HEADER_OFFSET_PX", 140.0)
# 点击跳转后屏蔽滚动重算的最长时间（平滑滚动动画时长）
CATEGORY_SCROLL_SUPPRESS_SECONDS = _env_float("CATEGORY_SCROLL_SUPPRESS_SECONDS", 0.8)

# 菜单会话空闲超时（秒）
SESSION_IDLE_TIMEOUT_SECONDS = _env_int("SESSION_IDLE_TIMEOUT_SECONDS", 3600)
