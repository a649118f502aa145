"""FastAPI 主应用"""
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from app.admin_service import PREVIEW_NOTE, DraftRegistry, new_item_template, validate_menu_item
from app.cart_service import checkout_service
from app.config import (
    CONTACT_EMAIL, LOG_LEVEL, MENU_DATA_PATH, SITE_NAME, STATIC_DIR, TEMPLATES_DIR,
)
from app.contact_service import submit_contact
from app.data import LOCATIONS, get_all_categories, load_catalog, parse_category
from app.errors import SiteError
from app.models import (
    CATEGORY_LABELS, AddToCartRequest, CategoryClickRequest, ContactMessage,
    ScrollReportRequest, ToggleCartRequest, UpdateQuantityRequest,
)
from app.session_service import MenuSession, SessionRegistry

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ============ 应用生命周期 ============

@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("[Startup] 加载菜单数据 %s", MENU_DATA_PATH)
    catalog = load_catalog(MENU_DATA_PATH)
    app.state.catalog = catalog
    app.state.sessions = SessionRegistry(catalog)
    app.state.drafts = DraftRegistry(catalog)
    logger.info("[Startup] 启动完成，共 %d 个菜单项", len(catalog))

    yield

    logger.info("[Shutdown] 清理 %d 个菜单会话", len(app.state.sessions))


app = FastAPI(
    title=f"{SITE_NAME} Demo",
    description="汉堡店官网 - 菜单浏览与购物车演示",
    version="1.0.0",
    lifespan=lifespan
)

# 静态文件和模板
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.globals.update(site_name=SITE_NAME, contact_email=CONTACT_EMAIL)


@app.exception_handler(SiteError)
async def site_error_handler(request: Request, exc: SiteError):
    """业务错误统一返回 {"status": "error", "message": ...}"""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _session(request: Request, session_id: str) -> MenuSession:
    return request.app.state.sessions.get(session_id)


def _page(request: Request, name: str, context: dict | None = None, active: str = ""):
    return templates.TemplateResponse(request, name, {"active_page": active, **(context or {})})


# ============ 健康检查 ============
@app.get("/api/health")
async def health_check():
    """健康检查端点"""
    return {
        "status": "healthy",
        "service": "smash-burgers-site",
        "version": "1.0.0"
    }


# ============ 页面 ============

@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """首页 - 推荐菜品与门店"""
    catalog = request.app.state.catalog
    return _page(request, "index.html", {
        "featured": catalog.featured(),
        "locations": LOCATIONS,
    }, active="home")


@app.get("/about", response_class=HTMLResponse)
async def about(request: Request):
    return _page(request, "about.html", active="about")


@app.get("/locations", response_class=HTMLResponse)
async def locations(request: Request):
    return _page(request, "locations.html", {"locations": LOCATIONS}, active="locations")


@app.get("/contact", response_class=HTMLResponse)
async def contact(request: Request):
    return _page(request, "contact.html", {"locations": LOCATIONS}, active="contact")


@app.get("/menu", response_class=HTMLResponse)
async def menu_page(request: Request):
    """菜单页 - 每次打开都创建新的会话（刷新后购物车为空）"""
    catalog = request.app.state.catalog
    session = request.app.state.sessions.create()
    return _page(request, "menu.html", {
        "session_id": session.session_id,
        "groups": [(cat.value, CATEGORY_LABELS[cat], items) for cat, items in catalog.grouped()],
        "cart": session.view(),
        "active_category": session.tracker.active_category,
    }, active="menu")


@app.get("/admin", response_class=HTMLResponse)
async def admin_page(request: Request):
    """菜单管理页（仅预览，不保存）"""
    return _page(request, "admin.html", {"categories": get_all_categories()}, active="admin")


# ============ 菜单 API ============

@app.get("/api/menu")
async def get_menu(request: Request):
    """获取完整菜单"""
    catalog = request.app.state.catalog
    return {
        "items": [item.model_dump(mode="json") for item in catalog],
        "categories": get_all_categories()
    }


@app.get("/api/menu/featured")
async def get_featured(request: Request):
    """获取推荐菜品"""
    return {"items": [item.model_dump(mode="json") for item in request.app.state.catalog.featured()]}


@app.get("/api/menu/category/{category}")
async def get_menu_category(request: Request, category: str):
    """获取分类菜单"""
    cat = parse_category(category)
    items = request.app.state.catalog.by_category(cat)
    return {
        "category": cat.value,
        "label": CATEGORY_LABELS[cat],
        "items": [item.model_dump(mode="json") for item in items]
    }


@app.get("/api/menu/item/{item_id}")
async def get_menu_item(request: Request, item_id: str):
    """获取单个菜单项"""
    return request.app.state.catalog.require(item_id).model_dump(mode="json")


# ============ 会话 / 购物车 API ============

@app.post("/api/session")
async def create_session(request: Request):
    """创建菜单会话"""
    session = request.app.state.sessions.create()
    return {
        "session_id": session.session_id,
        "cart": session.view().model_dump(),
        "category": session.tracker.state().model_dump()
    }


@app.get("/api/cart/{session_id}")
async def get_cart(request: Request, session_id: str):
    """获取购物车"""
    return _session(request, session_id).view().model_dump()


@app.post("/api/cart/{session_id}/add")
async def add_to_cart(request: Request, session_id: str, body: AddToCartRequest):
    """添加商品到购物车（同时打开购物车面板）"""
    session = _session(request, session_id)
    line = session.add_item(body.item_id)
    return {
        "status": "added",
        "cart": session.view().model_dump(),
        "message": f"Added {line.item.name} x{line.quantity}"
    }


@app.patch("/api/cart/{session_id}/item/{item_id}")
async def update_cart_item(request: Request, session_id: str, item_id: str, body: UpdateQuantityRequest):
    """修改商品数量，数量减到 0 时删除该行"""
    session = _session(request, session_id)
    quantity = session.update_quantity(item_id, body.delta)
    if quantity is None:
        status = "unchanged"
    elif quantity == 0:
        status = "removed"
    else:
        status = "updated"
    return {
        "status": status,
        "quantity": quantity,
        "cart": session.view().model_dump()
    }


@app.delete("/api/cart/{session_id}/item/{item_id}")
async def remove_cart_item(request: Request, session_id: str, item_id: str):
    """删除购物车商品"""
    session = _session(request, session_id)
    removed = session.cart.remove_item(item_id)
    return {
        "status": "removed" if removed else "unchanged",
        "cart": session.view().model_dump()
    }


@app.delete("/api/cart/{session_id}")
async def clear_cart(request: Request, session_id: str):
    """清空购物车"""
    session = _session(request, session_id)
    session.cart.clear()
    return {
        "status": "cleared",
        "cart": session.view().model_dump()
    }


@app.post("/api/cart/{session_id}/toggle")
async def toggle_cart(request: Request, session_id: str, body: ToggleCartRequest | None = None):
    """打开/关闭购物车面板"""
    session = _session(request, session_id)
    session.toggle_cart(body.open if body else None)
    return {
        "status": "ok",
        "cart": session.view().model_dump()
    }


@app.post("/api/cart/{session_id}/checkout")
async def checkout_cart(request: Request, session_id: str):
    """结算（占位实现，不会真正下单）"""
    session = _session(request, session_id)
    receipt = checkout_service.checkout(session)
    return {
        "status": "success",
        "receipt": receipt.model_dump(),
        "message": receipt.message,
        "cart": session.view().model_dump()
    }


# ============ 分类导航 API ============

@app.get("/api/session/{session_id}/category")
async def get_category_state(request: Request, session_id: str):
    """获取当前分类"""
    return _session(request, session_id).tracker.state().model_dump()


@app.post("/api/session/{session_id}/category/scroll")
async def report_scroll(request: Request, session_id: str, body: ScrollReportRequest):
    """上报滚动位置，重新计算当前分类"""
    tracker = _session(request, session_id).tracker
    tracker.on_scroll(body.sections, body.scroll_y)
    return tracker.state().model_dump()


@app.post("/api/session/{session_id}/category/click")
async def click_category(request: Request, session_id: str, body: CategoryClickRequest):
    """点击分类标签，返回滚动目标"""
    tracker = _session(request, session_id).tracker
    scroll = tracker.on_click(body.category, body.section_top, body.page_offset)
    return tracker.state(scroll).model_dump()


# ============ 菜单管理 API ============

@app.post("/api/admin/validate")
async def admin_validate_item(item: dict):
    """校验单个菜单项"""
    errors = validate_menu_item(item)
    return {"valid": not errors, "errors": errors}


@app.post("/api/admin/drafts")
async def admin_create_draft(request: Request):
    """基于当前菜单创建草稿"""
    draft = request.app.state.drafts.create()
    return {
        "draft_id": draft.draft_id,
        "menu": draft.records,
        "item_count": draft.item_count(),
        "template": new_item_template()
    }


@app.get("/api/admin/drafts/{draft_id}")
async def admin_get_draft(request: Request, draft_id: str):
    draft = request.app.state.drafts.get(draft_id)
    return {
        "draft_id": draft.draft_id,
        "menu": draft.records,
        "item_count": draft.item_count()
    }


@app.put("/api/admin/drafts/{draft_id}/items")
async def admin_save_item(request: Request, draft_id: str, item: dict):
    """新增或修改草稿中的菜单项"""
    draft = request.app.state.drafts.get(draft_id)
    status = draft.save_item(item)
    return {
        "status": status,
        "message": f"Item saved! {PREVIEW_NOTE}",
        "menu": draft.records
    }


@app.delete("/api/admin/drafts/{draft_id}/items/{category}/{item_id}")
async def admin_delete_item(request: Request, draft_id: str, category: str, item_id: str):
    """删除草稿中的菜单项"""
    draft = request.app.state.drafts.get(draft_id)
    deleted = draft.delete_item(category, item_id)
    return {
        "status": "deleted" if deleted else "unchanged",
        "message": "Item deleted! (Note: This is a preview only.)" if deleted else "Item not found",
        "menu": draft.records
    }


@app.get("/api/admin/drafts/{draft_id}/export")
async def admin_export_draft(request: Request, draft_id: str):
    """导出草稿为 menu-items.json"""
    draft = request.app.state.drafts.get(draft_id)
    return Response(
        content=draft.export(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="menu-items.json"'}
    )


# ============ 联系表单 API ============

@app.post("/api/contact")
async def contact_submit(message: ContactMessage):
    """提交联系表单（模拟）"""
    return submit_contact(message)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
