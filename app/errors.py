"""站点错误类型"""


class SiteError(Exception):
    """业务错误基类，由 main 中的异常处理器统一转换为 JSON 响应"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"status": "error", "message": self.message}


class CatalogError(SiteError):
    """菜单数据文件无法加载"""
    status_code = 500

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        return {**super().to_dict(), "errors": self.errors}


class UnknownMenuItemError(SiteError):
    status_code = 404

    def __init__(self, item_id: str):
        super().__init__(f"Menu item not found: {item_id}")
        self.item_id = item_id


class UnknownCategoryError(SiteError):
    status_code = 404

    def __init__(self, category: str):
        super().__init__(f"Unknown category: {category}")
        self.category = category


class SessionNotFoundError(SiteError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class DraftNotFoundError(SiteError):
    status_code = 404

    def __init__(self, draft_id: str):
        super().__init__(f"Draft not found: {draft_id}")
        self.draft_id = draft_id


class EmptyCartError(SiteError):
    status_code = 409

    def __init__(self):
        super().__init__("Cart is empty")


class FieldValidationError(SiteError):
    """字段校验失败，errors 为逐条错误信息"""
    status_code = 422

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors

    def to_dict(self) -> dict:
        return {**super().to_dict(), "errors": self.errors}


class MenuItemValidationError(FieldValidationError):
    pass


class ContactValidationError(FieldValidationError):
    pass
