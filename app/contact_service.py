"""联系表单服务（模拟提交，不发送邮件）"""
import logging
import re

from app.errors import ContactValidationError
from app.models import ContactMessage

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

THANK_YOU_MESSAGE = "Thank you for your message! We'll get back to you soon."


def validate_contact(message: ContactMessage) -> list[str]:
    errors = []
    if not message.name.strip():
        errors.append("Name is required")
    if not message.email.strip():
        errors.append("Email is required")
    elif not EMAIL_PATTERN.match(message.email.strip()):
        errors.append("Email address is not valid")
    text = message.message.strip()
    if not text:
        errors.append("Message is required")
    elif len(text) < 10:
        errors.append("Message must be at least 10 characters")
    elif len(text) > 2000:
        errors.append("Message must be 2000 characters or less")
    return errors


def submit_contact(message: ContactMessage) -> dict:
    """校验并记录联系表单"""
    errors = validate_contact(message)
    if errors:
        raise ContactValidationError(errors)

    logger.info("[Contact] message from %s <%s>: %d chars", message.name.strip(), message.email.strip(), len(message.message))
    return {"status": "received", "message": THANK_YOU_MESSAGE}
