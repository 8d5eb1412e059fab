from urllib.parse import quote
from typing import Optional

from config import WHATSAPP_NUMBER, PRODUCT_NAME, UNIT_PRICE, CURRENCY
from models.order import Order

WHATSAPP_BASE_URL = "https://wa.me"


def build_confirmation_message(
    order: Order,
    product_name: str = PRODUCT_NAME,
    unit_price: int = UNIT_PRICE,
    currency: str = CURRENCY
) -> str:
    """Confirmation text the customer sends after submitting the order"""
    lines = [
        "مرحباً، تم تسجيل طلبي بنجاح:",
        "",
        f"🌟 المنتج: {product_name}",
        f"💰 السعر: {unit_price} {currency} (شحن مجاني)",
        f"📋 رقم الطلب: #{order.id}",
        "",
        "📋 بيانات الطلب:",
        f"الاسم: {order.customer_name}",
        f"الهاتف: {order.customer_phone}",
        f"العنوان: {order.customer_address}",
    ]
    if order.customer_notes:
        lines.append(f"ملاحظات: {order.customer_notes}")
    lines += ["", "شكراً لثقتكم في منتجاتنا! 💕"]
    return "\n".join(lines)


def build_whatsapp_url(order: Order, number: Optional[str] = None, **message_kwargs) -> str:
    number = (number or WHATSAPP_NUMBER).lstrip("+")
    text = build_confirmation_message(order, **message_kwargs)
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(text, safe='')}"
