from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid
import re

# Egyptian mobile numbers: 010/011/012/015 with optional country prefix
PHONE_PATTERN = re.compile(r"^(?:\+20|0020|0)?1[0125]\d{7,8}$")


class OrderStatus(str, Enum):
    NEW = "NEW"
    PROCESSING = "PROCESSING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    OrderStatus.NEW: "جديد",
    OrderStatus.PROCESSING: "قيد التجهيز",
    OrderStatus.DELIVERED: "تم التوصيل",
    OrderStatus.CANCELLED: "ملغي",
}


def normalize_phone(value: str) -> str:
    return re.sub(r"[\s\-]", "", value or "")


class OrderCreate(BaseModel):
    """Customer submitted order form"""
    # missing fields run through the same validators as blank ones
    model_config = ConfigDict(validate_default=True)

    customer_name: str = ""
    customer_phone: str = ""
    customer_address: str = ""
    customer_notes: Optional[str] = None

    @field_validator("customer_name")
    @classmethod
    def name_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("الاسم مطلوب")
        return v

    @field_validator("customer_phone")
    @classmethod
    def phone_valid(cls, v: str) -> str:
        v = normalize_phone((v or "").strip())
        if not v:
            raise ValueError("رقم الهاتف مطلوب")
        if not PHONE_PATTERN.match(v):
            raise ValueError("رقم الهاتف غير صحيح")
        return v

    @field_validator("customer_address")
    @classmethod
    def address_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("العنوان مطلوب")
        return v

    @field_validator("customer_notes")
    @classmethod
    def blank_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class Order(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: f"ord_{uuid.uuid4().hex[:12]}")
    customer_name: str
    customer_phone: str
    customer_address: str
    customer_notes: Optional[str] = None
    status: OrderStatus = OrderStatus.NEW
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_document(self) -> dict:
        doc = self.model_dump()
        doc["status"] = self.status.value
        doc["created_at"] = doc["created_at"].isoformat()
        doc["updated_at"] = doc["updated_at"].isoformat()
        return doc


INVALID_ORDER_MESSAGE = "بيانات الطلب غير صحيحة"


def validation_message(errors: List[dict]) -> str:
    """First readable message from a list of pydantic error dicts

    Only messages raised by our own validators are passed through; anything
    pydantic or the JSON decoder reports falls back to a generic Arabic message.
    """
    for err in errors:
        loc = err.get("loc") or ()
        if err.get("type") == "value_error":
            ctx_error = (err.get("ctx") or {}).get("error")
            if ctx_error is not None:
                return str(ctx_error)
        if "status" in loc:
            return "حالة الطلب غير صحيحة"
    return INVALID_ORDER_MESSAGE
