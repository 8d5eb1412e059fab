"""
Order domain errors
Each error carries a user facing (Arabic) message and the HTTP status it maps to
"""


class OrderError(Exception):
    status_code = 500
    default_message = "حدث خطأ غير متوقع"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(OrderError):
    """Missing or malformed input, correctable by the user"""
    status_code = 400
    default_message = "بيانات الطلب غير صحيحة"


class NotFoundError(OrderError):
    """The referenced order does not exist"""
    status_code = 404
    default_message = "الطلب غير موجود"


class StoreError(OrderError):
    """Persistence failure; details are logged, never returned"""
    status_code = 500
    default_message = "حدث خطأ في الخادم. يرجى المحاولة لاحقاً"
