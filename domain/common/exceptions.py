"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode
from shared.codes.payment_codes import PaymentCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
        )


class UnsupportedPaymentMethodException(BusinessException):
    def __init__(self, payment_method: str):
        super().__init__(
            code=PaymentCode.UNSUPPORTED_PAYMENT_METHOD,
            message=f"Unsupported payment method: {payment_method}",
            error_type="UnsupportedPaymentMethod",
            details={"payment_method": payment_method},
            field="payment_method",
        )


class InvalidPhoneNumberException(DomainValidationException):
    def __init__(self, phone_number: str):
        super().__init__(
            "Phone number must be exactly 9 digits",
            field="phone_number",
            details={"length": len(phone_number or "")},
        )
