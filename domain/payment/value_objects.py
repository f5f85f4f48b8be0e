"""
支付领域值对象 - 支付方式、支付流程、运营商编码、手机号规范化
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from domain.common.exceptions import (
    InvalidPhoneNumberException,
    UnsupportedPaymentMethodException,
)


LOCAL_PHONE_DIGITS = 9
DEFAULT_MEMO = "CamerPay Payment"


class PaymentMethod(str, Enum):
    """支付方式（封闭枚举）"""
    MTN_MOMO = "mtn-momo"
    ORANGE_MONEY = "orange-money"


class PaymentFlow(str, Enum):
    """支付流程"""
    DIRECT = "direct"        # 手机上弹出 USSD/App 确认
    REDIRECT = "redirect"    # 跳转到网关托管支付页


class ChargePurpose(str, Enum):
    """扣款用途，仅用于生成默认备注"""
    AIRTIME = "airtime"
    DATA = "data"
    ELECTRICITY = "electricity"
    WATER = "water"
    TV = "tv"


# Exhaustive: every PaymentMethod member has exactly one operator code.
MNO_CODES: dict[PaymentMethod, str] = {
    PaymentMethod.MTN_MOMO: "MTN_MOMO",
    PaymentMethod.ORANGE_MONEY: "ORANGE_MONEY_CAMEROON",
}

TV_PACKAGE_PRICES: dict[str, int] = {
    "daily": 250,
    "weekly": 1000,
    "monthly": 2500,
}


def parse_payment_method(tag: str | PaymentMethod) -> PaymentMethod:
    """将外部传入的标签解析为 PaymentMethod，未知标签直接拒绝。"""
    if isinstance(tag, PaymentMethod):
        return tag
    if not isinstance(tag, str):
        raise UnsupportedPaymentMethodException(str(tag))
    try:
        return PaymentMethod(tag.strip().lower())
    except ValueError:
        raise UnsupportedPaymentMethodException(str(tag)) from None


def mno_code_for(method: str | PaymentMethod) -> str:
    return MNO_CODES[parse_payment_method(method)]


def normalize_phone(local_number: str, country_code: str = "+237") -> str:
    """
    将 9 位本地号码规范化为带国家码的完整号码

    Examples:
        >>> normalize_phone("670000000")
        '+237670000000'
    """
    digits = (local_number or "").strip()
    # ASCII only: str.isdigit() also accepts other scripts' digits
    if len(digits) != LOCAL_PHONE_DIGITS or not (digits.isascii() and digits.isdigit()):
        raise InvalidPhoneNumberException(local_number)
    return f"{country_code}{digits}"


def build_memo(
    purpose: Optional[ChargePurpose],
    reference: Optional[str] = None,
    package: Optional[str] = None,
) -> str:
    """根据用途生成默认备注；缺少用途或参考号时返回通用备注。"""
    if purpose is None or not reference:
        return DEFAULT_MEMO
    if purpose is ChargePurpose.ELECTRICITY:
        return f"ENEO bill for meter {reference}"
    if purpose is ChargePurpose.WATER:
        return f"CamWater bill for contract {reference}"
    if purpose is ChargePurpose.TV:
        if package:
            return f"TV Subscription for {reference} ({package})"
        return f"TV Subscription for {reference}"
    if purpose is ChargePurpose.DATA:
        return f"Data bundle for {reference}"
    return f"Airtime top-up for {reference}"
