"""Enumeration types for dealer entities."""

from __future__ import annotations

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw: object) -> OrderStatus:
        """Map free-form status text onto a member, ignoring case and spelling."""
        if raw is None:
            return cls.OTHER
        text = str(raw).strip().lower()
        if text in _CANCELLED_ALIASES:
            return cls.CANCELLED
        try:
            member = cls(text.upper())
        except ValueError:
            return cls.OTHER
        return member


_CANCELLED_ALIASES = frozenset({"cancel", "cancelled", "canceled"})


class PlanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    OVERDUE = "OVERDUE"
    PAID = "PAID"

    @classmethod
    def parse(cls, raw: object) -> PlanStatus:
        """Map backend plan status text onto a member; unknown text reads as ACTIVE."""
        if raw is None:
            return cls.ACTIVE
        text = str(raw).strip().upper().replace(" ", "_")
        if text == "PAID_OFF":
            return cls.PAID
        try:
            return cls(text)
        except ValueError:
            return cls.ACTIVE


class PaymentMethod(str, Enum):
    TT = "TT"  # full payment
    TG = "TG"  # installment


class Segment(str, Enum):
    NEW = "NEW"
    REGULAR = "REGULAR"
    VIP = "VIP"


class CustomerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AmountSource(str, Enum):
    CONFIRMATION = "CONFIRMATION"
    DETAIL = "DETAIL"
    PAYMENT = "PAYMENT"
    PAYMENT_INDEX = "PAYMENT_INDEX"
    NONE = "NONE"
