from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


class ShippingAddress(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


class CardPayment(BaseModel):
    card_number: str = Field(min_length=16)
    expiry_date: str = Field(min_length=5)  # MM/YY
    cvv: str = Field(min_length=3)

    model_config = {"str_strip_whitespace": True}

    @property
    def last4(self) -> str:
        digits = "".join(ch for ch in self.card_number if ch.isdigit())
        return digits[-4:]


class CheckoutForm(BaseModel):
    shipping_address: ShippingAddress
    payment_method: Literal["card", "paypal"] = "card"
    payment: Optional[CardPayment] = None

    @model_validator(mode="after")
    def card_details_required(self):
        if self.payment_method == "card" and self.payment is None:
            raise ValueError("Card details are required")
        return self


class OrderStatusForm(BaseModel):
    status: Literal["pending", "processing", "shipped", "delivered", "cancelled"]
