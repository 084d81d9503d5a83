"""Checkout session models.

Request/response shapes for opening a Stripe hosted checkout session.
JSON field names are camelCase to match the order service contract.
Order payloads are closed: unknown properties are rejected.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class OrderItem(BaseModel):
    """A single product line in an order.

    Prices are in the currency's major unit (e.g. dollars).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    name: str = Field(..., min_length=1, description="Product name", examples=["A"])
    price: Decimal = Field(
        ...,
        gt=0,
        description="Unit price in major currency units",
        examples=[9.99],
    )
    quantity: int = Field(..., gt=0, strict=True, description="Number of units", examples=[2])

    @field_validator("price", mode="before")
    @classmethod
    def _price_is_number(cls, value: Any) -> Any:
        # JSON strings and booleans are not prices
        if isinstance(value, (str, bool)):
            raise ValueError("price must be a number")
        return value


class PaymentSessionRequest(BaseModel):
    """Order payload for which a checkout session is opened."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "orderId": "o1",
                    "currency": "usd",
                    "items": [{"name": "A", "price": 9.99, "quantity": 2}],
                }
            ]
        },
    )

    order_id: str = Field(
        ...,
        min_length=1,
        description="Order identifier, attached to the payment as metadata",
        examples=["o1"],
    )
    currency: str = Field(
        ...,
        min_length=1,
        description="ISO 4217 currency code",
        examples=["usd"],
    )
    items: list[OrderItem] = Field(..., min_length=1)


class CheckoutSessionResult(BaseModel):
    """Redirect targets of a created checkout session.

    Values are passed through verbatim from Stripe.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success_url: str | None = Field(
        default=None,
        examples=["http://localhost:3003/payments/success"],
    )
    cancel_url: str | None = Field(
        default=None,
        examples=["http://localhost:3003/payments/cancel"],
    )
    url: str | None = Field(
        default=None,
        description="Stripe-hosted checkout page",
        examples=["https://checkout.stripe.com/c/pay/cs_test_abc123"],
    )
