"""Integration tests for the complete payment flow.

1. Order service opens a checkout session for an order
2. Stripe copies the session's PaymentIntent metadata onto the charge
3. Stripe delivers a signed charge.succeeded webhook
4. payment.succeeded is published with the original order ID

Stripe's API and the broker are mocked; the HTTP app, the checkout builder,
the signature verifier and the webhook processor run for real.
"""

from typing import Any

from fastapi.testclient import TestClient


def _charge_from_session(
    params: dict[str, Any], charge_succeeded_event, charge_id: str
) -> dict[str, Any]:
    """Build the charge.succeeded event Stripe sends for a paid session."""
    order_id = params["payment_intent_data"]["metadata"]["orderId"]
    return charge_succeeded_event(
        event_id=f"evt_{charge_id}",
        charge_id=charge_id,
        order_id=order_id,
        receipt_url=f"https://pay.stripe.com/receipts/payment/{charge_id}",
    )


class TestPaymentFlow:
    def test_order_to_payment_succeeded(
        self,
        client: TestClient,
        mock_stripe_client,
        mock_bus,
        charge_succeeded_event,
        encode_event,
        sign_payload,
    ):
        order = {
            "orderId": "o1",
            "currency": "usd",
            "items": [{"name": "A", "price": 9.99, "quantity": 2}],
        }

        session_response = client.post("/payments/create-payment-session", json=order)
        assert session_response.status_code == 201
        assert session_response.json()["url"].startswith("https://checkout.stripe.com/")

        params = mock_stripe_client.checkout.sessions.create.call_args.kwargs["params"]
        assert params["line_items"][0]["price_data"]["unit_amount"] == 999
        assert params["line_items"][0]["quantity"] == 2

        event = _charge_from_session(params, charge_succeeded_event, "ch_3Flow")
        payload = encode_event(event)
        webhook_response = client.post(
            "/payments/webhook",
            content=payload,
            headers={"Stripe-Signature": sign_payload(payload)},
        )

        assert webhook_response.status_code == 200
        mock_bus.publish.assert_called_once_with(
            "payment.succeeded",
            {
                "stripePaymentId": "ch_3Flow",
                "orderId": "o1",
                "receiptUrl": "https://pay.stripe.com/receipts/payment/ch_3Flow",
            },
        )

    def test_abandoned_checkout_publishes_nothing(
        self, client: TestClient, mock_bus, unhandled_event, encode_event, sign_payload
    ):
        order = {
            "orderId": "o2",
            "currency": "eur",
            "items": [{"name": "B", "price": 5, "quantity": 1}],
        }
        assert client.post("/payments/create-payment-session", json=order).status_code == 201
        assert client.get("/payments/cancel").json()["ok"] is False

        payload = encode_event(unhandled_event)
        response = client.post(
            "/payments/webhook",
            content=payload,
            headers={"Stripe-Signature": sign_payload(payload)},
        )

        assert response.status_code == 200
        mock_bus.publish.assert_not_called()

    def test_two_orders_publish_their_own_ids(
        self,
        client: TestClient,
        mock_stripe_client,
        mock_bus,
        charge_succeeded_event,
        encode_event,
        sign_payload,
    ):
        published = []
        mock_bus.publish.side_effect = lambda topic, message: published.append(message)

        for order_id, charge_id in (("o-a", "ch_a"), ("o-b", "ch_b")):
            client.post(
                "/payments/create-payment-session",
                json={
                    "orderId": order_id,
                    "currency": "usd",
                    "items": [{"name": "A", "price": 1, "quantity": 1}],
                },
            )
            params = mock_stripe_client.checkout.sessions.create.call_args.kwargs["params"]
            payload = encode_event(_charge_from_session(params, charge_succeeded_event, charge_id))
            client.post(
                "/payments/webhook",
                content=payload,
                headers={"Stripe-Signature": sign_payload(payload)},
            )

        assert [(m["orderId"], m["stripePaymentId"]) for m in published] == [
            ("o-a", "ch_a"),
            ("o-b", "ch_b"),
        ]
