"""Message bus clients for publishing payment events.

The webhook processor only needs one capability, `publish(topic, payload)`.
The production implementation publishes JSON messages to a RabbitMQ topic
exchange, using the topic name as the routing key.
"""

import json
import logging
import threading
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import pika
from pika.exceptions import AMQPError

logger = logging.getLogger(__name__)


class MessageBusError(Exception):
    """Raised when a message cannot be handed to the broker."""


class MessageBus(Protocol):
    """Publish-only message bus capability."""

    def publish(self, topic: str, payload: Mapping[str, Any]) -> None:
        """Publish a payload under a topic name."""
        ...


class RabbitMQMessageBus:
    """Publishes events to a RabbitMQ topic exchange.

    The connection is opened lazily and re-opened when the broker dropped it.
    A BlockingConnection is not thread-safe, so publishing is serialized.
    """

    def __init__(self, urls: Sequence[str], exchange: str = "payments") -> None:
        """Initialize the client without connecting.

        Args:
            urls: AMQP URLs, tried in order on connect.
            exchange: Name of the durable topic exchange to publish to.
        """
        if not urls:
            raise ValueError("at least one broker URL is required")
        self._urls = list(urls)
        self._exchange = exchange
        self._connection: pika.BlockingConnection | None = None
        self._channel: Any = None
        self._lock = threading.Lock()

    def _connect(self) -> None:
        """Open the connection and declare the exchange.

        Raises:
            MessageBusError: If no broker is reachable.
        """
        parameters = [pika.URLParameters(url) for url in self._urls]
        try:
            self._connection = pika.BlockingConnection(parameters)
            self._channel = self._connection.channel()
            self._channel.exchange_declare(
                exchange=self._exchange,
                exchange_type="topic",
                durable=True,
            )
        except AMQPError as e:
            self._connection = None
            self._channel = None
            logger.critical("Cannot connect to message broker: %s", e)
            raise MessageBusError(f"Cannot connect to message broker: {e}") from e
        logger.info("Connected to message broker (exchange=%s)", self._exchange)

    def _is_open(self) -> bool:
        return (
            self._connection is not None
            and self._connection.is_open
            and self._channel is not None
            and self._channel.is_open
        )

    def publish(self, topic: str, payload: Mapping[str, Any]) -> None:
        """Publish a JSON message with the topic as routing key.

        Args:
            topic: Topic name, e.g. "payment.succeeded".
            payload: JSON-serializable message body.

        Raises:
            MessageBusError: If the message could not be published.
        """
        body = json.dumps(payload)
        with self._lock:
            if not self._is_open():
                self._connect()
            try:
                self._channel.basic_publish(
                    exchange=self._exchange,
                    routing_key=topic,
                    body=body,
                    properties=pika.BasicProperties(
                        content_type="application/json",
                        delivery_mode=2,  # persistent
                    ),
                )
            except AMQPError as e:
                logger.error("Failed to publish to %s: %s", topic, e)
                raise MessageBusError(f"Failed to publish to {topic}: {e}") from e
        logger.debug("Published message to %s", topic)

    def close(self) -> None:
        """Close the broker connection if open."""
        with self._lock:
            if self._connection is not None and self._connection.is_open:
                self._connection.close()
            self._connection = None
            self._channel = None
