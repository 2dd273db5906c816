"""Kafka publishing for reminder notifications."""

import os
import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from kafka import KafkaProducer

logger = logging.getLogger(__name__)


class ReminderNotifier:
    """
    Publishes reminder digests to Kafka for the notification service.

    The producer is created lazily on first use and the notifier is
    failsafe: a missing or unreachable broker is logged and the message is
    dropped, so a reminder run never fails because of Kafka.
    """

    def __init__(self, topic: Optional[str] = None):
        self.producer = None
        self._lock = threading.Lock()
        self.topic = topic or os.getenv("KAFKA_REMINDER_TOPIC", "contract-reminders")
        self.server_name = os.getenv("SERVER_NAME", "CONTRACT_KEY_DATES_BACKEND")

    def _initialize_producer(self) -> bool:
        """Initialize KafkaProducer. Returns True on success."""
        bootstrap_servers = os.getenv("KAFKA_BOOTSTRAP_SERVERS")
        if not bootstrap_servers:
            logger.warning("KAFKA_BOOTSTRAP_SERVERS not set. Reminder notifications disabled.")
            return False

        try:
            logger.info(f"Initializing reminder notifier for topic '{self.topic}'...")
            producer_config = {
                "bootstrap_servers": bootstrap_servers.split(","),
                "value_serializer": lambda v: json.dumps(v, default=str).encode("utf-8"),
                "key_serializer": lambda k: k.encode("utf-8") if k else None,
                "retries": 3,
                "request_timeout_ms": 15000,
                "acks": 1,
                "linger_ms": 10,
            }
            if os.getenv("KAFKA_USE_SSL", "true").lower() == "true":
                producer_config["security_protocol"] = "SSL"

            self.producer = KafkaProducer(**producer_config)
            logger.info(f"Reminder notifier connected. Topic: '{self.topic}'")
            return True
        except Exception as e:
            logger.error(f"Could not initialize reminder notifier: {e}", exc_info=True)
            self.producer = None
            return False

    def _create_message(self, digest: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "type": "contract-reminder",
            "server_name": self.server_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "owner_id": digest["owner_id"],
            "as_of": digest["as_of"],
            "items": digest["items"],
        }

    def publish_digest(self, digest: Dict[str, Any]) -> bool:
        """
        Queue one owner's reminder digest.

        Args:
            digest: Digest from build_reminder_digests

        Returns:
            True if the message was handed to the producer
        """
        if not self.producer:
            with self._lock:
                if not self.producer and not self._initialize_producer():
                    logger.warning(f"Reminder for owner {digest['owner_id']} not sent.")
                    return False

        try:
            self.producer.send(self.topic, key=digest["owner_id"], value=self._create_message(digest))
            return True
        except Exception as e:
            logger.error(f"Error queuing reminder for owner {digest['owner_id']}: {e}", exc_info=True)
            return False

    def close(self):
        """Flush buffered messages and close the producer."""
        if self.producer:
            logger.info("Closing reminder notifier Kafka producer...")
            try:
                self.producer.flush(timeout=5)
            except Exception as e:
                logger.error(f"Error flushing reminders to Kafka: {e}", exc_info=True)
            finally:
                self.producer.close()
                self.producer = None
                logger.info("Reminder notifier closed.")


def create_reminder_notifier() -> ReminderNotifier:
    """Create a new reminder notifier instance."""
    return ReminderNotifier()
