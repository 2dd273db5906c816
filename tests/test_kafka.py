"""
Unit tests for the Kafka reminder notifier.
"""
import pytest
import os
from unittest.mock import Mock, patch

from keydates.utils.kafka import ReminderNotifier, create_reminder_notifier

DIGEST = {
    "owner_id": "u1",
    "as_of": "2025-01-01",
    "items": [{"event_id": "agr-a-term-2025-01-31", "in_days": 30}],
}


class TestReminderNotifier:
    """Test suite for ReminderNotifier."""

    def test_disabled_without_bootstrap_servers(self):
        """Test that publishing is skipped when Kafka is not configured."""
        with patch.dict(os.environ, {}, clear=True):
            notifier = ReminderNotifier()

            assert notifier.publish_digest(DIGEST) is False
            assert notifier.producer is None

    def test_default_topic(self):
        """Test the default topic name."""
        with patch.dict(os.environ, {}, clear=True):
            assert create_reminder_notifier().topic == "contract-reminders"

    def test_publish(self):
        """Test that a digest is sent keyed by owner."""
        env = {"KAFKA_BOOTSTRAP_SERVERS": "broker:9092", "KAFKA_USE_SSL": "false"}
        with patch.dict(os.environ, env, clear=True), \
             patch("keydates.utils.kafka.KafkaProducer") as mock_producer:
            producer = Mock()
            mock_producer.return_value = producer

            notifier = ReminderNotifier(topic="reminders-test")
            assert notifier.publish_digest(DIGEST) is True

            config = mock_producer.call_args[1]
            assert config["bootstrap_servers"] == ["broker:9092"]
            assert "security_protocol" not in config

            topic = producer.send.call_args[0][0]
            kwargs = producer.send.call_args[1]
            assert topic == "reminders-test"
            assert kwargs["key"] == "u1"
            assert kwargs["value"]["type"] == "contract-reminder"
            assert kwargs["value"]["items"] == DIGEST["items"]

    def test_ssl_enabled_by_default(self):
        """Test that SSL is used unless disabled."""
        with patch.dict(os.environ, {"KAFKA_BOOTSTRAP_SERVERS": "a:1,b:2"}, clear=True), \
             patch("keydates.utils.kafka.KafkaProducer") as mock_producer:
            ReminderNotifier().publish_digest(DIGEST)

            config = mock_producer.call_args[1]
            assert config["bootstrap_servers"] == ["a:1", "b:2"]
            assert config["security_protocol"] == "SSL"

    def test_producer_failure_is_swallowed(self):
        """Test that an unreachable broker does not raise."""
        with patch.dict(os.environ, {"KAFKA_BOOTSTRAP_SERVERS": "broker:9092"}, clear=True), \
             patch("keydates.utils.kafka.KafkaProducer", side_effect=Exception("no brokers")):
            assert ReminderNotifier().publish_digest(DIGEST) is False

    def test_send_failure_is_swallowed(self):
        """Test that a send error is reported as not published."""
        with patch.dict(os.environ, {"KAFKA_BOOTSTRAP_SERVERS": "broker:9092"}, clear=True), \
             patch("keydates.utils.kafka.KafkaProducer") as mock_producer:
            mock_producer.return_value.send.side_effect = Exception("buffer full")

            assert ReminderNotifier().publish_digest(DIGEST) is False

    def test_close_flushes(self):
        """Test that close flushes and releases the producer."""
        notifier = ReminderNotifier()
        producer = Mock()
        notifier.producer = producer

        notifier.close()

        producer.flush.assert_called_once_with(timeout=5)
        producer.close.assert_called_once()
        assert notifier.producer is None
