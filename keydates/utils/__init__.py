"""Shared utilities: configuration, logging and Kafka notifications."""
