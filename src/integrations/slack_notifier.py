#!/usr/bin/env python3
"""
Slack delivery for report summaries through an incoming webhook.
"""

import logging
from typing import Dict, Optional, Any
from datetime import datetime
import requests

from core.env_loader import get_env_var
from .alert_formatter import AlertFormatter

logger = logging.getLogger(__name__)

# Slack rejects longer message text
MAX_MESSAGE_LENGTH = 4000


class SlackNotifier:
    """Posts CWV alert summaries, experiment summaries and plain text to Slack."""

    def __init__(self, webhook_url: Optional[str] = None, timeout: int = 10):
        """
        Args:
            webhook_url: Incoming webhook URL; falls back to SLACK_WEBHOOK_URL
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url or get_env_var('SLACK_WEBHOOK_URL')
        if not self.webhook_url:
            raise ValueError("Slack webhook URL not provided and not found in SLACK_WEBHOOK_URL environment variable")

        self.timeout = timeout
        self.formatter = AlertFormatter()

    def send_message(self, text: str, channel: Optional[str] = None, username: str = "Landing Insights") -> bool:
        if len(text) > MAX_MESSAGE_LENGTH:
            text = text[:MAX_MESSAGE_LENGTH - 3] + "..."

        payload = {"text": text, "username": username, "icon_emoji": ":bar_chart:"}
        if channel:
            payload["channel"] = channel
        return self.post(payload)

    def send_cwv_alerts(self, report: Dict[str, Any]) -> bool:
        """Send the alert summary of a CWV report."""
        return self.post(self.formatter.format_cwv_alerts(report))

    def send_experiment_summary(self, report: Dict[str, Any]) -> bool:
        return self.post(self.formatter.format_experiment_summary(report))

    def post(self, payload: Dict[str, Any]) -> bool:
        """
        Post a payload to the webhook.

        Returns:
            True only when Slack answered 200; network errors are logged
        """
        try:
            response = requests.post(
                self.webhook_url,
                json=payload,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"}
            )
        except requests.RequestException as e:
            logger.error(f"Failed to send Slack message: {e}")
            return False

        if response.status_code != 200:
            logger.error(f"Slack webhook failed with status {response.status_code}: {response.text}")
            return False

        logger.info("Slack message sent")
        return True

    def test_connection(self) -> bool:
        stamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        ok = self.send_message(f"🧪 Test message from Landing Insights - {stamp}", username="Landing Insights Test")
        logger.log(logging.INFO if ok else logging.ERROR, f"Slack connection test {'succeeded' if ok else 'failed'}")
        return ok
