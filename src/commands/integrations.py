#!/usr/bin/env python3
"""
Integrations command endpoints for managing external service connections.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.config import get_config_manager

logger = logging.getLogger(__name__)


class IntegrationsCommand(BaseCommand):
    """Handle external integration operations."""

    subcommands = ['status', 'slack']

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute integrations subcommand."""
        try:
            if subcommand == "status":
                return self.status(args)
            elif subcommand == "slack":
                return self.slack(args)
            else:
                return self.unknown_subcommand(subcommand)

        except (Exception, KeyboardInterrupt) as e:
            return self.handle_error(e, f"integrations {subcommand}")

    def status(self, args: Namespace) -> int:
        """Show status of all integrations."""
        status = get_config_manager().get_integration_status()

        print("📊 Integration Status:")
        print(f"💬 Slack webhook: {'✅ Configured' if status['slack_webhook'] else '❌ Missing'}")
        if status['ga4']:
            print(f"📈 GA4: ⚠️  Enabled (property {status['ga4_property']}) but not implemented")
            print(f"   • Credentials file: {'✅ Found' if status['ga4_credentials'] else '❌ Missing'}")
        else:
            print("📈 GA4: ➖ Disabled (simulated data in use)")
        return 0

    def slack(self, args: Namespace) -> int:
        """Test or send through the Slack integration."""
        action = getattr(args, 'action', 'test') or 'test'

        try:
            notifier = self.create_slack_notifier()
        except ValueError as e:
            print(f"❌ Slack not configured: {e}")
            return 1

        if action == 'test':
            print("🔍 Testing Slack connection...")
            if notifier.test_connection():
                print("✅ Slack integration working")
                return 0
            print("❌ Slack integration failed")
            return 1

        elif action == 'send':
            message = getattr(args, 'message', None) or 'Test message from landing insights CLI'
            if notifier.send_message(message):
                print(f"✅ Message sent to Slack: {message}")
                return 0
            print("❌ Failed to send message")
            return 1

        else:
            self.logger.error(f"Unknown slack action '{action}'. Use 'test' or 'send'")
            return 1
