"""
Webhooks module - Payment provider event processing.

This module handles:
- Webhook signature verification
- Event deduplication by idempotency key
- Dispatch of commerce events to license lifecycle transitions
"""
