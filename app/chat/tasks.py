"""
Celery tasks for chat app.

This module defines periodic tasks for:
- Typing indicator expiry

Related files:
    - services.py: TypingService
    - config/settings.py: CELERY_BEAT_SCHEDULE

Usage:
    from chat.tasks import expire_typing_indicators

    expire_typing_indicators.delay()
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def expire_typing_indicators() -> int:
    """
    Delete typing indicators older than the configured TTL.

    Readers already ignore stale rows; this keeps the table small.

    Returns:
        Number of indicators removed
    """
    from chat.services import TypingService

    removed = TypingService.sweep_expired()
    if removed:
        logger.info(f"Expired {removed} typing indicators")
    return removed
