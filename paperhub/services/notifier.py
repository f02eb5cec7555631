"""Hand-off of password reset codes to the out-of-band delivery worker.

Codes are published to a Redis channel; a separate mailer subscribes and
delivers them. Delivery itself is not handled here.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Protocol

import redis

from paperhub.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class OtpNotifier(Protocol):
    """Anything that can deliver a reset code to an email address."""

    def send_reset_code(self, email: str, code: str) -> None: ...


# Synchronous Redis client shared by API workers
_sync_redis: redis.Redis | None = None


def get_sync_redis() -> redis.Redis:
    """Get synchronous Redis client for publishing from API endpoints."""
    global _sync_redis
    if _sync_redis is None:
        _sync_redis = redis.from_url(
            settings.redis_url,
            socket_timeout=settings.outbound_timeout_seconds,
            socket_connect_timeout=settings.outbound_timeout_seconds,
        )
    return _sync_redis


class RedisOtpNotifier:
    """Publishes reset codes for the mail worker."""

    def __init__(self, channel: str | None = None) -> None:
        self.channel = channel or settings.otp_channel

    def send_reset_code(self, email: str, code: str) -> None:
        try:
            message = {
                "type": "password_reset",
                "email": email,
                "code": code,
                "expires_in_minutes": settings.otp_expiration_minutes,
                "timestamp": datetime.now(UTC).isoformat(),
            }
            get_sync_redis().publish(self.channel, json.dumps(message))
            logger.debug(f"Published password reset for {email} to {self.channel}")
        except redis.RedisError as e:
            # The response to the caller is uniform; a lost code is recovered by asking again
            logger.error(f"Failed to publish password reset notification: {e}")


def get_notifier() -> OtpNotifier:
    """Get the configured reset code notifier."""
    return RedisOtpNotifier()
