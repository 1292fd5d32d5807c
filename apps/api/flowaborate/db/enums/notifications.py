"""Notification-related enums."""

from enum import Enum


class NotificationType(str, Enum):
    """Transactional email types. Each maps to exactly one template."""

    STATUS_CHANGE = "status_change"
    REMINDER = "reminder"  # Upcoming recording (24h / 1h)
    STALLED = "stalled"
    NO_SHOW = "no_show"
    MISSED_DEADLINE = "missed_deadline"


class ReminderWindow(str, Enum):
    """Reminder lead times sent ahead of a scheduled recording."""

    DAY_BEFORE = "24h"
    HOUR_BEFORE = "1h"


class NotificationLogStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


class SweepDedupeMode(str, Enum):
    """
    How the scheduled sweep treats repeat exception alerts.

    - NONE: alert on every run while the condition holds
    - ONCE: alert once per condition episode
    - COOLDOWN: re-alert after SWEEP_DEDUPE_COOLDOWN_HOURS
    """

    NONE = "none"
    ONCE = "once"
    COOLDOWN = "cooldown"
