"""Email template selection, structured payloads, and rendering.

Each NotificationType maps to exactly one template (status_change has a
per-role variant of the same template). Templates use {{variable}}
placeholders; markup is kept deliberately plain.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from flowaborate.core.config import settings
from flowaborate.core.status_definitions import get_status_label
from flowaborate.db.enums import CollaborationRole, NotificationType, ReminderWindow
from flowaborate.services.responsibility_service import resolve_responsibility

VARIABLE_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


@dataclass(frozen=True)
class EmailTemplate:
    key: str
    subject: str
    body: str


TEMPLATES: dict[NotificationType, EmailTemplate] = {
    NotificationType.STATUS_CHANGE: EmailTemplate(
        key="status_change",
        subject="{{workspace_name}}: collaboration is now {{new_status_label}}",
        body=(
            "<p>Hi {{recipient_name}},</p>"
            "<p>The collaboration with {{counterpart_name}} moved from "
            "<strong>{{old_status_label}}</strong> to <strong>{{new_status_label}}</strong>.</p>"
            "<p>Waiting on: {{waiting_on}}. Next step: {{action_required}}.</p>"
            "{{scheduled_line}}"
            '<p><a href="{{collaboration_url}}">Open collaboration</a></p>'
        ),
    ),
    NotificationType.REMINDER: EmailTemplate(
        key="reminder",
        subject="Reminder: Recording {{timeframe_title}} - {{workspace_name}}",
        body=(
            "<p>Hi {{guest_name}},</p>"
            "<p>Your recording session with <strong>{{host_name}}</strong> is {{timeframe}}!</p>"
            "<p>{{scheduled_date_display}}</p>"
            "<p>See you soon!</p>"
            "<p>This reminder was sent from {{workspace_name}}.</p>"
        ),
    ),
    NotificationType.STALLED: EmailTemplate(
        key="stalled",
        subject="Stalled Collaboration: {{guest_name}} - {{workspace_name}}",
        body=(
            "<p>Hi {{host_name}},</p>"
            "<p>This collaboration has had no activity for an extended period.</p>"
            "<p>{{details}}</p>"
            "<p>Please review this collaboration and take appropriate action.</p>"
            '<p><a href="{{collaboration_url}}">Review collaboration</a></p>'
        ),
    ),
    NotificationType.NO_SHOW: EmailTemplate(
        key="no_show",
        subject="Missed Recording Session: {{guest_name}} - {{workspace_name}}",
        body=(
            "<p>Hi {{host_name}},</p>"
            "<p>The scheduled recording session was not completed.</p>"
            "<p>{{details}}</p>"
            "<p>Please review this collaboration and take appropriate action.</p>"
            '<p><a href="{{collaboration_url}}">Review collaboration</a></p>'
        ),
    ),
    NotificationType.MISSED_DEADLINE: EmailTemplate(
        key="missed_deadline",
        subject="Editing Deadline Overdue: {{guest_name}} - {{workspace_name}}",
        body=(
            "<p>Hi {{host_name}},</p>"
            "<p>The editing deadline has passed without completion.</p>"
            "<p>{{details}}</p>"
            "<p>Please review this collaboration and take appropriate action.</p>"
            '<p><a href="{{collaboration_url}}">Review collaboration</a></p>'
        ),
    ),
}


def select_template(notification_type: NotificationType | str) -> EmailTemplate:
    """Template for a notification type. Raises ValueError for unknown types."""
    return TEMPLATES[NotificationType(notification_type)]


def render_template(
    subject: str,
    body: str,
    variables: dict[str, str],
) -> tuple[str, str]:
    """
    Render a template with variable substitution.

    Variables in format {{variable_name}} are replaced with values.
    Missing variables are replaced with empty string. Subject values lose
    CR/LF (header injection). Body values are HTML-escaped except keys
    ending in `_line` (pre-built fragments).

    Returns (rendered_subject, rendered_body).
    """
    def replace_subject(match: re.Match) -> str:
        value = variables.get(match.group(1), "")
        return value.replace("\r", " ").replace("\n", " ")

    def replace_body(match: re.Match) -> str:
        name = match.group(1)
        value = variables.get(name, "")
        return value if name.endswith("_line") else html.escape(value)

    return VARIABLE_PATTERN.sub(replace_subject, subject), VARIABLE_PATTERN.sub(replace_body, body)


def format_datetime(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%A, %B %d, %Y at %H:%M UTC")


def collaboration_url(collaboration_id: UUID | str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/dashboard/collaborations/{collaboration_id}"


def build_status_change_data(
    *,
    collaboration_id: UUID | str,
    old_status: str,
    new_status: str,
    scheduled_date: datetime | None,
) -> dict[str, Any]:
    """Structured payload handed to the status_change template."""
    responsibility = resolve_responsibility(new_status)
    return {
        "collaboration_id": str(collaboration_id),
        "old_status": str(old_status),
        "new_status": str(new_status),
        "waiting_on": responsibility.responsible_party.value,
        "action_required": responsibility.action,
        "scheduled_date": scheduled_date.isoformat() if scheduled_date else None,
    }


def build_status_change_variables(
    data: dict[str, Any],
    *,
    role: CollaborationRole,
    recipient_name: str,
    counterpart_name: str,
    workspace_name: str,
    scheduled_date: datetime | None,
) -> dict[str, str]:
    scheduled_line = ""
    if scheduled_date is not None:
        scheduled_line = f"<p>Recording: {html.escape(format_datetime(scheduled_date))}</p>"
    return {
        "recipient_role": role.value,
        "recipient_name": recipient_name,
        "counterpart_name": counterpart_name,
        "workspace_name": workspace_name,
        "old_status_label": get_status_label(data["old_status"]),
        "new_status_label": get_status_label(data["new_status"]),
        "waiting_on": data["waiting_on"],
        "action_required": data["action_required"],
        "scheduled_line": scheduled_line,
        "collaboration_url": collaboration_url(data["collaboration_id"]),
    }


def build_reminder_variables(
    *,
    window: ReminderWindow,
    guest_name: str,
    host_name: str,
    workspace_name: str,
    scheduled_date: datetime,
) -> dict[str, str]:
    day_before = window is ReminderWindow.DAY_BEFORE
    return {
        "guest_name": guest_name,
        "host_name": host_name,
        "workspace_name": workspace_name,
        "timeframe": "tomorrow" if day_before else "in about 1 hour",
        "timeframe_title": "Tomorrow" if day_before else "Soon",
        "scheduled_date_display": format_datetime(scheduled_date),
    }


def build_exception_variables(
    *,
    collaboration_id: UUID | str,
    host_name: str,
    guest_name: str,
    workspace_name: str,
    details: str,
) -> dict[str, str]:
    return {
        "host_name": host_name,
        "guest_name": guest_name,
        "workspace_name": workspace_name,
        "details": details,
        "collaboration_url": collaboration_url(collaboration_id),
    }
