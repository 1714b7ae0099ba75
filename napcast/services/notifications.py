"""
Maps upcoming schedule blocks to local reminder notifications.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from ..models import BlockKind
from ..schemas import NotificationPlan, ScheduleBlock
from ..time_utils import as_utc, utc_now

NOTIFICATION_HORIZON = timedelta(hours=36)

NOTIFICATION_TEXT = {
    BlockKind.WIND_DOWN: (
        "Time to start winding down",
        "Based on recent patterns, this is a good time to start the pre-nap routine.",
    ),
    BlockKind.NAP: (
        "Nap window starting",
        "Your baby's nap window is starting based on their wake window and nap length.",
    ),
    BlockKind.BEDTIME: (
        "Bedtime window",
        "This is an age-appropriate bedtime window given recent naps.",
    ),
}


def build_notification_plan(blocks: List[ScheduleBlock], now: Optional[datetime] = None) -> List[NotificationPlan]:
    """Reminders for blocks starting after now and no more than 36 hours ahead."""
    now = as_utc(now) if now is not None else utc_now()
    plan = []
    for block in blocks:
        if not (now < block.start_at <= now + NOTIFICATION_HORIZON):
            continue
        title, body = NOTIFICATION_TEXT[block.kind]
        plan.append(NotificationPlan(
            id=f"notif_{block.id}",
            block_id=block.id,
            kind=block.kind,
            fire_at=block.start_at,
            title=title,
            body=body,
        ))
    return plan
