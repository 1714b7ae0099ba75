from datetime import timedelta

from napcast.models import BlockKind
from napcast.schemas import ScheduleBlock
from napcast.services.notifications import build_notification_plan
from tests.helpers import utc

NOW = utc(2024, 7, 2, 9)


def block(block_id, kind, offset_hours):
    start = NOW + timedelta(hours=offset_hours)
    return ScheduleBlock(
        id=block_id, kind=kind, start_at=start, end_at=start + timedelta(minutes=30),
        confidence=0.5, rationale="test",
    )


def test_only_blocks_within_next_36_hours():
    blocks = [
        block("past", BlockKind.NAP, -1),
        block("now", BlockKind.NAP, 0),
        block("soon", BlockKind.WIND_DOWN, 1),
        block("edge", BlockKind.BEDTIME, 36),
        block("far", BlockKind.NAP, 37),
    ]
    plan = build_notification_plan(blocks, now=NOW)
    assert [p.block_id for p in plan] == ["soon", "edge"]


def test_plan_fields():
    plan = build_notification_plan([block("sched_nap_1", BlockKind.NAP, 2)], now=NOW)
    assert len(plan) == 1
    notification = plan[0]
    assert notification.id == "notif_sched_nap_1"
    assert notification.kind == BlockKind.NAP
    assert notification.fire_at == NOW + timedelta(hours=2)
    assert notification.title == "Nap window starting"


def test_empty_schedule():
    assert build_notification_plan([], now=NOW) == []
