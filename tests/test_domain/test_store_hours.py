"""
Unit tests for store status computed from the opening hours
"""
import json
from datetime import datetime

from dateutil import tz

from app.domain.integration import compute_store_status, describe_store_hours

SAO_PAULO = tz.gettz("America/Sao_Paulo")

SCHEDULE = json.dumps({
    "monday": {"enabled": True, "slots": [{"start": "08:00", "end": "12:00"}, {"start": "14:00", "end": "18:00"}]},
    "saturday": {"enabled": True, "slots": [{"start": "09:00", "end": "13:00"}]},
    "sunday": {"enabled": False, "slots": []},
})


def _at(year, month, day, hour, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=SAO_PAULO)


class TestStoreStatus:

    def test_no_hours_means_open(self):
        status = compute_store_status(None)
        assert status.is_open
        assert status.text == "Aberto"

    def test_plain_text_is_shown_as_is(self):
        status = compute_store_status("Seg a Sex, 8h às 18h")
        assert status.is_open
        assert status.text == "Seg a Sex, 8h às 18h"

    def test_open_inside_slot(self):
        # 2025-07-21 is a Monday
        status = compute_store_status(SCHEDULE, now=_at(2025, 7, 21, 10, 30))
        assert status.is_open
        assert status.text == "Aberto agora"
        assert status.raw_text == "08:00 - 12:00 / 14:00 - 18:00"

    def test_closed_between_slots(self):
        status = compute_store_status(SCHEDULE, now=_at(2025, 7, 21, 13, 0))
        assert not status.is_open
        assert status.text == "Fechado"

    def test_slot_end_is_inclusive(self):
        assert compute_store_status(SCHEDULE, now=_at(2025, 7, 21, 18, 0)).is_open

    def test_disabled_day(self):
        # 2025-07-20 is a Sunday
        status = compute_store_status(SCHEDULE, now=_at(2025, 7, 20, 10, 0))
        assert not status.is_open
        assert status.text == "Fechado hoje"

    def test_missing_day_is_closed(self):
        # Tuesday is not in the schedule
        assert compute_store_status(SCHEDULE, now=_at(2025, 7, 22, 10, 0)).text == "Fechado hoje"

    def test_utc_time_is_converted_to_store_time(self):
        # 12:30 UTC = 09:30 in Sao Paulo, Monday
        now = datetime(2025, 7, 21, 12, 30, tzinfo=tz.UTC)
        assert compute_store_status(SCHEDULE, now=now).is_open

    def test_describe_store_hours(self):
        assert describe_store_hours(SCHEDULE) == "Seg: 08:00 - 12:00 / 14:00 - 18:00 | Sáb: 09:00 - 13:00"
        assert describe_store_hours("8h às 18h") == "8h às 18h"

    def test_unparseable_slot_falls_back_to_text(self):
        hours = json.dumps({"monday": {"enabled": True, "slots": [{"start": "8h", "end": "18h"}]}})

        status = compute_store_status(hours, now=_at(2025, 7, 21, 12, 0))

        assert status.is_open
        assert status.text == hours

    def test_slot_with_seconds_falls_back_to_text(self):
        hours = json.dumps({"monday": {"enabled": True, "slots": [{"start": "08:00:00", "end": "18:00:00"}]}})

        assert compute_store_status(hours, now=_at(2025, 7, 21, 12, 0)).text == hours

    def test_invalid_day_shape_falls_back_to_text(self):
        hours = json.dumps({"monday": {"enabled": True, "slots": None}})

        assert compute_store_status(hours, now=_at(2025, 7, 21, 12, 0)).is_open
        assert describe_store_hours(hours) == hours
