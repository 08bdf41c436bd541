"""
Integration Settings Domain Models

Single row of credentials and URLs used by outbound notifications
(webhooks, Chatwoot), the payment gateway and the store-hours banner.
"""
import json
from datetime import datetime
from typing import List, Optional

from dateutil import tz
from pydantic import BaseModel, ConfigDict, Field, ValidationError

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class IntegrationSettings(BaseModel):
    id: int

    webhook_order_created: Optional[str] = None
    webhook_abandoned_cart: Optional[str] = None
    status_order_created: bool = False
    status_abandoned_cart: bool = False
    auth_token: Optional[str] = None

    mp_access_token: Optional[str] = None
    mp_public_key: Optional[str] = None

    chatwoot_url: Optional[str] = None
    chatwoot_account_id: Optional[str] = None
    chatwoot_token: Optional[str] = None
    chatwoot_inbox_id: Optional[str] = None

    store_address: Optional[str] = None
    store_hours: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def chatwoot_configured(self) -> bool:
        return all([
            self.chatwoot_url,
            self.chatwoot_account_id,
            self.chatwoot_token,
            self.chatwoot_inbox_id,
        ])

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")

    def to_public_dict(self) -> dict:
        """Fields safe to expose to the storefront"""
        return {
            "mp_public_key": self.mp_public_key,
            "store_address": self.store_address,
            "store_hours": self.store_hours,
        }


class IntegrationSettingsUpdate(BaseModel):
    webhook_order_created: Optional[str] = None
    webhook_abandoned_cart: Optional[str] = None
    status_order_created: Optional[bool] = None
    status_abandoned_cart: Optional[bool] = None
    auth_token: Optional[str] = None
    mp_access_token: Optional[str] = None
    mp_public_key: Optional[str] = None
    chatwoot_url: Optional[str] = None
    chatwoot_account_id: Optional[str] = None
    chatwoot_token: Optional[str] = None
    chatwoot_inbox_id: Optional[str] = None
    store_address: Optional[str] = None
    store_hours: Optional[str] = None


class StoreStatus(BaseModel):
    is_open: bool
    text: str
    raw_text: str = ""


class TimeSlot(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class DaySchedule(BaseModel):
    enabled: bool = False
    slots: List[TimeSlot] = Field(default_factory=list)


def _to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def compute_store_status(
    store_hours: Optional[str],
    now: Optional[datetime] = None,
    timezone_name: str = "America/Sao_Paulo",
) -> StoreStatus:
    """
    Decide whether the store is open right now

    store_hours is either a JSON schedule:
        {"monday": {"enabled": true, "slots": [{"start": "08:00", "end": "18:00"}]}, ...}
    or free text ("Seg a Sex, 8h às 18h"), which is shown as-is.

    Slots are in store-local time; both ends are inclusive.
    """
    if not store_hours:
        return StoreStatus(is_open=True, text="Aberto")

    try:
        schedule = json.loads(store_hours)
    except ValueError:
        schedule = None

    if not isinstance(schedule, dict):
        return StoreStatus(is_open=True, text=store_hours, raw_text=store_hours)

    local_tz = tz.gettz(timezone_name)
    if now is None:
        now = datetime.now(local_tz)
    elif now.tzinfo is not None:
        now = now.astimezone(local_tz)

    day = schedule.get(WEEKDAYS[now.weekday()])
    current = now.hour * 60 + now.minute
    is_open = False
    ranges = []

    # Malformed schedules fall back to showing the stored text
    try:
        day_schedule = DaySchedule.model_validate(day) if isinstance(day, dict) else None

        if day_schedule is None or not day_schedule.enabled or not day_schedule.slots:
            return StoreStatus(is_open=False, text="Fechado hoje", raw_text="Fechado hoje")

        for slot in day_schedule.slots:
            if not slot.start or not slot.end:
                continue
            if _to_minutes(slot.start) <= current <= _to_minutes(slot.end):
                is_open = True
            ranges.append(f"{slot.start} - {slot.end}")
    except (ValidationError, ValueError):
        return StoreStatus(is_open=True, text=store_hours, raw_text=store_hours)

    return StoreStatus(
        is_open=is_open,
        text="Aberto agora" if is_open else "Fechado",
        raw_text=" / ".join(ranges),
    )


DAY_LABELS = {
    "monday": "Seg",
    "tuesday": "Ter",
    "wednesday": "Qua",
    "thursday": "Qui",
    "friday": "Sex",
    "saturday": "Sáb",
    "sunday": "Dom",
}


def describe_store_hours(store_hours: Optional[str]) -> Optional[str]:
    """
    Human readable opening hours for customer messages

    JSON schedules become "Seg: 08:00 - 18:00 | Ter: ..."; free text is returned unchanged.
    """
    if not store_hours:
        return store_hours

    try:
        schedule = json.loads(store_hours)
    except ValueError:
        return store_hours

    if not isinstance(schedule, dict):
        return store_hours

    parts = []
    for day in WEEKDAYS:
        value = schedule.get(day)
        if not isinstance(value, dict):
            continue
        try:
            day_schedule = DaySchedule.model_validate(value)
        except ValidationError:
            return store_hours
        slots = [f"{s.start} - {s.end}" for s in day_schedule.slots if s.start and s.end]
        if day_schedule.enabled and slots:
            parts.append(f"{DAY_LABELS[day]}: {' / '.join(slots)}")

    return " | ".join(parts) if parts else "Fechado"
