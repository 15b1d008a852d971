from typing import Optional

from sqlalchemy.orm import Session

from shared.core.database import parse_id

from ...models.system.system_settings import SystemSetting
from ...schemas.system.system_settings_schemas import SystemSettingsUpdate

SECTIONS = ("general", "security", "notifications", "maintenance", "integrations")

DEFAULT_SETTINGS = {
    "general": {"system_name": "BMS", "time_zone": "Africa/Addis_Ababa",
                "currency": "ETB", "maintenance_mode": False},
    "security": {"session_timeout_minutes": 1440, "password_min_length": 8},
    "notifications": {"email_enabled": True},
    "maintenance": {"due_window_days": 7},
    "integrations": {"chapa": {"enabled": False}},
}


def get_or_create(db: Session) -> SystemSetting:
    setting = db.query(SystemSetting).first()
    if setting:
        return setting

    setting = SystemSetting(**{section: dict(DEFAULT_SETTINGS[section]) for section in SECTIONS})
    db.add(setting)
    db.commit()
    db.refresh(setting)
    return setting


def update(db: Session, payload: SystemSettingsUpdate,
           user_id: Optional[str] = None) -> SystemSetting:
    setting = get_or_create(db)

    for section, values in payload.model_dump(exclude_unset=True).items():
        if values is None:
            continue
        setattr(setting, section, {**(getattr(setting, section) or {}), **values})

    setting.updated_by = parse_id(user_id)
    db.commit()
    db.refresh(setting)
    return setting
