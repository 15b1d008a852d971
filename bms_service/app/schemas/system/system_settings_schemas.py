from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class SystemSettingsUpdate(EmptyStringModel):
    general: Optional[Dict[str, Any]] = None
    security: Optional[Dict[str, Any]] = None
    notifications: Optional[Dict[str, Any]] = None
    maintenance: Optional[Dict[str, Any]] = None
    integrations: Optional[Dict[str, Any]] = None


class SystemSettingsOut(EmptyStringModel):
    id: UUID
    general: Dict[str, Any] = {}
    security: Dict[str, Any] = {}
    notifications: Dict[str, Any] = {}
    maintenance: Dict[str, Any] = {}
    integrations: Dict[str, Any] = {}
    updated_by: Optional[UUID] = None
    updated_at: Optional[datetime] = None
