from datetime import datetime, timezone
import re
from uuid import UUID
from pydantic import BaseModel, model_validator
from pydantic.alias_generators import to_camel
from typing import Any

INVISIBLE_CHARS_PATTERN = re.compile(
    r'[\u200e\u200f\u202a-\u202e\u2066-\u2069\ufeff]')


def deep_clean(value: Any):
    """Recursively trim strings, strip invisible chars and turn empty strings into None."""

    if isinstance(value, BaseModel):
        return deep_clean(value.model_dump())

    if isinstance(value, dict):
        return {k: deep_clean(v) for k, v in value.items()}

    if isinstance(value, list):
        return [deep_clean(v) for v in value]

    if isinstance(value, str):
        cleaned = INVISIBLE_CHARS_PATTERN.sub("", value).strip()
        return None if cleaned == "" else cleaned

    if isinstance(value, UUID):
        return value

    return value


def to_naive_utc(value: Any):
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class EmptyStringModel(BaseModel):
    """Base for request and response models.

    Fields are snake_case in Python and camelCase on the wire; both spellings
    are accepted on input.
    """
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "use_enum_values": True,
    }

    # STEP 1: Pre-clean input
    @model_validator(mode="before")
    @classmethod
    def clean_input(cls, values):
        if isinstance(values, dict):
            return deep_clean(values)
        return values

    # STEP 2: Store every timestamp as naive UTC
    @model_validator(mode="after")
    def normalize_datetimes(self):
        for field_name in type(self).model_fields:
            value = getattr(self, field_name)
            if isinstance(value, datetime) and value.tzinfo is not None:
                object.__setattr__(self, field_name, to_naive_utc(value))
        return self
