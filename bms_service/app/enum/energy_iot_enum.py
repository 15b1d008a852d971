from enum import Enum


class MeterType(str, Enum):
    electricity = "electricity"
    water = "water"
    gas = "gas"


class MeterUnit(str, Enum):
    kwh = "kwh"
    cubic_meter = "cubic_meter"
    liter = "liter"


class MeterStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    faulty = "faulty"


class ReadingSource(str, Enum):
    manual = "manual"
    iot = "iot"
    import_ = "import"
