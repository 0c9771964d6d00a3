import enum


class Status(enum.Enum):
    SUCCESS = "00"
    FAILURE = "01"
    VALIDATION_ERROR = "98"
    UNKNOWN_ERROR = "99"
