import math
import re
from datetime import datetime
from typing import Optional

from csvload.errors import ConfigurationError

INT32_MIN = -2147483648
INT32_MAX = 2147483647


class TypeDetector:
    INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')

    DATETIME_FORMATS = [
        "%Y-%m-%dT%H:%M:%SZ",
        "%Y-%m-%dT%H:%M:%S.%fZ",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%dT%H:%M:%S.%f",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d %H:%M:%S.%f",
        "%Y-%m-%d %H:%M",
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%Y/%m/%d %H:%M:%S",
        "%d/%m/%Y",
        "%d/%m/%Y %H:%M:%S",
        "%d/%m/%Y %H:%M",
        "%m/%d/%Y",
        "%m/%d/%Y %H:%M:%S",
        "%d-%m-%Y",
        "%m-%d-%Y",
        "%d.%m.%Y",
        "%d %b %Y",
        "%d %B %Y",
        "%b %d, %Y",
        "%B %d, %Y",
    ]

    def __init__(self, true_literal: str = "Yes", false_literal: str = "No"):
        if true_literal == false_literal:
            raise ConfigurationError(f"Boolean literals must differ, both are {true_literal!r}")
        self.true_literal = true_literal
        self.false_literal = false_literal

    @classmethod
    def parse_int(cls, value: str) -> Optional[int]:
        """Signed 32-bit integer, or None."""
        value = value.strip()
        if not cls.INTEGER_PATTERN.match(value):
            return None
        number = int(value)
        if number < INT32_MIN or number > INT32_MAX:
            return None
        return number

    @classmethod
    def parse_float(cls, value: str) -> Optional[float]:
        """Finite floating-point number, or None."""
        if "_" in value:
            return None
        try:
            number = float(value)
        except (ValueError, TypeError):
            return None
        if not math.isfinite(number):
            return None
        return number

    @classmethod
    def parse_datetime(cls, value: str) -> Optional[datetime]:
        value = value.strip()
        for fmt in cls.DATETIME_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        return None

    @classmethod
    def is_int(cls, value: str) -> bool:
        return cls.parse_int(value) is not None

    @classmethod
    def is_float(cls, value: str) -> bool:
        return cls.parse_float(value) is not None

    @classmethod
    def is_datetime(cls, value: str) -> bool:
        return cls.parse_datetime(value) is not None

    def is_boolean(self, value: str) -> bool:
        return value == self.true_literal or value == self.false_literal

    def parse_boolean(self, value: str) -> Optional[bool]:
        if value == self.true_literal:
            return True
        if value == self.false_literal:
            return False
        return None

