from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

from flask.json.provider import DefaultJSONProvider


class AbsenkuJSONProvider(DefaultJSONProvider):
    """ISO-8601 dates/times instead of Flask's HTTP-date format."""

    sort_keys = False

    @staticmethod
    def default(o):
        if isinstance(o, (datetime, date, time)):
            return o.isoformat()
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, Decimal):
            return float(o)
        return DefaultJSONProvider.default(o)
