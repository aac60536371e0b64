"""Date formatting used in gateway fields"""

from datetime import datetime

GATEWAY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def gateway_timestamp(moment: datetime) -> str:
    """Timestamp as the gateway expects it (2025-10-28 12:00:00)"""
    return moment.strftime(GATEWAY_TIMESTAMP_FORMAT)


def default_reference(prefix: str, moment: datetime) -> str:
    """Timestamp-derived merchant reference / session (R20251028120000)"""
    return f"{prefix}{moment.strftime('%Y%m%d%H%M%S')}"


def parse_gateway_timestamp(value: str) -> datetime:
    return datetime.strptime(value, GATEWAY_TIMESTAMP_FORMAT)
