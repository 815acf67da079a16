import math
from datetime import date
from flask import request
from .errors import ApiError


def json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_amount(value, field):
    if isinstance(value, bool):
        raise ApiError(f"{field} must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ApiError(f"{field} must be a number")
    # float() also parses "nan" and "Infinity"
    if not math.isfinite(amount):
        raise ApiError(f"{field} must be a number")
    return amount


def parse_int(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ApiError(f"{field} must be an integer")


def parse_date(value, field="date"):
    try:
        # Accept full ISO timestamps, keep the day
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ApiError(f"{field} must be an ISO date")
