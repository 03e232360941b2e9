"""
Total shape predicates over decoded JSON values.

Every predicate takes any value and returns a bool; none of them raise.
Composite predicates check presence and primitive type of the fields each
data layer section needs, the way a tag manager would read them.
"""

import math
from typing import Any, Optional


class _Undefined:
    """Marker for a declared-but-unset value (JSON has no such thing)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()

VARIABLE_TYPES = ("string", "number", "boolean", "array", "object")


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_string_array(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def has(record: Any, key: str) -> bool:
    """True when `record` is a dict holding `key` with a defined value."""
    return is_record(record) and key in record and record[key] is not UNDEFINED


# ------------------------------------------------------------------
# Data layer sections
# ------------------------------------------------------------------

def is_page_data(value: Any) -> bool:
    return is_record(value) and is_string(value.get("pageName"))


def is_user_data(value: Any) -> bool:
    return is_record(value)


def is_event_data(value: Any) -> bool:
    return is_record(value) and is_string(value.get("eventName"))


def is_product_data(value: Any) -> bool:
    return (
        is_record(value)
        and is_string(value.get("productId"))
        and is_string(value.get("productName"))
    )


def is_product_data_array(value: Any) -> bool:
    return is_array(value) and all(is_product_data(item) for item in value)


def is_transaction_data(value: Any) -> bool:
    return (
        is_record(value)
        and is_string(value.get("transactionId"))
        and is_number(value.get("transactionTotal"))
    )


def is_hotel_search_data(value: Any) -> bool:
    return is_record(value)


def is_hotel_data(value: Any) -> bool:
    return (
        is_record(value)
        and is_string(value.get("hotelCode"))
        and is_string(value.get("hotelName"))
    )


def is_room_data(value: Any) -> bool:
    return is_record(value) and is_string(value.get("roomType"))


def is_booking_data(value: Any) -> bool:
    if not is_record(value):
        return False
    strings = ("bookingCheckIn", "bookingCheckOut", "bookingCurrency")
    numbers = ("bookingNights", "bookingAdults", "bookingRooms", "bookingTotal")
    return all(is_string(value.get(k)) for k in strings) and all(
        is_number(value.get(k)) for k in numbers
    )


def is_guest_data(value: Any) -> bool:
    return is_record(value)


SECTION_PREDICATES = {
    "page": is_page_data,
    "user": is_user_data,
    "event": is_event_data,
    "product": is_product_data,
    "products": is_product_data_array,
    "transaction": is_transaction_data,
    "search": is_hotel_search_data,
    "hotel": is_hotel_data,
    "room": is_room_data,
    "booking": is_booking_data,
    "guest": is_guest_data,
}


def data_layer_shape_error(value: Any) -> Optional[str]:
    """
    Name the first section that breaks the data layer shape.

    Returns None when `value` is a record whose known sections (when present)
    all have the expected shape, "/" when it is not a record at all.
    """
    if not is_record(value):
        return "/"
    for section, predicate in SECTION_PREDICATES.items():
        if has(value, section) and not predicate(value[section]):
            return section
    return None


def is_data_layer(value: Any) -> bool:
    return data_layer_shape_error(value) is None


# ------------------------------------------------------------------
# Tracking specifications
# ------------------------------------------------------------------

def is_tracking_variable(value: Any) -> bool:
    return (
        is_record(value)
        and is_string(value.get("name"))
        and is_string(value.get("description"))
        and value.get("type") in VARIABLE_TYPES
        and is_boolean(value.get("required"))
    )


def is_tracking_event(value: Any) -> bool:
    return (
        is_record(value)
        and is_string(value.get("name"))
        and is_string(value.get("description"))
        and is_string(value.get("trigger"))
        and is_array(value.get("variables"))
        and all(is_tracking_variable(v) for v in value["variables"])
    )


def is_tracking_spec(value: Any) -> bool:
    return (
        is_record(value)
        and is_string(value.get("name"))
        and is_array(value.get("variables"))
        and all(is_tracking_variable(v) for v in value["variables"])
        and is_array(value.get("events"))
        and all(is_tracking_event(e) for e in value["events"])
    )
