"""
Tealium business rules applied on top of schema validation.

Each check is independent and every one of them runs; a single call reports
every finding. The traversals are pure folds over the document: each returns
its own list and the caller concatenates them.
"""

import re
from typing import Any, Dict, List

from tealium_mcp.guards import UNDEFINED, has, is_number, is_record, is_string
from tealium_mcp.models import RuleFindings, ValidationError, ValidationWarning
from tealium_mcp.schemas import CURRENCY_PATTERN, LANGUAGE_PATTERN
from tealium_mcp.utils import (
    ISO_DATE_RE,
    format_number,
    join_path,
    parse_calendar_date,
    parse_float_prefix,
    safe_get,
)

CURRENCY_RE = re.compile(CURRENCY_PATTERN)
LANGUAGE_RE = re.compile(LANGUAGE_PATTERN)

STRINGIFIED_NULLS = {"undefined", "null", "nan"}

PII_PATTERNS = [
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b", re.ASCII), "email address"),
    (re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b", re.ASCII), "phone number"),
    (re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b", re.ASCII), "credit card number"),
]

# identifiers that legitimately look like PII
PII_SAFE_KEYS = {"userId", "visitorId", "bookingId", "transactionId"}

PRICE_FIELDS = [
    ("product", "productPrice"),
    ("transaction", "transactionTotal"),
    ("booking", "bookingTotal"),
    ("booking", "bookingTaxes"),
    ("booking", "bookingFees"),
]

DATE_FIELDS = [
    ("search", "searchCheckIn"),
    ("search", "searchCheckOut"),
    ("booking", "bookingCheckIn"),
    ("booking", "bookingCheckOut"),
]


def _field(document: Dict[str, Any], section: str, key: str) -> Any:
    """Value of `section.key`, or UNDEFINED when either level is missing."""
    record = document.get(section)
    if not has(record, key):
        return UNDEFINED
    return record[key]


def _display(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ------------------------------------------------------------------
# Recursive scans
# ------------------------------------------------------------------

def find_undefined_values(obj: Any, path: str = "") -> List[ValidationError]:
    if obj is UNDEFINED:
        return [
            ValidationError(
                path=path or "/",
                message="Value is undefined - this may cause tracking issues",
            )
        ]
    errors: List[ValidationError] = []
    if is_record(obj):
        for key, value in obj.items():
            current = join_path(path, key)
            if value is UNDEFINED:
                errors.append(
                    ValidationError(
                        path=current,
                        message="Value is undefined - this may cause tracking issues; remove it or set it to null",
                    )
                )
            elif is_record(value):
                errors.extend(find_undefined_values(value, current))
    return errors


def find_stringified_nulls(obj: Any, path: str = "") -> List[ValidationError]:
    errors: List[ValidationError] = []
    if not is_record(obj):
        return errors
    for key, value in obj.items():
        current = join_path(path, key)
        if is_string(value):
            if value.lower() in STRINGIFIED_NULLS:
                errors.append(
                    ValidationError(
                        path=current,
                        message=f'String value "{value}" looks like a stringified null/undefined',
                        value=value,
                        expected="Use actual null or remove the property",
                    )
                )
        elif is_record(value):
            errors.extend(find_stringified_nulls(value, current))
    return errors


def find_pii(obj: Any, path: str = "") -> List[ValidationWarning]:
    """Advisory only: false positives are expected, so these never become errors."""
    warnings: List[ValidationWarning] = []
    if not is_record(obj):
        return warnings
    for key, value in obj.items():
        if key in PII_SAFE_KEYS:
            continue
        current = join_path(path, key)
        if is_string(value):
            for pattern, name in PII_PATTERNS:
                if pattern.search(value):
                    warnings.append(
                        ValidationWarning(
                            path=current,
                            message=f"Possible {name} detected in data layer",
                            suggestion="Ensure PII is properly hashed or removed before tracking",
                        )
                    )
        elif is_record(value):
            warnings.extend(find_pii(value, current))
    return warnings


# ------------------------------------------------------------------
# Field checks
# ------------------------------------------------------------------

def check_page_name(document: Dict[str, Any]) -> List[ValidationError]:
    page_name = _field(document, "page", "pageName")
    if page_name is UNDEFINED or page_name == "":
        return [
            ValidationError(
                path="page.pageName",
                message="page.pageName is required and must not be empty",
                expected="non-empty string",
            )
        ]
    return []


def check_page_formats(document: Dict[str, Any]) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []

    currency = _field(document, "page", "currency")
    if currency is not UNDEFINED and not (is_string(currency) and CURRENCY_RE.fullmatch(currency)):
        warnings.append(
            ValidationWarning(
                path="page.currency",
                message=f'Currency "{_display(currency)}" should be ISO 4217 format',
                suggestion='Use 3-letter uppercase code like "USD", "EUR", "GBP"',
            )
        )

    language = _field(document, "page", "language")
    if language is not UNDEFINED and not (is_string(language) and LANGUAGE_RE.fullmatch(language)):
        warnings.append(
            ValidationWarning(
                path="page.language",
                message=f'Language "{_display(language)}" should be ISO format',
                suggestion='Use format like "en", "es", or "en-US", "es-ES"',
            )
        )

    return warnings


def check_price_values(document: Dict[str, Any]) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    for section, key in PRICE_FIELDS:
        value = _field(document, section, key)
        if is_string(value):
            warnings.append(
                ValidationWarning(
                    path=f"{section}.{key}",
                    message="Price value is a string, should be a number",
                    suggestion=f'Convert "{value}" to number: {format_number(parse_float_prefix(value))}',
                )
            )
    return warnings


def check_booking(booking: Dict[str, Any]) -> RuleFindings:
    """Cross-field consistency of a hotel booking."""
    findings = RuleFindings()
    check_in = parse_calendar_date(booking.get("bookingCheckIn"))
    check_out = parse_calendar_date(booking.get("bookingCheckOut"))

    if check_in is not None and check_out is not None:
        if check_out <= check_in:
            findings.errors.append(
                ValidationError(
                    path="booking.bookingCheckOut",
                    message="Check-out date must be after check-in date",
                    value=booking.get("bookingCheckOut"),
                )
            )

        expected_nights = (check_out - check_in).days
        nights = booking.get("bookingNights", UNDEFINED)
        if not (is_number(nights) and nights == expected_nights):
            findings.warnings.append(
                ValidationWarning(
                    path="booking.bookingNights",
                    message=(
                        f"bookingNights ({_display(nights)}) doesn't match date range "
                        f"({expected_nights} nights)"
                    ),
                    suggestion=f"Set bookingNights to {expected_nights}",
                )
            )

    if booking.get("bookingCurrency") == "":
        findings.errors.append(
            ValidationError(
                path="booking.bookingCurrency",
                message="bookingCurrency must not be empty",
                expected="3-letter currency code (e.g., EUR, USD)",
            )
        )

    return findings


def check_hotel(hotel: Dict[str, Any]) -> List[ValidationWarning]:
    rating = hotel.get("hotelStarRating")
    if is_number(rating) and not 1 <= rating <= 5:
        return [
            ValidationWarning(
                path="hotel.hotelStarRating",
                message=f"Star rating {format_number(rating)} is outside normal range (1-5)",
                suggestion="Use a value between 1 and 5",
            )
        ]
    return []


def check_date_formats(document: Dict[str, Any]) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    for section, key in DATE_FIELDS:
        value = _field(document, section, key)
        if is_string(value) and not ISO_DATE_RE.fullmatch(value):
            warnings.append(
                ValidationWarning(
                    path=f"{section}.{key}",
                    message=f'Date "{value}" is not in ISO format',
                    suggestion='Use YYYY-MM-DD format (e.g., "2024-03-15")',
                )
            )
    return warnings


def collect_suggestions(document: Dict[str, Any]) -> List[str]:
    suggestions: List[str] = []
    if _field(document, "user", "visitorId") is UNDEFINED and _field(document, "user", "userId") is UNDEFINED:
        suggestions.append("Consider adding user.visitorId for anonymous tracking")
    if has(document, "event") and _field(document, "event", "eventCategory") is UNDEFINED:
        suggestions.append("Adding eventCategory helps with event organization in reports")
    return suggestions


def validate_tealium_rules(document: Dict[str, Any]) -> RuleFindings:
    """Run every business rule over a record-shaped data layer."""
    errors: List[ValidationError] = []
    warnings: List[ValidationWarning] = []

    errors += check_page_name(document)
    errors += find_undefined_values(document)
    errors += find_stringified_nulls(document)
    warnings += check_page_formats(document)
    warnings += find_pii(document)
    warnings += check_price_values(document)

    booking = safe_get(document, "booking")
    if is_record(booking):
        booking_findings = check_booking(booking)
        errors += booking_findings.errors
        warnings += booking_findings.warnings

    hotel = safe_get(document, "hotel")
    if is_record(hotel):
        warnings += check_hotel(hotel)

    warnings += check_date_formats(document)

    return RuleFindings(
        errors=errors,
        warnings=warnings,
        suggestions=collect_suggestions(document),
    )
