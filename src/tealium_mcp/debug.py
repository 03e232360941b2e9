"""
Descriptive triage of a data layer.

Unlike validation this does not check schema conformance: it classifies what
it finds by severity (error / warning / info), lists variables that look
missing, compares a fixed set of paths against their expected runtime type
and collects recommendations. Caller-supplied checkpoints switch on extra
targeted checks.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from tealium_mcp.guards import UNDEFINED, has, is_array, is_number, is_record, is_string
from tealium_mcp.models import DebugIssue, DebugResult, TypeMismatch
from tealium_mcp.utils import index_path, join_path, json_type, parse_calendar_date

logger = logging.getLogger(__name__)

CRITICAL_ERROR_THRESHOLD = 5

EXPECTED_TYPES = {
    "page.pageName": "string",
    "page.language": "string",
    "user.isLoggedIn": "boolean",
    "user.userId": "string",
    "product.productPrice": "number",
    "product.productQuantity": "number",
    "transaction.transactionTotal": "number",
    "transaction.transactionTax": "number",
    "booking.bookingTotal": "number",
    "booking.bookingNights": "number",
    "booking.bookingAdults": "number",
    "booking.bookingRooms": "number",
    "hotel.hotelStarRating": "number",
    "search.searchAdults": "number",
    "search.searchRooms": "number",
    "guest.guestLoyaltyPoints": "number",
}


def _section(document: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = document.get(name)
    return value if is_record(value) else {}


# ------------------------------------------------------------------
# Independent checks
# ------------------------------------------------------------------

def check_empty_values(obj: Any, path: str = "") -> List[DebugIssue]:
    issues: List[DebugIssue] = []
    if not is_record(obj):
        return issues
    for key, value in obj.items():
        current = join_path(path, key)
        if is_string(value) and value == "":
            issues.append(
                DebugIssue(
                    severity="warning",
                    path=current,
                    issue="Empty string value",
                    recommendation="Remove the property or set a meaningful value",
                )
            )
        elif value is None:
            issues.append(
                DebugIssue(
                    severity="info",
                    path=current,
                    issue="Null value",
                    recommendation="Consider if this property should be present at all",
                )
            )
        elif is_array(value) and not value:
            issues.append(
                DebugIssue(
                    severity="info",
                    path=current,
                    issue="Empty array",
                    recommendation='Remove empty arrays unless intentionally indicating "no items"',
                )
            )
        elif is_record(value):
            issues.extend(check_empty_values(value, current))
    return issues


def check_data_types(document: Dict[str, Any]) -> List[TypeMismatch]:
    mismatches: List[TypeMismatch] = []
    for path, expected in EXPECTED_TYPES.items():
        section, key = path.split(".", 1)
        record = document.get(section)
        if not has(record, key) or record[key] is None:
            continue
        actual = json_type(record[key])
        if actual != expected:
            mismatches.append(TypeMismatch(path=path, expected=expected, actual=actual))
    return mismatches


def find_missing_variables(document: Dict[str, Any]) -> List[str]:
    missing: List[str] = []

    if not has(document, "page"):
        missing.append("page (entire object)")
    else:
        page = _section(document, "page")
        if page.get("pageName") == "":
            missing.append("page.pageName")
        if not has(page, "pageType"):
            missing.append("page.pageType")

    if not has(document, "user"):
        missing.append("user (entire object)")
    else:
        user = _section(document, "user")
        if not has(user, "visitorId") and not has(user, "userId"):
            missing.append("user.visitorId or user.userId")

    if has(document, "booking"):
        if not has(_section(document, "hotel"), "hotelCode"):
            missing.append("hotel.hotelCode")
        if _section(document, "booking").get("bookingCurrency") == "":
            missing.append("booking.bookingCurrency")

    if has(document, "search"):
        if not has(_section(document, "search"), "searchDestination") and not has(document, "hotel"):
            missing.append("search.searchDestination or hotel context")

    return missing


def check_event_tracking(document: Dict[str, Any]):
    """Event-name hygiene; returns (issues, recommendations)."""
    issues: List[DebugIssue] = []
    recommendations: List[str] = []
    if not has(document, "event"):
        return issues, recommendations

    event = _section(document, "event")
    name = event.get("eventName")
    if is_string(name):
        if " " in name:
            issues.append(
                DebugIssue(
                    severity="warning",
                    path="event.eventName",
                    issue=f'Event name contains spaces: "{name}"',
                    recommendation=(
                        'Use snake_case or dot.notation (e.g., "booking_completed" or "booking.completed")'
                    ),
                )
            )
        if name != name.lower():
            issues.append(
                DebugIssue(
                    severity="info",
                    path="event.eventName",
                    issue="Event name contains uppercase characters",
                    recommendation="Consider using lowercase for consistency",
                )
            )

    if not has(event, "eventCategory"):
        recommendations.append("Add eventCategory for better event organization in reports")
    return issues, recommendations


def check_booking_funnel(document: Dict[str, Any], today: date) -> List[DebugIssue]:
    issues: List[DebugIssue] = []
    if not has(document, "booking"):
        return issues
    booking = _section(document, "booking")

    if not has(document, "hotel") and has(booking, "bookingId"):
        issues.append(
            DebugIssue(
                severity="error",
                path="hotel",
                issue="Booking exists but hotel data is missing",
                recommendation="Include hotel.hotelCode and hotel.hotelName with booking data",
            )
        )

    check_in = parse_calendar_date(booking.get("bookingCheckIn"))
    check_out = parse_calendar_date(booking.get("bookingCheckOut"))

    if check_in is not None and check_in < today and booking.get("bookingStatus") != "completed":
        issues.append(
            DebugIssue(
                severity="warning",
                path="booking.bookingCheckIn",
                issue="Check-in date is in the past",
                recommendation="Verify date is correct or update booking status",
            )
        )

    if check_in is not None and check_out is not None and check_out < check_in:
        issues.append(
            DebugIssue(
                severity="error",
                path="booking.bookingCheckOut",
                issue="Check-out date is before check-in date",
                recommendation="Fix date values",
            )
        )

    total = booking.get("bookingTotal")
    if is_number(total) and total == 0:
        issues.append(
            DebugIssue(
                severity="warning",
                path="booking.bookingTotal",
                issue="Booking total is zero",
                recommendation="Verify pricing data is correctly populated",
            )
        )

    return issues


def check_checkpoint(document: Dict[str, Any], checkpoint: str):
    """One targeted check per known checkpoint; returns (issues, recommendations)."""
    issues: List[DebugIssue] = []
    recommendations: List[str] = []
    name = checkpoint.lower()

    if name in ("ecommerce", "products"):
        products = document.get("products")
        if is_array(products):
            for i, product in enumerate(products):
                if not is_record(product):
                    continue
                path = join_path(index_path("products", i), "productId")
                if not has(product, "productId") or product["productId"] is None:
                    issue = "Product is missing productId"
                elif product["productId"] == "":
                    issue = "Product has empty productId"
                else:
                    continue
                issues.append(
                    DebugIssue(
                        severity="error",
                        path=path,
                        issue=issue,
                        recommendation="Every product must have a unique identifier",
                    )
                )
    elif name in ("loyalty", "guest"):
        if not has(document, "guest") and _section(document, "user").get("userType") == "loyalty":
            issues.append(
                DebugIssue(
                    severity="warning",
                    path="guest",
                    issue="User is loyalty member but guest data is missing",
                    recommendation="Include guest.guestLoyaltyTier and guest.guestLoyaltyPoints",
                )
            )
    elif name == "search":
        if has(document, "search") and not has(_section(document, "search"), "searchCheckIn"):
            recommendations.append(
                "Include check-in and check-out dates in search data for better analysis"
            )
    else:
        logger.debug("Ignoring unknown checkpoint %r", checkpoint)

    return issues, recommendations


def general_recommendations(document: Dict[str, Any], issues: List[DebugIssue]) -> List[str]:
    recommendations: List[str] = []

    error_count = sum(1 for i in issues if i.severity == "error")
    if error_count > CRITICAL_ERROR_THRESHOLD:
        recommendations.append(
            "Consider reviewing your data layer implementation - multiple critical issues detected"
        )

    if not has(_section(document, "page"), "pageType"):
        recommendations.append("Add page.pageType for better page classification in analytics")

    booking_currency = _section(document, "booking").get("bookingCurrency", UNDEFINED)
    page_currency = _section(document, "page").get("currency", UNDEFINED)
    if booking_currency is not UNDEFINED and page_currency is not UNDEFINED:
        if booking_currency != page_currency:
            recommendations.append("Ensure page.currency and booking.bookingCurrency are consistent")

    return recommendations


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------

def debug_data_layer(
    data_layer: Any,
    checkpoints: Optional[Iterable[str]] = None,
    today: Optional[date] = None,
) -> DebugResult:
    """
    Diagnose `data_layer`. `today` pins the clock for the past check-in check.

    Issues are never deduplicated; recommendations are (first occurrence wins).
    """
    if not is_record(data_layer):
        return DebugResult(
            snapshot={},
            issues=[
                DebugIssue(
                    severity="error",
                    path="/",
                    issue="Invalid data layer: must be an object",
                    recommendation="Provide a valid data layer object",
                )
            ],
            missing_variables=[],
            type_mismatches=[],
            recommendations=["Ensure the data layer is a valid object"],
        )

    today = today or date.today()
    issues: List[DebugIssue] = []
    recommendations: List[str] = []

    issues += check_empty_values(data_layer)
    type_mismatches = check_data_types(data_layer)
    missing_variables = find_missing_variables(data_layer)

    event_issues, event_recs = check_event_tracking(data_layer)
    issues += event_issues
    recommendations += event_recs

    issues += check_booking_funnel(data_layer, today)

    for checkpoint in checkpoints or []:
        cp_issues, cp_recs = check_checkpoint(data_layer, checkpoint)
        issues += cp_issues
        recommendations += cp_recs

    recommendations += general_recommendations(data_layer, issues)

    result = DebugResult(
        snapshot=data_layer,
        issues=issues,
        missing_variables=missing_variables,
        type_mismatches=type_mismatches,
        recommendations=list(dict.fromkeys(recommendations)),
    )
    logger.info(
        "Debugged data layer: %d error(s), %d warning(s), %d info",
        result.count("error"),
        result.count("warning"),
        result.count("info"),
    )
    return result
