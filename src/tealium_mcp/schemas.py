import copy
from typing import Any, Dict, List, Optional

SCHEMA_URI_PREFIX = "tealium://schema/"
DEFAULT_SCHEMA_URI = SCHEMA_URI_PREFIX + "standard"

COUNTRY_PATTERN = "^[A-Z]{2}$"
CURRENCY_PATTERN = "^[A-Z]{3}$"
LANGUAGE_PATTERN = "^[a-z]{2}(-[A-Z]{2})?$"

# ------------------------------------------------------------------
# Standard: page, user, event
# ------------------------------------------------------------------

STANDARD_SCHEMA: Dict[str, Any] = {
    "$id": SCHEMA_URI_PREFIX + "standard",
    "type": "object",
    "properties": {
        "page": {
            "type": "object",
            "properties": {
                "pageName": {"type": "string", "minLength": 1},
                "pageType": {"type": "string"},
                "pageCategory": {"type": "string"},
                "pageSubcategory": {"type": "string"},
                "language": {"type": "string", "pattern": LANGUAGE_PATTERN},
                "country": {"type": "string", "pattern": COUNTRY_PATTERN},
                "currency": {"type": "string", "pattern": CURRENCY_PATTERN},
            },
            "required": ["pageName"],
        },
        "user": {
            "type": "object",
            "properties": {
                "userId": {"type": "string"},
                "visitorId": {"type": "string"},
                "userType": {"type": "string", "enum": ["guest", "registered", "premium"]},
                "isLoggedIn": {"type": "boolean"},
            },
        },
        "event": {
            "type": "object",
            "properties": {
                "eventName": {"type": "string", "minLength": 1},
                "eventCategory": {"type": "string"},
                "eventAction": {"type": "string"},
                "eventLabel": {"type": "string"},
                "eventValue": {"type": "number"},
            },
            "required": ["eventName"],
        },
    },
}

# ------------------------------------------------------------------
# E-commerce: standard + product(s), transaction
# ------------------------------------------------------------------

_PRODUCT_PROPERTIES = {
    "productId": {"type": "string", "minLength": 1},
    "productName": {"type": "string", "minLength": 1},
    "productCategory": {"type": "string"},
    "productBrand": {"type": "string"},
    "productPrice": {"type": "number", "minimum": 0},
    "productQuantity": {"type": "integer", "minimum": 1},
}

ECOMMERCE_SCHEMA: Dict[str, Any] = {
    "$id": SCHEMA_URI_PREFIX + "ecommerce",
    "type": "object",
    "properties": {
        **copy.deepcopy(STANDARD_SCHEMA["properties"]),
        "product": {
            "type": "object",
            "properties": {
                **_PRODUCT_PROPERTIES,
                "productVariant": {"type": "string"},
                "productSku": {"type": "string"},
            },
            "required": ["productId", "productName"],
        },
        "products": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": dict(_PRODUCT_PROPERTIES),
                "required": ["productId", "productName"],
            },
        },
        "transaction": {
            "type": "object",
            "properties": {
                "transactionId": {"type": "string", "minLength": 1},
                "transactionTotal": {"type": "number", "minimum": 0},
                "transactionTax": {"type": "number", "minimum": 0},
                "transactionShipping": {"type": "number", "minimum": 0},
                "transactionCurrency": {"type": "string", "pattern": CURRENCY_PATTERN},
                "transactionPaymentMethod": {"type": "string"},
            },
            "required": ["transactionId", "transactionTotal"],
        },
    },
}

# ------------------------------------------------------------------
# Hotels: standard + search, hotel, room, booking, guest
# ------------------------------------------------------------------

HOTEL_SCHEMA: Dict[str, Any] = {
    "$id": SCHEMA_URI_PREFIX + "hotels",
    "type": "object",
    "properties": {
        **copy.deepcopy(STANDARD_SCHEMA["properties"]),
        "search": {
            "type": "object",
            "properties": {
                "searchDestination": {"type": "string"},
                "searchCheckIn": {"type": "string", "format": "date"},
                "searchCheckOut": {"type": "string", "format": "date"},
                "searchAdults": {"type": "integer", "minimum": 1},
                "searchChildren": {"type": "integer", "minimum": 0},
                "searchRooms": {"type": "integer", "minimum": 1},
                "searchFlexibleDates": {"type": "boolean"},
            },
        },
        "hotel": {
            "type": "object",
            "properties": {
                "hotelCode": {"type": "string", "minLength": 1},
                "hotelName": {"type": "string", "minLength": 1},
                "hotelBrand": {"type": "string"},
                "hotelCity": {"type": "string"},
                "hotelCountry": {"type": "string", "pattern": COUNTRY_PATTERN},
                "hotelStarRating": {"type": "number", "minimum": 1, "maximum": 5},
                "hotelCategory": {
                    "type": "string",
                    "enum": ["resort", "city", "beach", "boutique", "business"],
                },
            },
            "required": ["hotelCode", "hotelName"],
        },
        "room": {
            "type": "object",
            "properties": {
                "roomType": {"type": "string", "minLength": 1},
                "roomCode": {"type": "string"},
                "roomName": {"type": "string"},
                "roomCapacity": {"type": "integer", "minimum": 1},
                "roomAmenities": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["roomType"],
        },
        "booking": {
            "type": "object",
            "properties": {
                "bookingId": {"type": "string"},
                "bookingStatus": {
                    "type": "string",
                    "enum": ["pending", "confirmed", "cancelled", "completed"],
                },
                "bookingCheckIn": {"type": "string", "format": "date"},
                "bookingCheckOut": {"type": "string", "format": "date"},
                "bookingNights": {"type": "integer", "minimum": 1},
                "bookingAdults": {"type": "integer", "minimum": 1},
                "bookingChildren": {"type": "integer", "minimum": 0},
                "bookingRooms": {"type": "integer", "minimum": 1},
                "bookingRateCode": {"type": "string"},
                "bookingRateName": {"type": "string"},
                "bookingTotal": {"type": "number", "minimum": 0},
                "bookingCurrency": {"type": "string", "pattern": CURRENCY_PATTERN},
                "bookingTaxes": {"type": "number", "minimum": 0},
                "bookingFees": {"type": "number", "minimum": 0},
            },
            "required": [
                "bookingCheckIn",
                "bookingCheckOut",
                "bookingNights",
                "bookingAdults",
                "bookingRooms",
                "bookingTotal",
                "bookingCurrency",
            ],
        },
        "guest": {
            "type": "object",
            "properties": {
                "guestType": {"type": "string", "enum": ["new", "returning", "loyalty"]},
                "guestLoyaltyId": {"type": "string"},
                "guestLoyaltyTier": {"type": "string"},
                "guestLoyaltyPoints": {"type": "integer", "minimum": 0},
                "guestPreferences": {"type": "array", "items": {"type": "string"}},
            },
        },
    },
}

SCHEMAS: Dict[str, Dict[str, Any]] = {
    s["$id"]: s for s in (STANDARD_SCHEMA, ECOMMERCE_SCHEMA, HOTEL_SCHEMA)
}

SCHEMA_INFO: List[Dict[str, str]] = [
    {
        "uri": SCHEMA_URI_PREFIX + "standard",
        "name": "Standard Data Layer Schema",
        "description": "Basic schema for page, user, and event data",
    },
    {
        "uri": SCHEMA_URI_PREFIX + "ecommerce",
        "name": "E-commerce Schema",
        "description": "Schema for product, cart, and transaction tracking",
    },
    {
        "uri": SCHEMA_URI_PREFIX + "hotels",
        "name": "Hotel Industry Schema",
        "description": "Schema for hotel search, booking, and guest tracking",
    },
]


def resolve_schema_uri(schema_id: Optional[str]) -> str:
    """Map `standard` style ids onto their URI; other values pass through."""
    if not schema_id:
        return DEFAULT_SCHEMA_URI
    if schema_id in SCHEMAS:
        return schema_id
    if SCHEMA_URI_PREFIX + schema_id in SCHEMAS:
        return SCHEMA_URI_PREFIX + schema_id
    return schema_id



def schema_ids() -> List[str]:
    return [uri[len(SCHEMA_URI_PREFIX):] for uri in SCHEMAS]
