"""
In-memory property filtering used by the browse endpoint.
Pure functions over lists of property dictionaries: type and price filters,
great-circle distance filtering and INR price formatting.
"""

from decimal import Decimal, ROUND_HALF_UP
from math import radians, sin, cos, sqrt, atan2
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

EARTH_RADIUS_KM = 6371.0
DEFAULT_MAX_DISTANCE_KM = 10.0
MAX_PRICE = 100000000

PRICE_RANGES: Dict[str, Tuple[int, int]] = {
    "any": (0, MAX_PRICE),
    "0-500000": (0, 500000),
    "500000-2000000": (500000, 2000000),
    "2000000-5000000": (2000000, 5000000),
    "5000000-10000000": (5000000, 10000000),
    "10000000-20000000": (10000000, 20000000),
    "20000000+": (20000000, MAX_PRICE),
}

PROPERTY_TYPES = ("sale", "rent")


class LocationCoordinates(NamedTuple):
    lat: float
    lng: float


class FilterOptions:
    """Criteria for filter_properties. Unset criteria do not filter."""

    def __init__(
        self,
        property_type: str = "all",
        price_range: Optional[Tuple[float, float]] = None,
        location: Optional[LocationCoordinates] = None,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM
    ):
        self.property_type = property_type
        self.price_range = price_range
        self.location = location
        self.max_distance_km = max_distance_km


def get_price_range_from_string(value: str) -> Tuple[int, int]:
    """
    Map a price range identifier such as "500000-2000000" to (min, max).
    Unknown identifiers fall back to the "any" range.
    """
    return PRICE_RANGES.get(value, PRICE_RANGES["any"])


def normalize_property(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a property dictionary from any source.

    The primary image is read from image_url or imageUrl, string prices are
    parsed, and unknown types fall back to "sale".
    """
    prop = dict(raw)
    prop["image_url"] = raw.get("image_url") or raw.get("imageUrl") or ""
    prop.pop("imageUrl", None)

    price = raw.get("price")
    if isinstance(price, (str, Decimal)):
        prop["price"] = float(price)

    if prop.get("type") not in PROPERTY_TYPES:
        prop["type"] = "sale"

    prop["images"] = list(raw.get("images") or [])
    return prop


def filter_properties(properties: List[Dict[str, Any]], filters: FilterOptions) -> List[Dict[str, Any]]:
    """
    Filter properties by type and inclusive price range, keeping input order.
    Location is handled separately by filter_properties_by_distance.
    """
    filtered = []
    for prop in properties:
        if filters.property_type and filters.property_type != "all":
            if prop.get("type") != filters.property_type:
                continue

        if filters.price_range:
            min_price, max_price = filters.price_range
            price = prop.get("price")
            if price is None or price < min_price or price > max_price:
                continue

        filtered.append(prop)
    return filtered


def calculate_distance(point_a: LocationCoordinates, point_b: LocationCoordinates) -> float:
    """Haversine distance between two coordinates in kilometres."""
    d_lat = radians(point_b.lat - point_a.lat)
    d_lng = radians(point_b.lng - point_a.lng)

    a = (
        sin(d_lat / 2) ** 2
        + cos(radians(point_a.lat)) * cos(radians(point_b.lat)) * sin(d_lng / 2) ** 2
    )
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def filter_properties_by_distance(
    properties: List[Dict[str, Any]],
    center: Optional[LocationCoordinates],
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM
) -> List[Dict[str, Any]]:
    """
    Keep properties within max_distance_km of center.
    Properties without coordinates are dropped; no center means no filtering.
    """
    if center is None:
        return properties

    nearby = []
    for prop in properties:
        lat, lng = prop.get("latitude"), prop.get("longitude")
        if lat is None or lng is None:
            continue
        distance = calculate_distance(center, LocationCoordinates(float(lat), float(lng)))
        if distance <= max_distance_km:
            nearby.append(prop)
    return nearby


def apply_filters(properties: List[Dict[str, Any]], filters: FilterOptions) -> List[Dict[str, Any]]:
    """Normalize, then run the type/price filter followed by the distance filter."""
    results = filter_properties([normalize_property(p) for p in properties], filters)
    if filters.location is not None:
        results = filter_properties_by_distance(results, filters.location, filters.max_distance_km)
    return results


def format_price_display(value: Any) -> str:
    """
    Format a price in rupees with Indian digit grouping and no decimals.

    >>> format_price_display(2500000)
    '₹25,00,000'
    """
    amount = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    digits = str(abs(int(amount)))

    # Last three digits, then groups of two
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail]) if groups else tail

    return f"{sign}₹{grouped}"
