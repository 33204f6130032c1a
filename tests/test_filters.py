"""
Tests for the in-memory browse filters.
"""

import pytest
from decimal import Decimal

from marketplace.utils.filters import (
    FilterOptions,
    LocationCoordinates,
    MAX_PRICE,
    apply_filters,
    calculate_distance,
    filter_properties,
    filter_properties_by_distance,
    format_price_display,
    get_price_range_from_string,
    normalize_property,
)


def make_property(price, property_type="sale", latitude=None, longitude=None, **extra):
    return {"price": price, "type": property_type, "latitude": latitude, "longitude": longitude, **extra}


class TestPriceRanges:
    """Test price range identifiers."""

    @pytest.mark.parametrize("value,expected", [
        ("any", (0, MAX_PRICE)),
        ("0-500000", (0, 500000)),
        ("500000-2000000", (500000, 2000000)),
        ("2000000-5000000", (2000000, 5000000)),
        ("5000000-10000000", (5000000, 10000000)),
        ("10000000-20000000", (10000000, 20000000)),
        ("20000000+", (20000000, 100000000)),
    ])
    def test_known_ranges(self, value, expected):
        assert get_price_range_from_string(value) == expected

    def test_unknown_range_falls_back_to_any(self):
        assert get_price_range_from_string("cheap") == (0, MAX_PRICE)
        assert get_price_range_from_string("") == (0, MAX_PRICE)


class TestFilterProperties:
    """Test type and price filtering."""

    def test_price_range_scenario(self):
        """Three listings at 4 lakh, 25 lakh and 1.5 crore."""
        properties = [make_property(400000), make_property(2500000), make_property(15000000)]

        mid_range = FilterOptions(price_range=get_price_range_from_string("500000-2000000"))
        assert filter_properties(properties, mid_range) == []

        low_range = FilterOptions(price_range=get_price_range_from_string("0-500000"))
        assert filter_properties(properties, low_range) == [properties[0]]

    def test_price_bounds_are_inclusive(self):
        properties = [make_property(500000), make_property(2000000), make_property(2000001)]

        result = filter_properties(properties, FilterOptions(price_range=(500000, 2000000)))

        assert [p["price"] for p in result] == [500000, 2000000]

    def test_type_filter(self):
        properties = [make_property(100, "sale"), make_property(200, "rent"), make_property(300, "rent")]

        assert [p["price"] for p in filter_properties(properties, FilterOptions(property_type="rent"))] == [200, 300]
        assert [p["price"] for p in filter_properties(properties, FilterOptions(property_type="sale"))] == [100]

    def test_all_type_and_no_price_range_keep_everything(self):
        properties = [make_property(100, "sale"), make_property(200, "rent")]

        assert filter_properties(properties, FilterOptions()) == properties

    def test_keeps_input_order(self):
        properties = [make_property(3), make_property(1), make_property(2)]

        result = filter_properties(properties, FilterOptions(price_range=(0, 10)))

        assert [p["price"] for p in result] == [3, 1, 2]


class TestDistance:
    """Test the haversine distance and distance filter."""

    def test_distance_to_self_is_zero(self):
        point = LocationCoordinates(19.0760, 72.8777)
        assert calculate_distance(point, point) == pytest.approx(0.0)

    def test_one_degree_of_latitude(self):
        # 2 * pi * 6371 / 360
        distance = calculate_distance(LocationCoordinates(0, 0), LocationCoordinates(1, 0))
        assert distance == pytest.approx(111.19, abs=0.01)

    def test_mumbai_to_pune(self):
        mumbai = LocationCoordinates(19.0760, 72.8777)
        pune = LocationCoordinates(18.5204, 73.8567)
        assert calculate_distance(mumbai, pune) == pytest.approx(120, abs=5)

    def test_distance_is_symmetric(self):
        a = LocationCoordinates(12.9716, 77.5946)
        b = LocationCoordinates(13.0827, 80.2707)
        assert calculate_distance(a, b) == pytest.approx(calculate_distance(b, a))

    def test_filter_by_distance(self):
        center = LocationCoordinates(19.0760, 72.8777)
        near = make_property(1, latitude=19.0800, longitude=72.8800)
        far = make_property(2, latitude=18.5204, longitude=73.8567)
        unlocated = make_property(3)

        result = filter_properties_by_distance([near, far, unlocated], center)

        assert result == [near]

    def test_custom_radius(self):
        center = LocationCoordinates(19.0760, 72.8777)
        pune = make_property(1, latitude=18.5204, longitude=73.8567)

        assert filter_properties_by_distance([pune], center, max_distance_km=200) == [pune]
        assert filter_properties_by_distance([pune], center, max_distance_km=50) == []

    def test_no_center_returns_input_unchanged(self):
        properties = [make_property(1), make_property(2, latitude=1.0, longitude=1.0)]

        assert filter_properties_by_distance(properties, None) is properties


class TestNormalizeProperty:
    """Test normalization of raw property dictionaries."""

    def test_image_url_falls_back_to_camel_case_key(self):
        prop = normalize_property({"price": 1, "type": "sale", "imageUrl": "http://img/1.jpg"})

        assert prop["image_url"] == "http://img/1.jpg"
        assert "imageUrl" not in prop

    def test_image_url_defaults_to_empty(self):
        assert normalize_property({"price": 1, "type": "sale"})["image_url"] == ""

    def test_string_and_decimal_prices_become_floats(self):
        assert normalize_property({"price": "25000.50", "type": "rent"})["price"] == 25000.5
        assert normalize_property({"price": Decimal("1200"), "type": "rent"})["price"] == 1200.0

    def test_unknown_type_becomes_sale(self):
        assert normalize_property({"price": 1, "type": "lease"})["type"] == "sale"
        assert normalize_property({"price": 1})["type"] == "sale"

    def test_apply_filters_normalizes_first(self):
        raw = [{"price": "400000", "type": "rent"}, {"price": "2500000", "type": "rent"}]

        result = apply_filters(raw, FilterOptions(property_type="rent", price_range=(0, 500000)))

        assert len(result) == 1
        assert result[0]["price"] == 400000.0


class TestFormatPriceDisplay:
    """Test rupee formatting with Indian digit grouping."""

    @pytest.mark.parametrize("value,expected", [
        (0, "₹0"),
        (999, "₹999"),
        (25000, "₹25,000"),
        (2500000, "₹25,00,000"),
        (15000000, "₹1,50,00,000"),
        (Decimal("1234.50"), "₹1,235"),
        ("400000", "₹4,00,000"),
    ])
    def test_format(self, value, expected):
        assert format_price_display(value) == expected
