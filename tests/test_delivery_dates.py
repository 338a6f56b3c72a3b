"""Tests for delivery date estimation and option descriptions."""
from datetime import date, datetime

import pytest

from shipping_estimator.delivery_dates import describe_delivery_days, estimate_delivery_date


class TestEstimateDeliveryDate:
    @pytest.mark.parametrize("value", ["N/A", "", None])
    def test_not_available(self, value):
        assert estimate_delivery_date(value) == "Not available"

    def test_same_day(self):
        assert estimate_delivery_date("Same Day") == "Today"

    def test_same_day_is_case_sensitive(self):
        assert estimate_delivery_date("same day") == "same day"

    def test_range(self, fixed_today):
        assert estimate_delivery_date("3-4", today=fixed_today) == "02/02/2024 - 03/02/2024"

    def test_range_min_first(self):
        first, second = estimate_delivery_date("3-4").split(" - ")
        assert datetime.strptime(first, "%d/%m/%Y") <= datetime.strptime(second, "%d/%m/%Y")

    def test_single_day_count(self, fixed_today):
        assert estimate_delivery_date("2", today=fixed_today) == "01/02/2024"

    def test_leading_integer_is_parsed(self, fixed_today):
        assert estimate_delivery_date("5 days", today=fixed_today) == "04/02/2024"

    def test_custom_format(self, fixed_today):
        result = estimate_delivery_date("1-2", today=fixed_today, date_format="%Y-%m-%d")
        assert result == "2024-01-31 - 2024-02-01"

    def test_defaults_to_today(self):
        expected = date.today().strftime("%d/%m/%Y")
        assert estimate_delivery_date("0") == expected

    def test_garbage_returned_unchanged(self):
        assert estimate_delivery_date("garbage") == "garbage"

    def test_unparseable_range_returned_unchanged(self):
        assert estimate_delivery_date("soon-ish") == "soon-ish"

    def test_huge_day_count_does_not_raise(self, fixed_today):
        assert estimate_delivery_date("99999999", today=fixed_today) == "99999999"


class TestDescribeDeliveryDays:
    def test_template(self):
        assert describe_delivery_days("2-3") == "Delivery in 2-3 business days"

    def test_same_day_kept_literally_by_default(self):
        assert describe_delivery_days("Same Day") == "Delivery in Same Day business days"

    def test_natural_same_day(self):
        assert describe_delivery_days("Same Day", natural_same_day=True) == "Same day delivery"
        assert describe_delivery_days("1-2", natural_same_day=True) == "Delivery in 1-2 business days"
