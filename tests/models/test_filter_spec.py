"""Tests for FilterSpec."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from convquery.models.filters import FilterSpec, to_unix


class TestFilterSpec:
    """SUT: FilterSpec"""

    def test_defaults(self):
        """Defaults should match the console's."""
        spec = FilterSpec(projectId="bf")
        assert spec.page == 1
        assert spec.page_size == 20
        assert spec.status == []
        assert spec.env == "development"
        assert spec.event_filter_operator == "or"
        assert spec.event_filter == []
        assert spec.in_order is False
        assert spec.unbounded is False

    def test_camel_and_snake(self):
        """Both camelCase aliases and field names should populate."""
        a = FilterSpec.model_validate({"projectId": "bf", "xThanLength": "equals", "durationFilterUpperBound": 5})
        b = FilterSpec(project_id="bf", x_than_length="equals", duration_filter_upper_bound=5)
        assert a == b

    def test_unbounded(self):
        """pageSize -1 should be accepted as unbounded."""
        assert FilterSpec(projectId="bf", pageSize=-1).unbounded is True

    @pytest.mark.parametrize("page_size", [0, -2])
    def test_invalid_page_size(self, page_size):
        """pageSize must be -1 or positive."""
        with pytest.raises(ValidationError):
            FilterSpec(projectId="bf", pageSize=page_size)

    def test_invalid_page(self):
        """page is 1-based."""
        with pytest.raises(ValidationError):
            FilterSpec(projectId="bf", page=0)

    def test_unknown_comparator_is_not_a_validation_error(self):
        """Comparator names are resolved later, by the comparator resolver."""
        assert FilterSpec(projectId="bf", xThanLength="bogus").x_than_length == "bogus"

    def test_iso_dates(self):
        """ISO strings should parse to datetimes."""
        spec = FilterSpec(projectId="bf", startDate="2024-01-01T00:00:00Z")
        assert to_unix(spec.start_date) == 1704067200


class TestToUnix:
    """SUT: to_unix"""

    def test_naive_is_utc(self):
        """Naive datetimes should be read as UTC."""
        assert to_unix(datetime(2024, 1, 1)) == to_unix(datetime(2024, 1, 1, tzinfo=timezone.utc))
