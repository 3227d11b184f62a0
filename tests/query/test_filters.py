"""Tests for the base match predicate."""

from datetime import datetime, timezone

import pytest

from convquery.errors import ComparatorError
from convquery.models.filters import FilterSpec
from convquery.query.filters import create_filter_object, event_confidences, stored_field_checks

from factories import conversation, user


def _spec(**overrides):
    return FilterSpec(project_id="bf", **overrides)


class TestCreateFilterObject:
    """SUT: create_filter_object"""

    def test_project_only(self):
        """Defaults should scope by project and widen the default env."""
        assert create_filter_object(_spec()) == {
            "projectId": "bf",
            "env": {"$in": ["development", None]},
        }

    def test_status_set(self):
        """A non-empty status list should become $in."""
        filters = create_filter_object(_spec(status=["new", "read"]))
        assert filters["status"] == {"$in": ["new", "read"]}

    def test_empty_status_unconstrained(self):
        """An empty status list should not constrain."""
        assert "status" not in create_filter_object(_spec(status=[]))

    def test_other_env_exact(self):
        """A non-default env should match exactly."""
        assert create_filter_object(_spec(env="production"))["env"] == "production"

    def test_no_env(self):
        """env=None should leave env unconstrained."""
        assert "env" not in create_filter_object(_spec(env=None))

    def test_custom_default_env(self):
        """The widened env should follow the configured default."""
        filters = create_filter_object(_spec(env="staging"), default_env="staging")
        assert filters["env"] == {"$in": ["staging", None]}

    def test_confidence_or_of_both_shapes(self):
        """Both confidence shapes should be OR'ed with the same bound."""
        filters = create_filter_object(_spec(confidence_filter=0.7, x_than_confidence="lessThan"))
        assert filters["$or"] == [
            {"tracker.events": {"$elemMatch": {"parse_data.intent.confidence": {"$exists": True, "$lte": 0.7}}}},
            {"tracker.events": {"$elemMatch": {"confidence": {"$exists": True, "$lte": 0.7}}}},
        ]

    @pytest.mark.parametrize("bound,comparator", [(0, "lessThan"), (None, "lessThan"), (0.5, None)])
    def test_confidence_inactive(self, bound, comparator):
        """Confidence needs both a positive bound and a comparator."""
        filters = create_filter_object(_spec(confidence_filter=bound, x_than_confidence=comparator))
        assert "$or" not in filters

    def test_confidence_bad_comparator(self):
        """An unknown confidence comparator should raise."""
        with pytest.raises(ComparatorError):
            create_filter_object(_spec(confidence_filter=0.5, x_than_confidence="around"))

    def test_date_range(self):
        """Both dates should constrain the derived window inclusively."""
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2024, 1, 2, tzinfo=timezone.utc)
        filters = create_filter_object(_spec(start_date=start, end_date=end))
        assert filters["$and"] == [
            {"startTime": {"$lte": int(end.timestamp())}},
            {"endTime": {"$gte": int(start.timestamp())}},
        ]

    def test_single_date_ignored(self):
        """One date alone should not constrain."""
        assert "$and" not in create_filter_object(_spec(start_date=datetime(2024, 1, 1)))

    def test_user_id(self):
        """userId should match exactly."""
        assert create_filter_object(_spec(user_id="u-1"))["userId"] == "u-1"


class TestEventConfidences:
    """SUT: event_confidences"""

    def test_collects_both_shapes(self):
        """Intent and top-level confidences should both be collected."""
        conv = conversation([user("greet", confidence=0.9), {"event": "action", "confidence": 0.4}])
        assert event_confidences(conv) == [0.9, 0.4]


class TestStoredFieldChecks:
    """SUT: stored_field_checks"""

    def test_env_widening(self):
        """The default env should also accept null env, other envs only themselves."""
        assert stored_field_checks(_spec(), conversation([], env=None)) == {"env": True}
        assert stored_field_checks(_spec(), conversation([], env="development")) == {"env": True}
        assert stored_field_checks(_spec(), conversation([], env="production")) == {"env": False}
        assert stored_field_checks(_spec(env="production"), conversation([], env=None)) == {"env": False}

    def test_no_env(self):
        """A null env in the spec should not constrain."""
        assert stored_field_checks(_spec(env=None), conversation([], env="production")) == {}

    def test_status_and_user(self):
        """Status should be one of the accepted values and userId should match exactly."""
        conv = conversation([], status="new", userId="u-1")
        checks = stored_field_checks(_spec(env=None, status=["new", "read"], user_id="u-2"), conv)
        assert checks == {"status": True, "userId": False}
