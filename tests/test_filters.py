"""Unit tests for the WHERE-clause builder and the days parameter."""
import datetime
import re

import pytest

from app.core.errors import ValidationError
from app.db.filters import FILTER_TABLE, WhereClause, build_where, lookback_where, parse_days
from app.models.domain.mentions import MentionFilters

UTC = datetime.timezone.utc


def placeholders(sql):
    return re.findall(r":p(\d+)", sql)


class TestBuildWhere:

    def test_no_filters_no_conditions(self):
        where = build_where(MentionFilters())
        assert where.sql == ""
        assert where.args == []
        assert not where

    def test_scalar_filters_bind_one_value_each(self):
        filters = MentionFilters(project_id="p1", language="en", country="US", mention_id="m9")
        where = build_where(filters)
        assert where.sql == (
            "mentions.project_id = :p1 AND mentions.mention_id = :p2 "
            "AND mentions.language = :p3 AND mentions.country = :p4"
        )
        assert where.args == ["p1", "m9", "en", "US"]

    def test_repeatable_filters_expand_in_order(self):
        filters = MentionFilters(sentiment=["positive", "neutral"], social_network=["x", "reddit", "tiktok"])
        where = build_where(filters)
        assert where.sql == (
            "mentions.sentiment IN (:p1, :p2) AND mentions.social_network IN (:p3, :p4, :p5)"
        )
        assert where.args == ["positive", "neutral", "x", "reddit", "tiktok"]

    def test_empty_repeatable_filter_contributes_nothing(self):
        where = build_where(MentionFilters(sentiment=[], language="en"))
        assert where.sql == "mentions.language = :p1"

    def test_substring_filters_are_case_insensitive_and_wrapped(self):
        where = build_where(MentionFilters(keyword="Acme", tracked_keyword="shoe"))
        assert where.sql == (
            "LOWER(projects.keyword) LIKE LOWER(:p1) "
            "AND LOWER(mentions.tracked_keyword) LIKE LOWER(:p2)"
        )
        assert where.args == ["%Acme%", "%shoe%"]

    def test_ranges(self):
        filters = MentionFilters(
            domain_influence_min="10.5",
            domain_influence_max=90,
            social_media_interactions_min="3",
            social_media_interactions_max=400,
        )
        where = build_where(filters)
        assert where.sql == (
            "mentions.domain_influence >= :p1 AND mentions.domain_influence <= :p2 "
            "AND mentions.social_media_interactions >= :p3 AND mentions.social_media_interactions <= :p4"
        )
        assert where.args == [10.5, 90.0, 3, 400]

    def test_linked_false_is_still_a_filter(self):
        where = build_where(MentionFilters(linked="false"))
        assert where.sql == "mentions.linked = :p1"
        assert where.args == [False]

    def test_user_input_never_reaches_sql_text(self):
        hostile = "x'; DROP TABLE mentions; --"
        where = build_where(MentionFilters(project_id=hostile, keyword=hostile, sentiment=[hostile]))
        assert "DROP" not in where.sql
        assert hostile in where.args

    def test_every_filter_at_once_numbers_contiguously(self):
        filters = MentionFilters(
            project_id="p1", keyword="acme",
            project_created_from="2024-01-01", project_created_to="2024-12-31",
            mention_id="m1", published_from="2025-01-01T00:00:00Z", published_to="2025-02-01",
            language="en", country="US", sentiment=["positive", "negative"],
            social_network=["twitter"], tracked_keyword="acme",
            domain_influence_min=1, domain_influence_max=99,
            social_media_interactions_min=0, social_media_interactions_max=10, linked=True,
        )
        where = build_where(filters)
        numbers = [int(n) for n in placeholders(where.sql)]
        assert numbers == list(range(1, len(FILTER_TABLE) + 2))
        assert len(where.args) == len(numbers)
        assert where.params == {f"p{i}": v for i, v in enumerate(where.args, start=1)}

    def test_appends_after_existing_conditions(self, now):
        where = build_where(MentionFilters(language="en"), lookback_where(7, now=now))
        assert where.sql == "mentions.published >= :p1 AND mentions.language = :p2"
        assert where.args[0] == now - datetime.timedelta(days=7)
        assert where.args[1] == "en"

    def test_raw_condition_binds_nothing(self):
        where = WhereClause().equals("mentions.project_id", "p1")
        where.add_raw("mentions.url IS NOT NULL")
        where.equals("mentions.language", "en")
        assert where.sql == "mentions.project_id = :p1 AND mentions.url IS NOT NULL AND mentions.language = :p2"


class TestMentionFilters:

    def test_blank_values_are_absent(self):
        filters = MentionFilters(project_id="", keyword="   ", sentiment=["", "positive"])
        assert filters.project_id is None
        assert filters.keyword is None
        assert filters.sentiment == ["positive"]

    def test_created_at_aliases(self):
        filters = MentionFilters.model_validate({"created_at_from": "2024-01-01", "created_at_to": "2024-02-01"})
        assert filters.project_created_from == datetime.datetime(2024, 1, 1, tzinfo=UTC)
        assert filters.project_created_to == datetime.datetime(2024, 2, 1, tzinfo=UTC)

    def test_timestamps_normalized_to_utc(self):
        filters = MentionFilters(published_from="2025-01-01T02:00:00+02:00")
        assert filters.published_from == datetime.datetime(2025, 1, 1, tzinfo=UTC)

    @pytest.mark.parametrize("field", ["domain_influence_min", "social_media_interactions_max"])
    def test_non_numeric_range_rejected(self, field):
        with pytest.raises(Exception):
            MentionFilters.model_validate({field: "lots"})

    def test_nan_rejected(self):
        with pytest.raises(Exception):
            MentionFilters.model_validate({"domain_influence_max": "nan"})


class TestParseDays:

    @pytest.mark.parametrize("raw", ["0", "366", "abc", "-3", "1.5"])
    def test_rejected(self, raw):
        with pytest.raises(ValidationError) as exc:
            parse_days(raw)
        assert exc.value.field == "days"
        assert exc.value.status_code == 400

    @pytest.mark.parametrize("raw,expected", [("1", 1), ("365", 365), (" 30 ", 30), (None, 7), ("", 7)])
    def test_accepted(self, raw, expected):
        assert parse_days(raw) == expected
