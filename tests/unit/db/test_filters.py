"""Tests for pagination, sort validation and metadata."""

import pytest

from app.core.errors import InvariantViolation
from app.core.validator import Validator
from app.db.filters import Filters, Metadata, calculate_metadata, validate_filters

SAFELIST = ("id", "-id")


def _errors(**kwargs) -> dict[str, str]:
    v = Validator()
    validate_filters(v, Filters(sort_safelist=SAFELIST, **kwargs))
    return v.errors


# ======================================================================
# validate_filters
# ======================================================================


class TestValidateFilters:
    def test_defaults_valid(self):
        assert _errors() == {}

    @pytest.mark.parametrize("page", [0, -1, 10_000_001])
    def test_page_out_of_range(self, page):
        assert set(_errors(page=page)) == {"page"}

    @pytest.mark.parametrize("page", [1, 10_000_000])
    def test_page_bounds(self, page):
        assert _errors(page=page) == {}

    @pytest.mark.parametrize("page_size", [0, 101])
    def test_page_size_out_of_range(self, page_size):
        assert set(_errors(page_size=page_size)) == {"page_size"}

    @pytest.mark.parametrize("page_size", [1, 100])
    def test_page_size_bounds(self, page_size):
        assert _errors(page_size=page_size) == {}

    @pytest.mark.parametrize("sort", ["name", "i", "-", "id;DROP TABLE users", "--id"])
    def test_sort_outside_safelist(self, sort):
        assert _errors(sort=sort) == {"sort": "invalid sort value"}


# ======================================================================
# Resolution
# ======================================================================


class TestResolve:
    def test_descending(self):
        f = Filters(sort="-id", sort_safelist=SAFELIST)
        assert f.sort_column() == "id"
        assert f.sort_direction() == "DESC"

    def test_ascending(self):
        f = Filters(sort="id", sort_safelist=SAFELIST)
        assert f.sort_column() == "id"
        assert f.sort_direction() == "ASC"

    def test_unvalidated_sort_is_fatal(self):
        f = Filters(sort="name; DROP TABLE users", sort_safelist=SAFELIST)
        with pytest.raises(InvariantViolation):
            f.sort_column()

    def test_limit_offset(self):
        f = Filters(page=3, page_size=25, sort_safelist=SAFELIST)
        assert f.limit() == 25
        assert f.offset() == 50

    def test_first_page_offset_zero(self):
        assert Filters(page=1, page_size=10).offset() == 0


# ======================================================================
# Metadata
# ======================================================================


class TestMetadata:
    def test_empty_sentinel(self):
        assert calculate_metadata(0, 1, 20) == Metadata()

    def test_values(self):
        m = calculate_metadata(95, 2, 20)
        assert m == Metadata(current_page=2, page_size=20, first_page=1, last_page=5, total_records=95)

    def test_exact_multiple(self):
        assert calculate_metadata(40, 1, 20).last_page == 2

    def test_empty_serializes_to_nothing(self):
        assert Metadata().model_dump() == {}

    def test_serializes_all_fields(self):
        assert calculate_metadata(1, 1, 20).model_dump() == {
            "current_page": 1,
            "page_size": 20,
            "first_page": 1,
            "last_page": 1,
            "total_records": 1,
        }
