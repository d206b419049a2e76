"""
Unit Tests for the Program Catalog
==================================
"""

import pytest

from program_catalog import (
    PROGRAMS,
    ProgramCategory,
    ProgramLevel,
    ProgramNotFoundError,
    ProgramStatus,
    example_calculation,
    find_program,
    get_program,
    list_programs,
)


class TestLookups:
    """Slug lookups."""

    def test_slugs_unique(self):
        assert len({p.slug for p in PROGRAMS}) == len(PROGRAMS)

    def test_get_known_program(self):
        program = get_program("cdap-boost")
        assert program.funding_percentage == 90
        assert program.level is ProgramLevel.FEDERAL

    def test_lookup_normalises_case(self):
        assert find_program(" CDAP-Boost ") is get_program("cdap-boost")

    def test_unknown_slug(self):
        assert find_program("nope") is None
        assert find_program(None) is None
        with pytest.raises(ProgramNotFoundError) as exc:
            get_program("nope")
        assert exc.value.slug == "nope"
        assert isinstance(exc.value, LookupError)


class TestListPrograms:
    """Directory filters."""

    def test_no_filters_returns_all(self):
        assert list_programs() == list(PROGRAMS)

    def test_category_filter(self):
        grants = list_programs(category=ProgramCategory.GRANT)
        assert grants
        assert all(p.category is ProgramCategory.GRANT for p in grants)

    def test_status_filter(self):
        assert [p.slug for p in list_programs(status=ProgramStatus.PAUSED)] == ["canexport-smes"]

    def test_query_matches_tags_and_provider(self):
        assert [p.slug for p in list_programs(query="export")] == ["canexport-smes"]
        assert {p.slug for p in list_programs(query="investissement")} == {
            "essor-component-1", "productivite-innovation",
        }

    def test_combined_filters_can_be_empty(self):
        assert list_programs(level=ProgramLevel.MUNICIPAL) == []


class TestProgram:
    """Program helpers."""

    def test_to_dict_uses_camel_case(self):
        data = get_program("c3i-tax-credit").to_dict()
        assert data["fundingMax"] == 0
        assert data["category"] == "Tax Credit"
        assert "matchReason" in data

    def test_no_cap(self):
        assert not get_program("c3i-tax-credit").has_cap
        assert get_program("cdap-boost").has_cap

    def test_example_calculation(self):
        example = example_calculation(get_program("essor-component-1"))
        assert example == {"project_cost": 200000, "eligible_expenses": 160000, "funding": 80000}
