"""
Tests for text rendering (people_of_history/render.py)
"""

from people_of_history.render import age_badge, format_year, lifespan
from people_of_history.schemas import BiographicalFacts


class TestRender:
    """Test year, lifespan and badge text."""

    def test_format_year(self):
        assert format_year(1769) == "1769"
        assert format_year(-100) == "100 BCE"
        assert format_year(None) == ""

    def test_bce_lifespan_and_badge(self):
        facts = BiographicalFacts(label="Caesar", birth_year=-100, death_year=-44, age=56)
        assert lifespan(facts.birth_year, facts.death_year) == "100 BCE – 44 BCE"
        assert age_badge(facts) == "died at 56"

    def test_partial_lifespans(self):
        assert lifespan(1950, None) == "born 1950"
        assert lifespan(None, 814) == "died 814"
        assert lifespan(None, None) == ""

    def test_no_badge_without_age(self):
        assert age_badge(BiographicalFacts(label="X", birth_year=1950)) == ""
