"""Text rendering of years and lifespans."""

from people_of_history.schemas import BiographicalFacts


def format_year(year: int | None) -> str:
    """Format a signed year, showing negative years as BCE."""
    if year is None:
        return ""
    if year < 0:
        return f"{abs(year)} BCE"
    return str(year)


def lifespan(birth_year: int | None, death_year: int | None) -> str:
    """Describe a lifespan, e.g. ``100 BCE – 44 BCE``, ``born 1950`` or ``died 814``."""
    if birth_year is not None and death_year is not None:
        return f"{format_year(birth_year)} – {format_year(death_year)}"
    if birth_year is not None:
        return f"born {format_year(birth_year)}"
    if death_year is not None:
        return f"died {format_year(death_year)}"
    return ""


def age_badge(facts: BiographicalFacts) -> str:
    """Age badge like ``died at 56``, empty unless the age is known."""
    if facts.age is None:
        return ""
    return f"died at {facts.age}"
