"""Pydantic schemas for people and their place in a family tree.

These schemas define the normalized shape of a knowledge-base entity once its
claims have been validated. Raw entities are never exposed past the resolver.
"""

from pydantic import BaseModel, Field, model_validator

QID_PATTERN = r"^Q[0-9]+$"


class SearchHit(BaseModel):
    """A person returned by a free-text search."""

    id: str = Field(pattern=QID_PATTERN, description="Wikidata item identifier")
    label: str = Field(description="Display name, falls back to the identifier")
    description: str = Field(default="", description="Short description of the person")


class BiographicalFacts(BaseModel):
    """Validated facts derived from an entity's labels, claims and sitelinks."""

    label: str
    description: str = ""
    wikipedia_url: str | None = None
    image_url: str | None = None
    birth_year: int | None = Field(default=None, description="Signed year, negative is BCE")
    death_year: int | None = Field(default=None, description="Signed year, negative is BCE")
    age: int | None = Field(default=None, ge=0, description="Age at death in years")

    @model_validator(mode="after")
    def check_lifespan(self) -> "BiographicalFacts":
        """Reject contradictory years and an age that does not follow from them."""
        both = self.birth_year is not None and self.death_year is not None
        if both and self.birth_year > self.death_year:
            raise ValueError("birth_year must not be after death_year")
        if self.age is None:
            return self
        if self.birth_year is None or self.death_year is None:
            raise ValueError("age requires both birth_year and death_year")
        if self.age != self.death_year - self.birth_year:
            raise ValueError("age must equal death_year - birth_year")
        return self


class Relations(BaseModel):
    """Parent and child identifiers of a person, sanitized and deduplicated."""

    parent_ids: list[str] = Field(default_factory=list)
    child_ids: list[str] = Field(default_factory=list)


class Person(BiographicalFacts):
    """A person resolved from the knowledge base."""

    id: str = Field(pattern=QID_PATTERN, description="Wikidata item identifier")
    parent_ids: list[str] = Field(default_factory=list, description="Fathers then mothers")
    child_ids: list[str] = Field(default_factory=list)

    @classmethod
    def compose(cls, entity_id: str, facts: BiographicalFacts, relations: Relations) -> "Person":
        """Build a person from extracted facts and relations."""
        return cls(id=entity_id, **facts.model_dump(), **relations.model_dump())

    @property
    def parent_count(self) -> int:
        return len(self.parent_ids)

    @property
    def child_count(self) -> int:
        return len(self.child_ids)
