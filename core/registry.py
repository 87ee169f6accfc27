# =============================================================================
# core/registry.py - Section Schema Registry
# =============================================================================
# Static description of the portfolio's relational layout:
#
#   section (parent table) -> child relations -> nested relations
#
# e.g. education -> education_items -> education_relevant_courses
#
# Child relations are looked up by (section, itemType), nested relations by
# (parentTable, nestedType). Each relation carries its table, the foreign key
# column pointing at its parent, and the whitelist of writable columns.
#
# Column names follow the database: camelCase for most tables, flattened
# lowercase where Postgres folded them (courseurl).
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from app.exceptions import (
    ItemTypeRequiredError,
    UnknownItemTypeError,
    UnknownNestedTypeError,
    UnknownSectionError,
)


# Columns holding a public storage URL, in lookup order
IMAGE_FIELDS: tuple[str, ...] = (
    "educationImageUrl",
    "imageUrl",
    "imageurl",
    "awardImageUrl",
    "experienceImageUrl",
)

# snake_case spellings accepted on parent-row patches
IMAGE_FIELD_ALIASES: tuple[str, ...] = IMAGE_FIELDS + (
    "education_image_url",
    "image_url",
    "award_image_url",
    "experience_image_url",
)


class Section(str, Enum):
    """Top-level content categories; each value is also its parent table."""
    HOME = "home"
    ABOUT = "about"
    AWARDS = "awards"
    EDUCATION = "education"
    EXPERIENCE = "experience"
    GALLERY = "gallery"
    PROJECTS = "projects"


@dataclass(frozen=True)
class Relation:
    """
    A child or nested table hanging off a parent row.

    Attributes:
        name: itemType / nestedType used in URLs
        table: Database table
        foreign_key: Column referencing the parent row
        fields: Writable columns (everything else is dropped)
        eager_nested: Embed this table's nested relations when listing
    """
    name: str
    table: str
    foreign_key: str
    fields: tuple[str, ...]
    eager_nested: bool = False

    @property
    def image_field(self) -> str | None:
        """The relation's storage-backed image column, if it has one."""
        for name in IMAGE_FIELDS:
            if name in self.fields:
                return name
        return None


@dataclass(frozen=True)
class SectionSchema:
    """A section's parent table and its child relations."""
    section: Section
    children: dict[str, Relation] = field(default_factory=dict)

    @property
    def parent_table(self) -> str:
        return self.section.value


def _rel(name: str, table: str, fk: str, *fields: str, eager_nested: bool = False) -> Relation:
    return Relation(name=name, table=table, foreign_key=fk, fields=fields, eager_nested=eager_nested)


_POSITION_FIELDS = ("position", "startDate", "endDate", "responsibilities", "skills", "images")


SECTION_SCHEMAS: dict[Section, SectionSchema] = {
    Section.HOME: SectionSchema(Section.HOME, {
        "organizations": _rel("organizations", "home_organizations", "homeId",
                              "name", "orgUrl", "orgColor", "orgPortfolioUrl"),
        "qualities": _rel("qualities", "home_qualities", "homeId", "attribute", "description"),
    }),
    Section.ABOUT: SectionSchema(Section.ABOUT, {
        "skills": _rel("skills", "about_skills", "aboutId", "skill"),
        "interests": _rel("interests", "about_interests", "aboutId", "interest"),
    }),
    Section.AWARDS: SectionSchema(Section.AWARDS, {
        "items": _rel("items", "awards_items", "awardsId", "title", "organization", "date", "description"),
    }),
    Section.EDUCATION: SectionSchema(Section.EDUCATION, {
        "items": _rel("items", "education_items", "educationId",
                      "name", "nameUrl", "educationType", "schoolType", "major",
                      "completionDate", "description", "gpa", "educationImageUrl"),
    }),
    Section.EXPERIENCE: SectionSchema(Section.EXPERIENCE, {
        "professional": _rel("professional", "experience_professional", "experienceId",
                             "company", "companyUrl", "location"),
        "leadership": _rel("leadership", "experience_leadership", "experienceId",
                           "company", "companyUrl", "location"),
    }),
    # Gallery rows are the items themselves; categories hang off them
    Section.GALLERY: SectionSchema(Section.GALLERY, {}),
    Section.PROJECTS: SectionSchema(Section.PROJECTS, {
        "items": _rel("items", "project_items", "projectsId",
                      "title", "date", "description", "githubUrl", "liveUrl", "imageUrl",
                      eager_nested=True),
    }),
}


NESTED_RELATIONS: dict[str, dict[str, Relation]] = {
    "education_items": {
        "courses": _rel("courses", "education_relevant_courses", "educationItemId", "course", "courseurl"),
        "involvement": _rel("involvement", "education_organization_involvement", "educationItemId",
                            "organization", "role"),
    },
    "experience_professional": {
        "positions": _rel("positions", "experience_professional_positions", "professionalId",
                          *_POSITION_FIELDS),
    },
    "experience_leadership": {
        "positions": _rel("positions", "experience_leadership_positions", "leadershipId",
                          *_POSITION_FIELDS),
    },
    "project_items": {
        "technologies": _rel("technologies", "project_technologies", "projectItemId", "technology"),
        "highlights": _rel("highlights", "project_highlights", "projectItemId", "highlight"),
    },
    "gallery": {
        "categories": _rel("categories", "gallery_categories", "galleryId", "categoryName"),
    },
}


# =============================================================================
# Lookups
# =============================================================================

def list_sections() -> list[str]:
    """Section names in display order."""
    return [section.value for section in Section]


def resolve_section(name: str | Section) -> Section:
    """
    Map a section name to its Section.

    Raises:
        UnknownSectionError: If the name isn't a known section
    """
    if isinstance(name, Section):
        return name
    try:
        return Section(name)
    except ValueError:
        raise UnknownSectionError(str(name), list_sections())


def get_schema(section: str | Section) -> SectionSchema:
    return SECTION_SCHEMAS[resolve_section(section)]


def resolve_child(section: str | Section, item_type: str | None = None) -> Relation:
    """
    Find the child relation for (section, itemType).

    When item_type is omitted and the section has exactly one child relation,
    that relation is used.

    Raises:
        UnknownSectionError: Unknown section
        ItemTypeRequiredError: Omitted item_type on a section with several relations
        UnknownItemTypeError: item_type not configured for the section
    """
    schema = get_schema(section)
    names = list(schema.children)

    if not item_type:
        if len(names) == 1:
            return schema.children[names[0]]
        if not names:
            raise UnknownItemTypeError(schema.section.value, "", names)
        raise ItemTypeRequiredError(schema.section.value, names)

    relation = schema.children.get(item_type)
    if relation is None:
        raise UnknownItemTypeError(schema.section.value, item_type, names)
    return relation


def resolve_nested(parent_table: str, nested_type: str) -> Relation:
    """
    Find the nested relation for (parentTable, nestedType).

    Raises:
        UnknownNestedTypeError: If the pair isn't configured
    """
    relation = NESTED_RELATIONS.get(parent_table, {}).get(nested_type)
    if relation is None:
        raise UnknownNestedTypeError(parent_table, nested_type)
    return relation


def nested_relations(table: str) -> list[Relation]:
    """Nested relations whose parent is `table` (empty when none)."""
    return list(NESTED_RELATIONS.get(table, {}).values())
