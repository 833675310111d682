"""Resource type definitions: input schemas, required fields, filters and response keys."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt

from marketplace.domain.filters import CONTAINS, EQUALS, MAXIMUM, MINIMUM, FilterSpec

Number = Union[StrictInt, StrictFloat]


class _Input(BaseModel):
    """Request body: every field optional so presence is checked by the service."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)


class UserInput(_Input):
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class ClassifiedInput(_Input):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Number] = None


class VacancyInput(_Input):
    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None
    salary: Optional[Number] = None


class CompanyInput(_Input):
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[Number] = None


class RealEstateInput(_Input):
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Number] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class ResourceDefinition:
    """Everything that distinguishes one resource type from another."""

    key: str
    path: str
    plural: str
    singular: str
    title: str
    label: str
    schema: type[BaseModel]
    required: tuple[str, ...]
    optional: tuple[str, ...] = ()
    defaults: dict[str, Any] = field(default_factory=dict)
    filters: tuple[FilterSpec, ...] = ()
    create_requires_auth: bool = False


USERS = ResourceDefinition(
    key="users",
    path="users",
    plural="users",
    singular="user",
    title="User",
    label="User",
    schema=UserInput,
    required=("username", "password"),
    optional=("role",),
    defaults={"role": "user"},
)

CLASSIFIEDS = ResourceDefinition(
    key="classifieds",
    path="classifieds",
    plural="classifieds",
    singular="ad",
    title="Classified",
    label="Ad",
    schema=ClassifiedInput,
    required=("title", "description", "category"),
    optional=("price",),
    filters=(
        FilterSpec("category", "category", CONTAINS),
        FilterSpec("minPrice", "price", MINIMUM),
        FilterSpec("maxPrice", "price", MAXIMUM),
    ),
    create_requires_auth=True,
)

VACANCIES = ResourceDefinition(
    key="vacancies",
    path="vacancies",
    plural="vacancies",
    singular="vacancy",
    title="Vacancy",
    label="Vacancy",
    schema=VacancyInput,
    required=("title", "company", "description"),
    optional=("salary",),
    filters=(
        # vacancies have no category of their own; browsing by "category" searches the employer
        FilterSpec("category", "company", CONTAINS),
        FilterSpec("company", "company", CONTAINS),
        FilterSpec("minSalary", "salary", MINIMUM),
    ),
)

COMPANIES = ResourceDefinition(
    key="companies",
    path="companies",
    plural="companies",
    singular="company",
    title="Company",
    label="Company",
    schema=CompanyInput,
    required=("name", "category", "description"),
    optional=("rating",),
    filters=(
        FilterSpec("category", "category", CONTAINS),
        FilterSpec("minRating", "rating", MINIMUM),
    ),
)

REAL_ESTATE = ResourceDefinition(
    key="realEstate",
    path="real-estate",
    plural="realEstate",
    singular="property",
    title="Property",
    label="Property",
    schema=RealEstateInput,
    required=("type", "title", "description"),
    optional=("price", "location"),
    filters=(
        FilterSpec("type", "type", EQUALS),
        FilterSpec("minPrice", "price", MINIMUM),
        FilterSpec("location", "location", CONTAINS),
    ),
)

LISTING_RESOURCES = (CLASSIFIEDS, VACANCIES, COMPANIES, REAL_ESTATE)
ALL_RESOURCES = (USERS,) + LISTING_RESOURCES
