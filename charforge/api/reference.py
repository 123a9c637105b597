"""
Reference catalog API endpoints for CharForge.

Public, read-only views over the rules catalog: category listings, single
records and a class's cantrip list.
"""

from fastapi import APIRouter

from ..dependencies import CatalogDep
from ..exceptions import ValidationError
from ..schemas.reference import ClassSpell, ReferenceDetail, ReferenceItem
from ..services.reference_client import CATEGORY_KINDS, ReferenceCatalogClient
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

reference_router = APIRouter(prefix="/api/reference", tags=["reference"])


@reference_router.get("/{category}", response_model=list[ReferenceItem])
async def list_reference_category(
    category: str,
    catalog: ReferenceCatalogClient = CatalogDep,
) -> list[ReferenceItem]:
    """
    List a catalog category (races, classes, backgrounds, alignments, ...).

    An empty list means the catalog had nothing or could not be reached.
    """
    return await catalog.list_category(category)


@reference_router.get("/classes/{index}/cantrips", response_model=list[ClassSpell])
async def list_class_cantrips(
    index: str,
    catalog: ReferenceCatalogClient = CatalogDep,
) -> list[ClassSpell]:
    """Level-0 spells of a class; empty for classes without spellcasting."""
    return await catalog.get_cantrips(index)


@reference_router.get("/{category}/{index}", response_model=ReferenceDetail)
async def get_reference_detail(
    category: str,
    index: str,
    catalog: ReferenceCatalogClient = CatalogDep,
):
    """
    Fetch one catalog record.

    Answers 404 when the catalog has no such record and 502 when it cannot be
    reached.
    """
    kind = CATEGORY_KINDS.get(category)
    if kind is None:
        logger.warning("Unknown reference category requested", category=category)
        raise ValidationError(
            f"Unknown reference category: {category}",
            field="category",
            value=category,
            user_friendly=f"Unknown category '{category}'. Use one of: {', '.join(CATEGORY_KINDS)}",
        )
    return await catalog.fetch_detail(f"{category}/{index}", kind)
