"""
Client for the public rules reference catalog (dnd5eapi.co).

Lists degrade to ``[]`` and details to ``None`` when the catalog cannot be
reached, so browsing never fails hard. Callers that cannot proceed without a
record (for example leveling, which needs the class hit die) use the
``require_*`` variants, which raise instead.

Successful responses are cached per path for the lifetime of the client;
the catalog is static reference data.
"""

import asyncio
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config.models import CatalogConfig
from ..error_types import ErrorMessages
from ..exceptions import NetworkError, ResourceNotFoundError, ValidationError, create_error_context
from ..schemas.reference import (
    DETAIL_MODELS,
    AlignmentDetail,
    BackgroundDetail,
    ClassDetail,
    ClassLevel,
    ClassSpell,
    FeatureDetail,
    ProficiencyDetail,
    RaceDetail,
    ReferenceItem,
    SpellDetail,
)
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

DetailT = TypeVar("DetailT", bound=BaseModel)

# List category -> detail kind
CATEGORY_KINDS: dict[str, str] = {
    "races": "race",
    "classes": "class",
    "backgrounds": "background",
    "alignments": "alignment",
    "spells": "spell",
    "proficiencies": "proficiency",
    "features": "feature",
}


def _api_path(locator: str) -> str:
    """Normalize ``/api/races/elf``, ``api/races/elf`` and ``races/elf`` to ``/api/races/elf``."""
    path = locator.strip().lstrip("/")
    if not path.startswith("api/"):
        path = f"api/{path}"
    return f"/{path}"


class ReferenceCatalogClient:
    """Async HTTP client for the reference catalog."""

    def __init__(self, config: CatalogConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """
        Initialize the catalog client.

        Args:
            config: Base URL, timeout and concurrency settings
            transport: Optional transport override (tests pass httpx.MockTransport)
        """
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._semaphore = asyncio.Semaphore(config.max_concurrency)
        self._cache: dict[str, Any] = {}
        logger.info(
            "ReferenceCatalogClient initialized",
            base_url=config.base_url,
            max_concurrency=config.max_concurrency,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
        logger.info("ReferenceCatalogClient closed")

    async def _fetch_json(self, path: str) -> Any:
        """
        GET a catalog path, using the cache when possible.

        Raises:
            ResourceNotFoundError: If the catalog answers 404
            NetworkError: On transport errors, other error statuses or invalid JSON
        """
        if path in self._cache:
            return self._cache[path]

        context = create_error_context()
        context.metadata["operation"] = "catalog_fetch"
        context.metadata["catalog_path"] = path

        try:
            async with self._semaphore:
                response = await self._client.get(path)
            if response.status_code == 404:
                raise ResourceNotFoundError(
                    f"Catalog has no entry at {path}",
                    context,
                    resource_type="reference",
                    resource_id=path,
                    user_friendly=ErrorMessages.REFERENCE_NOT_FOUND,
                )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Catalog request failed for {path}: {e}",
                context,
                connection_type="http",
                details={"error_type": type(e).__name__},
                user_friendly=ErrorMessages.CATALOG_UNAVAILABLE,
            ) from e
        except ValueError as e:
            raise NetworkError(
                f"Catalog returned invalid JSON for {path}",
                context,
                connection_type="http",
                user_friendly=ErrorMessages.CATALOG_UNAVAILABLE,
            ) from e

        self._cache[path] = data
        return data

    async def _try_fetch_json(self, path: str) -> Any | None:
        try:
            return await self._fetch_json(path)
        except (NetworkError, ResourceNotFoundError) as e:
            logger.warning("Catalog fetch degraded", path=path, error_type=type(e).__name__)
            return None

    async def list_category(self, category: str) -> list[ReferenceItem]:
        """
        List a catalog category in catalog order.

        Returns ``[]`` when the catalog cannot be reached.

        Raises:
            ValidationError: If the category is not one CharForge supports
        """
        if category not in CATEGORY_KINDS:
            raise ValidationError(
                f"Unknown reference category: {category}",
                field="category",
                value=category,
                user_friendly=f"Unknown category '{category}'. Use one of: {', '.join(CATEGORY_KINDS)}",
            )

        data = await self._try_fetch_json(_api_path(category))
        if not isinstance(data, dict):
            return []
        try:
            return [ReferenceItem.model_validate(item) for item in data.get("results", [])]
        except PydanticValidationError as e:
            logger.warning("Catalog list response malformed", category=category, error=str(e))
            return []

    def _parse_detail(self, data: Any, model: type[DetailT], path: str) -> DetailT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise NetworkError(
                f"Catalog record at {path} did not match {model.__name__}",
                connection_type="http",
                details={"errors": e.error_count()},
                user_friendly=ErrorMessages.CATALOG_UNAVAILABLE,
            ) from e

    async def fetch_detail(self, locator: str, kind: str) -> BaseModel:
        """
        Fetch and parse a detail record, raising on failure.

        Args:
            locator: Catalog URL path (``/api/races/elf``) or ``races/elf``
            kind: One of the detail kinds (race, class, background, ...)

        Raises:
            ValidationError: If the kind is unknown
            ResourceNotFoundError: If the catalog has no such record
            NetworkError: If the catalog cannot be reached or returns garbage
        """
        model = DETAIL_MODELS.get(kind)
        if model is None:
            raise ValidationError(f"Unknown reference kind: {kind}", field="kind", value=kind)
        path = _api_path(locator)
        data = await self._fetch_json(path)
        return self._parse_detail(data, model, path)

    async def get_detail(self, locator: str, kind: str) -> BaseModel | None:
        """Fetch a detail record, or ``None`` if it cannot be fetched or parsed."""
        try:
            return await self.fetch_detail(locator, kind)
        except (NetworkError, ResourceNotFoundError) as e:
            logger.warning("Catalog detail unavailable", locator=locator, kind=kind, error_type=type(e).__name__)
            return None

    async def get_race(self, index: str) -> RaceDetail | None:
        return await self.get_detail(f"races/{index}", "race")  # type: ignore[return-value]

    async def get_class(self, index: str) -> ClassDetail | None:
        return await self.get_detail(f"classes/{index}", "class")  # type: ignore[return-value]

    async def require_class(self, index: str) -> ClassDetail:
        """Fetch a class record, raising NetworkError/ResourceNotFoundError on failure."""
        return await self.fetch_detail(f"classes/{index}", "class")  # type: ignore[return-value]

    async def get_background(self, index: str) -> BackgroundDetail | None:
        return await self.get_detail(f"backgrounds/{index}", "background")  # type: ignore[return-value]

    async def get_alignment(self, index: str) -> AlignmentDetail | None:
        return await self.get_detail(f"alignments/{index}", "alignment")  # type: ignore[return-value]

    async def get_spell(self, index: str) -> SpellDetail | None:
        return await self.get_detail(f"spells/{index}", "spell")  # type: ignore[return-value]

    async def get_proficiency(self, index: str) -> ProficiencyDetail | None:
        return await self.get_detail(f"proficiencies/{index}", "proficiency")  # type: ignore[return-value]

    async def get_feature(self, locator: str) -> FeatureDetail | None:
        """Fetch a class feature by index or by the URL found in a level table."""
        if "/" not in locator:
            locator = f"features/{locator}"
        return await self.get_detail(locator, "feature")  # type: ignore[return-value]

    async def get_class_levels(self, class_index: str) -> list[ClassLevel]:
        """The class's level table (subclass rows excluded), or ``[]`` on failure."""
        data = await self._try_fetch_json(_api_path(f"classes/{class_index}/levels"))
        if not isinstance(data, list):
            return []
        try:
            levels = [ClassLevel.model_validate(row) for row in data]
        except PydanticValidationError as e:
            logger.warning("Catalog level table malformed", class_index=class_index, error=str(e))
            return []
        return sorted((level for level in levels if level.subclass is None), key=lambda level: level.level)

    async def get_class_spells(self, class_index: str) -> list[ClassSpell]:
        """The class spell list, or ``[]`` on failure."""
        data = await self._try_fetch_json(_api_path(f"classes/{class_index}/spells"))
        if not isinstance(data, dict):
            return []
        try:
            return [ClassSpell.model_validate(item) for item in data.get("results", [])]
        except PydanticValidationError as e:
            logger.warning("Catalog spell list malformed", class_index=class_index, error=str(e))
            return []

    async def get_cantrips(self, class_index: str, class_detail: ClassDetail | None = None) -> list[ClassSpell]:
        """
        Level-0 spells available to a class.

        The spell list is only requested once the class record shows the class
        casts spells. Pass an already fetched ``class_detail`` to skip that fetch.
        """
        if class_detail is None:
            class_detail = await self.get_class(class_index)
        if class_detail is None or class_detail.spellcasting is None:
            return []
        spells = await self.get_class_spells(class_index)
        return [spell for spell in spells if spell.level == 0]
