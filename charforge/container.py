"""
Dependency injection container for CharForge.

The ApplicationContainer owns every long-lived service: the database manager,
the reference catalog client, the character repository and the services
built on them. It is created and initialized in the application lifespan and
stored on app.state.container; request dependencies read it from there.

USAGE:
    container = ApplicationContainer()
    await container.initialize()
    app.state.container = container
    ...
    await container.shutdown()
"""

import asyncio
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config.models import AppConfig
    from .database import DatabaseManager
    from .game.stats_generator import StatsGenerator
    from .persistence.repositories import CharacterRepository
    from .services.character_service import CharacterService
    from .services.reference_client import ReferenceCatalogClient
    from .services.sheet_assembler import CharacterSheetAssembler
    from .services.wizard_service import WizardService

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class ApplicationContainer:
    """
    Dependency injection container for the CharForge application.

    Services are plain instances owned by the container. Construction has no
    side effects; initialize() builds everything in dependency order.
    """

    _instance: "ApplicationContainer | None" = None
    _lock: threading.Lock = threading.Lock()

    def __init__(self) -> None:
        self.config: AppConfig | None = None

        # Infrastructure
        self.database_manager: DatabaseManager | None = None
        self.catalog: ReferenceCatalogClient | None = None

        # Persistence
        self.character_repository: CharacterRepository | None = None

        # Domain services
        self.stats_generator: StatsGenerator | None = None
        self.character_service: CharacterService | None = None
        self.sheet_assembler: CharacterSheetAssembler | None = None
        self.wizard_service: WizardService | None = None

        self._initialized: bool = False
        self._initialization_lock = asyncio.Lock()

        logger.info("ApplicationContainer created (not yet initialized)")

    @classmethod
    def get_instance(cls) -> "ApplicationContainer":
        """Get the process-wide container instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def set_instance(cls, instance: "ApplicationContainer") -> None:
        """Register the container created by the lifespan."""
        with cls._lock:
            cls._instance = instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the container singleton. Tests only."""
        with cls._lock:
            cls._instance = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize all services in dependency order.

        INITIALIZATION ORDER:
        1. Configuration
        2. Database (engine, table creation)
        3. Reference catalog client
        4. Repository and domain services
        """
        async with self._initialization_lock:
            if self._initialized:
                logger.warning("Container already initialized - skipping re-initialization")
                return

            logger.info("Initializing ApplicationContainer...")

            from .config import get_config

            self.config = get_config()
            logger.info("Configuration loaded", environment=self.config.logging.environment)

            from .database import DatabaseManager, init_db

            self.database_manager = DatabaseManager.get_instance()
            await init_db()
            logger.info("Database infrastructure initialized")

            from .services.reference_client import ReferenceCatalogClient

            self.catalog = ReferenceCatalogClient(self.config.catalog)

            from .game.stats_generator import StatsGenerator
            from .persistence.repositories import CharacterRepository
            from .services.character_service import CharacterService
            from .services.sheet_assembler import CharacterSheetAssembler
            from .services.wizard_service import WizardService

            self.character_repository = CharacterRepository()
            self.stats_generator = StatsGenerator()
            self.character_service = CharacterService(self.character_repository, self.catalog)
            self.sheet_assembler = CharacterSheetAssembler(self.catalog)
            self.wizard_service = WizardService(self.catalog, self.character_service, self.stats_generator)
            logger.info("Domain services initialized")

            self._initialized = True
            logger.info("ApplicationContainer initialization complete")

    async def shutdown(self) -> None:
        """Release resources in reverse order of initialization."""
        logger.info("Shutting down ApplicationContainer...")

        if self.catalog is not None:
            try:
                await self.catalog.aclose()
            except RuntimeError as e:
                logger.error("Error closing reference catalog client", error=str(e))

        if self.database_manager is not None:
            try:
                await self.database_manager.close()
                logger.debug("Database connections closed")
            except RuntimeError as e:
                logger.error("Error closing database connections", error=str(e))

        self._initialized = False
        logger.info("ApplicationContainer shutdown complete")
