"""FastAPI dependency injection functions."""
from functools import lru_cache
from salon_scheduler import config
from salon_scheduler.booking_service import BookingService
from salon_scheduler.catalog import CatalogStore, ShopCatalog
from salon_scheduler.errors import ConfigurationError
from salon_scheduler.sql_repository import SqlAppointmentRepository


def load_catalog() -> ShopCatalog:
    """
    Catalog file from CATALOG_DIR when set, config.py defaults otherwise.

    Raises:
        ConfigurationError: If CATALOG_NAME is not among the stored catalogs
    """
    if not config.CATALOG_DIR:
        return ShopCatalog.from_config()

    store = CatalogStore(config.CATALOG_DIR)
    if not store.catalog_exists(config.CATALOG_NAME):
        available = ", ".join(store.list_catalogs()) or "none"
        raise ConfigurationError(
            f"Catalog '{config.CATALOG_NAME}' not found in {config.CATALOG_DIR} "
            f"(available: {available})"
        )
    return store.load_catalog(config.CATALOG_NAME)


@lru_cache(maxsize=1)
def get_booking_service() -> BookingService:
    """
    Get booking service (cached singleton).

    Pattern: Build catalog and repository once, reuse across requests.
    A malformed catalog fails here with ConfigurationError.
    """
    return BookingService(
        catalog=load_catalog(),
        repository=SqlAppointmentRepository(database_url=config.DATABASE_URL)
    )
