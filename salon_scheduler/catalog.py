"""Shop catalog: professionals with their schedules, and services.

Handles:
- Building the catalog from config.py defaults
- Lookups by id (NotFound on unknown ids)
- Saving / loading catalogs as JSON files
"""
import json
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
from salon_scheduler import config
from salon_scheduler.errors import ConfigurationError, NotFound
from salon_scheduler.models import Service, ServiceQuote, StaffAccount


class ShopCatalog(BaseModel):
    """Static reference data of one shop."""
    name: str = Field(default="default", min_length=1, max_length=200)
    professionals: List[StaffAccount] = Field(..., min_length=1)
    services: List[Service] = Field(..., min_length=1)

    @field_validator("professionals", "services")
    @classmethod
    def check_unique_ids(cls, v):
        ids = [item.id for item in v]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate ids: {', '.join(duplicates)}")
        return v

    @classmethod
    def from_config(cls) -> "ShopCatalog":
        """Catalog from the defaults in config.py."""
        return load_catalog_data({
            "name": config.CATALOG_NAME,
            "professionals": config.PROFESSIONALS,
            "services": config.SERVICES,
        })

    def professionals_by_id(self) -> Dict[str, StaffAccount]:
        return {p.id: p for p in self.professionals}

    def services_by_id(self) -> Dict[str, Service]:
        return {s.id: s for s in self.services}

    def get_professional(self, professional_id: str) -> StaffAccount:
        professional = self.professionals_by_id().get(professional_id)
        if professional is None:
            raise NotFound("Professional", professional_id)
        return professional

    def get_service(self, service_id: str) -> Service:
        service = self.services_by_id().get(service_id)
        if service is None:
            raise NotFound("Service", service_id)
        return service

    def quote(self, service_ids: List[str]) -> ServiceQuote:
        """
        Total price and duration of a selection of services.

        Raises:
            NotFound: On the first unknown service id
        """
        services = [self.get_service(service_id) for service_id in service_ids]
        return ServiceQuote(
            services=services,
            total_price=sum(s.price for s in services),
            total_duration_minutes=sum(s.duration_minutes for s in services),
        )

    def price_of(self, service_ids: List[str]) -> float:
        """Sum of known service prices; unknown ids count as zero."""
        services = self.services_by_id()
        return sum(services[i].price for i in service_ids if i in services)


def load_catalog_data(data: dict) -> ShopCatalog:
    """
    Validate raw catalog data.

    Raises:
        ConfigurationError: If any professional schedule or service is malformed
    """
    try:
        return ShopCatalog(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid catalog: {e}") from e


class CatalogStore:
    """Manages shop catalog files."""

    def __init__(self, catalog_dir: Optional[str] = None):
        """
        Initialize catalog store.

        Args:
            catalog_dir: Directory for catalog files.
                         Defaults to 'data/catalogs' in project root.
        """
        if catalog_dir is None:
            project_root = Path(__file__).parent.parent
            catalog_dir = project_root / "data" / "catalogs"

        self.catalog_dir = Path(catalog_dir)
        self.catalog_dir.mkdir(parents=True, exist_ok=True)

    def _get_catalog_path(self, name: str) -> Path:
        # Sanitize name to prevent path traversal
        safe_name = name.replace("/", "_").replace("\\", "_")
        return self.catalog_dir / f"{safe_name}.json"

    def save_catalog(self, catalog: ShopCatalog) -> None:
        path = self._get_catalog_path(catalog.name)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(
                catalog.model_dump(mode='json'),
                f,
                indent=2,
                ensure_ascii=False
            )

    def load_catalog(self, name: str) -> ShopCatalog:
        """
        Load a catalog from file.

        Raises:
            FileNotFoundError: If the catalog file doesn't exist
            ConfigurationError: If the file is not valid JSON or fails validation
        """
        path = self._get_catalog_path(name)

        if not path.exists():
            raise FileNotFoundError(f"Catalog not found: {name}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Catalog {name} is not valid JSON: {e}") from e

        return load_catalog_data(data)

    def catalog_exists(self, name: str) -> bool:
        return self._get_catalog_path(name).exists()

    def list_catalogs(self) -> List[str]:
        return sorted(path.stem for path in self.catalog_dir.glob("*.json"))
