"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class DataConfig(BaseSettings):
    """Where the GeoJSON layers are fetched from."""

    model_config = {"env_prefix": "FLOODRISK_DATA_"}

    base_url: str | None = None
    data_dir: str = "data"
    zone_files: dict[str, str] = Field(
        default_factory=lambda: {
            "VE": "VE.geojson",
            "AE": "AE.geojson",
            "AO": "AO.geojson",
            "A": "A.geojson",
            "X": "X.geojson",
        }
    )
    facilities_file: str = "shelter.geojson"
    parcels_file: str = "parcel_value.geojson"
    timeout_seconds: int = 30


class FacilityConfig(BaseSettings):
    """Shelter layer attributes and the region override rule."""

    model_config = {"env_prefix": "FLOODRISK_FACILITY_"}

    name_attribute: str = "Name"
    default_name: str = "Shelter"
    restricted_name: str = "Water Island Station"
    region_token: str = "WATER ISLAND"
    legal_attribute: str = "Tax_Legal_"


class ParcelConfig(BaseSettings):
    """Parcel value statistics configuration."""

    model_config = {"env_prefix": "FLOODRISK_PARCEL_"}

    class_count: int = 5
    breaks_min_value: float = 0.1
    breaks_max_value: float = 5000.0


class ValuationConfig(BaseSettings):
    """Premium estimation configuration."""

    model_config = {"env_prefix": "FLOODRISK_VALUATION_"}

    profiles_path: str | None = None


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "FLOODRISK_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    load_on_startup: bool = True

    data: DataConfig = Field(default_factory=DataConfig)
    facility: FacilityConfig = Field(default_factory=FacilityConfig)
    parcel: ParcelConfig = Field(default_factory=ParcelConfig)
    valuation: ValuationConfig = Field(default_factory=ValuationConfig)
