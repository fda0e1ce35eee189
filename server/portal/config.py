"""
Portal Service Configuration

Service-level knobs layered on top of core runtime settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class PortalSettings(BaseSettings):
    """Portal service specific configuration"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PORTAL_SERVER_NAME: str = "police-unit-portal"
    PORTAL_SERVER_VERSION: str = "1.0.0"
    PORTAL_MAX_RESULTS: int = 1000
    PORTAL_DEFAULT_PAGE_SIZE: int = 50

    # Vehicle registration numbers start here when the collection is empty
    PORTAL_REGISTRATION_SEED: int = 1202890

    # Operational "now" is taken at this fixed offset (Brasilia, no DST)
    PORTAL_UTC_OFFSET_HOURS: int = -3


portal_settings = PortalSettings()
