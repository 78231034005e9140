from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "gridquery"

    DATABASE_URL: str = "sqlite+pysqlite:///:memory:"
    CORS_ORIGINS: str = "http://localhost:3000"

    # False: a per-column search term applies even when the column is not globally searchable.
    DATAGRID_COLUMN_SEARCH_REQUIRES_SEARCHABLE: bool = False

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
