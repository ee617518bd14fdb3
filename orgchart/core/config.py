import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Personnel roster lives in its own workbook; task/team structure and
    # vacancies share the org workbook.
    TEAM_LIST_WORKBOOK: str = ""
    ORG_WORKBOOK: str = ""
    TEAM_LIST_SHEET: str = "Team List"
    TEAM_MAPPINGS_SHEET: str = "Team Mappings"
    VACANT_POSITIONS_SHEET: str = "Vacant Positions"

    ORG_CACHE_TTL_SECONDS: int = 300
    TEAM_LIST_RAW_CACHE_TTL_SECONDS: int = 600
    TEAMS_CACHE_TTL_SECONDS: int = 300

    CPC_LEVEL_MAP: dict[str, str] = {
        "1": "director",
        "2": "deputy",
        "3": "lead",
        "4": "person",
    }
    DEFAULT_CONTRACT: str = "SQuAT"

    PERMISSION_ROLES: dict[str, list[str]] = {
        "org.edit": ["admin", "org-editor"],
        "org.admin": ["admin"],
    }

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    AZURE_AD_TENANT_ID: str = ""
    AZURE_AD_CLIENT_ID: str = ""

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
