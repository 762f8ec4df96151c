"""Configuration management for People of History.

Loads settings from environment variables and provides validated configuration.
"""

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env file if it exists
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Knowledge base endpoints
    wikidata_api_url: str = "https://www.wikidata.org/w/api.php"
    wikipedia_base_url: str = "https://en.wikipedia.org/wiki/"
    commons_filepath_url: str = "https://commons.wikimedia.org/wiki/Special:FilePath/"
    user_agent: str = "PeopleOfHistory/0.1 (family tree browser; https://www.wikidata.org)"
    request_timeout: float = 30.0

    # Search and tree limits
    language: str = "en"
    search_limit: int = 12
    search_settle_delay: float = 0.25
    max_depth: int = 3
    avatar_size: int = 48

    # Wikidata properties
    property_instance_of: str = "P31"
    property_birth: str = "P569"
    property_death: str = "P570"
    property_image: str = "P18"
    property_father: str = "P22"
    property_mother: str = "P25"
    property_child: str = "P40"
    class_human: str = "Q5"

    class Config:
        """Pydantic configuration."""

        env_prefix = "HISTORY_TREE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
