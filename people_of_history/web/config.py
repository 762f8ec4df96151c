"""Web app configuration for People of History."""

from people_of_history.config import settings


class Config:
    """Base configuration."""

    # App settings
    DEBUG = True
    TESTING = False

    # CORS settings
    CORS_ORIGINS = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
    ]

    # Knowledge base settings
    KNOWLEDGE_BASE_CLIENT = None  # None means a WikidataClient per app
    SEARCH_LIMIT = settings.search_limit
    DEFAULT_TREE_DEPTH = 1
    MAX_TREE_DEPTH = settings.max_depth


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""

    DEBUG = False
    TESTING = True


# Config factory
def get_config(env: str = "development") -> Config:
    """Get configuration based on environment.

    Args:
        env: Environment name (development, production, testing)

    Returns:
        Configuration object
    """
    configs = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }
    return configs.get(env, DevelopmentConfig)()
