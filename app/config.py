"""
Application Configuration
Load settings from environment variables with validation
"""
import os

class Settings:
    """Application configuration from environment variables"""

    # MongoDB Configuration
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME", "proposalfast")
    MONGODB_TLS: bool = os.getenv("MONGODB_TLS", "False").lower() == "true"

    # OpenAI Configuration
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_LLM_MODEL: str = os.getenv("OPENAI_LLM_MODEL", "gpt-4o")
    OPENAI_EXTRACTION_MODEL: str = os.getenv("OPENAI_EXTRACTION_MODEL", "gpt-4o-mini")

    # Contract Generation Configuration
    CONTRACT_MAX_TOKENS: int = int(os.getenv("CONTRACT_MAX_TOKENS", "2000"))
    CONTRACT_TEMPERATURE: float = float(os.getenv("CONTRACT_TEMPERATURE", "0.7"))

    # AI Memory Configuration
    MEMORY_EXTRACTION_CHAR_LIMIT: int = int(os.getenv("MEMORY_EXTRACTION_CHAR_LIMIT", "2000"))
    MEMORY_EXTRACTION_TEMPERATURE: float = float(os.getenv("MEMORY_EXTRACTION_TEMPERATURE", "0.3"))
    MEMORY_KEY_TERMS_LIMIT: int = int(os.getenv("MEMORY_KEY_TERMS_LIMIT", "3"))

    # Webhook Configuration
    WEBHOOK_TIMEOUT_SECONDS: float = float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "5"))

    # Auth Configuration
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

    # Application Configuration
    APP_NAME: str = "ProposalFast Contract Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "True").lower() == "true"

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Initialize settings
settings = Settings()

def validate_settings() -> bool:
    """
    Validate that all required settings are configured

    OPENAI_API_KEY is optional: without it every contract is rendered
    from the local template and no memory is learned.

    Returns:
        True if all required settings are present

    Raises:
        ValueError: If required settings are missing
    """
    required_keys = {
        "MONGODB_URI": settings.MONGODB_URI,
        "MONGODB_DB_NAME": settings.MONGODB_DB_NAME,
    }

    missing_keys = [key for key, value in required_keys.items() if not value]
    if missing_keys:
        raise ValueError(f"Missing required environment variables: {', '.join(missing_keys)}")

    return True
