from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # API Settings
    API_TITLE: str = "Mindmap Generator"
    API_DESCRIPTION: str = "Generate mind maps from a topic with Gemini"
    ENVIRONMENT: str = "development"

    # Model in "provider/model" form, resolved by langchain's init_chat_model
    GEMINI_MODEL: str = "google-genai/gemini-2.5-flash"
    GOOGLE_API_KEY: str = ""
    LLM_TEMPERATURE: float = 0.5

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="allow"
    )

    # Env settings for logging customization
    ENV_MODE: str = "LOCAL"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: str = ""

    # Canvas defaults
    CANVAS_WIDTH: int = 800
    CANVAS_HEIGHT: int = 600
    MARGIN_TOP: int = 20
    MARGIN_RIGHT: int = 120
    MARGIN_BOTTOM: int = 20
    MARGIN_LEFT: int = 120
    NODE_RADIUS: float = 7

    # Structural limits for generated trees
    MAX_TREE_DEPTH: int = 6
    MAX_CHILDREN_PER_NODE: int = 12
    MAX_TREE_NODES: int = 300
    MAX_NODE_NAME_LENGTH: int = 200


settings = Settings()
