import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # Shop data API (the collaborator)
    data_api_url: str = os.getenv("DATA_API_URL", "http://localhost:3333")
    data_api_timeout: float = float(os.getenv("DATA_API_TIMEOUT", "30"))

    # Inventory screen
    autofill_feedback_seconds: float = float(os.getenv("AUTOFILL_FEEDBACK_SECONDS", "3"))
    low_stock_threshold: int = int(os.getenv("LOW_STOCK_THRESHOLD", "5"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_origins: list[str] = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
    ]


settings = Settings()
