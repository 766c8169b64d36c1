import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root, regardless of where the app is started from
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    UPLOAD_URL = os.getenv("UPLOAD_URL", "https://example.com/upload")
    UPLOAD_TIMEOUT_SECONDS = float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "30"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
