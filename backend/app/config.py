# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "CodeMate API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:5000",
        # production frontend
        "https://codemate.diy",
        "http://codemate.diy",
    ]

    # Transactional email (HTTP API). Unset URL disables notifications.
    email_api_url: str | None = os.getenv("EMAIL_API_URL")
    email_api_key: str | None = os.getenv("EMAIL_API_KEY")
    email_from: str = os.getenv("EMAIL_FROM", "no-reply@codemate.diy")

    # Razorpay (membership payments)
    razorpay_key_id: str | None = os.getenv("RAZORPAY_KEY_ID")
    razorpay_key_secret: str | None = os.getenv("RAZORPAY_KEY_SECRET")
    razorpay_api_base: str = os.getenv("RAZORPAY_API_BASE", "https://api.razorpay.com/v1")

    # Discovery feed / chat limits
    feed_max_limit: int = int(os.getenv("FEED_MAX_LIMIT", "50"))
    chat_message_max_length: int = int(os.getenv("CHAT_MESSAGE_MAX_LENGTH", "2000"))

settings = Settings()  # Instantiate configuration
