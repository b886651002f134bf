# anandayojan/config.py
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    database_username: Optional[str] = None
    database_password: Optional[str] = None
    database_hostname: Optional[str] = None
    database_port: str = "5432"
    database_name: Optional[str] = None

    # Auth
    secret_key: str = "dev-secret-change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    admin_emails: List[str] = []

    # External APIs
    razorpay_key_id: Optional[str] = None
    razorpay_key_secret: Optional[str] = None
    razorpay_webhook_secret: Optional[str] = None
    sendgrid_api_key: Optional[str] = None
    sendgrid_from_email: str = "noreply@anandayojan.com"
    google_client_id: Optional[str] = None

    # Swap every external service and store for a local fake
    use_mock: bool = False

    # Bookings
    booking_timezone: str = "Asia/Kolkata"

    # Frontend / CORS
    frontend_base_url: str = "http://localhost:5173"
    allowed_origins: List[str] = ["http://localhost:5173"]

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
