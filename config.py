import os
from dotenv import load_dotenv
load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///registration.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    # JSON API: forms are posted as JSON bodies without a CSRF token
    WTF_CSRF_ENABLED = False
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "registration@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Registration")
    EMAIL_LOGO_URL = os.getenv("EMAIL_LOGO_URL", "")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY") or os.getenv("GPT_API_KEY")
    OPENAI_API_BASE = os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    AI_MAX_ATTEMPTS = int(os.getenv("AI_MAX_ATTEMPTS", "3"))
    AI_RETRY_DELAY_SEC = float(os.getenv("AI_RETRY_DELAY_SEC", "1.0"))
    WHATSAPP_API = os.getenv("WHATSAPP_API")
    WHATSAPP_API_TOKEN = os.getenv("WHATSAPP_API_TOKEN")
    WHATSAPP_SENDER_ID = os.getenv("WHATSAPP_SENDER_ID")
    SITE_URL = os.getenv("SITE_URL", "http://localhost:5000")
    OTP_STORE = os.getenv("OTP_STORE", "redis")  # redis/memory
    OTP_TTL_SEC = int(os.getenv("OTP_TTL_SEC", "600"))
    STAGE_BATCH_SIZE = int(os.getenv("STAGE_BATCH_SIZE", "50"))
    STAGE_BATCH_DELAY_SEC = float(os.getenv("STAGE_BATCH_DELAY_SEC", "2"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
