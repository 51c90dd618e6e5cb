# saconnect/config.py
import os

from dotenv import load_dotenv

# Завантаження змінних середовища
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+psycopg2://postgres:12345@db:5432/postgres")

# Адреси облікових записів модераторів, через кому
ADMIN_EMAILS = frozenset(
    email.strip() for email in os.getenv("ADMIN_EMAILS", "").split(",") if email.strip()
)

# Вартість bcrypt не нижче 10
BCRYPT_ROUNDS = max(int(os.getenv("BCRYPT_ROUNDS", "10")), 10)

RESET_TOKEN_EXPIRE_MINUTES = 15
# Повертати код скидання пароля у відповіді (лише для розробки)
RESET_TOKEN_IN_RESPONSE = os.getenv("RESET_TOKEN_IN_RESPONSE", "false").lower() == "true"

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
