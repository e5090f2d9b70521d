from pydantic import BaseModel
import os

class Settings(BaseModel):
    DATABASE_URL: str = os.getenv('DATABASE_URL', 'sqlite:///./data/ecom.db')
    DB_BUSY_TIMEOUT: float = float(os.getenv('DB_BUSY_TIMEOUT', '5.0'))
    AUTO_CREATE_SCHEMA: bool = os.getenv('AUTO_CREATE_SCHEMA', 'true').lower() == 'true'

    # Reservation retry bound
    ORDER_MAX_ATTEMPTS: int = int(os.getenv('ORDER_MAX_ATTEMPTS', '3'))

    # Logging
    ENVIRONMENT: str = os.getenv('ENVIRONMENT', 'development')
    LOG_LEVEL: str | None = os.getenv('LOG_LEVEL')

settings = Settings()
