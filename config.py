import os
import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Variables sin las cuales la aplicación no puede arrancar
REQUIRED_VARS = ("BD_HOST", "BD_NOMBRE", "BD_USER", "JWT_SECRET")


class Settings(BaseModel):
    """
    Configuración del proceso, leída una sola vez al iniciar la aplicación.
    """
    db_host: str
    db_name: str
    db_user: str
    db_password: str = ""
    db_port: int = 5432
    database_url_override: Optional[str] = None

    jwt_secret: str
    jwt_expire_minutes: int = 60 * 24

    port: int = 3000
    backend_url: str = "http://localhost:3000"

    email_host: Optional[str] = None
    email_port: int = 465
    email_user: Optional[str] = None
    email_pass: Optional[str] = None

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


def load_settings() -> Settings:
    """
    Carga las variables de entorno (incluyendo el archivo .env) y construye
    la configuración.

    Raises:
        EnvironmentError: Si falta alguna variable obligatoria.
    """
    load_dotenv()

    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        logger.critical(f"Faltan variables de entorno obligatorias: {', '.join(missing)}")
        raise EnvironmentError(f"Faltan variables de entorno obligatorias: {', '.join(missing)}")

    values = {
        "db_host": os.getenv("BD_HOST"),
        "db_name": os.getenv("BD_NOMBRE"),
        "db_user": os.getenv("BD_USER"),
        "db_password": os.getenv("BD_PASS", ""),
        "db_port": os.getenv("BD_PORT", 5432),
        "database_url_override": os.getenv("DATABASE_URL") or None,
        "jwt_secret": os.getenv("JWT_SECRET"),
        "jwt_expire_minutes": os.getenv("JWT_EXPIRE_MINUTES", 60 * 24),
        "port": os.getenv("PORT", 3000),
        "backend_url": os.getenv("BACKEND_URL", "http://localhost:3000"),
        "email_host": os.getenv("EMAIL_HOST") or None,
        "email_port": os.getenv("EMAIL_PORT", 465),
        "email_user": os.getenv("EMAIL_USER") or None,
        "email_pass": os.getenv("EMAIL_PASS") or None,
    }
    return Settings(**values)
