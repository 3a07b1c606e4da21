import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from models.models import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Punto de acceso a la base de datos: motor, fábrica de sesiones y ciclo
    de vida. Se crea al iniciar la aplicación y se cierra al detenerla.
    """

    def __init__(self, url: str):
        self.url = url
        if url.startswith("sqlite"):
            # Una sola conexión compartida, útil para pruebas en memoria
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                url,
                pool_size=5,
                max_overflow=0,
                pool_timeout=30,  # segundos de espera por una conexión libre
                pool_recycle=300,
                pool_pre_ping=True,
            )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def connect(self):
        """
        Verifica la conexión y crea las tablas que falten.
        """
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=self.engine)
        logger.info("Conexión correcta a la base de datos")

    def dispose(self):
        self.engine.dispose()
        logger.info("Conexiones a la base de datos cerradas")

    def session(self) -> Session:
        return self.SessionLocal()


def get_db_session(request: Request):
    """
    Proporciona una sesión de base de datos por petición. Revierte la
    transacción si ocurre un error de base de datos y asegura que la sesión
    se cierre al terminar.

    Yields:
        Session: Una sesión de base de datos.
    """
    db = request.app.state.database.session()
    try:
        yield db
    except SQLAlchemyError:
        db.rollback()
        raise
    finally:
        db.close()
