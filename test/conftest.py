import re
import sys
import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Agrega la ruta raíz del proyecto al sys.path
sys.path.append(os.path.dirname(os.path.abspath(__file__)) + '/../')

from main import app
from dataBase import Database, get_db_session
from models.models import Usuario
from utils.email import get_email_service
from utils.security import hash_password
from utils.tokens import SessionTokenIssuer, get_token_issuer

CSRF_INPUT = re.compile(r'name="_csrf" value="([^"]+)"')


class FakeEmailService:
    """Registra los correos en memoria en lugar de enviarlos."""

    def __init__(self):
        self.registros = []
        self.restablecimientos = []

    def send_registration_email(self, nombre, email, token):
        self.registros.append({"nombre": nombre, "email": email, "token": token})

    def send_password_reset_email(self, nombre, email, token):
        self.restablecimientos.append({"nombre": nombre, "email": email, "token": token})


def extract_csrf(html: str) -> str:
    match = CSRF_INPUT.search(html)
    assert match, "El formulario no incluye el token CSRF"
    return match.group(1)


@pytest.fixture(scope="function")
def database():
    """Base de datos SQLite en memoria, nueva para cada prueba."""
    db = Database("sqlite://")
    db.connect()
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture(scope="function")
def email_outbox():
    return FakeEmailService()


@pytest.fixture(scope="function")
def token_issuer():
    return SessionTokenIssuer("clave-secreta-de-pruebas")


@pytest.fixture(scope="function")
def app_with_overrides(database, email_outbox, token_issuer):
    # Función para sobrescribir la dependencia get_db_session
    def override_get_db_session():
        session = database.session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_email_service] = lambda: email_outbox
    app.dependency_overrides[get_token_issuer] = lambda: token_issuer
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app_with_overrides):
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def find_user(database):
    """Consulta un usuario en una sesión nueva para ver el estado ya guardado."""
    def _find(email):
        session = database.session()
        try:
            return session.query(Usuario).filter(Usuario.email == email).first()
        finally:
            session.close()
    return _find


@pytest.fixture
def create_user_in_db(database):
    def _create(nombre="Ana", email="ana@example.com", password="secreto123", confirmado=True, token=None):
        session = database.session()
        try:
            usuario = Usuario(
                nombre=nombre,
                email=email,
                password=hash_password(password),
                confirmado=confirmado,
                token=token,
            )
            session.add(usuario)
            session.commit()
            session.refresh(usuario)
            return usuario
        finally:
            session.close()
    return _create


async def get_csrf(client, url):
    response = await client.get(url)
    assert response.status_code == 200
    return extract_csrf(response.text)
