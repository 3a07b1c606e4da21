import pytest
from sqlalchemy.exc import OperationalError

import config
import main
from conftest import get_csrf


@pytest.mark.asyncio
async def test_database_error_renders_generic_page(client, monkeypatch):
    def database_down(db, email):
        raise OperationalError("SELECT * FROM usuarios", {}, Exception("conexión rechazada"))

    monkeypatch.setattr("endpoints.auth.find_user_by_email", database_down)

    csrf = await get_csrf(client, "/auth/olvide-password")
    response = await client.post("/auth/olvide-password", data={"_csrf": csrf, "email": "ana@example.com"})

    assert response.status_code == 500
    assert "Hubo un error al procesar tu solicitud" in response.text
    assert "conexión rechazada" not in response.text
    assert "SELECT" not in response.text


def test_startup_fails_without_required_configuration(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in config.REQUIRED_VARS:
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(EnvironmentError):
        main.startup_event()


def test_startup_and_shutdown_build_resources(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    monkeypatch.setenv("BD_HOST", "localhost")
    monkeypatch.setenv("BD_NOMBRE", "bienesraices")
    monkeypatch.setenv("BD_USER", "root")
    monkeypatch.setenv("JWT_SECRET", "secreto")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.delenv("BACKEND_URL", raising=False)

    main.startup_event()
    try:
        assert main.app.state.database.url == "sqlite://"
        assert main.app.state.token_issuer.decode(main.app.state.token_issuer.issue({"id": 1})) is not None
        assert main.app.state.email_service.backend_url == "http://localhost:3000"
    finally:
        main.shutdown_event()
