import pytest

from conftest import extract_csrf


@pytest.mark.asyncio
async def test_private_page_requires_session(client):
    response = await client.get("/mis-propiedades")

    assert response.status_code == 302
    assert response.headers["location"] == "/auth/login"


@pytest.mark.asyncio
async def test_private_page_rejects_invalid_cookie(client):
    client.cookies.set("_token", "no-es-un-jwt")

    response = await client.get("/mis-propiedades")

    assert response.status_code == 302


@pytest.mark.asyncio
async def test_private_page_greets_user(client, token_issuer):
    client.cookies.set("_token", token_issuer.issue({"id": 1, "nombre": "Ana"}))

    response = await client.get("/mis-propiedades")

    assert response.status_code == 200
    assert "Hola Ana" in response.text


@pytest.mark.asyncio
async def test_logout_clears_session_cookie(client, token_issuer):
    client.cookies.set("_token", token_issuer.issue({"id": 1, "nombre": "Ana"}))
    page = await client.get("/mis-propiedades")

    response = await client.post("/auth/cerrar-sesion", data={"_csrf": extract_csrf(page.text)})

    assert response.status_code == 302
    assert response.headers["location"] == "/auth/login"
    assert any(h.startswith('_token=""') for h in response.headers.get_list("set-cookie"))


@pytest.mark.asyncio
async def test_root_redirects_to_login(client):
    response = await client.get("/")

    assert response.status_code == 302
    assert response.headers["location"] == "/auth/login"
