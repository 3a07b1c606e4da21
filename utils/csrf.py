"""
Protección contra CSRF con el esquema de doble envío.

El secreto de cada cliente viaja en la cookie ``_csrf`` (HttpOnly). Los
formularios incluyen en el campo oculto ``_csrf`` un token derivado de ese
secreto con una sal aleatoria; al recibir un POST se recalcula el token con
la sal recibida y se compara contra el enviado.
"""

import base64
import hashlib
import logging
import secrets

from fastapi import Request

logger = logging.getLogger(__name__)

CSRF_COOKIE = "_csrf"
CSRF_FIELD = "_csrf"
CSRF_HEADER = "x-csrf-token"


class CSRFError(Exception):
    """El token anti-falsificación falta o no corresponde al secreto."""


def new_secret() -> str:
    return secrets.token_urlsafe(18)


def _digest(salt: str, secret: str) -> str:
    raw = hashlib.sha256(f"{salt}-{secret}".encode("utf-8")).digest()
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def create_token(secret: str) -> str:
    # La sal es hexadecimal, así que el primer guion separa sal y resumen
    salt = secrets.token_hex(4)
    return f"{salt}-{_digest(salt, secret)}"


def verify_token(secret: str, token: str) -> bool:
    if not secret or not isinstance(token, str) or not token:
        return False
    salt, sep, digest = token.partition("-")
    if not sep or not salt or not digest:
        return False
    return secrets.compare_digest(digest.encode("utf-8"), _digest(salt, secret).encode("utf-8"))


def get_csrf_token(request: Request) -> str:
    """
    Token para incrustar en el formulario que se está renderizando.
    """
    return create_token(request.state.csrf_secret)


async def verify_csrf(request: Request):
    """
    Dependencia para las rutas POST: rechaza la petición si el token del
    formulario (o de la cabecera X-CSRF-Token) no corresponde a la cookie.

    Raises:
        CSRFError: Si el token falta o es inválido.
    """
    secret = request.cookies.get(CSRF_COOKIE)
    form = await request.form()
    token = form.get(CSRF_FIELD) or request.headers.get(CSRF_HEADER)
    if not verify_token(secret, token):
        logger.warning(f"Token CSRF inválido en {request.method} {request.url.path}")
        raise CSRFError()
