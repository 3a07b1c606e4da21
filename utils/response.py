from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from utils.csrf import get_csrf_token

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

SESSION_COOKIE = "_token"


def render_page(
    request: Request,
    template: str,
    pagina: str,
    status_code: int = 200,
    csrf: bool = False,
    **data: Any
):
    """
    Renderiza una plantilla HTML con un contexto nuevo para esta petición.

    Args:
        request (Request): La petición en curso.
        template (str): Ruta de la plantilla dentro de templates/.
        pagina (str): Título de la página.
        status_code (int, optional): Código HTTP de la respuesta. Por defecto 200.
        csrf (bool, optional): Incluir un token CSRF para los formularios de la página.
        **data: Datos adicionales para la plantilla (errores, usuario, mensaje...).

    Returns:
        TemplateResponse: La página renderizada.
    """
    context = {"pagina": pagina, **data}
    if csrf:
        context["csrfToken"] = get_csrf_token(request)
    return templates.TemplateResponse(request, template, context, status_code=status_code)


def render_message(request: Request, pagina: str, mensaje: str):
    return render_page(request, "templates/mensaje.html", pagina, mensaje=mensaje)


def render_error_page(request: Request, pagina: str, mensaje: str, status_code: int = 200):
    return render_page(
        request,
        "auth/confirmar-cuenta.html",
        pagina,
        status_code=status_code,
        mensaje=mensaje,
        error=True,
    )


def login_redirect(token: str, url: str = "/mis-propiedades") -> RedirectResponse:
    """
    Redirige al área privada guardando el token de sesión en una cookie HttpOnly.
    """
    response = RedirectResponse(url=url, status_code=302)
    response.set_cookie(SESSION_COOKIE, token, httponly=True, samesite="lax")
    return response


def logout_redirect(url: str = "/auth/login") -> RedirectResponse:
    response = RedirectResponse(url=url, status_code=302)
    response.delete_cookie(SESSION_COOKIE)
    return response
