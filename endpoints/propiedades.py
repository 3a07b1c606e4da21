from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
import logging

from utils.response import render_page, SESSION_COOKIE
from utils.tokens import SessionTokenIssuer, get_token_issuer

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/mis-propiedades")
def mis_propiedades(request: Request, token_issuer: SessionTokenIssuer = Depends(get_token_issuer)):
    """
    Página principal del área privada. Requiere la cookie `_token` emitida
    al iniciar sesión; sin ella (o si expiró) redirige al login.
    """
    payload = token_issuer.decode(request.cookies.get(SESSION_COOKIE))
    if not payload or "id" not in payload:
        return RedirectResponse(url="/auth/login", status_code=302)

    return render_page(
        request,
        "propiedades/admin.html",
        "Mis Propiedades",
        csrf=True,
        usuario={"id": payload["id"], "nombre": payload.get("nombre")},
    )
