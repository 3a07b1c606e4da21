from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
import logging

from config import load_settings
from dataBase import Database
from endpoints import auth, propiedades
from utils.csrf import CSRF_COOKIE, CSRFError, new_secret
from utils.email import EmailService
from utils.response import render_page
from utils.tokens import SessionTokenIssuer

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(title="Bienes Raíces")


# Incluir las rutas de autenticación con prefijo y etiqueta
app.include_router(auth.router, prefix="/auth", tags=["Autenticación"])

# Incluir el área privada
app.include_router(propiedades.router, tags=["Propiedades"])


@app.middleware("http")
async def csrf_cookie_middleware(request: Request, call_next):
    """
    Asegura que cada cliente tenga un secreto CSRF en la cookie `_csrf`.
    """
    secret = request.cookies.get(CSRF_COOKIE)
    is_new = not secret
    if is_new:
        secret = new_secret()
    request.state.csrf_secret = secret

    response = await call_next(request)
    if is_new:
        response.set_cookie(CSRF_COOKIE, secret, httponly=True, samesite="lax")
    return response


@app.exception_handler(CSRFError)
async def csrf_error_handler(request: Request, exc: CSRFError):
    return render_page(
        request,
        "error.html",
        "Petición rechazada",
        status_code=403,
        mensaje="El formulario expiró o no es válido, recarga la página e intenta de nuevo",
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Error de base de datos en {request.method} {request.url.path}: {exc}", exc_info=exc)
    return render_page(
        request,
        "error.html",
        "Error",
        status_code=500,
        mensaje="Hubo un error al procesar tu solicitud, intenta de nuevo más tarde",
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"Error inesperado en {request.method} {request.url.path}: {exc}", exc_info=exc)
    return render_page(
        request,
        "error.html",
        "Error",
        status_code=500,
        mensaje="Hubo un error al procesar tu solicitud, intenta de nuevo más tarde",
    )


@app.get("/")
def read_root():
    """
    Ruta raíz: lleva al formulario de inicio de sesión.
    """
    return RedirectResponse(url="/auth/login", status_code=302)


# Cargar configuración y recursos al iniciar; si falta una variable
# obligatoria la excepción detiene el arranque.
@app.on_event("startup")
def startup_event():
    settings = load_settings()
    app.state.settings = settings

    database = Database(settings.database_url)
    database.connect()
    app.state.database = database

    app.state.token_issuer = SessionTokenIssuer(settings.jwt_secret, settings.jwt_expire_minutes)
    app.state.email_service = EmailService.from_settings(settings)
    logger.info("Aplicación iniciada")


@app.on_event("shutdown")
def shutdown_event():
    database = getattr(app.state, "database", None)
    if database is not None:
        database.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=load_settings().port)
