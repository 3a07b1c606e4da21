from fastapi import APIRouter, Depends, Form, Request
from sqlalchemy.orm import Session
import logging

from dataBase import get_db_session
from utils.csrf import verify_csrf
from utils.email import EmailService, get_email_service
from utils.response import render_page, render_message, render_error_page, login_redirect, logout_redirect
from utils.security import hash_password, verify_password, generate_verification_token
from utils.tokens import SessionTokenIssuer, get_token_issuer
from utils.usuarios import (
    UsuarioDuplicadoError,
    find_user_by_email,
    find_user_by_token,
    create_user,
    save_user,
    consume_token,
)
from utils.validation import validate_login, validate_registro, validate_email_form, validate_new_password

logger = logging.getLogger(__name__)

router = APIRouter()

PAGINA_LOGIN = "Iniciar Sesión"
PAGINA_REGISTRO = "Crear Cuenta"
PAGINA_OLVIDE = "Recupera tu acceso a Bienes Raíces"
PAGINA_RESET = "Reestablece tu password"


def _login_form(request: Request, errores=None, email=""):
    return render_page(
        request,
        "auth/login.html",
        PAGINA_LOGIN,
        csrf=True,
        errores=errores or [],
        usuario={"email": email},
    )


def _registro_form(request: Request, errores=None, nombre="", email=""):
    return render_page(
        request,
        "auth/registro.html",
        PAGINA_REGISTRO,
        csrf=True,
        errores=errores or [],
        usuario={"nombre": nombre, "email": email},
    )


def _olvide_form(request: Request, errores=None):
    return render_page(request, "auth/olvide-password.html", PAGINA_OLVIDE, csrf=True, errores=errores or [])


def _reset_form(request: Request, errores=None):
    return render_page(request, "auth/reset-password.html", PAGINA_RESET, csrf=True, errores=errores or [])


def _invalid_reset_token(request: Request):
    return render_error_page(request, PAGINA_RESET, "Hubo un error al validar tu información, intenta de nuevo")


@router.get("/login")
def formulario_login(request: Request):
    """
    Muestra el formulario de inicio de sesión.
    """
    return _login_form(request)


@router.post("/login", dependencies=[Depends(verify_csrf)])
def autenticar(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db_session),
    token_issuer: SessionTokenIssuer = Depends(get_token_issuer),
):
    """
    Inicio de Sesión

    Autentica al usuario con email y password. Solo se muestra un error a la
    vez, en este orden: datos inválidos, usuario inexistente, cuenta sin
    confirmar, password incorrecto.

    - **email** (form): Correo electrónico del usuario.
    - **password** (form): Contraseña del usuario.

    Si todo es correcto guarda el JWT en la cookie `_token` y redirige a
    `/mis-propiedades`.
    """
    errores = validate_login(email, password)
    if errores:
        return _login_form(request, errores, email)

    usuario = find_user_by_email(db, email)
    if not usuario:
        logger.warning("Inicio de sesión con un email no registrado: %s", email)
        return _login_form(request, [{"msg": "No existe este usuario"}], email)

    if not usuario.confirmado:
        logger.info("Inicio de sesión rechazado, cuenta sin confirmar: %s", email)
        return _login_form(request, [{"msg": "Tu cuenta no ha sido confirmada"}], email)

    if not verify_password(password, usuario.password):
        logger.warning("Password incorrecto para el usuario: %s", email)
        return _login_form(request, [{"msg": "El password es incorrecto"}], email)

    token = token_issuer.issue({"id": usuario.id, "nombre": usuario.nombre})
    logger.info("Inicio de sesión exitoso para el usuario con ID %s", usuario.id)
    return login_redirect(token)


@router.post("/cerrar-sesion", dependencies=[Depends(verify_csrf)])
def cerrar_sesion():
    """
    Cierra la sesión borrando la cookie `_token`.
    """
    return logout_redirect()


@router.get("/registro")
def formulario_registro(request: Request):
    return _registro_form(request)


@router.post("/registro", dependencies=[Depends(verify_csrf)])
def registrar(
    request: Request,
    nombre: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    repetir_password: str = Form(""),
    db: Session = Depends(get_db_session),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Registra un nuevo usuario.

    - **nombre**: El nombre del usuario.
    - **email**: El correo electrónico del usuario.
    - **password**: La contraseña (mínimo 6 caracteres).
    - **repetir_password**: Confirmación de la contraseña.

    Todos los errores de validación se muestran juntos; el nombre y el email
    se conservan en el formulario, las contraseñas no.
    """
    errores = validate_registro(nombre, email, password, repetir_password)
    if errores:
        return _registro_form(request, errores, nombre, email)

    ya_registrado = [{"msg": "El usuario ya esta registrado"}]
    if find_user_by_email(db, email):
        logger.warning("Registro fallido, el email ya existe: %s", email)
        return _registro_form(request, ya_registrado, nombre, email)

    try:
        usuario = create_user(
            db,
            nombre=nombre.strip(),
            email=email,
            password_hash=hash_password(password),
            token=generate_verification_token(),
        )
    except UsuarioDuplicadoError:
        logger.warning("Registro concurrente con el mismo email: %s", email)
        return _registro_form(request, ya_registrado, nombre, email)

    logger.info("Usuario creado con ID %s", usuario.id)

    email_service.send_registration_email(nombre=usuario.nombre, email=usuario.email, token=usuario.token)

    return render_message(request, "Cuenta creada correctamente", "Hemos enviado un mail de confirmación, presiona en el enlace")


@router.get("/confirmar/{token}")
def confirmar(request: Request, token: str, db: Session = Depends(get_db_session)):
    """
    Confirma la cuenta asociada al token enviado por correo. El token es de
    un solo uso: una segunda visita al mismo enlace muestra el error.
    """
    error = "Hubo un error al validar tu cuenta, intenta de nuevo"

    usuario = find_user_by_token(db, token)
    if not usuario:
        logger.warning("Token de confirmación inválido")
        return render_error_page(request, "Error al confirmar tu cuenta", error)

    if not consume_token(db, usuario, token, confirmado=True):
        logger.warning("El token de confirmación del usuario %s ya fue utilizado", usuario.id)
        return render_error_page(request, "Error al confirmar tu cuenta", error)

    logger.info("Cuenta confirmada para el usuario con ID %s", usuario.id)
    return render_page(
        request,
        "auth/confirmar-cuenta.html",
        "Cuenta confirmada",
        mensaje="La cuenta se confirmó correctamente",
    )


@router.get("/olvide-password")
def formulario_olvide_password(request: Request):
    return _olvide_form(request)


@router.post("/olvide-password", dependencies=[Depends(verify_csrf)])
def reset_password(
    request: Request,
    email: str = Form(""),
    db: Session = Depends(get_db_session),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Inicia el proceso de restablecimiento de contraseña: genera un token
    nuevo (reemplaza cualquier token anterior) y lo envía por correo.

    - **email**: El correo electrónico del usuario que solicita el restablecimiento.
    """
    errores = validate_email_form(email)
    if errores:
        return _olvide_form(request, errores)

    usuario = find_user_by_email(db, email)
    if not usuario:
        logger.warning("Solicitud de restablecimiento para un email no registrado: %s", email)
        return _olvide_form(request, [{"msg": "El email no pertenece a ningún usuario"}])

    usuario.token = generate_verification_token()
    save_user(db, usuario)
    logger.info("Token de restablecimiento generado para el usuario con ID %s", usuario.id)

    email_service.send_password_reset_email(nombre=usuario.nombre, email=usuario.email, token=usuario.token)

    return render_message(request, PAGINA_RESET, "Hemos enviado un mail con las instrucciones")


@router.get("/olvide-password/{token}")
def comprobar_token(request: Request, token: str, db: Session = Depends(get_db_session)):
    """
    Muestra el formulario de nuevo password si el token es válido. No
    consume el token.
    """
    usuario = find_user_by_token(db, token)
    if not usuario:
        logger.warning("Token de restablecimiento inválido")
        return _invalid_reset_token(request)

    return _reset_form(request)


@router.post("/olvide-password/{token}", dependencies=[Depends(verify_csrf)])
def nuevo_password(
    request: Request,
    token: str,
    password: str = Form(""),
    db: Session = Depends(get_db_session),
):
    """
    Guarda el nuevo password del usuario dueño del token y consume el token.

    - **token** (ruta): El token recibido por correo.
    - **password** (form): El nuevo password (mínimo 6 caracteres).
    """
    errores = validate_new_password(password)
    if errores:
        return _reset_form(request, errores)

    usuario = find_user_by_token(db, token)
    if not usuario:
        logger.warning("Intento de restablecer el password con un token inválido")
        return _invalid_reset_token(request)

    if not consume_token(db, usuario, token, password=hash_password(password)):
        logger.warning("El token de restablecimiento del usuario %s ya fue utilizado", usuario.id)
        return _invalid_reset_token(request)

    logger.info("Password reestablecido para el usuario con ID %s", usuario.id)
    return render_page(
        request,
        "auth/confirmar-cuenta.html",
        "Password reestablecido",
        mensaje="El password fue reestablecido correctamente",
    )
