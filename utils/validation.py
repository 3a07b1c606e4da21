"""
Validación de los formularios de autenticación.

Cada función devuelve una lista de errores con la forma
``{"campo": str, "msg": str}``; una lista vacía significa que el formulario
es válido. Todos los errores de un formulario se reportan juntos.
"""

from email_validator import validate_email, EmailNotValidError

PASSWORD_MIN_LENGTH = 6


def is_email(value: str) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _error(campo, msg):
    return {"campo": campo, "msg": msg}


def validate_login(email: str, password: str) -> list:
    errores = []
    if not is_email(email):
        errores.append(_error("email", "El email es obligatorio"))
    if not password:
        errores.append(_error("password", "El Password es obligatorio"))
    return errores


def validate_registro(nombre: str, email: str, password: str, repetir_password: str) -> list:
    errores = []
    if not nombre or not nombre.strip():
        errores.append(_error("nombre", "El Nombre es obligatorio"))
    if not is_email(email):
        errores.append(_error("email", "Eso no parece un email"))
    if len(password or "") < PASSWORD_MIN_LENGTH:
        errores.append(_error("password", "El password debe ser de al menos 6 caracteres"))
    if repetir_password != password:
        errores.append(_error("repetir_password", "Los passwords no son iguales"))
    return errores


def validate_email_form(email: str) -> list:
    if not is_email(email):
        return [_error("email", "Eso no parece un email")]
    return []


def validate_new_password(password: str) -> list:
    if len(password or "") < PASSWORD_MIN_LENGTH:
        return [_error("password", "El password debe ser de al menos 6 caracteres")]
    return []
