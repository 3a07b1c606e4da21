from passlib.context import CryptContext
from passlib.exc import UnknownHashError
import secrets
import string


pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

def hash_password(password: str) -> str:
    """
    Hashea una contraseña utilizando el esquema configurado en CryptContext.
    Cada llamada usa una sal nueva, por lo que el resultado cambia aunque la
    contraseña sea la misma.

    Args:
        password (str): La contraseña en texto plano a hashear.

    Returns:
        str: La contraseña hasheada.
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica una contraseña en texto plano contra una contraseña hasheada.

    Args:
        plain_password (str): La contraseña en texto plano.
        hashed_password (str): La contraseña hasheada a comparar.

    Returns:
        bool: Verdadero si las contraseñas coinciden, falso en caso contrario
        (incluido un hash vacío o con formato desconocido).
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError):
        return False


def generate_verification_token(length: int = 32) -> str:
    """
    Genera un token aleatorio para confirmar la cuenta o restablecer la
    contraseña.

    Args:
        length (int): La longitud del token. Por defecto es 32 (unos 190 bits
        de entropía).

    Returns:
        str: Un token compuesto por letras y dígitos.
    """
    characters = string.ascii_letters + string.digits
    return ''.join(secrets.choice(characters) for _ in range(length))
