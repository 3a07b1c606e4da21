from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.models import Usuario


class UsuarioDuplicadoError(Exception):
    """El email ya pertenece a otro usuario (violación del índice único)."""


def find_user_by_email(db: Session, email: str) -> Optional[Usuario]:
    """
    Busca un usuario por su correo electrónico (coincidencia exacta).

    Returns:
        Usuario: El usuario encontrado, o None si no existe.
    """
    return db.query(Usuario).filter(Usuario.email == email).first()


def find_user_by_token(db: Session, token: str) -> Optional[Usuario]:
    """
    Busca el usuario que tiene pendiente el token indicado.

    Returns:
        Usuario: El usuario encontrado, o None si el token no existe.
    """
    if not token:
        return None
    return db.query(Usuario).filter(Usuario.token == token).first()


def create_user(db: Session, nombre: str, email: str, password_hash: str, token: str) -> Usuario:
    """
    Crea un usuario sin confirmar. La contraseña debe llegar ya hasheada.

    Raises:
        UsuarioDuplicadoError: Si el email ya está registrado.
    """
    usuario = Usuario(
        nombre=nombre,
        email=email,
        password=password_hash,
        token=token,
        confirmado=False,
    )
    db.add(usuario)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UsuarioDuplicadoError(email) from e
    db.refresh(usuario)
    return usuario


def save_user(db: Session, usuario: Usuario) -> Usuario:
    db.add(usuario)
    db.commit()
    db.refresh(usuario)
    return usuario


def consume_token(db: Session, usuario: Usuario, token: str, **values) -> bool:
    """
    Limpia el token del usuario y aplica los cambios indicados en una sola
    sentencia UPDATE condicionada a que el token siga vigente.

    Returns:
        bool: True si el token se consumió, False si otra petición ya lo usó.
    """
    values["token"] = None
    updated = (
        db.query(Usuario)
        .filter(Usuario.id == usuario.id, Usuario.token == token)
        .update(values, synchronize_session=False)
    )
    db.commit()
    db.refresh(usuario)
    return updated == 1
