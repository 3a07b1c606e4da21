from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import declarative_base
from datetime import datetime
import pytz

Base = declarative_base()


def get_colombia_time():
    colombia_tz = pytz.timezone("America/Bogota")
    return datetime.now(colombia_tz)


class Usuario(Base):
    """
    Representa una cuenta de usuario del sitio.

    Atributos:
    ----------
    id : int
        Identificador único del usuario.
    nombre : str
        Nombre del usuario.
    email : str
        Correo electrónico, usado para iniciar sesión.
    password : str
        Hash de la contraseña (nunca el texto plano).
    token : str
        Token de confirmación o de restablecimiento pendiente; None si no hay
        ninguno en curso.
    confirmado : bool
        Indica si el usuario ya confirmó su cuenta desde el correo.
    created_at, updated_at : datetime
        Marcas de tiempo de creación y última modificación.
    """
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(60), nullable=False)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    token = Column(String(64), nullable=True, index=True)
    confirmado = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=get_colombia_time)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=get_colombia_time, onupdate=get_colombia_time)

    def __repr__(self):
        return f"<Usuario {self.email}>"
