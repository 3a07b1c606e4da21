"""Emisión y lectura del JWT que se guarda en la cookie de sesión."""

import logging
from datetime import timedelta
from typing import Dict, Optional

from fastapi import Request
from jose import JWTError, jwt

from models.models import get_colombia_time

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class SessionTokenIssuer:
    """
    Firma tokens de sesión con la clave secreta del proceso.
    """

    def __init__(self, secret_key: str, expire_minutes: int = 60 * 24):
        if not secret_key:
            raise ValueError("Se requiere una clave secreta para firmar los tokens de sesión")
        self._secret_key = secret_key
        self.expire_minutes = expire_minutes

    def issue(self, claims: Dict) -> str:
        """
        Genera un JWT con los datos del usuario y una fecha de expiración.

        Args:
            claims: Datos a incluir en el token (ej. {'id': 1, 'nombre': 'Ana'}).

        Returns:
            String del JWT codificado.
        """
        to_encode = claims.copy()
        expire = get_colombia_time() + timedelta(minutes=self.expire_minutes)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self._secret_key, algorithm=ALGORITHM)

    def decode(self, token: str) -> Optional[Dict]:
        """
        Decodifica y valida un JWT.

        Returns:
            El payload si el token es válido y no ha expirado, None en caso contrario.
        """
        if not token:
            return None
        try:
            return jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.warning(f"Token de sesión inválido: {e}")
            return None


def get_token_issuer(request: Request) -> SessionTokenIssuer:
    return request.app.state.token_issuer
