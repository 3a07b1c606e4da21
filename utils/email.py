import smtplib
import logging
from html import escape
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from fastapi import Request

logger = logging.getLogger(__name__)


EMAIL_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; background-color: #f7f7f7; }
    .container { max-width: 600px; margin: 0 auto; background-color: #ffffff; padding: 20px; border-radius: 8px; }
    .button { display: inline-block; padding: 10px 20px; background-color: #4f46e5; color: #ffffff; border-radius: 5px; text-decoration: none; }
    .footer { margin-top: 30px; font-size: 12px; color: #777; }
"""


class EmailService:
    """
    Envía los correos transaccionales de la aplicación por SMTP.

    Los envíos no interrumpen la petición que los origina: cualquier error se
    registra en el log y se descarta.
    """

    def __init__(self, host=None, port=465, user=None, password=None, backend_url="http://localhost:3000"):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.backend_url = backend_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings):
        return cls(
            host=settings.email_host,
            port=settings.email_port,
            user=settings.email_user,
            password=settings.email_pass,
            backend_url=settings.backend_url,
        )

    def send_registration_email(self, nombre: str, email: str, token: str):
        """
        Envía el correo con el enlace para confirmar la cuenta.

        :param nombre: Nombre del usuario.
        :param email: Dirección de correo electrónico del destinatario.
        :param token: Token de confirmación a incluir en el enlace.
        """
        link = f"{self.backend_url}/auth/confirmar/{token}"
        body_html = f"""
        <!DOCTYPE html>
        <html>
        <head><style>{EMAIL_STYLE}</style></head>
        <body>
            <div class="container">
                <h2>Hola {escape(nombre)},</h2>
                <p>Tu cuenta en Bienes Raíces ya está lista, solo debes comprobarla en el siguiente enlace:</p>
                <p><a class="button" href="{link}">Confirmar cuenta</a></p>
                <div class="footer">
                    <p>Si tú no creaste esta cuenta, puedes ignorar este mensaje.</p>
                </div>
            </div>
        </body>
        </html>
        """
        self._send(email, "Confirma tu cuenta en BienesRaices.com", body_html, "registro")

    def send_password_reset_email(self, nombre: str, email: str, token: str):
        """
        Envía el correo con el enlace para restablecer la contraseña.

        :param nombre: Nombre del usuario.
        :param email: Dirección de correo electrónico del destinatario.
        :param token: Token de restablecimiento a incluir en el enlace.
        """
        link = f"{self.backend_url}/auth/olvide-password/{token}"
        body_html = f"""
        <!DOCTYPE html>
        <html>
        <head><style>{EMAIL_STYLE}</style></head>
        <body>
            <div class="container">
                <h2>Hola {escape(nombre)},</h2>
                <p>Has solicitado reestablecer tu password en Bienes Raíces. Sigue el siguiente enlace para generar uno nuevo:</p>
                <p><a class="button" href="{link}">Reestablecer password</a></p>
                <div class="footer">
                    <p>Si tú no solicitaste el cambio de password, puedes ignorar este mensaje.</p>
                </div>
            </div>
        </body>
        </html>
        """
        self._send(email, "Reestablece tu password en BienesRaices.com", body_html, "olvide-password")

    def _send(self, email, subject, body_html, email_type):
        if not self.host or not self.user or not self.password:
            logger.error(f"Las credenciales SMTP no están configuradas; no se envió el correo de {email_type} a {email}")
            return

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.user
        msg["To"] = email
        msg.attach(MIMEText(body_html, "html"))

        try:
            if self.port == 465:
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=30)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=30)
            with server:
                if self.port != 465:
                    server.starttls()
                server.login(self.user, self.password)
                server.sendmail(self.user, email, msg.as_string())
            logger.info(f"Correo de {email_type} enviado exitosamente a {email}")
        except Exception as e:
            logger.error(f"Error al enviar correo de {email_type} a {email}: {e}")


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service
