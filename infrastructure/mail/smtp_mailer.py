"""
SMTP mailer

Sends HTML mail through an SMTP relay with STARTTLS.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from core.services.mailer import Mailer, MailMessage

logger = logging.getLogger(__name__)


class SmtpMailer(Mailer):
    def __init__(self, host: str, port: int, sender: str, user: str = "", password: str = ""):
        self.host = host
        self.port = port
        self.sender = sender
        self.user = user
        self.password = password

    def _build(self, message: MailMessage) -> MIMEMultipart:
        mime = MIMEMultipart()
        mime["From"] = self.sender
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.attach(MIMEText(message.html, "html"))
        return mime

    def send(self, message: MailMessage) -> None:
        with smtplib.SMTP(self.host, self.port) as server:
            server.starttls()
            if self.user:
                server.login(self.user, self.password)
            server.send_message(self._build(message))
        logger.info("Mail '%s' sent to %s", message.subject, message.to)
