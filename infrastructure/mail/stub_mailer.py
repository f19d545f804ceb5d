import logging
from collections import deque
from typing import Deque

from core.services.mailer import Mailer, MailMessage

logger = logging.getLogger(__name__)


class StubMailer(Mailer):
    """Logs messages instead of sending them; only the latest `keep` stay in the outbox"""
    def __init__(self, keep: int = 50):
        self.outbox: Deque[MailMessage] = deque(maxlen=keep)

    def send(self, message: MailMessage) -> None:
        self.outbox.append(message)
        logger.info("Stub mail '%s' to %s: %s", message.subject, message.to, message.html)
