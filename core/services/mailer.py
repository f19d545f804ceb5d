from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class MailMessage:
    to: str
    subject: str
    html: str


class Mailer(ABC):
    @abstractmethod
    def send(self, message: MailMessage) -> None: ...
