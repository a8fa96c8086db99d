"""Outbound email: the only place that talks to an SMTP server."""
from __future__ import annotations
import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage

from homework_planner.core import config

logger = logging.getLogger(__name__)


class Mailer(ABC):

    @abstractmethod
    def send(self, recipient: str, subject: str, body: str) -> None:
        """Deliver one plain-text message. Raises on delivery failure."""
        ...


class SmtpMailer(Mailer):
    def __init__(
        self,
        host: str = config.EMAIL_HOST,
        port: int = config.EMAIL_PORT,
        user: str = config.EMAIL_USER,
        password: str = config.EMAIL_PASS,
        sender: str = config.EMAIL_FROM,
        use_tls: bool = config.EMAIL_USE_TLS,
    ):
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._sender = sender
        self._use_tls = use_tls

    def send(self, recipient: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = f'"Homework Planner" <{self._sender}>'
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(body)

        with smtplib.SMTP(self._host, self._port, timeout=30) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._user:
                smtp.login(self._user, self._password)
            smtp.send_message(message)
        logger.info("Sent reminder %r to %s", subject, recipient)
