"""Outgoing account email: verification, password reset, welcome."""

import logging
import smtplib
from email.message import EmailMessage

from jinja2 import DictLoader, Environment, select_autoescape

from aidhub.config import Settings, get_settings

logger = logging.getLogger("aidhub")

DEFAULT_NAME = "Valued Member"

TEMPLATES = {
    "verification.subject": "Verify your AidHub email address",
    "verification.html": """
<html>
<body style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1>Hello {{ name }},</h1>
    <p>Thanks for joining AidHub. Please confirm your email address:</p>
    <p><a href="{{ url }}">Verify email</a></p>
    <p style="color: #666; font-size: 14px;">Or copy this link: {{ url }}</p>
    <p style="color: #666; font-size: 14px;">This link expires in {{ ttl_minutes }} minutes.</p>
</body>
</html>
""",
    "verification.txt": """Hello {{ name }},

Thanks for joining AidHub. Confirm your email address by visiting:
{{ url }}

This link expires in {{ ttl_minutes }} minutes.
""",
    "password_reset.subject": "Reset your AidHub password",
    "password_reset.html": """
<html>
<body style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1>Reset your password</h1>
    <p>Hello {{ name }}, we received a request to reset your password.</p>
    <p><a href="{{ url }}">Choose a new password</a></p>
    <p style="color: #666; font-size: 14px;">This link expires in {{ ttl_minutes }} minutes.</p>
    <p style="color: #666; font-size: 14px;">If you didn't request this, you can safely ignore this email.</p>
</body>
</html>
""",
    "password_reset.txt": """Hello {{ name }},

We received a request to reset your password. Visit this link to choose a new one:
{{ url }}

This link expires in {{ ttl_minutes }} minutes.
If you didn't request this, you can safely ignore this email.
""",
    "welcome.subject": "Welcome to AidHub",
    "welcome.html": """
<html>
<body style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1>Welcome, {{ name }}!</h1>
    <p>Your email address is verified. You can now sign in and submit aid requests.</p>
    <p><a href="{{ url }}">Open AidHub</a></p>
</body>
</html>
""",
    "welcome.txt": """Welcome, {{ name }}!

Your email address is verified. You can now sign in and submit aid requests:
{{ url }}
""",
}

_env = Environment(loader=DictLoader(TEMPLATES), autoescape=select_autoescape(enabled_extensions=("html",)))


class Mailer:
    """Renders account emails and hands them to ``deliver``.

    Subclasses implement ``deliver``; it may raise, and callers decide
    whether a failed send is fatal.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def render(self, template: str, **context) -> tuple[str, str, str]:
        """Return (subject, html, text) for a template family."""
        subject = _env.get_template(f"{template}.subject").render(**context)
        html = _env.get_template(f"{template}.html").render(**context)
        text = _env.get_template(f"{template}.txt").render(**context)
        return subject, html, text

    def deliver(self, to: str, subject: str, html: str, text: str) -> None:
        raise NotImplementedError

    def send_verification_email(self, to: str, name: str | None, verification_url: str) -> None:
        subject, html, text = self.render(
            "verification",
            name=name or DEFAULT_NAME,
            url=verification_url,
            ttl_minutes=self.settings.VERIFICATION_TOKEN_EXPIRE_MINUTES,
        )
        self.deliver(to, subject, html, text)

    def send_password_reset_email(self, to: str, name: str | None, reset_url: str) -> None:
        subject, html, text = self.render(
            "password_reset",
            name=name or DEFAULT_NAME,
            url=reset_url,
            ttl_minutes=self.settings.PASSWORD_RESET_EXPIRE_MINUTES,
        )
        self.deliver(to, subject, html, text)

    def send_welcome_email(self, to: str, name: str | None) -> None:
        subject, html, text = self.render("welcome", name=name or DEFAULT_NAME, url=self.settings.FRONTEND_URL)
        self.deliver(to, subject, html, text)


class ConsoleMailer(Mailer):
    """Development mailer: writes the plain-text body to the server log."""

    def deliver(self, to: str, subject: str, html: str, text: str) -> None:
        logger.info("EMAIL to=%s subject=%r\n%s", to, subject, text)


class SMTPMailer(Mailer):
    """Sends multipart email through an SMTP relay."""

    def deliver(self, to: str, subject: str, html: str, text: str) -> None:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.settings.MAIL_FROM
        message["To"] = to
        message.set_content(text)
        message.add_alternative(html, subtype="html")

        with smtplib.SMTP(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=10) as server:
            if self.settings.SMTP_USE_TLS:
                server.starttls()
            if self.settings.SMTP_USERNAME:
                server.login(self.settings.SMTP_USERNAME, self.settings.SMTP_PASSWORD)
            server.send_message(message)
        logger.info("Email sent to %s: %s", to, subject)


_mailer: Mailer | None = None


def get_mailer() -> Mailer:
    """Get singleton mailer: SMTP when configured, otherwise the log."""
    global _mailer
    if _mailer is None:
        settings = get_settings()
        _mailer = SMTPMailer(settings) if settings.SMTP_HOST else ConsoleMailer(settings)
    return _mailer
