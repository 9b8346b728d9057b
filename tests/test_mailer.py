"""Tests for email rendering and delivery."""

import logging
from dataclasses import replace
from unittest.mock import patch

from aidhub.config import Settings
from aidhub.services.mailer import DEFAULT_NAME, ConsoleMailer, SMTPMailer


class TestRendering:
    """Tests for the email templates."""

    def test_verification_email(self, settings: Settings):
        subject, html, text = ConsoleMailer(settings).render(
            "verification", name="Ayse", url="http://x.test/v?token=t&email=a%40b.c", ttl_minutes=30
        )
        assert subject == "Verify your AidHub email address"
        assert "http://x.test/v?token=t&email=a%40b.c" in text
        assert "&amp;" in html
        assert "30 minutes" in text

    def test_html_is_escaped(self, settings: Settings):
        _, html, _ = ConsoleMailer(settings).render("welcome", name="<script>", url="http://x.test")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestConsoleMailer:
    """Tests for the development mailer."""

    def test_logs_message(self, settings: Settings, caplog):
        with caplog.at_level(logging.INFO, logger="aidhub"):
            ConsoleMailer(settings).send_password_reset_email("a@example.com", None, "http://x.test/reset")
        record = caplog.records[-1].getMessage()
        assert "a@example.com" in record
        assert "http://x.test/reset" in record
        assert DEFAULT_NAME in record


class TestSMTPMailer:
    """Tests for SMTP delivery."""

    def test_sends_multipart_message(self, settings: Settings):
        smtp_settings = replace(settings, SMTP_HOST="smtp.test", SMTP_USERNAME="bot", SMTP_PASSWORD="secret")
        with patch("aidhub.services.mailer.smtplib.SMTP") as smtp_cls:
            SMTPMailer(smtp_settings).send_welcome_email("a@example.com", "Ayse")

        smtp_cls.assert_called_once_with("smtp.test", smtp_settings.SMTP_PORT, timeout=10)
        server = smtp_cls.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("bot", "secret")
        message = server.send_message.call_args[0][0]
        assert message["To"] == "a@example.com"
        assert message["Subject"] == "Welcome to AidHub"
        assert message.is_multipart()
