"""
Unit tests for email notifications.
"""

import smtplib
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from shared.config.settings import SMTPSettings
from shared.models.assessment import Assessment, ComplianceTier, ValidationState
from shared.models.vendor import Vendor
from shared.notifications import EmailNotificationDispatcher, build_message


@pytest.fixture
def vendor() -> Vendor:
    return Vendor(
        id="v1",
        name="Acme <Hosting>",
        contact_email="security@acme.example",
        invite_token="Ab3dEf6hJk9M",
    )


@pytest.fixture
def assessment() -> Assessment:
    return Assessment(
        id="a1",
        vendor_id="v1",
        score=40,
        compliance_tier=ComplianceTier.NON_COMPLIANT,
        validation_state=ValidationState.REJECTED,
        reviewer_id="admin",
        reviewed_at=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
        comments="EDR missing on servers",
    )


@pytest.fixture
def smtp() -> SMTPSettings:
    return SMTPSettings(host="smtp.example.com", user="mailer", password="pw")


class TestBuildMessage:
    """Tests for build_message."""

    def test_rejected_french(self, vendor, assessment) -> None:
        msg = build_message(
            vendor, assessment, ValidationState.REJECTED, "fr", "noreply@vs.example", "https://vs.example/"
        )

        assert msg["Subject"] == "Votre évaluation a été rejetée"
        assert msg["To"] == "security@acme.example"
        text = msg.get_body(preferencelist=("plain",)).get_content()
        assert "EDR missing on servers" in text
        assert "https://vs.example/api/v1/portal/Ab3dEf6hJk9M/status?lang=fr" in text

    def test_html_escapes_vendor_name(self, vendor, assessment) -> None:
        msg = build_message(
            vendor, assessment, ValidationState.APPROVED, "en", "noreply@vs.example", "https://vs.example"
        )

        html = msg.get_body(preferencelist=("html",)).get_content()
        assert "Acme &lt;Hosting&gt;" in html
        assert msg["Subject"] == "Your assessment has been approved"

    def test_html_escapes_reviewer_input(self, vendor) -> None:
        assessment = Assessment(
            id="a2",
            vendor_id="v1",
            score=60,
            compliance_tier=ComplianceTier.IN_PROGRESS,
            validation_state=ValidationState.NEEDS_CLARIFICATION,
            reviewer_id="<b>admin</b>",
            comments="<script>alert(1)</script> & more",
        )
        msg = build_message(
            vendor, assessment, ValidationState.NEEDS_CLARIFICATION, "en", "a@b.c", "https://vs.example"
        )

        html = msg.get_body(preferencelist=("html",)).get_content()
        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt; &amp; more" in html
        assert "&lt;b&gt;admin&lt;/b&gt;" in html
        text = msg.get_body(preferencelist=("plain",)).get_content()
        assert "<script>alert(1)</script> & more" in text
        assert "Acme <Hosting>" in text

    def test_clarification_asks_for_action(self, vendor, assessment) -> None:
        msg = build_message(
            vendor, assessment, ValidationState.NEEDS_CLARIFICATION, "en", "a@b.c", "https://vs.example"
        )
        text = msg.get_body(preferencelist=("plain",)).get_content()
        assert "Action required" in text

    def test_unknown_locale_falls_back_to_french(self, vendor, assessment) -> None:
        msg = build_message(vendor, assessment, ValidationState.APPROVED, "de", "a@b.c", "https://x")
        assert msg["Subject"] == "Votre évaluation a été approuvée"


class TestEmailNotificationDispatcher:
    """Tests for EmailNotificationDispatcher."""

    @pytest.mark.asyncio
    async def test_test_mode_does_not_send(self, vendor, assessment) -> None:
        dispatcher = EmailNotificationDispatcher(SMTPSettings(host=""), "https://vs.example")

        with patch("shared.notifications.email.smtplib.SMTP") as smtp_cls:
            result = await dispatcher.notify(vendor, assessment, ValidationState.REJECTED, "fr")

        assert result.success is False
        assert result.test_mode is True
        smtp_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_address(self, assessment, smtp) -> None:
        vendor = Vendor(id="v2", name="NoMail", contact_email=None, invite_token="t")
        dispatcher = EmailNotificationDispatcher(smtp, "https://vs.example")

        result = await dispatcher.notify(vendor, assessment, ValidationState.APPROVED, "en")

        assert result.success is False
        assert result.error == "No email address"

    @pytest.mark.asyncio
    async def test_sends_over_starttls(self, vendor, assessment, smtp) -> None:
        dispatcher = EmailNotificationDispatcher(smtp, "https://vs.example")

        with patch("shared.notifications.email.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value
            server.__enter__.return_value = server
            result = await dispatcher.notify(vendor, assessment, ValidationState.APPROVED, "en")

        assert result.success is True
        assert result.message_id
        server.login.assert_called_once_with("mailer", "pw")
        server.send_message.assert_called_once()

    @pytest.mark.asyncio
    async def test_smtp_failure_reported(self, vendor, assessment, smtp) -> None:
        dispatcher = EmailNotificationDispatcher(smtp, "https://vs.example")

        with patch("shared.notifications.email.smtplib.SMTP") as smtp_cls:
            smtp_cls.side_effect = smtplib.SMTPConnectError(421, b"busy")
            result = await dispatcher.notify(vendor, assessment, ValidationState.APPROVED, "en")

        assert result.success is False
        assert result.error

    @pytest.mark.asyncio
    async def test_verify_in_test_mode(self) -> None:
        dispatcher = EmailNotificationDispatcher(SMTPSettings(host=""), "https://vs.example")
        assert await dispatcher.verify() is False
