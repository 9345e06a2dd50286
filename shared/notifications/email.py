"""
Email Notifications
===================

SMTP delivery of assessment decisions to vendors.

When no SMTP server is configured the dispatcher runs in test mode: the
message is built and logged but not sent.

Version: 0.1.0
"""

import asyncio
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from shared.config.settings import SMTPSettings
from shared.logging import get_logger
from shared.models.assessment import Assessment, ValidationState
from shared.models.vendor import Vendor
from shared.notifications.dispatcher import NotificationDispatcher, NotificationResult


logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

# HTML templates are autoescaped, plain text ones are not
_templates = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)

ACCENT_COLORS: dict[ValidationState, str] = {
    ValidationState.APPROVED: "#28a745",
    ValidationState.REJECTED: "#dc3545",
    ValidationState.NEEDS_CLARIFICATION: "#ffc107",
}


MESSAGES: dict[str, dict[ValidationState, dict[str, str]]] = {
    "fr": {
        ValidationState.APPROVED: {
            "subject": "Votre évaluation a été approuvée",
            "title": "Évaluation Approuvée",
            "message": "Félicitations ! Votre évaluation de conformité a été approuvée par l'équipe sécurité.",
        },
        ValidationState.REJECTED: {
            "subject": "Votre évaluation a été rejetée",
            "title": "Évaluation Rejetée",
            "message": "Votre évaluation de conformité a été rejetée par l'équipe sécurité.",
        },
        ValidationState.NEEDS_CLARIFICATION: {
            "subject": "Clarifications demandées sur votre évaluation",
            "title": "Clarifications Demandées",
            "message": "L'équipe sécurité a besoin de clarifications concernant votre évaluation de conformité.",
        },
    },
    "en": {
        ValidationState.APPROVED: {
            "subject": "Your assessment has been approved",
            "title": "Assessment Approved",
            "message": "Congratulations! Your compliance assessment has been approved by the security team.",
        },
        ValidationState.REJECTED: {
            "subject": "Your assessment has been rejected",
            "title": "Assessment Rejected",
            "message": "Your compliance assessment has been rejected by the security team.",
        },
        ValidationState.NEEDS_CLARIFICATION: {
            "subject": "Clarifications requested on your assessment",
            "title": "Clarifications Requested",
            "message": "The security team needs clarifications regarding your compliance assessment.",
        },
    },
}

LABELS: dict[str, dict[str, str]] = {
    "fr": {
        "greeting": "Bonjour",
        "validated_by": "Validé par",
        "validated_at": "Date de validation",
        "comments": "Commentaires",
        "action_required": "Action requise : veuillez soumettre à nouveau votre évaluation avec les clarifications demandées.",
        "view_status": "Voir le statut détaillé",
        "footer": "Cet email a été envoyé automatiquement par VendorShield. Merci de ne pas y répondre.",
    },
    "en": {
        "greeting": "Hello",
        "validated_by": "Validated by",
        "validated_at": "Validation date",
        "comments": "Comments",
        "action_required": "Action required: please resubmit your assessment with the requested clarifications.",
        "view_status": "View detailed status",
        "footer": "This email was automatically sent by VendorShield. Please do not reply.",
    },
}


def status_url(base_url: str, vendor: Vendor, locale: str) -> str:
    """Link to the vendor's status page."""
    return f"{base_url.rstrip('/')}/api/v1/portal/{vendor.invite_token}/status?lang={locale}"


def build_message(
    vendor: Vendor,
    assessment: Assessment,
    kind: ValidationState,
    locale: str,
    sender: str,
    base_url: str,
) -> EmailMessage:
    """
    Render the notification email.

    Raises:
        KeyError: ``kind`` has no template (PENDING is never notified)
    """
    if locale not in MESSAGES:
        locale = "fr"
    info = MESSAGES[locale][kind]
    context = {
        "vendor": vendor,
        "assessment": assessment,
        "locale": locale,
        "info": info,
        "labels": LABELS[locale],
        "link": status_url(base_url, vendor, locale),
        "accent": ACCENT_COLORS[kind],
        "action_required": kind == ValidationState.NEEDS_CLARIFICATION,
    }
    text_body = _templates.get_template("assessment_status.txt").render(**context)
    html_body = _templates.get_template("assessment_status.html").render(**context)

    msg = EmailMessage()
    msg["Subject"] = info["subject"]
    msg["From"] = sender
    msg["To"] = vendor.contact_email or ""
    msg["Message-ID"] = make_msgid(domain="vendorshield")
    msg.set_content(text_body)
    msg.add_alternative(html_body, subtype="html")
    return msg


class EmailNotificationDispatcher(NotificationDispatcher):
    """Sends notifications over SMTP."""

    def __init__(self, smtp: SMTPSettings, base_url: str) -> None:
        self.smtp = smtp
        self.base_url = base_url

    @property
    def test_mode(self) -> bool:
        """True when no SMTP server is configured."""
        return not self.smtp.is_configured

    def _connect(self) -> smtplib.SMTP:
        if self.smtp.secure:
            server: smtplib.SMTP = smtplib.SMTP_SSL(
                self.smtp.host,
                self.smtp.port,
                timeout=self.smtp.timeout_seconds,
                context=ssl.create_default_context(),
            )
        else:
            server = smtplib.SMTP(self.smtp.host, self.smtp.port, timeout=self.smtp.timeout_seconds)
            server.starttls(context=ssl.create_default_context())
        server.login(self.smtp.user, self.smtp.password.get_secret_value())
        return server

    def _send(self, msg: EmailMessage) -> None:
        with self._connect() as server:
            server.send_message(msg)

    async def notify(
        self,
        vendor: Vendor,
        assessment: Assessment,
        kind: ValidationState,
        locale: str,
    ) -> NotificationResult:
        if not vendor.contact_email:
            logger.warning("notification_no_address", vendor_id=vendor.id)
            return NotificationResult(success=False, error="No email address")

        if kind not in MESSAGES["fr"]:
            logger.warning("notification_unknown_kind", kind=kind.value)
            return NotificationResult(success=False, error="Unknown status")

        msg = build_message(
            vendor,
            assessment,
            kind,
            locale,
            sender=formataddr((self.smtp.from_name, self.smtp.sender)),
            base_url=self.base_url,
        )

        if self.test_mode:
            logger.warning(
                "email_test_mode",
                to=vendor.contact_email,
                kind=kind.value,
                subject=msg["Subject"],
            )
            return NotificationResult(success=False, error="Email in test mode", test_mode=True)

        try:
            await asyncio.to_thread(self._send, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "email_send_failed",
                to=vendor.contact_email,
                kind=kind.value,
                error=str(e),
            )
            return NotificationResult(success=False, error=str(e))

        logger.info(
            "email_sent",
            to=vendor.contact_email,
            kind=kind.value,
            message_id=msg["Message-ID"],
        )
        return NotificationResult(success=True, message_id=msg["Message-ID"])

    async def verify(self) -> bool:
        if self.test_mode:
            logger.warning("email_test_mode_enabled")
            return False

        def check() -> None:
            with self._connect() as server:
                server.noop()

        try:
            await asyncio.to_thread(check)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("email_server_unreachable", error=str(e))
            return False

        logger.info("email_server_ready", host=self.smtp.host)
        return True
