"""
Questionnaire Catalogue
=======================

The fixed security questionnaire and display labels.

Question identifiers, sections and weights live in one immutable table;
text is a per-locale lookup keyed by the same identifiers, so localization
never changes scoring.

Version: 0.1.0
"""

from dataclasses import dataclass
from types import MappingProxyType

from pydantic import BaseModel

from shared.models.assessment import ComplianceTier, ValidationState


SUPPORTED_LOCALES = ("fr", "en")
DEFAULT_LOCALE = "fr"


@dataclass(frozen=True)
class Question:
    """A scored questionnaire item."""

    id: str
    section: int
    weight: int

    def __post_init__(self) -> None:
        if self.weight <= 0:
            raise ValueError(f"Question {self.id} must have a positive weight")


QUESTIONS: tuple[Question, ...] = (
    # Section 1: authentication and access control
    Question(id="mfa", section=1, weight=2),
    Question(id="iam", section=1, weight=2),
    Question(id="account_deactivation", section=1, weight=1),
    # Section 2: workstation and server security
    Question(id="av_edr", section=2, weight=2),
    Question(id="patches", section=2, weight=2),
    # Section 3: segmentation and environment isolation
    Question(id="network_segmentation", section=3, weight=2),
    Question(id="monitoring", section=3, weight=2),
    # Section 4: business continuity
    Question(id="pra", section=4, weight=2),
    # Section 5: monitoring, compliance and reporting
    Question(id="siem", section=5, weight=2),
)

QUESTIONS_BY_ID = MappingProxyType({q.id: q for q in QUESTIONS})


SECTION_TITLES: dict[str, dict[int, str]] = {
    "fr": {
        1: "Authentification et Contrôle d'accès",
        2: "Sécurité des postes et serveurs",
        3: "Segmentation et isolation des environnements",
        4: "Plan de Reprise d'Activité (PRA) et Continuité",
        5: "Surveillance, conformité et reporting",
    },
    "en": {
        1: "Authentication and Access Control",
        2: "Workstation and Server Security",
        3: "Segmentation and Environment Isolation",
        4: "Business Continuity Plan (BCP) and Continuity",
        5: "Monitoring, Compliance and Reporting",
    },
}

QUESTION_TEXT: dict[str, dict[str, str]] = {
    "fr": {
        "mfa": "Votre organisation utilise-t-elle l'authentification multi-facteurs (MFA) pour tous les comptes accédant aux systèmes de l'entreprise ?",
        "iam": "Disposez-vous d'un système de gestion des identités (IAM) pour contrôler les droits d'accès des utilisateurs ?",
        "account_deactivation": "Les comptes utilisateurs sont-ils désactivés immédiatement après le départ d'un collaborateur ?",
        "av_edr": "Tous vos postes de travail et serveurs disposent-ils d'un antivirus ou EDR à jour ?",
        "patches": "Les mises à jour de sécurité (patchs) sont-elles appliquées régulièrement ?",
        "network_segmentation": "Votre réseau interne est-il segmenté pour isoler les environnements critiques ?",
        "monitoring": "Disposez-vous de mécanismes de supervision pour surveiller les accès et les flux réseau vers le client ?",
        "pra": "Disposez-vous d'un PRA documenté et validé par la direction ?",
        "siem": "Disposez-vous d'un système centralisé de journalisation (SIEM) pour collecter et analyser les logs de sécurité ?",
    },
    "en": {
        "mfa": "Does your organization use multi-factor authentication (MFA) for all accounts accessing company systems?",
        "iam": "Do you have an Identity and Access Management (IAM) system to control user access rights?",
        "account_deactivation": "Are user accounts deactivated immediately after an employee leaves?",
        "av_edr": "Do all your workstations and servers have up-to-date antivirus or EDR?",
        "patches": "Are security updates (patches) applied regularly?",
        "network_segmentation": "Is your internal network segmented to isolate critical environments?",
        "monitoring": "Do you have monitoring mechanisms to supervise access and network flows to the client?",
        "pra": "Do you have a documented and management-approved Business Continuity Plan (BCP)?",
        "siem": "Do you have a centralized logging system (SIEM) to collect and analyze security logs?",
    },
}

TIER_LABELS: dict[str, dict[ComplianceTier, str]] = {
    "fr": {
        ComplianceTier.COMPLIANT: "Conforme",
        ComplianceTier.NON_COMPLIANT: "Non Conforme",
        ComplianceTier.IN_PROGRESS: "En cours",
    },
    "en": {
        ComplianceTier.COMPLIANT: "Compliant",
        ComplianceTier.NON_COMPLIANT: "Non-Compliant",
        ComplianceTier.IN_PROGRESS: "In Progress",
    },
}

VALIDATION_LABELS: dict[str, dict[ValidationState, str]] = {
    "fr": {
        ValidationState.PENDING: "En attente de validation",
        ValidationState.APPROVED: "Approuvé",
        ValidationState.REJECTED: "Rejeté",
        ValidationState.NEEDS_CLARIFICATION: "Clarifications demandées",
    },
    "en": {
        ValidationState.PENDING: "Pending validation",
        ValidationState.APPROVED: "Approved",
        ValidationState.REJECTED: "Rejected",
        ValidationState.NEEDS_CLARIFICATION: "Needs clarification",
    },
}


class LocalizedQuestion(BaseModel):
    """Question as displayed to a vendor."""

    id: str
    section: int
    section_title: str
    text: str
    weight: int


def resolve_locale(locale: str | None) -> str:
    """Map a requested locale onto a supported one."""
    if locale:
        primary = locale.split(",")[0].split("-")[0].strip().lower()
        if primary in SUPPORTED_LOCALES:
            return primary
    return DEFAULT_LOCALE


def get_questions(locale: str | None = None) -> list[LocalizedQuestion]:
    """Questionnaire with text in the requested locale."""
    loc = resolve_locale(locale)
    return [
        LocalizedQuestion(
            id=q.id,
            section=q.section,
            section_title=SECTION_TITLES[loc][q.section],
            text=QUESTION_TEXT[loc][q.id],
            weight=q.weight,
        )
        for q in QUESTIONS
    ]


def tier_label(tier: ComplianceTier, locale: str | None = None) -> str:
    return TIER_LABELS[resolve_locale(locale)][tier]


def validation_label(state: ValidationState, locale: str | None = None) -> str:
    return VALIDATION_LABELS[resolve_locale(locale)][state]
