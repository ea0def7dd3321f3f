"""Demo data: three opportunities with bilingual questions, an admin and an agent.

Safe to run repeatedly; existing rows are left alone.
"""

import logging

from sqlalchemy.orm import Session

from agenthub.db.base import atomic
from agenthub.db.tables import Agent, ApplicationQuestion, Opportunity, Profile

logger = logging.getLogger(__name__)


def _options(*items: tuple[str, str, str]) -> list[dict]:
    return [{"value": value, "label": label, "labelEs": label_es} for value, label, label_es in items]


YES_NO = _options(("yes", "Yes", "Sí"), ("no", "No", "No"))

OPPORTUNITIES = [
    {
        "id": "opp-techcare",
        "name": "TechCare Premium Support",
        "description": "Provide technical support for premium software customers. "
        "Handle escalated issues and ensure customer satisfaction.",
        "client": "TechCare Inc.",
        "status": "active",
        "category": "Technical Support",
        "requirements": {
            "minScore": 75,
            "languages": ["English"],
            "skills": ["Technical Support", "Customer Service"],
            "minExperience": 6,
            "requiredDocuments": ["w9", "nda", "contract"],
            "equipmentRequirements": {"hasComputer": True, "hasHeadset": True, "internetSpeed": 50},
            "backgroundCheckRequired": True,
        },
        "compensation": {
            "type": "hourly",
            "baseRate": 18,
            "bonusStructure": "Performance bonus up to $200/month",
            "currency": "USD",
        },
        "training": {"required": True, "duration": 40, "modules": []},
        "max_agents": 50,
        "current_agents": 32,
        "open_positions": 18,
        "tags": ["Technical", "Premium", "Full-time"],
        "questions": [
            {
                "question": "Why are you interested in this technical support opportunity?",
                "question_es": "¿Por qué te interesa esta oportunidad de soporte técnico?",
                "type": "textarea",
                "required": True,
                "placeholder": "Share your motivation and relevant experience...",
                "placeholder_es": "Comparte tu motivación y experiencia relevante...",
            },
            {
                "question": "How many years of technical support experience do you have?",
                "question_es": "¿Cuántos años de experiencia en soporte técnico tienes?",
                "type": "select",
                "required": True,
                "options": _options(
                    ("0-1", "Less than 1 year", "Menos de 1 año"),
                    ("1-2", "1-2 years", "1-2 años"),
                    ("3-5", "3-5 years", "3-5 años"),
                    ("5+", "5+ years", "5+ años"),
                ),
            },
            {
                "question": "What troubleshooting tools are you familiar with?",
                "question_es": "¿Con qué herramientas de diagnóstico estás familiarizado?",
                "type": "multiselect",
                "required": True,
                "options": _options(
                    ("remote_desktop", "Remote Desktop", "Escritorio Remoto"),
                    ("ticketing_systems", "Ticketing Systems", "Sistemas de Tickets"),
                    ("crm", "CRM Software", "Software CRM"),
                    ("network_diagnostics", "Network Diagnostics", "Diagnóstico de Red"),
                ),
            },
            {
                "question": "Are you comfortable working weekends if needed?",
                "question_es": "¿Estás cómodo trabajando fines de semana si es necesario?",
                "type": "radio",
                "required": True,
                "options": YES_NO + _options(("sometimes", "Sometimes", "A veces")),
            },
        ],
    },
    {
        "id": "opp-healthline",
        "name": "HealthLine Bilingual Support",
        "description": "Provide customer support for healthcare insurance inquiries in English and Spanish.",
        "client": "HealthLine Insurance",
        "status": "active",
        "category": "Healthcare",
        "requirements": {
            "minScore": 80,
            "languages": ["English", "Spanish"],
            "skills": ["Healthcare", "Bilingual (English/Spanish)"],
            "minExperience": 12,
            "requiredDocuments": ["w9", "nda", "contract", "background_consent"],
            "equipmentRequirements": {"hasComputer": True, "hasHeadset": True, "hasQuietSpace": True},
            "backgroundCheckRequired": True,
        },
        "compensation": {
            "type": "hourly",
            "baseRate": 22,
            "bonusStructure": "Quality bonus + $2/hour for bilingual",
            "currency": "USD",
        },
        "training": {"required": True, "duration": 60, "modules": []},
        "max_agents": 30,
        "current_agents": 12,
        "open_positions": 18,
        "tags": ["Healthcare", "Bilingual", "Premium Pay"],
        "questions": [
            {
                "question": "Describe your experience in healthcare or insurance customer service.",
                "question_es": "Describe tu experiencia en servicio al cliente de salud o seguros.",
                "type": "textarea",
                "required": True,
                "placeholder": "Include specific roles and responsibilities...",
                "placeholder_es": "Incluye roles y responsabilidades específicas...",
            },
            {
                "question": "Rate your Spanish language proficiency",
                "question_es": "Califica tu nivel de español",
                "type": "select",
                "required": True,
                "options": _options(
                    ("native", "Native Speaker", "Hablante Nativo"),
                    ("fluent", "Fluent", "Fluido"),
                    ("conversational", "Conversational", "Conversacional"),
                    ("basic", "Basic", "Básico"),
                ),
            },
            {
                "question": "Are you HIPAA certified or willing to get certified?",
                "question_es": "¿Tienes certificación HIPAA o estás dispuesto a obtenerla?",
                "type": "radio",
                "required": True,
                "options": _options(
                    ("certified", "Already certified", "Ya certificado"),
                    ("willing", "Willing to get certified", "Dispuesto a certificarme"),
                    ("not_sure", "Not sure", "No estoy seguro"),
                ),
            },
            {
                "question": "When can you start?",
                "question_es": "¿Cuándo puedes comenzar?",
                "type": "date",
                "required": True,
            },
        ],
    },
    {
        "id": "opp-shopeasy",
        "name": "ShopEasy Customer Care",
        "description": "Handle order inquiries, returns, and general customer support for e-commerce platform.",
        "client": "ShopEasy",
        "status": "active",
        "category": "Customer Service",
        "requirements": {
            "minScore": 70,
            "languages": ["English"],
            "skills": ["Customer Service", "E-commerce"],
            "minExperience": 3,
            "requiredDocuments": ["w9", "nda", "contract"],
            "equipmentRequirements": {"hasComputer": True, "hasHeadset": True},
            "backgroundCheckRequired": False,
        },
        "compensation": {
            "type": "hourly",
            "baseRate": 15,
            "bonusStructure": "Sales commission on upsells",
            "currency": "USD",
        },
        "training": {"required": True, "duration": 20, "modules": []},
        "max_agents": 100,
        "current_agents": 67,
        "open_positions": 33,
        "tags": ["E-commerce", "Entry Level", "Flexible"],
        "questions": [
            {
                "question": "Have you worked in e-commerce customer support before?",
                "question_es": "¿Has trabajado en soporte al cliente de e-commerce antes?",
                "type": "radio",
                "required": True,
                "options": YES_NO,
            },
            {
                "question": "How many hours per week can you commit?",
                "question_es": "¿Cuántas horas por semana puedes comprometer?",
                "type": "number",
                "required": True,
                "placeholder": "Enter hours (e.g., 40)",
                "placeholder_es": "Ingresa horas (ej: 40)",
                "validation": {"min": 10, "max": 60, "message": "Must be between 10 and 60 hours"},
            },
            {
                "question": "Tell us about a time you turned an unhappy customer into a satisfied one.",
                "question_es": "Cuéntanos sobre una vez que convertiste un cliente insatisfecho en uno satisfecho.",
                "type": "textarea",
                "required": True,
                "placeholder": "Describe the situation and how you handled it...",
                "placeholder_es": "Describe la situación y cómo la manejaste...",
            },
        ],
    },
]

PROFILES = [
    {
        "id": "user-admin-001",
        "email": "admin@agenthub.com",
        "username": "admin",
        "first_name": "System",
        "last_name": "Administrator",
        "role": "admin",
    },
    {
        "id": "user-agent-001",
        "email": "maria.garcia@example.com",
        "username": "mariag",
        "first_name": "Maria",
        "last_name": "Garcia",
        "phone": "+1 (555) 123-4567",
        "role": "agent",
    },
]

AGENTS = [
    {
        "id": "agent-001",
        "user_id": "user-agent-001",
        "pipeline_status": "training",
        "preferred_language": "en",
        "timezone": "America/New_York",
    },
]


def seed(db: Session) -> dict[str, int]:
    """Insert whatever demo rows are missing. Returns counts of rows created."""
    created = {"opportunities": 0, "questions": 0, "profiles": 0, "agents": 0}

    with atomic(db):
        for data in OPPORTUNITIES:
            data = dict(data)
            questions = data.pop("questions")
            if db.get(Opportunity, data["id"]) is None:
                db.add(Opportunity(**data))
                db.flush()
                created["opportunities"] += 1

            has_questions = (
                db.query(ApplicationQuestion).filter(ApplicationQuestion.opportunity_id == data["id"]).first()
            )
            if not has_questions:
                for order, question in enumerate(questions, start=1):
                    db.add(ApplicationQuestion(opportunity_id=data["id"], order=order, **question))
                    created["questions"] += 1

        for data in PROFILES:
            if db.get(Profile, data["id"]) is None:
                db.add(Profile(**data))
                created["profiles"] += 1
        db.flush()

        for data in AGENTS:
            if db.get(Agent, data["id"]) is None:
                db.add(Agent(**data))
                created["agents"] += 1

    logger.info(f"Seed complete: {created}")
    return created
