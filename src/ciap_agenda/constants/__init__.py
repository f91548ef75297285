"""
Agenda Constants
"""

import pytz

from ciap_agenda.config import settings


class APP_SETTINGS:
    """Application metadata"""
    APP_NAME = "CIAP Agenda"
    VERSION = "0.1.0"
    DESCRIPTION = "Agenda da Chefia do CIAP (PM/PA): compromissos, avisos e agendamento por linguagem natural"


class STORAGE_KEYS:
    """Fixed keys in the local key-value store"""
    EVENTS = "ciap_boss_agenda_v5"
    OPERATOR = "ciap_operator"
    ROLE = "ciap_role"


class SMART_ADD_SETTINGS:
    """Smart-Add LLM configuration"""
    API_KEY: str = settings.LLM_API_KEY
    PROVIDER: str = settings.LLM_PROVIDER or "openai"
    MODEL: str = settings.LLM_MODEL
    TEMPERATURE: float = settings.LLM_TEMPERATURE
    DEFAULT_REMINDER_MINUTES: int = settings.DEFAULT_REMINDER_MINUTES
    DEFAULT_EMOJI = "📅"


# Card gradients per event type, used by Smart-Add and manual creation
EVENT_TYPE_COLORS = {
    "meeting": "from-slate-800 to-slate-950",
    "lecture": "from-blue-600 to-indigo-700",
    "ceremony": "from-amber-600 to-orange-700",
    "event": "from-blue-500 to-cyan-600",
    "task": "from-emerald-600 to-teal-800",
}
FALLBACK_COLOR = "from-slate-600 to-slate-800"

# createdBy label when no operator name is set
ROLE_LABELS = {
    "chefe": "Chefe CIAP",
    "secretaria": "Secretária CIAP",
}

SHARE_BASE_URL = "https://wa.me/"

AGENDA_TIMEZONE = pytz.timezone(settings.AGENDA_TIMEZONE)
