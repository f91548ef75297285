"""
Outbound sharing: a preformatted WhatsApp summary of an event and the
wa.me deep link that carries it. Fire-and-forget, nothing confirms delivery.
"""

from urllib.parse import quote

from ciap_agenda.constants import SHARE_BASE_URL
from ciap_agenda.dto import CalendarEvent, ShareLink
from ciap_agenda.utils.datetime_utils import format_date, format_time

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_share_text(event: CalendarEvent) -> str:
    return (
        "📢 *CIAP PM/PA - Agenda Chefia*\n"
        f"🗓️ *Evento:* {event.title}\n"
        f"📅 *Data:* {format_date(event.start)}\n"
        f"⏰ *Hora:* {format_time(event.start)}\n"
        f"👤 *Responsável:* {event.responsible}\n"
        f"👥 *Participantes:* {', '.join(event.participants)}\n"
        f"📝 *Descrição:* {event.description or 'Sem descrição.'}\n"
        f"✍️ *Registrado por:* {event.created_by}\n"
        "--------------------------"
    )


def build_share_link(text: str) -> str:
    return f"{SHARE_BASE_URL}?text={quote(text, safe=_URI_COMPONENT_SAFE)}"


def share_event(event: CalendarEvent) -> ShareLink:
    text = build_share_text(event)
    return ShareLink(text=text, url=build_share_link(text))
