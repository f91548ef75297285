from fastapi import Request

from ciap_agenda.services.session import AgendaSession


def get_session(request: Request) -> AgendaSession:
    return request.app.state.session
