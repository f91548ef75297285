import logging
from typing import Optional

from fastapi import FastAPI

from ciap_agenda.config import settings
from ciap_agenda.constants import APP_SETTINGS
from ciap_agenda.db.persistence import AgendaPersistence, JsonFileStorage
from ciap_agenda.routes import calendar, events, health, reminders, session as session_routes, smart_add
from ciap_agenda.services.session import AgendaSession

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s"
)

logger = logging.getLogger(__name__)


def build_session() -> AgendaSession:
    storage = JsonFileStorage(settings.STORAGE_PATH)
    return AgendaSession(AgendaPersistence(storage))


def create_app(session: Optional[AgendaSession] = None) -> FastAPI:
    app = FastAPI(
        title=APP_SETTINGS.APP_NAME,
        version=APP_SETTINGS.VERSION,
        description=APP_SETTINGS.DESCRIPTION
    )
    app.state.session = session or build_session()

    @app.on_event("startup")
    async def startup_event():
        """Validate configuration, load the agenda and start the reminder timer"""
        from ciap_agenda.config import validate_required_keys
        try:
            validate_required_keys()
        except ValueError as e:
            logger.warning("%s Smart-Add requests will fail until this is fixed.", e)
        await app.state.session.open()
        logger.info("Agenda loaded with %d event(s)", len(app.state.session.store))

    @app.on_event("shutdown")
    async def shutdown_event():
        """Stop the reminder timer"""
        await app.state.session.close()

    @app.get("/")
    async def root():
        return {"message": f"Welcome to {APP_SETTINGS.APP_NAME}"}

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(session_routes.router, prefix="/session", tags=["Session"])
    app.include_router(events.router, prefix="/events", tags=["Events"])
    app.include_router(calendar.router, prefix="/calendar", tags=["Calendar"])
    app.include_router(reminders.router, prefix="/reminders", tags=["Reminders"])
    app.include_router(smart_add.router, prefix="/smart-add", tags=["Smart-Add"])

    return app


def main():
    import uvicorn

    uvicorn.run(
        "ciap_agenda.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.APP_ENV == "development"
    )


if __name__ == "__main__":
    main()
