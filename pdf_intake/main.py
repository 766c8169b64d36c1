"""
FastAPI application entry point.
Mounts the selection router. Loads env vars.
"""

import logging

from fastapi import FastAPI

from pdf_intake.config import settings

logging.basicConfig(level=settings.LOG_LEVEL)

from pdf_intake.router import router
from pdf_intake.services.dispatcher import UploadDispatcher
from pdf_intake.services.session import SelectionSession


def create_app(dispatcher: UploadDispatcher | None = None) -> FastAPI:
    app = FastAPI(title="PDF Intake")
    if dispatcher is None:
        dispatcher = UploadDispatcher(settings.UPLOAD_URL, timeout=settings.UPLOAD_TIMEOUT_SECONDS)
    app.state.selection = SelectionSession(dispatcher)
    app.include_router(router, prefix="/api")

    @app.get("/")
    def read_root():
        return {"message": "PDF Intake is running"}

    return app


app = create_app()
