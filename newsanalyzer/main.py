import sys
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from newsanalyzer.analysis.news_analyzer import NewsAnalyzer
from newsanalyzer.analysis.router import MISSING_FIELDS_ERROR, create_router as create_analysis_router
from newsanalyzer.core.config import ConfigError, Settings
from newsanalyzer.core.llm_chains import ChatModelClient, get_chat_llm
from newsanalyzer.core.store import HistoryStore
from newsanalyzer.history.router import create_router as create_history_router


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format='%(asctime)s [%(levelname)s] %(message)s')


def create_app(
    settings: Optional[Settings] = None,
    analyzer: Optional[NewsAnalyzer] = None,
    store: Optional[HistoryStore] = None,
) -> FastAPI:
    """Build the API.

    ``analyzer`` and ``store`` are created in the lifespan from ``settings``
    unless they are passed in.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.info("Application starting...")
        if app.state.analyzer is None:
            # No model key: startup fails here.
            llm = get_chat_llm(settings)
            app.state.analyzer = NewsAnalyzer(ChatModelClient(llm))
            logging.info(f"Chat model ready: {settings.openai_model}")

        owns_store = app.state.store is None
        if owns_store:
            app.state.store = await HistoryStore.connect(
                settings.mongodb_uri, settings.mongodb_db, settings.mongodb_collection
            )
        logging.info(f"History store: {app.state.store.state.value}")

        try:
            yield
        finally:
            if owns_store:
                await app.state.store.close()
            logging.info("Application shutting down...")

    app = FastAPI(title="News Analyzer", lifespan=lifespan)
    app.state.analyzer = analyzer
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logging.info(f"Rejected request to {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": MISSING_FIELDS_ERROR})

    app.include_router(create_analysis_router(lambda: app.state.analyzer, lambda: app.state.store))
    app.include_router(create_history_router(lambda: app.state.store, settings.history_limit))

    @app.get("/")
    def read_root():
        store_state = app.state.store.state.value if app.state.store is not None else "starting"
        return {"message": "News analyzer server is running.", "store": store_state}

    return app


def run():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    try:
        settings.require_model_key()
    except ConfigError as e:
        logging.critical(str(e))
        sys.exit(1)

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
