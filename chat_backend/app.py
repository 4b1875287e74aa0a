import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import OpenAI

from chat_backend.chatbot import Chatbot, InvalidChatRequest, parse_chat_request, verify_api_key
from chat_backend.config import AdvisorSettings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request"


def create_app(settings: Optional[AdvisorSettings] = None, generation_client=None) -> FastAPI:
    """
    Build the exchange API.

    Settings and the completion client are created here when not injected, so
    `uvicorn --factory chat_backend.app:create_app` fails at startup without a key.
    """
    if settings is None:
        settings = AdvisorSettings.from_env()

    if generation_client is None:
        generation_client = OpenAI(api_key=settings.openai_api_key.get_secret_value())

    chatbot = Chatbot(
        generation_client=generation_client,
        settings=settings,
        logger=logger,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.verify_api_key:
            await run_in_threadpool(verify_api_key, generation_client, logger)
        yield

    app = FastAPI(
        title="Cambridge Physics Advisor API",
        description="Exchange endpoint for the postgraduate physics advisor chat widget",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.chatbot = chatbot

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,  # must be False when using "*"
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/debug/ping")
    def ping():
        return {"status": "alive"}

    @app.post("/api/chat")
    async def chat_request(request: Request):
        """Validate the body, run one completion and return {message} or {programs, supervisors}"""
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse(status_code=400, content={"error": "Request body must be valid JSON"})

        try:
            history = parse_chat_request(body)
        except InvalidChatRequest as e:
            logger.info(f"Rejected chat request: {e}")
            return JSONResponse(status_code=400, content={"error": str(e)})

        try:
            return await run_in_threadpool(chatbot.chat, history)
        except Exception as e:
            logger.exception(f"Error in chat API: {e}")
            return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})

    return app


def main():
    # SET UP LOGGING
    logging.basicConfig(level=logging.INFO)

    settings = AdvisorSettings.from_env()
    app = create_app(settings)

    logger.info(f"Starting advisor backend on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
