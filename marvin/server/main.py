import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from marvin.brain.orchestrator import Assistant, build_assistant
from marvin.bus.messages import (AskRequest, CommandReply, CommandRequest, ConversationMessage,
                                 PerceptionSnapshot, ProModeRequest)
from marvin.config import Settings, setup_logging
from marvin.vision.draw import frame_to_jpeg

logger = logging.getLogger(__name__)


def create_app(assistant: Optional[Assistant] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.assistant = assistant or build_assistant()
        app.state.assistant.router.welcome()
        yield
        await app.state.assistant.close()

    app = FastAPI(title="Marvin Backend", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _assistant(request: Request) -> Assistant:
        return request.app.state.assistant

    def _visible_assistant(request: Request) -> Assistant:
        a = _assistant(request)
        if not a.session.visible:
            raise HTTPException(status_code=409, detail="Marvin is shut down. Restart to interact again.")
        return a

    @app.get("/health")
    def health():
        return {"status": "ok", "service": "marvin-backend", "ts": time.strftime("%Y-%m-%dT%H-%M-%S")}

    @app.post("/command", response_model=CommandReply)
    async def command(req: CommandRequest, request: Request):
        a = _visible_assistant(request)
        text = req.text.strip()
        if not text:
            raise HTTPException(status_code=422, detail="Empty command")
        before = len(a.conversation.replies())
        say = await a.handle(text)
        return CommandReply(say=say, responses=a.conversation.replies()[before:])

    @app.post("/ask", response_model=CommandReply)
    async def ask(req: AskRequest, request: Request):
        say = await _visible_assistant(request).router.query_llm(req.message)
        return CommandReply(say=say, responses=[say])

    @app.post("/pro-mode", response_model=CommandReply)
    async def pro_mode(req: ProModeRequest, request: Request):
        say = await _visible_assistant(request).router.set_pro_mode(req.enabled)
        return CommandReply(say=say, responses=[say])

    @app.get("/perception", response_model=PerceptionSnapshot)
    def perception(request: Request):
        p = _assistant(request).perception
        return PerceptionSnapshot(
            webcam_active=p.camera_active,
            emotion_active=p.emotion_active,
            detections=p.current_detections(),
            detection_text=p.detection_text(),
            emotion=p.current_emotion(),
        )

    @app.get("/vision/frame.jpg")
    def frame(request: Request):
        img = _assistant(request).perception.current_frame()
        if img is None:
            raise HTTPException(status_code=404, detail="No frame yet. Turn on vision first.")
        return Response(content=frame_to_jpeg(img), media_type="image/jpeg")

    @app.get("/conversation", response_model=list[ConversationMessage])
    def conversation(request: Request):
        return _assistant(request).conversation.messages

    return app


app = create_app()


def serve():
    """`marvin-server` entry point."""
    load_dotenv()
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    uvicorn.run("marvin.server.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
