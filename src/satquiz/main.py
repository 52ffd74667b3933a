import logging
import os
import random
import uuid
from logging.handlers import RotatingFileHandler
from typing import Optional

import uvicorn
from fastapi import (
    Cookie,
    Depends,
    FastAPI,
    Form,
    Request,
)
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .bank import QuestionBankLoader
from .config import settings
from .controller import LOAD_FAILED_MESSAGE, QuizController
from .models import SessionStatus
from .session_store import SessionStore, create_session_store

# --- Logging Setup ---
logger = logging.getLogger("satquiz")
logger.setLevel(logging.INFO)

if settings.LOG_TO_FILE:
    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)


# --- App Setup ---
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG)
app.mount("/static", StaticFiles(directory=os.path.join(BASE_DIR, "static")), name="static")
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))

session_store = create_session_store()
quiz_rng = random.Random()


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
) -> Optional[str]:
    return session_id


def get_session_store() -> SessionStore:
    return session_store


def get_bank_loader() -> QuestionBankLoader:
    return QuestionBankLoader(settings.QUESTIONS_SOURCE)


def get_rng() -> random.Random:
    return quiz_rng


def _load_controller(
    session_id: Optional[str], store: SessionStore, rng: random.Random
) -> Optional[QuizController]:
    if not session_id:
        return None
    session = store.get(session_id)
    if not session:
        return None
    return QuizController(session, rng=rng)


def get_controller(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    rng: random.Random = Depends(get_rng),
) -> Optional[QuizController]:
    return _load_controller(session_id, store, rng)


def _invalid_session() -> JSONResponse:
    return JSONResponse({"error": "Session invalid"}, status_code=401)


def _wrong_state(controller: QuizController) -> JSONResponse:
    return JSONResponse(
        {"error": f"Session is {controller.status.value}"}, status_code=409
    )


def _new_session(
    loader: QuestionBankLoader, store: SessionStore, rng: random.Random
) -> JSONResponse:
    controller = QuizController(rng=rng)
    session = controller.start(loader)
    if session.status == SessionStatus.ERROR:
        return JSONResponse(
            {"error": LOAD_FAILED_MESSAGE, "detail": session.error}, status_code=503
        )

    new_id = str(uuid.uuid4())
    store.save(new_id, session)
    logger.info(f"New session: {new_id} [{session.total} questions]")

    response = JSONResponse(controller.current_view().model_dump(mode="json"))
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=new_id,
        httponly=True,
        samesite="Lax",
    )
    return response


# --- Routes ---
@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return templates.TemplateResponse(
        request, "index.html", {"project_name": settings.PROJECT_NAME}
    )


@app.post("/api/start")
def start_session(
    session_id: Optional[str] = Depends(get_session_id),
    loader: QuestionBankLoader = Depends(get_bank_loader),
    store: SessionStore = Depends(get_session_store),
    rng: random.Random = Depends(get_rng),
):
    if session_id:
        store.delete(session_id)
    return _new_session(loader, store, rng)


@app.get("/api/quiz")
def get_question_data(controller: Optional[QuizController] = Depends(get_controller)):
    if not controller:
        return _invalid_session()
    return controller.current_view()


@app.post("/api/answer")
def submit_answer(
    answer: str = Form(...),
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    rng: random.Random = Depends(get_rng),
):
    if not session_id:
        return _invalid_session()

    with store.lock(session_id):
        controller = _load_controller(session_id, store, rng)
        if not controller:
            return _invalid_session()
        if controller.status != SessionStatus.IN_PROGRESS:
            return _wrong_state(controller)
        if answer not in controller.session.presented_options:
            return JSONResponse({"error": "Invalid option"}, status_code=400)

        result, feedback = controller.submit(answer)
        store.save(session_id, controller.session)

    return {
        "result": result,
        "feedback": feedback,
        "score": controller.session.state.score,
        "total": controller.session.total,
    }


@app.post("/api/next")
def next_question(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    rng: random.Random = Depends(get_rng),
):
    if not session_id:
        return _invalid_session()

    with store.lock(session_id):
        controller = _load_controller(session_id, store, rng)
        if not controller:
            return _invalid_session()
        if controller.status != SessionStatus.IN_PROGRESS:
            return _wrong_state(controller)
        if not controller.session.state.answered:
            return JSONResponse(
                {"error": "Answer the current question first"}, status_code=400
            )

        controller.advance()
        store.save(session_id, controller.session)
    return controller.current_view()


@app.get("/api/result")
def get_result_data(controller: Optional[QuizController] = Depends(get_controller)):
    if not controller:
        return _invalid_session()
    if controller.status != SessionStatus.COMPLETE:
        return _wrong_state(controller)

    return {
        "score": controller.session.state.score,
        "total": controller.session.total,
        "summary": controller.summary(),
    }


@app.post("/api/restart")
def restart_session(
    session_id: Optional[str] = Depends(get_session_id),
    loader: QuestionBankLoader = Depends(get_bank_loader),
    store: SessionStore = Depends(get_session_store),
    rng: random.Random = Depends(get_rng),
):
    if session_id:
        store.delete(session_id)
        logger.info(f"Reset session: {session_id}")
    return _new_session(loader, store, rng)


if __name__ == "__main__":
    uvicorn.run("satquiz.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
