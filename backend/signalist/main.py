from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from signalist.api.routes import router as api_router
from signalist.db.session import database
from signalist.errors import SignalistError
from signalist.logging import setup_logger
from signalist.web.guard import session_guard
from signalist.web.pages import router as pages_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await database.dispose()


async def handle_signalist_error(request: Request, exc: SignalistError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse({"success": False, "message": exc.message}, status_code=exc.status_code)


def create_app() -> FastAPI:
    setup_logger()
    app = FastAPI(title="Signalist", lifespan=lifespan)
    app.mount("/static", StaticFiles(directory=Path(__file__).parent / "web" / "static"), name="static")
    app.middleware("http")(session_guard)
    app.add_exception_handler(SignalistError, handle_signalist_error)
    app.include_router(api_router)
    app.include_router(pages_router)
    return app


app = create_app()
