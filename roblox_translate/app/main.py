import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .routers import translate
from .services import CORS_HEADERS, SERVICE_NAME, SERVICE_VERSION, TranslationHandler

load_dotenv()

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings = get_settings()
    logger.info("Translation server starting (model %s)", settings.gemini_model)
    logger.info("Gemini API configured: %s", settings.api_key_configured)
    yield
    logger.info("Translation server shutdown.")


app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
    description="Translation gateway for Roblox experiences backed by Gemini",
    lifespan=lifespan,
)
app.state.translation_handler = TranslationHandler(logger=logging.getLogger("roblox_translate.handler"))


@app.middleware("http")
async def cors_headers(request: Request, call_next) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    # A known path with the wrong method is reported as not found as well.
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


app.include_router(translate.router)


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
