from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..schemas import HealthResponse, ServiceDescriptor
from ..services import TranslationHandler, dump, health_status, service_descriptor

router = APIRouter(tags=["translation"])


def get_translation_handler(request: Request) -> TranslationHandler:
    return request.app.state.translation_handler


@router.get("/", response_model=ServiceDescriptor)
def root() -> JSONResponse:
    return JSONResponse(dump(service_descriptor()))


@router.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings)) -> JSONResponse:
    return JSONResponse(dump(health_status(settings)))


@router.post("/translate")
async def translate(
    request: Request,
    handler: TranslationHandler = Depends(get_translation_handler),
) -> JSONResponse:
    # Parsed by the handler itself so malformed JSON gets its own error code.
    outcome = await handler.translate(await request.body())
    return JSONResponse(status_code=outcome.status_code, content=outcome.content())
