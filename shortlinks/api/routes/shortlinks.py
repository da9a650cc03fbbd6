from fastapi import APIRouter, Depends, Path, status

from shortlinks.api import schemas
from shortlinks.api.dependencies import get_shortener_engine, to_http_exception
from shortlinks.services.exceptions import ShortlinkError
from shortlinks.services.shortener import ShortenerEngine

router = APIRouter(tags=["shortlinks"])


@router.post(
    "/shorten",
    response_model=schemas.ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        500: {"model": schemas.ErrorResponse, "description": "Short link could not be stored"}
    }
)
async def shorten_url(
    request: schemas.ShortenRequest,
    engine: ShortenerEngine = Depends(get_shortener_engine),
):
    try:
        code = await engine.shorten_to_code(request.url)
    except ShortlinkError as e:
        raise to_http_exception(e)
    return schemas.ShortenResponse(
        short_url=engine.short_url(code),
        hash=code,
        url=request.url,
    )


@router.get(
    "/resolve/{code}",
    response_model=schemas.ResolveResponse,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Short link not found"},
        409: {"model": schemas.ErrorResponse, "description": "Short code matches several links"}
    }
)
async def resolve_code(
    code: str = Path(..., description="The short code to resolve"),
    engine: ShortenerEngine = Depends(get_shortener_engine),
):
    try:
        url = await engine.resolve(code)
    except ShortlinkError as e:
        raise to_http_exception(e)
    return schemas.ResolveResponse(hash=code, url=url)
