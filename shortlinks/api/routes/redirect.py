"""Short URL redirection endpoint."""

import logging

from fastapi import APIRouter, Depends, status
from starlette.responses import RedirectResponse

from shortlinks.api.dependencies import get_shortener_engine, to_http_exception
from shortlinks.services.exceptions import ShortlinkError
from shortlinks.services.shortener import ShortenerEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["redirect"])


@router.get(
    "/short/{code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_307_TEMPORARY_REDIRECT
)
async def redirect_to_original_url(
    code: str,
    engine: ShortenerEngine = Depends(get_shortener_engine),
):
    """Redirect a short URL to the page it was created from."""
    try:
        url = await engine.resolve(code)
    except ShortlinkError as e:
        logger.info(f"Redirect failed for {code}: {e}")
        raise to_http_exception(e)
    return RedirectResponse(url=url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
