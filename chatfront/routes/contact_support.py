"""Contact-support route."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from chatfront.relay.context import RelayContext
from chatfront.relay.support import read_support_banner
from chatfront.routes.responses import get_relay_context, to_response

router = APIRouter(tags=["support"])


@router.get("/contact-support", response_class=HTMLResponse)
async def contact_support_page(request: Request, ctx: RelayContext = Depends(get_relay_context)):
    """Render the contact-support page with the upstream support banner."""
    result = await read_support_banner(ctx)
    return to_response(request, result)
