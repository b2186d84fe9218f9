"""Contact-support relay handler."""

import logging

from chatfront.models.results import Render
from chatfront.relay.context import RelayContext
from chatfront.upstream.client import UpstreamError

logger = logging.getLogger(__name__)

SUPPORT_BANNER_PATH = "/support-banner/1"

FALLBACK_BANNER = {
    "titleText": "Contact Support Team",
    "html": (
        "If you need assistance, please call us at <strong>0800 123 456</strong> "
        "or email <a href='mailto:support@example.com'>support@example.com</a>."
    ),
}


async def read_support_banner(ctx: RelayContext) -> Render:
    """Render the contact-support page with the upstream banner.

    The upstream ``{title, content}`` maps to ``{titleText, html}``. Any
    failure falls back to a fixed banner.
    """
    try:
        result = await ctx.call("GET", SUPPORT_BANNER_PATH, requires_session=True)
    except UpstreamError as e:
        logger.error(f"Error fetching support banner: {e}")
        return Render("contact-support", {"supportBanner": FALLBACK_BANNER})

    banner = result.data
    if not isinstance(banner, dict):
        logger.error(f"Unexpected support banner payload: {type(banner).__name__}")
        return Render("contact-support", {"supportBanner": FALLBACK_BANNER})

    return Render("contact-support", {
        "supportBanner": {
            "titleText": banner.get("title"),
            "html": banner.get("content"),
        }
    })
