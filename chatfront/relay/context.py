"""Per-request context shared by the relay handlers."""

from dataclasses import dataclass
from typing import Dict, Optional

from chatfront.i18n import translate
from chatfront.session.bridge import SessionBridge
from chatfront.upstream.client import UpstreamClient, UpstreamCredentials, UpstreamResponse


@dataclass
class RelayContext:
    """Everything a relay handler needs for one browser request.

    Attributes:
        bridge: Accessor for the local session's upstream fields
        client: Upstream client
        lang: Language of the request ("en" or "cy")
    """
    bridge: SessionBridge
    client: UpstreamClient
    lang: str = "en"

    def credentials(self) -> UpstreamCredentials:
        return UpstreamCredentials(lang=self.lang, session_cookie=self.bridge.get_upstream_cookie())

    async def call(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        requires_session: bool = False,
    ) -> UpstreamResponse:
        """Relay one upstream call and remember the CSRF token it used."""
        result = await self.client.call(
            self.credentials(), method, path, body, requires_session=requires_session
        )
        self.bridge.set_csrf_token(result.csrf_token)
        return result

    def t(self, key: str) -> str:
        return translate(key, self.lang)

    def messages(self, field_errors: Dict[str, str]) -> Dict[str, str]:
        """Translate a dict of field name -> message key."""
        return {name: self.t(key) for name, key in field_errors.items()}
