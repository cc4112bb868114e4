"""HTTP transport for the GitHub contents API and raw mirror."""

import logging
from typing import Any

import httpx

from .models import StoreConfig

logger = logging.getLogger(__name__)


class GitHubTransport:
    """Authenticated async transport bound to one repository and branch."""

    def __init__(
        self,
        config: StoreConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize transport.

        Args:
            config: Repository, branch and token settings
            transport: Custom httpx transport (tests inject a mock here)
        """
        self._contents = config.contents_base
        self._raw = config.raw_base
        self._timeout = config.timeout
        self._transport = transport
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "ghdrive-storage-client",
        }

        if config.token:
            self.headers["Authorization"] = f"token {config.token}"
            logger.debug("GitHub transport initialized with token")
        else:
            logger.warning("GitHub transport initialized without token, writes will be rejected")
        logger.info("GitHub transport ready, contents=%s, raw=%s", self._contents, self._raw)

    def contents_url(self, path: str) -> str:
        return f"{self._contents}/{path}"

    def raw_url(self, path: str) -> str:
        return f"{self._raw}/{path}"

    async def request(
        self, method: str, url: str, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        """
        Make one HTTP request upstream.

        Non-success statuses are returned, not raised; only transport
        faults raise ``httpx.HTTPError``.
        """
        logger.debug("Request: %s %s", method, url)
        async with httpx.AsyncClient(
            timeout=self._timeout, headers=self.headers, transport=self._transport
        ) as client:
            response = await client.request(method, url, json=json)
        logger.debug("Response: %s %s (status=%d)", method, url, response.status_code)
        return response

    def report(
        self, operation: str, cause: str, response: httpx.Response | None = None
    ) -> None:
        """Log one failed operation, with status details when a response arrived."""
        if response is None:
            logger.error("%s: cause=%s", operation, cause, extra={"cause": cause})
            return
        ok = response.is_success
        logger.error(
            "%s: cause=%s ok=%s status=%d status_text=%s",
            operation,
            cause,
            ok,
            response.status_code,
            response.reason_phrase,
            extra={
                "cause": cause,
                "ok": ok,
                "status": response.status_code,
                "status_text": response.reason_phrase,
            },
        )
