import httpx
import logging
import uuid
from typing import Optional, Dict, Any
from urllib.parse import quote

from ..version import SDK_VERSION
from ..exceptions import RemoteError, TransportError, TimeoutException
from ..utils.timing import time_block

logger = logging.getLogger(__name__)


def url_join(base: str, *values: str) -> str:
    """
    Append user values (namespace, artifact name, version) to a literal path.

    Every value is percent-encoded as a single segment, "/" included.
    """
    return "/".join([base.rstrip("/")] + [quote(v, safe="") for v in values])


class HttpClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 600.0,
        extra_headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.extra_headers = extra_headers or {}
        self._client = client or httpx.Client(timeout=timeout)

    def _headers(self, request_id: str) -> Dict[str, str]:
        h = {
            "X-Request-Id": request_id,
            "User-Agent": f"cdap-sdk/{SDK_VERSION}",
        }
        h.update(self.extra_headers)
        return h

    def request(
        self,
        method: str,
        path: str,
        content: Optional[bytes] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> bytes:
        """
        Send one request and return the raw response body.

        Raises:
            TimeoutException: the registry did not answer in time
            TransportError: the registry could not be reached
            RemoteError: any non-2xx status, with status code and body
        """
        request_id = str(uuid.uuid4())
        url = f"{self.base_url}{path}"
        req_headers = self._headers(request_id)
        if headers:
            req_headers.update(headers)

        with time_block() as timer:
            try:
                resp = self._client.request(
                    method,
                    url,
                    content=content,
                    json=json,
                    headers=req_headers,
                    timeout=self.timeout,
                )
            except httpx.TimeoutException as e:
                raise TimeoutException(
                    f"{method} {url} timed out after {self.timeout}s",
                    {"request_id": request_id},
                ) from e
            except httpx.TransportError as e:
                raise TransportError(
                    f"{method} {url} failed: {e}", {"request_id": request_id}
                ) from e

        logger.debug(
            f"{method} {url} -> {resp.status_code} in {timer.elapsed:.3f}s "
            f"(request_id={request_id})"
        )
        if not resp.is_success:
            raise RemoteError(resp.status_code, resp.text, method=method, url=url)
        return resp.content

    def close(self):
        self._client.close()
