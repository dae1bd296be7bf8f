import json
from typing import Optional

import requests


class HttpClient:
    """Thin wrapper around a requests.Session bound to one base URL."""

    def __init__(self, base_url: str, headers: Optional[dict[str, str]] = None,
                 session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}

    def url_for(self, path: str) -> str:
        if not path:
            return self.base_url
        return f"{self.base_url}/{path}"

    def request(self, method: str, path: str, payload: Optional[dict] = None, *,
                timeout: float, headers: Optional[dict[str, str]] = None,
                stream: bool = False) -> requests.Response:
        """
        Send one request and return the raw response. The payload goes out as
        UTF-8 encoded JSON, an empty object when there is none.
        With `stream` the body is left unread.
        requests exceptions are not caught here.
        """
        _headers = {**self.headers, **(headers or {})}
        data = json.dumps(payload or {}).encode("utf-8")

        return self.session.request(method, self.url_for(path), data=data,
                                    headers=_headers, timeout=timeout, stream=stream)

    def close(self) -> None:
        self.session.close()
