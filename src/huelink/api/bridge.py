import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Optional

import requests

from huelink.api.http_client import HttpClient
from huelink.api.messages import (
    ConnectionStatus,
    ErrorType,
    HueError,
    Method,
    Reply,
    Request,
    SenderCategory,
)
from huelink.config import BridgeSettings, load_settings
from huelink.repo.credential_store import CredentialStore

logger = logging.getLogger(__name__)

LINK_ATTEMPTS = 10
LINK_INTERVAL = 1.0  # seconds between two registration attempts

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class HueBridge:
    """
    Blocking client for the v1 REST API of one Hue bridge.

    Only one request is in flight at a time. After every request the bridge is
    left alone for a cooldown period whose length depends on who sent the
    request (lights, groups or anything else); the next request waits the
    remainder out before it goes on the wire. The request timeout covers the
    whole exchange, body included: the call runs on a worker thread and is
    abandoned once the deadline passes. All failures are reported
    through the returned Reply, nothing is raised.
    """

    def __init__(self, ip: Optional[str] = None, username: Optional[str] = None, *,
                 settings: Optional[BridgeSettings] = None,
                 credentials: Optional[CredentialStore] = None,
                 session: Optional[requests.Session] = None):
        self.settings = settings or load_settings()
        self._ip = ip or self.settings.bridge_ip
        if not self._ip:
            raise ValueError("No bridge IP given and HUE_BRIDGE_IP is not set.")

        self.credentials = credentials or CredentialStore(self.settings.home)
        if username is None:
            username = self.settings.username or self.credentials.read()
        self._username = username
        self.client = HttpClient(f"http://{self._ip}/api", session=session)

        self._cooldowns = {
            SenderCategory.LIGHT: self.settings.light_block_ms / 1000,
            SenderCategory.GROUP: self.settings.group_block_ms / 1000,
            SenderCategory.OTHER: self.settings.other_block_ms / 1000,
        }
        self._request_timeout = self.settings.request_timeout_ms / 1000
        self._cooldown_until: Optional[float] = None
        self._last_reply = Reply()
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="huelink-http")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self):
        return f"HueBridge(ip={self._ip!r})"

    @property
    def ip(self) -> str:
        return self._ip

    @property
    def username(self) -> str:
        return self._username

    @property
    def last_reply(self) -> Reply:
        return self._last_reply

    @property
    def last_error(self) -> HueError:
        return self._last_reply.error

    @property
    def request_timeout(self) -> float:
        return self._request_timeout

    @property
    def cooldowns(self) -> dict[SenderCategory, float]:
        return dict(self._cooldowns)

    def set_request_timeout(self, timeout_ms: int) -> None:
        """Zero or a negative value restores the configured default."""
        if timeout_ms > 0:
            self._request_timeout = timeout_ms / 1000
        else:
            self._request_timeout = self.settings.request_timeout_ms / 1000

    def set_cooldown(self, category: SenderCategory, cooldown_ms: int) -> None:
        if cooldown_ms < 0:
            raise ValueError(f"'cooldown_ms' must not be negative!\n{cooldown_ms=}")
        self._cooldowns[category] = cooldown_ms / 1000

    # =====================
    # Requests
    def send_request(self, request: Request,
                     category: SenderCategory = SenderCategory.OTHER) -> Reply:
        with self._lock:
            self._wait_for_cooldown()
            reply = self._exchange(request)
            self._cooldown_until = time.monotonic() + self._cooldowns[category]
            self._last_reply = reply
            return reply

    def _wait_for_cooldown(self) -> None:
        if self._cooldown_until is None:
            return
        remaining = self._cooldown_until - time.monotonic()
        if remaining > 0:
            time.sleep(remaining)

    def _exchange(self, request: Request) -> Reply:
        if request.method is Method.POST:
            path, headers = "", FORM_HEADERS
        else:
            path, headers = f"{self._username}/{request.path}", None

        opened: list[requests.Response] = []
        started = time.monotonic()
        future = self._executor.submit(self._fetch, request.method.value, path,
                                       request.body, headers, opened)
        try:
            response = future.result(timeout=self._request_timeout)
        except (FutureTimeout, requests.Timeout):
            # the worker may still be reading; closing the response drops the connection
            for response in opened:
                response.close()
            logger.warning("%s %s timed out after %.3fs", request.method.value,
                           request.path or "/api", self._request_timeout)
            return Reply(timed_out=True)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", request.method.value, request.path or "/api", e)
            status = e.response.status_code if e.response is not None else 0
            return Reply(http_status=status)

        if time.monotonic() - started > self._request_timeout:
            response.close()
            logger.warning("%s %s answered after the %.3fs timeout", request.method.value,
                           request.path or "/api", self._request_timeout)
            return Reply(timed_out=True)

        return self._evaluate(response)

    def _fetch(self, method: str, path: str, payload: dict, headers: Optional[dict[str, str]],
               opened: list) -> requests.Response:
        """Runs on the worker thread: send the request and read the whole body."""
        response = self.client.request(method, path, payload, timeout=self._request_timeout,
                                       headers=headers, stream=True)
        opened.append(response)
        response.content  # read the body while the caller is still waiting
        return response

    @staticmethod
    def _evaluate(response: requests.Response) -> Reply:
        status = response.status_code
        try:
            document = response.json()
        except ValueError:
            logger.debug("Response with status %s is not JSON: %r", status, response.text[:200])
            return Reply(http_status=status)

        if isinstance(document, list):
            first = document[0] if document and isinstance(document[0], dict) else {}
            if "error" in first:
                error_json = first["error"] if isinstance(first["error"], dict) else {}
                return Reply(http_status=status, error=HueError.from_json(error_json),
                             data=error_json)
            if "success" in first:
                success_json = first["success"] if isinstance(first["success"], dict) else {}
                return Reply(valid=True, http_status=status, data=success_json)
            return Reply(http_status=status)

        if isinstance(document, dict) and document:
            return Reply(valid=True, http_status=status, data=document)

        return Reply(http_status=status)

    def test_connection(self) -> tuple[bool, ConnectionStatus]:
        reply = self.send_request(Request.get("lights"))

        if reply.valid:
            return True, ConnectionStatus.SUCCESS
        if reply.timed_out:
            status = ConnectionStatus.TIMED_OUT
        elif reply.http_status != 200:
            status = ConnectionStatus.HTTP_ERROR
        elif reply.contains_error:
            status = ConnectionStatus.JSON_ERROR
        else:
            status = ConnectionStatus.UNKNOWN
        return False, status

    # =====================
    # Pairing
    def link(self, app_name: str = "huelink", device_name: str = "") -> str:
        """
        Get a username for this application, either from the credential file
        or by registering with the bridge. Registration needs the link button
        on the bridge to be pressed; the request is repeated LINK_ATTEMPTS
        times, LINK_INTERVAL seconds apart, while the bridge reports that it
        was not. Returns "" if no username could be obtained.
        """
        cached = self.credentials.read()
        if cached:
            self._username = cached
            return cached

        devicetype = f"{app_name}#{device_name}" if device_name else app_name
        request = Request.post({"devicetype": devicetype})

        reply = self.send_request(request)
        if reply.timed_out:
            logger.error("Request timed out - verify that the IP address of the Hue bridge is correct")
            return ""

        username = self._granted_username(reply)
        if username:
            return self._adopt(username)

        if reply.error.type != ErrorType.LINK_BUTTON_NOT_PRESSED:
            logger.error("Bridge refused to create a user: %s (type %s)",
                         reply.error.description, reply.error.type)
            return ""

        logger.warning("Press the link button on the Hue bridge now...")
        for attempt in range(LINK_ATTEMPTS):
            time.sleep(LINK_INTERVAL)
            logger.info("Attempting to create new user: %d", LINK_ATTEMPTS - attempt)
            username = self._granted_username(self.send_request(request))
            if username:
                return self._adopt(username)

        logger.error("Link button was not pressed in time.")
        return ""

    @staticmethod
    def _granted_username(reply: Reply) -> str:
        if reply.contains_error:
            return ""
        username = reply.data.get("username")
        return username if isinstance(username, str) else ""

    def _adopt(self, username: str) -> str:
        self._username = username
        try:
            self.credentials.write(username)
        except OSError as e:
            logger.error("New user %s could not be saved to %s: %s",
                         username, self.credentials.path, e)
        logger.info("New user created: %s", username)
        return username

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        self.client.close()
