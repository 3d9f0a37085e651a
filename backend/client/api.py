# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Thin synchronous client for the /api/users endpoints.

Wraps an ``httpx.Client``; pass your own (e.g. FastAPI's TestClient, which
is one) or let the class build one from *base_url*.  Non-2xx answers raise
:class:`ApiError` carrying the server's ``message``; transport failures
surface as the underlying ``httpx.HTTPError``.
"""

from typing import Optional

import httpx


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class AuthApi:
    def __init__(self, base_url: str = "", client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _post(self, path: str, payload: dict) -> dict:
        return self._unwrap(self._client.post(path, json=payload))

    @staticmethod
    def _unwrap(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.is_success:
            return body.get("data", {})
        message = body.get("message") if isinstance(body, dict) else None
        raise ApiError(response.status_code, message or response.reason_phrase)

    def register(self, name: str, email: str, phone: str, password: str) -> dict:
        return self._post(
            "/api/users/register",
            {"name": name, "email": email, "phone": phone, "password": password},
        )

    def login(self, email: str, password: str, passphrase: Optional[str] = None) -> dict:
        payload = {"email": email, "password": password}
        if passphrase:
            payload["passphrase"] = passphrase
        return self._post("/api/users/login", payload)

    def profile(self, token: str) -> dict:
        response = self._client.get(
            "/api/users/profile", headers={"Authorization": f"Bearer {token}"}
        )
        return self._unwrap(response)
