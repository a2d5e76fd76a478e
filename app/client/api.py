"""
HTTP client for the Placement Portal API.

Thin wrappers over httpx; every non-2xx response becomes an ApiError
carrying the server's message so the UI can show it verbatim.
"""

from typing import List, Optional

import httpx


class ApiError(Exception):
    """A failed API call. `message` is the server's detail text."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else body
    if isinstance(detail, list):
        return "; ".join(str(item) for item in detail)
    return str(detail) if detail else response.reason_phrase


class PlacementApiClient:
    """
    Usage:
        api = PlacementApiClient("http://localhost:8000/api", token=token)
        users = api.get_users()
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.token = token
        self.client = httpx.Client(base_url=base_url, timeout=timeout, headers=headers, transport=transport)

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, path: str, **kwargs):
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            # no response at all: connection refused, timeout
            raise ApiError(0, str(e) or "Could not reach the server") from e
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    # ---------- auth ----------

    def login(self, email: str, password: str) -> dict:
        """Login and keep the returned token on this client."""
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        self.client.headers["Authorization"] = f"Bearer {self.token}"
        return data

    # ---------- users ----------

    def get_users(self) -> List[dict]:
        return self._request("GET", "/users")["users"]

    def get_user(self, user_id: str) -> dict:
        return self._request("GET", f"/users/{user_id}")["user"]

    def update_user(self, user_id: str, fields: dict) -> dict:
        return self._request("PUT", f"/users/{user_id}", json=fields)

    def update_verification_status(self, user_id: str, is_verified: bool) -> dict:
        return self._request("PATCH", f"/users/{user_id}/verify", json={"is_verified": is_verified})

    def update_user_role(self, user_id: str, role: str) -> dict:
        return self._request("PATCH", f"/users/{user_id}/role", json={"role": role})

    def update_user_company(self, user_id: str, company_id: str) -> dict:
        return self._request("PATCH", f"/users/{user_id}/company", json={"company_id": company_id})

    def delete_user(self, user_id: str) -> dict:
        return self._request("DELETE", f"/users/{user_id}")

    # ---------- companies ----------

    def get_companies(self) -> List[dict]:
        return self._request("GET", "/companies")

    def get_company(self, company_id: str) -> dict:
        return self._request("GET", f"/companies/{company_id}")

    def add_company(self, data: dict) -> dict:
        return self._request("POST", "/companies", json=data)

    def update_company(self, company_id: str, data: dict) -> dict:
        return self._request("PUT", f"/companies/{company_id}", json=data)

    def delete_company(self, company_id: str) -> dict:
        return self._request("DELETE", f"/companies/{company_id}")
