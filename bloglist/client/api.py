"""
Bloglist — HTTP Client
=======================

What:  Async client for the Bloglist REST API.
How:   Wraps an httpx.AsyncClient. After login() the token is sent as
       `Authorization: bearer <token>` on the protected calls.
Who:   Used by the thunks in bloglist.client.actions; tests drive it against
       the ASGI app through httpx.ASGITransport.

Failures (any non-2xx response) raise ApiError carrying the status code and
the server's error message.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from bloglist.client.store import BlogRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3003"


class ApiError(Exception):
    """A non-2xx response from the API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            return cls(response.status_code, response.text or response.reason_phrase)
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or response.reason_phrase
        else:
            message = response.reason_phrase
        return cls(response.status_code, message)


class BlogClient:
    """
    Async client for the blog and login endpoints.

    Usage:
        async with BlogClient("http://localhost:3003") as api:
            await api.login("root", "sekret")
            blogs = await api.get_all()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._token: Optional[str] = None
        self.user: Optional[Dict[str, str]] = None

    async def __aenter__(self) -> "BlogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ── Auth ──────────────────────────────────────────────────────────────

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def _auth_headers(self) -> Dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"bearer {self._token}"}

    async def login(self, username: str, password: str) -> Dict[str, str]:
        """Log in, remember the token, and return {token, username, name}."""
        data = await self._request(
            "POST", "/api/login", json={"username": username, "password": password}
        )
        self._token = data["token"]
        self.user = {"username": data["username"], "name": data["name"]}
        logger.info("Logged in as %s", data["username"])
        return data

    def logout(self) -> None:
        self._token = None
        self.user = None

    async def register(self, username: str, name: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/users",
            json={"username": username, "name": name, "password": password},
        )

    # ── Blogs ─────────────────────────────────────────────────────────────

    async def get_all(self) -> List[BlogRecord]:
        data = await self._request("GET", "/api/blogs")
        return [BlogRecord.model_validate(item) for item in data]

    async def create(
        self,
        title: str,
        url: str,
        author: Optional[str] = None,
        likes: Optional[int] = None,
    ) -> BlogRecord:
        body: Dict[str, Any] = {"title": title, "url": url}
        if author is not None:
            body["author"] = author
        if likes is not None:
            body["likes"] = likes
        data = await self._request("POST", "/api/blogs", json=body, auth=True)
        return BlogRecord.model_validate(data)

    async def update(self, blog: BlogRecord) -> BlogRecord:
        """PUT the blog's mutable fields back to the server."""
        body = blog.model_dump(include={"title", "author", "url", "likes"})
        data = await self._request("PUT", f"/api/blogs/{blog.id}", json=body)
        return BlogRecord.model_validate(data)

    async def remove(self, blog_id: str) -> None:
        await self._request("DELETE", f"/api/blogs/{blog_id}", auth=True)

    # ── Transport ─────────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        auth: bool = False,
    ) -> Any:
        headers = self._auth_headers() if auth else {}
        response = await self._http.request(method, path, json=json, headers=headers)
        if response.is_error:
            error = ApiError.from_response(response)
            logger.warning("%s %s failed: %s", method, path, error)
            raise error
        if response.status_code == 204 or not response.content:
            return None
        return response.json()
