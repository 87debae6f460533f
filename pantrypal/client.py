"""Async client for the household pantry REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .session import SessionContext
from .types import (
    AnalyticsReport,
    Coupon,
    GroceryItem,
    GroceryList,
    InviteLink,
    Member,
    Notification,
    PantryItem,
    Profile,
    RecipeDetail,
    RecipeSummary,
    TripRecord,
)

logger = logging.getLogger(__name__)


class APIError(RuntimeError):
    """A request to the pantry API failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PantryAPI:
    """Thin typed wrapper over the pantry/grocery/recipe endpoints.

    Use as an async context manager::

        async with PantryAPI(base_url, session=session) as api:
            pantry = await api.get_pantry()
    """

    def __init__(
        self,
        base_url: str,
        session: SessionContext | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._session = session
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def session(self) -> SessionContext | None:
        return self._session

    async def __aenter__(self) -> PantryAPI:
        self._get_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._session is not None:
                headers["Authorization"] = self._session.authorization_header()
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict | None = None,
    ) -> Any:
        client = self._get_client()
        logger.debug("%s %s", method, path)
        try:
            response = await client.request(method, path, json=json, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise APIError(
                f"{method} {path} failed with HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise APIError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"{method} {path} returned invalid JSON") from e

    # -- pantry --------------------------------------------------------

    async def get_pantry(self) -> list[PantryItem]:
        data = await self._request("GET", "/pantry")
        return [PantryItem.from_dict(d) for d in data or []]

    async def add_pantry_item(self, item: PantryItem) -> Any:
        payload = item.to_payload()
        payload.pop("id", None)
        return await self._request("POST", "/pantry", json=payload)

    async def update_pantry_item(self, item_id: Any, **fields: Any) -> Any:
        return await self._request("PUT", "/pantry", json={"id": item_id, **fields})

    async def delete_pantry_item(self, item_id: Any) -> None:
        await self._request("DELETE", f"/pantry/{item_id}")

    # -- recipes -------------------------------------------------------

    async def get_recipes(self) -> list[RecipeSummary]:
        data = await self._request("GET", "/recipes")
        return [RecipeSummary.from_dict(d) for d in data or []]

    async def get_recipe(self, recipe_id: Any) -> RecipeDetail:
        data = await self._request("GET", f"/recipes/{recipe_id}")
        if not data:
            raise APIError(f"recipe {recipe_id} not found", status_code=404)
        return RecipeDetail.from_dict(data)

    # -- grocery list --------------------------------------------------

    async def get_grocery(self) -> tuple[GroceryList | None, list[GroceryItem]]:
        data = await self._request("GET", "/grocery") or {}
        list_data = data.get("list")
        grocery_list = GroceryList.from_dict(list_data) if list_data else None
        items = [GroceryItem.from_dict(d) for d in data.get("items") or []]
        return grocery_list, items

    async def add_grocery_item(self, item: GroceryItem) -> Any:
        return await self._request("POST", "/grocery", json=item.to_payload())

    async def update_grocery_item(self, item_id: Any, **fields: Any) -> Any:
        return await self._request("PUT", "/grocery", json={"id": item_id, **fields})

    async def delete_grocery_item(self, item_id: Any) -> None:
        await self._request("DELETE", f"/grocery/{item_id}")

    async def clear_grocery(self) -> None:
        await self._request("DELETE", "/grocery/clear")

    async def set_budget(self, budget_limit: float) -> None:
        await self._request("PUT", "/grocery/budget", json={"budget_limit": budget_limit})

    async def get_coupons(self) -> list[Coupon]:
        data = await self._request("GET", "/coupons")
        return [Coupon.from_dict(d) for d in data or []]

    # -- AI proxy ------------------------------------------------------

    async def estimate_price(self, item_name: str) -> float | None:
        """Ask the AI endpoint for a price estimate; None if it has none."""
        data = await self._request(
            "POST", "/ai/estimate-price", json={"itemName": item_name}
        )
        price = (data or {}).get("price")
        if not price:
            return None
        try:
            return float(price)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric price estimate %r", price)
            return None

    async def chat(self, message: str, history: list[dict] | None = None) -> str:
        """Send a chat turn; *history* is a list of ``{"role", "text"}``."""
        turns = [
            {"role": h["role"], "parts": [{"text": h["text"]}]}
            for h in history or []
            if h.get("text")
        ]
        data = await self._request(
            "POST", "/ai", json={"message": message, "history": turns}
        )
        return (data or {}).get("reply", "")

    # -- profile & history ---------------------------------------------

    async def get_profile(self) -> Profile:
        data = await self._request("GET", "/profile")
        return Profile.from_dict(data or {})

    async def update_profile(
        self, full_name: str, dietary_preferences: list[str]
    ) -> Profile:
        data = await self._request(
            "PUT",
            "/profile",
            json={"full_name": full_name, "dietary_preferences": dietary_preferences},
        )
        return Profile.from_dict(data or {})

    async def get_history(self) -> list[TripRecord]:
        data = await self._request("GET", "/history")
        return [TripRecord.from_dict(d) for d in data or []]

    async def log_trip(self, list_id: Any, total_spent: float) -> Any:
        return await self._request(
            "POST", "/history", json={"list_id": list_id, "total_spent": total_spent}
        )

    async def get_analytics(self, timeframe: str = "monthly") -> AnalyticsReport:
        data = await self._request(
            "GET", "/analytics", params={"timeFrame": timeframe}
        )
        return AnalyticsReport.from_dict(data or {})

    # -- notifications -------------------------------------------------

    async def get_notifications(self) -> list[Notification]:
        data = await self._request("GET", "/notifications")
        return [Notification.from_dict(d) for d in data or []]

    async def create_notification(self, message: str) -> Any:
        return await self._request("POST", "/notifications", json={"message": message})

    async def mark_notification_read(self, notification_id: Any) -> None:
        await self._request("PUT", f"/notifications/{notification_id}/read")

    # -- sharing -------------------------------------------------------

    async def get_members(self) -> list[Member]:
        data = await self._request("GET", "/members") or {}
        return [Member.from_dict(d) for d in data.get("members") or []]

    async def get_invite_links(self) -> list[InviteLink]:
        data = await self._request("GET", "/members/links")
        return [InviteLink.from_dict(d) for d in data or []]

    async def generate_invite_link(self) -> str:
        data = await self._request("POST", "/members/generate-link") or {}
        link = (data.get("data") or {}).get("link")
        if not link:
            raise APIError("invite link missing from response")
        return link

    async def accept_invite(self, invitation_id: str, guest_name: str) -> Any:
        return await self._request(
            "POST",
            "/members/accept",
            json={"invitationId": invitation_id, "guestName": guest_name},
        )

    async def remove_member(self, email: str) -> None:
        await self._request("DELETE", f"/members/{email}")
