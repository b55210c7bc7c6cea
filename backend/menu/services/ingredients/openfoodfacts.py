"""Ingredient lookup against the OpenFoodFacts API."""
import logging
from typing import Any

import httpx

from menu.core.config import settings
from menu.schemas.ingredient import IngredientSearchResult

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


class IngredientAPIError(Exception):
    """Lookup failed; ``status`` is set when the API answered with a non-2xx code."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


def _split(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def product_to_result(product: dict[str, Any]) -> IngredientSearchResult:
    categories = _split(product.get("categories"))
    return IngredientSearchResult(
        id=str(product.get("code", "")),
        name=product.get("product_name_en") or product.get("product_name") or "Unknown",
        category=categories[0] if categories else None,
        image_url=product.get("image_front_url"),
        brands=_split(product.get("brands")) or None,
    )


class IngredientAPI:
    """Client for OpenFoodFacts product search and lookup."""

    def __init__(self, base_url: str | None = None):
        self.base_url = (base_url or settings.openfoodfacts_base_url).rstrip("/")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"User-Agent": settings.openfoodfacts_user_agent},
            timeout=settings.openfoodfacts_timeout_seconds,
        )

    async def search(self, query: str | None, limit: int = 20) -> list[IngredientSearchResult]:
        """
        Search products by free text.

        Queries shorter than two characters return an empty list without a
        network call.

        Raises:
            IngredientAPIError: on a non-2xx response or a transport failure
        """
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return []

        params = {
            "search_terms": query.strip(),
            "search_simple": 1,
            "action": "process",
            "json": 1,
            "page_size": limit,
        }
        try:
            async with self._client() as client:
                response = await client.get("/cgi/search.pl", params=params)
                if not response.is_success:
                    raise IngredientAPIError(
                        f"OpenFoodFacts API returned {response.status_code}",
                        response.status_code,
                    )
                data = response.json()
        except IngredientAPIError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error searching ingredients for {query!r}: {e}")
            raise IngredientAPIError("Failed to search ingredients. Please try again.") from e

        products = [
            p for p in data.get("products", [])
            if p.get("product_name") or p.get("product_name_en")
        ]
        return [product_to_result(p) for p in products][:limit]

    async def get(self, product_id: str) -> IngredientSearchResult | None:
        """
        Fetch a single product. Returns None when it does not exist.

        Raises:
            IngredientAPIError: on a non-2xx (other than 404) response or a transport failure
        """
        try:
            async with self._client() as client:
                response = await client.get(f"/api/v0/product/{product_id}.json")
                if response.status_code == 404:
                    return None
                if not response.is_success:
                    raise IngredientAPIError(
                        f"OpenFoodFacts API returned {response.status_code}",
                        response.status_code,
                    )
                data = response.json()
        except IngredientAPIError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching ingredient {product_id}: {e}")
            raise IngredientAPIError("Failed to fetch ingredient details.") from e

        product = data.get("product")
        if not product:
            return None
        return product_to_result(product)
