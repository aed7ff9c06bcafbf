"""
app/services/quote_service.py

Purpose: Inspirational quote source

- Fetches a random quote from the ZenQuotes API
- Formats it as "<quote> -<author>"
"""

import httpx
from typing import Optional

from app.core.exceptions import SourceUnavailableError
from app.core.logging import get_logger

logger = get_logger(__name__)


class QuoteService:
    """
    Fetches quotes over a shared httpx client.
    """

    def __init__(self, url: str, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self._url = url
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch_quote(self) -> str:
        """
        Returns one quote.

        Raises:
            SourceUnavailableError: On network errors, bad status or an unexpected payload
        """
        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
            data = response.json()
            quote = data[0]["q"] + " -" + data[0]["a"]
        except httpx.TimeoutException as e:
            logger.error("Quote API timeout")
            raise SourceUnavailableError("Quote API timeout") from e
        except httpx.HTTPError as e:
            logger.error(f"Error fetching quote: {e}")
            raise SourceUnavailableError(f"Quote API error: {e}") from e
        except (ValueError, LookupError, TypeError) as e:
            logger.error(f"Unexpected quote payload: {e}")
            raise SourceUnavailableError("Unexpected quote payload") from e

        return quote

    async def close(self):
        await self._client.aclose()
