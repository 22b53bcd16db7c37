"""
Shopify API Client

Shared client for the Shopify Admin API (GraphQL, plus REST for the
connection check). Handles authentication, rate limiting, HTTP retries
and GraphQL cost throttling.
"""

import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests

logger = logging.getLogger(__name__)


class ShopifyAPIClient:
    """
    Shared client for Shopify Admin API.

    Handles:
    - Authentication
    - Rate limiting (minimum interval between requests)
    - HTTP retries on 429/5xx, honoring Retry-After
    - GraphQL THROTTLED responses (linear wait, then one final attempt)

    Usage:
        client = ShopifyAPIClient(shop="my-store", access_token="shpat_xxx")

        # GraphQL request
        data = client.graphql_request(query, variables)
    """

    API_VERSION = "2024-01"
    MAX_RETRIES = 5
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}

    # THROTTLED handling: wait min(attempt * step, max_wait) seconds
    THROTTLE_RETRIES = 6
    THROTTLE_STEP = 5
    THROTTLE_MAX_WAIT = 30

    def __init__(
        self,
        shop: str,
        access_token: str,
        api_version: Optional[str] = None,
        throttle: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the API client.

        Args:
            shop: Shop name (without .myshopify.com) or full domain
            access_token: Shopify Admin API access token
            api_version: Admin API version, defaults to API_VERSION
            throttle: Throttle policy (keys: retries, step, max_wait)
        """
        # Normalize shop name
        if ".myshopify.com" in shop:
            self.shop = shop.replace("https://", "").replace("http://", "").split(".myshopify.com")[0]
        else:
            self.shop = shop

        self.access_token = access_token
        self.api_version = api_version or self.API_VERSION
        self.base_url = f"https://{self.shop}.myshopify.com/admin/api/{self.api_version}"
        self.graphql_url = f"{self.base_url}/graphql.json"

        self.session = requests.Session()
        self.session.headers.update({
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        })

        throttle = throttle or {}
        self.throttle_retries = int(throttle.get("retries", self.THROTTLE_RETRIES))
        self.throttle_step = float(throttle.get("step", self.THROTTLE_STEP))
        self.throttle_max_wait = float(throttle.get("max_wait", self.THROTTLE_MAX_WAIT))

        # Rate limiting
        self.requests_made = 0
        self.throttled_count = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.5  # 2 req/sec

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self):
        """Wait until min_request_interval has passed since the last request."""
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    @staticmethod
    def _retry_after(response, attempt: int) -> int:
        """Seconds to wait before a retry: Retry-After (may be "2.0"), else 2 ** attempt."""
        try:
            return max(0, int(float(response.headers.get("Retry-After"))))
        except (TypeError, ValueError, OverflowError):
            return 2 ** attempt

    def rest_request(self, endpoint: str, timeout: int = 30) -> Optional[Dict]:
        """
        GET a REST endpoint with rate limiting and error handling.

        Args:
            endpoint: API endpoint (e.g., "shop.json")
            timeout: Request timeout in seconds

        Returns:
            Response JSON or None on error
        """
        url = urljoin(self.base_url + "/", endpoint)

        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                response = self.session.get(url, timeout=timeout)

                if response.status_code in self.RETRYABLE_STATUS_CODES:
                    retry_after = self._retry_after(response, attempt)
                    logger.warning("HTTP %d on %s, retry %d/%d in %ds...",
                                   response.status_code, endpoint, attempt + 1,
                                   self.MAX_RETRIES, retry_after)
                    time.sleep(retry_after)
                    continue

                if response.status_code >= 400:
                    logger.error("API Error %d: %s", response.status_code, response.text[:200])
                    return None

                return response.json()

            except requests.exceptions.Timeout:
                logger.error("Request timeout: %s", endpoint)
                return None
            except requests.exceptions.RequestException as e:
                logger.error("Request failed: %s", e)
                return None
            except ValueError as e:
                logger.error("Invalid JSON from %s: %s", endpoint, e)
                return None

        logger.error("Max retries (%d) exceeded for GET %s", self.MAX_RETRIES, endpoint)
        return None

    def _post_graphql(self, payload: Dict, timeout: int) -> Optional[Dict]:
        """
        POST a GraphQL payload, retrying retryable HTTP statuses.

        Returns:
            The full response body (with 'data' and/or 'errors') or None
        """
        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                response = self.session.post(
                    self.graphql_url,
                    json=payload,
                    timeout=timeout
                )

                if response.status_code in self.RETRYABLE_STATUS_CODES:
                    retry_after = self._retry_after(response, attempt)
                    logger.warning("HTTP %d on GraphQL, retry %d/%d in %ds...",
                                   response.status_code, attempt + 1,
                                   self.MAX_RETRIES, retry_after)
                    time.sleep(retry_after)
                    continue

                if response.status_code >= 400:
                    logger.error("API Error %d: %s", response.status_code, response.text[:200])
                    return None

                return response.json()

            except requests.exceptions.Timeout:
                logger.error("GraphQL request timeout")
                return None
            except requests.exceptions.RequestException as e:
                logger.error("Request failed: %s", e)
                return None
            except ValueError as e:
                logger.error("Invalid JSON in GraphQL response: %s", e)
                return None

        logger.error("Max retries (%d) exceeded for GraphQL request", self.MAX_RETRIES)
        return None

    @staticmethod
    def is_throttled(result: Dict) -> bool:
        """True if the response body reports a THROTTLED error."""
        errors = result.get("errors")
        if not errors or not isinstance(errors, list):
            return False
        first = errors[0] if isinstance(errors[0], dict) else {}
        return (first.get("extensions") or {}).get("code") == "THROTTLED"

    @staticmethod
    def _extract_data(result: Dict) -> Optional[Dict]:
        if "errors" in result:
            logger.error("GraphQL Errors: %s", result['errors'])
            return None
        return result.get("data")

    def graphql_request(
        self,
        query: str,
        variables: Optional[Dict] = None,
        timeout: int = 30
    ) -> Optional[Dict]:
        """
        Make GraphQL API request with rate limiting and throttle handling.

        A THROTTLED response is retried after min(attempt * step, max_wait)
        seconds, up to throttle_retries times. When those are used up one
        final attempt is made and its result returned as-is.

        Args:
            query: GraphQL query or mutation
            variables: Query variables
            timeout: Request timeout in seconds

        Returns:
            Response data (without 'data' wrapper) or None on error
        """
        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        for attempt in range(1, self.throttle_retries + 1):
            result = self._post_graphql(payload, timeout)
            if result is None:
                return None

            if self.is_throttled(result):
                self.throttled_count += 1
                wait = min(attempt * self.throttle_step, self.throttle_max_wait)
                logger.warning("Throttled, waiting %gs (attempt %d/%d)...",
                               wait, attempt, self.throttle_retries)
                time.sleep(wait)
                continue

            return self._extract_data(result)

        logger.warning("Final attempt after %d throttle waits", self.throttle_retries)
        result = self._post_graphql(payload, timeout)
        if result is None:
            return None
        return self._extract_data(result)

    def test_connection(self) -> bool:
        """
        Test API connection by fetching shop info.

        Returns:
            True if connection successful
        """
        result = self.rest_request("shop.json")
        if result and "shop" in result:
            shop_name = result["shop"].get("name", "Unknown")
            logger.info("Connected to: %s", shop_name)
            return True
        return False
