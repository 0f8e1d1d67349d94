"""Base API client with common functionality."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import requests

from ..exceptions import APIError, ResponseDecodeError


class BaseAPIClient(ABC):
    """Base class for API clients with common functionality.

    Requests are synchronous and sent once: a non-2xx status raises
    ``APIError`` and nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        verify_ssl: bool = True
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.logger = logging.getLogger(self.__class__.__name__)
        self.session = requests.Session()

    @abstractmethod
    def authenticate(self) -> Dict[str, str]:
        """Return authentication headers."""
        pass

    def build_url(self, endpoint: str) -> str:
        """Resolve an endpoint against the base URL.

        Absolute URLs (as handed out by the APIs themselves) are used as is.
        """
        if endpoint.startswith("http://") or endpoint.startswith("https://"):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Any] = None,
        json_data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> requests.Response:
        """Make HTTP request and raise APIError for non-2xx responses."""
        url = self.build_url(endpoint)
        request_headers = self.authenticate()
        if headers:
            request_headers.update(headers)

        response = self.session.request(
            method=method,
            url=url,
            params=params,
            data=data,
            json=json_data,
            headers=request_headers,
            timeout=self.timeout,
            verify=self.verify_ssl
        )

        self.logger.debug(f"{method} {url} -> {response.status_code}")

        if response.status_code // 100 != 2:
            request_body = None
            if json_data is not None:
                request_body = str(json_data)
            elif data is not None:
                request_body = str(data)
            raise APIError(
                f"{method} {url} failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
                url=url,
                method=method,
                request_body=request_body
            )

        return response

    def decode(self, response: requests.Response) -> Any:
        """Decode a JSON response body; empty bodies decode to None."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                f"Invalid JSON from {response.url}: {e}",
                {"body": response.text[:500]}
            )

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Make GET request."""
        return self._make_request("GET", endpoint, params=params)

    def post(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        json_data: Optional[Any] = None
    ) -> requests.Response:
        """Make POST request."""
        return self._make_request("POST", endpoint, data=data, json_data=json_data)

    def put(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        json_data: Optional[Any] = None
    ) -> requests.Response:
        """Make PUT request."""
        return self._make_request("PUT", endpoint, data=data, json_data=json_data)

    def patch(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        json_data: Optional[Any] = None
    ) -> requests.Response:
        """Make PATCH request."""
        return self._make_request("PATCH", endpoint, data=data, json_data=json_data)

    def delete(self, endpoint: str, json_data: Optional[Any] = None) -> requests.Response:
        """Make DELETE request."""
        return self._make_request("DELETE", endpoint, json_data=json_data)
