from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from grc_metrics_cli import __version__
from grc_metrics_cli.exceptions import ApiError, AuthenticationError
from grc_metrics_cli.models.config import AppConfig


class GrcClient:
    """Read-only access to one organization's register in the GRC REST API."""

    def __init__(self, config: AppConfig) -> None:
        self._base_url = config.api_url
        self._organization_id = config.organization_id
        self._session = requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {config.bearer_token}",
            "User-Agent": f"grc-metrics-cli/{__version__}",
            "Accept": "application/json",
        })

    def get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        return self._request("GET", path, params=params)

    def list_risks(self) -> Any:
        return self.get(self._org_path("risks"))

    def list_pci_dss_assessments(self) -> Any:
        return self.get(self._org_path("pci-dss-assessments"))

    def list_maturity_assessments(self) -> Any:
        return self.get(self._org_path("maturity-assessments"))

    def _org_path(self, resource: str) -> str:
        return f"api/organizations/{self._organization_id}/{resource}"

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        normalized_path = path.lstrip("/")
        url = self._base_url + normalized_path
        try:
            response = self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(
                f"Cannot connect to {self._base_url}. "
                "Check your network connection and API URL."
            ) from exc

        if response.status_code in (401, 403):
            raise AuthenticationError(
                "Authentication failed or access to the organization was denied. "
                "Run grc-metrics-cli --init to set a new token."
            )
        if response.status_code == 404:
            raise ApiError(
                f"Resource not found: {normalized_path}. "
                "Check the organization ID in your configuration."
            )
        if response.status_code >= 500:
            raise ApiError(
                f"GRC server error ({response.status_code}). "
                "Please try again later."
            )

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise ApiError(
                f"GRC API request failed ({response.status_code}) for {normalized_path}."
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                f"Invalid response from GRC API for {normalized_path}. Expected JSON data."
            ) from exc
