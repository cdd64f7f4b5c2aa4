"""
Salesforce REST client.

Responsibilities:
- Query existing Custom Permissions (inventory collaborator)
- Describe the org's sObjects (catalog collaborator)
- Follow SOQL pagination within an overall time budget
- Surface every transport or HTTP failure as RetrievalError
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from bypass_perm.models.catalog import SObjectDescription

logger = logging.getLogger(__name__)

CUSTOM_PERMISSION_SOQL = "SELECT DeveloperName, NamespacePrefix FROM CustomPermission"


class RetrievalError(Exception):
    """Raised when org metadata or catalog data cannot be retrieved."""
    pass


def full_permission_name(record: Dict[str, Any]) -> str:
    """Full name of a CustomPermission record, namespaced when managed."""
    developer_name = record["DeveloperName"]
    namespace = record.get("NamespacePrefix")
    if namespace:
        return f"{namespace}__{developer_name}"
    return developer_name


class SalesforceClient:
    """Thin synchronous client for the Salesforce REST API."""

    def __init__(
        self,
        instance_url: str,
        access_token: str,
        api_version: str = "59.0",
        request_timeout_seconds: float = 30.0,
        retrieve_timeout_seconds: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.instance_url = instance_url.rstrip("/")
        self.api_version = api_version.lstrip("v")
        self.retrieve_timeout_seconds = retrieve_timeout_seconds
        self._client = httpx.Client(
            base_url=self.instance_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
            timeout=request_timeout_seconds,
            transport=transport,
        )

    @property
    def data_path(self) -> str:
        return f"/services/data/v{self.api_version}"

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "SalesforceClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a REST resource and decode the JSON body."""
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise RetrievalError(f"Timed out calling Salesforce {path}") from e
        except httpx.HTTPStatusError as e:
            raise RetrievalError(
                f"Salesforce returned {e.response.status_code} for {path}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise RetrievalError(f"Could not reach Salesforce at {self.instance_url}: {e}") from e
        except ValueError as e:
            raise RetrievalError(f"Salesforce returned a non-JSON body for {path}") from e

    def query_all(self, soql: str) -> List[Dict[str, Any]]:
        """
        Execute a SOQL query and paginate through all results.

        Pagination stops with RetrievalError once the overall retrieve
        budget is exhausted.
        """
        deadline = time.monotonic() + self.retrieve_timeout_seconds
        all_records: List[Dict[str, Any]] = []

        data = self._get(f"{self.data_path}/query", params={"q": soql})
        while True:
            all_records.extend(data.get("records", []))
            next_url = data.get("nextRecordsUrl")
            if not next_url:
                break
            if time.monotonic() >= deadline:
                raise RetrievalError(
                    f"Query did not complete within {self.retrieve_timeout_seconds:.0f}s"
                )
            data = self._get(next_url)

        logger.debug("SOQL query complete", extra={"records": len(all_records)})
        return all_records

    def list_custom_permission_names(self) -> List[str]:
        """Full names of every Custom Permission in the org."""
        records = self.query_all(CUSTOM_PERMISSION_SOQL)
        return [full_permission_name(r) for r in records]

    def list_sobjects(self) -> List[SObjectDescription]:
        """describeGlobal: every sObject's API name and label."""
        data = self._get(f"{self.data_path}/sobjects/")
        return [
            SObjectDescription(name=s["name"], label=s.get("label") or s["name"])
            for s in data.get("sobjects", [])
        ]
