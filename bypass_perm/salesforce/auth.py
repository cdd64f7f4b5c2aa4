"""Org credential resolution via the Salesforce CLI or settings."""

import json
import logging
import subprocess
from typing import Callable, Optional

from pydantic import BaseModel

from bypass_perm.config import Settings
from bypass_perm.salesforce.client import RetrievalError

logger = logging.getLogger(__name__)

SF_EXECUTABLE = "sf"
ORG_DISPLAY_TIMEOUT_SECONDS = 60


class OrgCredentials(BaseModel):
    """Connection details for one org."""

    instance_url: str
    access_token: str
    username: Optional[str] = None
    api_version: Optional[str] = None


def _run_sf(args: list) -> subprocess.CompletedProcess:
    return subprocess.run(
        [SF_EXECUTABLE, *args],
        capture_output=True,
        text=True,
        timeout=ORG_DISPLAY_TIMEOUT_SECONDS,
    )


def resolve_org_credentials(
    target_org: str,
    runner: Callable[[list], subprocess.CompletedProcess] = _run_sf,
) -> OrgCredentials:
    """Resolve an org alias or username with `sf org display --json`."""
    try:
        result = runner(["org", "display", "--target-org", target_org, "--json"])
    except FileNotFoundError as e:
        raise RetrievalError(
            f"Salesforce CLI '{SF_EXECUTABLE}' not found; cannot resolve org {target_org}"
        ) from e
    except subprocess.TimeoutExpired as e:
        raise RetrievalError(f"Timed out resolving org {target_org}") from e

    try:
        payload = json.loads(result.stdout or "{}")
    except json.JSONDecodeError as e:
        raise RetrievalError(f"Unreadable output from '{SF_EXECUTABLE} org display'") from e

    org = payload.get("result") or {}
    if result.returncode != 0 or not org.get("accessToken") or not org.get("instanceUrl"):
        message = payload.get("message") or result.stderr.strip() or "no access token returned"
        raise RetrievalError(f"Could not resolve org {target_org}: {message}")

    logger.info("Resolved org", extra={"username": org.get("username")})
    return OrgCredentials(
        instance_url=org["instanceUrl"],
        access_token=org["accessToken"],
        username=org.get("username"),
        api_version=org.get("apiVersion"),
    )


def credentials_from_settings(settings: Settings) -> OrgCredentials:
    """Connection details from BYPASS_PERM_INSTANCE_URL / BYPASS_PERM_ACCESS_TOKEN."""
    if not settings.instance_url or not settings.access_token:
        raise RetrievalError(
            "No org connection: pass --target-org, set BYPASS_PERM_INSTANCE_URL and "
            "BYPASS_PERM_ACCESS_TOKEN, or use --offline"
        )
    return OrgCredentials(
        instance_url=settings.instance_url,
        access_token=settings.access_token,
    )
