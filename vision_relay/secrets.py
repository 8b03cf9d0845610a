from __future__ import annotations

import logging
import os
from typing import Optional

logger = logging.getLogger("vision-relay.secrets")

TRUTHY = ("true", "1", "yes")


def _resolve_project_id(project_id: Optional[str]) -> str:
    resolved = project_id or os.environ.get("GCP_PROJECT") or os.environ.get("GOOGLE_CLOUD_PROJECT")
    if not resolved:
        raise ValueError(
            "Project ID not specified. Set GCP_PROJECT_ID, GCP_PROJECT or GOOGLE_CLOUD_PROJECT."
        )
    return resolved


def load_secret_as_text(secret_name: str, project_id: Optional[str] = None) -> str:
    """
    Read the latest version of a plain-text secret from Google Cloud Secret Manager.

    Args:
        secret_name: Secret id, e.g. "openrouter-api-key"
        project_id: GCP project. Falls back to GCP_PROJECT / GOOGLE_CLOUD_PROJECT.

    Returns:
        The secret value without surrounding whitespace.

    Raises:
        ImportError: google-cloud-secret-manager is not installed.
        ValueError: No project could be resolved, or the secret is empty.
    """
    try:
        from google.cloud import secretmanager
    except ImportError:
        logger.warning("google-cloud-secret-manager not installed. Install it with: pip install 'vision-relay[secrets]'")
        raise

    name = f"projects/{_resolve_project_id(project_id)}/secrets/{secret_name}/versions/latest"
    logger.info(f"Fetching secret from Secret Manager: {secret_name}")
    response = secretmanager.SecretManagerServiceClient().access_secret_version(request={"name": name})

    # Secrets pasted through the console usually keep a trailing newline
    value = response.payload.data.decode("UTF-8").strip()
    if not value:
        raise ValueError(f"Secret {secret_name} is empty")
    return value


def should_use_secret_manager() -> bool:
    """USE_SECRET_MANAGER switches empty credentials over to Secret Manager."""
    return os.environ.get("USE_SECRET_MANAGER", "").lower() in TRUTHY
