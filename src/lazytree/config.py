"""Local configuration for lazytree."""

from __future__ import annotations

import os


DEFAULT_API_BASE_URL = "http://localhost:8080/api"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "lazytree/0.1"
DEFAULT_ID_FIELD = "id"
DEFAULT_PARENT_FIELD = "parentId"


def _env_flag(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


# Base URL of the remote record service used by HttpRecordFetcher.
LAZYTREE_API_BASE_URL = os.getenv("LAZYTREE_API_BASE_URL", DEFAULT_API_BASE_URL)
LAZYTREE_FETCH_TIMEOUT_S = float(os.getenv("LAZYTREE_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
LAZYTREE_FETCH_MAX_RETRIES = int(os.getenv("LAZYTREE_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
LAZYTREE_FETCH_BACKOFF_S = float(os.getenv("LAZYTREE_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
LAZYTREE_USER_AGENT = os.getenv("LAZYTREE_USER_AGENT", DEFAULT_USER_AGENT)

# Store behaviour.
LAZYTREE_EAGER_PROBE = _env_flag("LAZYTREE_EAGER_PROBE")
LAZYTREE_PROBE_GRANDCHILDREN = _env_flag("LAZYTREE_PROBE_GRANDCHILDREN")
LAZYTREE_ID_FIELD = os.getenv("LAZYTREE_ID_FIELD", DEFAULT_ID_FIELD)
LAZYTREE_PARENT_FIELD = os.getenv("LAZYTREE_PARENT_FIELD", DEFAULT_PARENT_FIELD)
