"""Server configuration."""

from __future__ import annotations

import os

# JSON file with {"roots": [...], "children": {"<id>": [...]}}; when set the
# server serves it from memory instead of calling the remote record API.
LAZYTREE_SEED_FILE = os.getenv("LAZYTREE_SEED_FILE", "")

NO_CHILDREN_MESSAGE = "No children for the selected record"
