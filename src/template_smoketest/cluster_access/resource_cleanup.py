"""Best-effort deletion of smoketest artifacts."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .cluster_api import ResourceNotFoundError

logger = logging.getLogger(__name__)


def delete_best_effort(kind: str, name: str | None, delete: Callable[[str], None]) -> bool:
    """Delete one resource without ever raising.

    A missing reference or an already deleted resource is a no-op. Any other
    failure is logged so that the remaining cleanup still runs.

    Returns:
      True when the delete call succeeded.
    """
    if not name:
        return False
    try:
        delete(name)
    except ResourceNotFoundError:
        logger.debug("%s %s already deleted", kind, name)
        return False
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.warning("Failed to delete %s %s: %s", kind, name, exc)
        return False
    logger.debug("Deleted %s %s", kind, name)
    return True
