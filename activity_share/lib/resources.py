"""
Process resource ceilings.

Reading a finished package back into memory can need a lot of address space:
packages can be as large as the maximum size we accept for sharing. Some
deployments run workers with a lowered ``RLIMIT_AS`` soft limit, so before we
read the bytes we raise that limit (never above the hard limit) to make room.

Platform notes:
  - Linux / macOS: the ``resource`` module is available and the soft limit is
    raised in place.
  - Windows: ``resource`` is unavailable, and ``ensure_capacity`` is a no-op.
"""
from __future__ import annotations

import logging
import sys

logger = logging.getLogger(__name__)


class MemoryCeiling:
    """
    Raises the process address-space soft limit on request.

    Passed explicitly to the code that needs it (instead of being a global
    toggle), so tests can substitute a fake and assert on the requested size.
    """

    def current_limit(self) -> int | None:
        """
        Return the current soft limit in bytes, or None if it's unlimited.
        """
        if sys.platform == "win32":
            return None

        import resource  # pylint: disable=import-outside-toplevel

        soft, _hard = resource.getrlimit(resource.RLIMIT_AS)
        if soft == resource.RLIM_INFINITY:
            return None
        return soft

    def ensure_capacity(self, max_bytes: int) -> bool:
        """
        Make sure the soft limit is at least ``max_bytes``.

        Limits are only ever raised, never lowered. Returns True if the limit
        was changed.
        """
        if sys.platform == "win32":
            return False

        import resource  # pylint: disable=import-outside-toplevel

        soft, hard = resource.getrlimit(resource.RLIMIT_AS)
        if soft == resource.RLIM_INFINITY or soft >= max_bytes:
            return False

        new_soft = max_bytes
        if hard != resource.RLIM_INFINITY:
            new_soft = min(max_bytes, hard)
        if new_soft <= soft:
            return False

        resource.setrlimit(resource.RLIMIT_AS, (new_soft, hard))
        logger.info("Raised address space soft limit from %d to %d bytes", soft, new_soft)
        return True
