"""
In-process cache for rendered list views.

Payloads are bucketed by route path and keyed inside a bucket by the
request's query parameters. Mutations call revalidate_path() to discard
every bucket at or beneath a path; there is no TTL and no size-based
eviction, so entries live until a mutation invalidates them.

Paths are normalized (leading slash added, trailing slash dropped), so
"dashboard/invoices" and "/dashboard/invoices/" name the same bucket.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[Tuple[str, str], ...]


def normalize_path(path: str) -> str:
    """Return `path` with exactly one leading slash and no trailing slash."""
    stripped = path.strip().strip("/")
    return f"/{stripped}"


def make_key(params: Mapping[str, object]) -> CacheKey:
    """Build an order-independent key from query parameters."""
    return tuple(sorted((str(name), str(value)) for name, value in params.items()))


class ViewCache:
    """
    Per-path store of rendered view payloads.

    Each path carries a generation number that revalidate_path() bumps.
    A reader snapshots generation() before fetching and passes it to set(),
    so a payload fetched before an invalidation is never written back.
    """

    def __init__(self) -> None:
        self._buckets: Dict[str, Dict[CacheKey, Any]] = {}
        self._generations: Dict[str, int] = {}

    def get(self, path: str, key: CacheKey) -> Optional[Any]:
        bucket = self._buckets.get(normalize_path(path))
        if bucket is None:
            return None
        return bucket.get(key)

    def generation(self, path: str) -> int:
        """Current generation of `path`; registers the path if unseen."""
        return self._generations.setdefault(normalize_path(path), 0)

    def set(
        self,
        path: str,
        key: CacheKey,
        payload: Any,
        generation: Optional[int] = None,
    ) -> bool:
        """
        Store `payload`, unless `path` was revalidated since `generation`.

        Returns:
            True if stored, False if the payload was stale and dropped.
        """
        target = normalize_path(path)
        if generation is not None and self._generations.get(target, 0) != generation:
            logger.debug(f"Dropped stale view for {target} (generation {generation})")
            return False

        self._buckets.setdefault(target, {})[key] = payload
        return True

    def revalidate_path(self, path: str) -> int:
        """
        Discard cached payloads for `path` and every path beneath it.

        Returns:
            Number of discarded payloads.
        """
        target = normalize_path(path)
        prefix = "/" if target == "/" else f"{target}/"

        def covered(candidate: str) -> bool:
            return candidate == target or candidate.startswith(prefix)

        for gen_path in {p for p in self._generations if covered(p)} | {target}:
            self._generations[gen_path] = self._generations.get(gen_path, 0) + 1

        discarded = 0
        for bucket_path in [p for p in self._buckets if covered(p)]:
            discarded += len(self._buckets.pop(bucket_path))

        logger.info(f"Revalidated {target}: discarded {discarded} cached view(s)")

        return discarded

    def clear(self) -> None:
        self._buckets.clear()
        self._generations.clear()

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())


# Shared by all routes in this process
view_cache = ViewCache()


def revalidate_path(path: str) -> int:
    """Invalidate `path` in the shared view cache."""
    return view_cache.revalidate_path(path)
