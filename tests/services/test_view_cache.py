"""
Tests for the list-view cache and path invalidation.
"""

from dashboard.services.cache import ViewCache, make_key, normalize_path


class TestNormalizePath:

    def test_adds_missing_leading_slash(self):
        assert normalize_path("dashboard/invoices") == "/dashboard/invoices"

    def test_drops_trailing_slash(self):
        assert normalize_path("/dashboard/invoices/") == "/dashboard/invoices"

    def test_root(self):
        assert normalize_path("/") == "/"


class TestViewCache:

    def test_get_returns_stored_payload(self):
        cache = ViewCache()
        key = make_key({"query": "", "page": 1})

        cache.set("/dashboard/invoices", key, {"invoices": []})

        assert cache.get("/dashboard/invoices", key) == {"invoices": []}
        assert cache.get("/dashboard/invoices", make_key({"query": "paid", "page": 1})) is None

    def test_key_ignores_parameter_order(self):
        assert make_key({"query": "x", "page": 2}) == make_key({"page": 2, "query": "x"})

    def test_revalidate_discards_path_entries(self):
        cache = ViewCache()
        cache.set("/dashboard/invoices", make_key({"page": 1}), "page-1")
        cache.set("/dashboard/invoices", make_key({"page": 2}), "page-2")

        discarded = cache.revalidate_path("/dashboard/invoices")

        assert discarded == 2
        assert len(cache) == 0

    def test_revalidate_without_leading_slash_hits_same_entries(self):
        cache = ViewCache()
        cache.set("/dashboard/invoices", make_key({"page": 1}), "page-1")

        assert cache.revalidate_path("dashboard/invoices") == 1
        assert cache.get("/dashboard/invoices", make_key({"page": 1})) is None

    def test_revalidate_includes_nested_paths_only(self):
        cache = ViewCache()
        cache.set("/dashboard/invoices", make_key({}), "list")
        cache.set("/dashboard/invoices/inv-1", make_key({}), "detail")
        cache.set("/dashboard/invoices-archive", make_key({}), "archive")
        cache.set("/dashboard/customers", make_key({}), "customers")

        assert cache.revalidate_path("/dashboard/invoices") == 2
        assert cache.get("/dashboard/invoices-archive", make_key({})) == "archive"
        assert cache.get("/dashboard/customers", make_key({})) == "customers"

    def test_revalidate_unknown_path_is_noop(self):
        cache = ViewCache()
        cache.set("/dashboard/invoices", make_key({}), "list")

        assert cache.revalidate_path("/dashboard/customers") == 0
        assert len(cache) == 1


class TestGenerations:
    """A payload fetched before an invalidation must not be stored after it."""

    def test_set_with_current_generation_stores(self):
        cache = ViewCache()
        key = make_key({"page": 1})
        generation = cache.generation("/dashboard/invoices")

        assert cache.set("/dashboard/invoices", key, "fresh", generation=generation) is True
        assert cache.get("/dashboard/invoices", key) == "fresh"

    def test_set_after_revalidate_is_dropped(self):
        cache = ViewCache()
        key = make_key({"page": 1})
        generation = cache.generation("/dashboard/invoices")

        cache.revalidate_path("dashboard/invoices")

        assert cache.set("/dashboard/invoices", key, "stale", generation=generation) is False
        assert cache.get("/dashboard/invoices", key) is None

    def test_parent_revalidate_bumps_nested_generation(self):
        cache = ViewCache()
        generation = cache.generation("/dashboard/invoices/inv-1")

        cache.revalidate_path("/dashboard")

        assert cache.generation("/dashboard/invoices/inv-1") != generation

    def test_unrelated_revalidate_keeps_generation(self):
        cache = ViewCache()
        generation = cache.generation("/dashboard/invoices")

        cache.revalidate_path("/dashboard/customers")

        assert cache.set("/dashboard/invoices", make_key({}), "list", generation=generation) is True
