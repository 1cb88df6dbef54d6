from institute_pricing.services.query_cache import QueryCache


def test_fetch_loads_once():
    cache = QueryCache()
    calls = []

    def loader():
        calls.append(1)
        return ["course"]

    assert cache.fetch('/api/courses', loader) == ["course"]
    assert cache.fetch('/api/courses', loader) == ["course"]
    assert len(calls) == 1


def test_invalidate_drops_prefix_and_children_only():
    cache = QueryCache()
    cache.set('/api/quotations', [])
    cache.set('/api/quotations/12', {})
    cache.set('/api/quotations-archive', [])
    cache.set('/api/courses', [])

    assert cache.invalidate('/api/quotations/') == 2
    assert '/api/quotations' not in cache
    assert '/api/quotations-archive' in cache
    assert len(cache) == 2


def test_separate_instances_do_not_share_entries():
    first, second = QueryCache(), QueryCache()
    first.set('/api/courses', [1])
    assert second.get('/api/courses') is None
    first.clear()
    assert len(first) == 0
