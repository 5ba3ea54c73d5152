from agentcart.services.search_history import SearchHistory


def test_history_newest_first_and_normalized() -> None:
    history = SearchHistory()
    history.add("  USB Hub ")
    history.add("Desk Lamp")

    assert history.get_recent() == ["desk lamp", "usb hub"]


def test_history_deduplicates_and_moves_to_front() -> None:
    history = SearchHistory()
    history.add("usb hub")
    history.add("desk lamp")
    history.add("USB hub")

    assert history.get_recent() == ["usb hub", "desk lamp"]
    assert len(history) == 2


def test_history_is_capped() -> None:
    history = SearchHistory(max_size=30)
    for i in range(35):
        history.add(f"query {i}")

    assert len(history) == 30
    assert history.get_recent(limit=1) == ["query 34"]
    assert "query 4" not in history.get_recent(limit=30)
    assert "query 5" in history.get_recent(limit=30)


def test_history_default_limit_is_eight() -> None:
    history = SearchHistory()
    for i in range(12):
        history.add(f"q{i}")

    assert len(history.get_recent()) == 8


def test_history_ignores_blank_queries_and_clears() -> None:
    history = SearchHistory()
    history.add("   ")
    assert len(history) == 0

    history.add("lamp")
    entries = history.entries()
    assert entries[0].query == "lamp"

    history.clear()
    assert history.get_recent() == []
