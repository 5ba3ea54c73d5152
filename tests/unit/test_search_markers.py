from agentcart.services.search_markers import extract_search_markers, strip_search_markers

_AGENT_TEXT = (
    "Here are some ideas for your hackathon!\n"
    "[SEARCH: custom lanyards bulk]\n"
    "Let me also look for prizes.\n"
    "[SEARCH:   wireless earbuds  ]\n"
)


def test_extract_search_markers() -> None:
    assert extract_search_markers(_AGENT_TEXT) == ["custom lanyards bulk", "wireless earbuds"]


def test_extract_search_markers_without_markers() -> None:
    assert extract_search_markers("No searches needed.") == []


def test_strip_search_markers() -> None:
    assert strip_search_markers(_AGENT_TEXT) == (
        "Here are some ideas for your hackathon!\nLet me also look for prizes."
    )
