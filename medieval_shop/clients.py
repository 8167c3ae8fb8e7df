"""Best-effort browser classification from a User-Agent string."""

# Order matters: Edge and Opera also advertise Chrome, Chrome also advertises Safari.
_SIGNATURES: list[tuple[str, tuple[str, ...]]] = [
    ("edge", ("edg/", "edge/", "edga/", "edgios/")),
    ("opera", ("opr/", "opera")),
    ("firefox", ("firefox/", "fxios/")),
    ("chrome", ("chrome/", "crios/", "chromium/")),
    ("safari", ("safari/",)),
]


def classify_browser(user_agent: str | None) -> str:
    """Return "edge", "opera", "firefox", "chrome", "safari" or "unknown"."""
    ua = (user_agent or "").lower()
    if not ua:
        return "unknown"
    for name, markers in _SIGNATURES:
        if any(m in ua for m in markers):
            return name
    return "unknown"
