"""MIME type helpers for picking themed file icons."""

DEFAULT_ICON = "text-x-generic"

_GENERIC_ICONS = {
    "image": "image-x-generic",
    "audio": "audio-x-generic",
    "video": "video-x-generic",
}


def icon_name_for_mime(mime: str | None) -> str:
    """Return a freedesktop icon name for a MIME type.

    Args:
        mime: MIME type such as ``image/jpeg``; may be None

    Returns:
        str: Icon name, ``text-x-generic`` when nothing more specific applies
    """
    if not mime or "/" not in mime:
        return DEFAULT_ICON
    major, minor = mime.split("/", 1)
    if major in _GENERIC_ICONS:
        return _GENERIC_ICONS[major]
    if major == "application" and minor:
        return f"application-x-{minor}"
    return DEFAULT_ICON
