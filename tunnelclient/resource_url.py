"""URLs that let an embedded HTML control load resources from the executable."""

from __future__ import annotations

import sys


def resource_to_url(
    resource_name: str,
    url_query: str | None = None,
    url_fragment: str | None = None,
    exe_path: str | None = None,
) -> str:
    """Return a ``res://`` URL for ``resource_name`` inside ``exe_path``.

    ``exe_path`` defaults to the running interpreter's executable. The query
    and fragment are appended as given, without further encoding.
    """
    if exe_path is None:
        exe_path = sys.executable or ""

    url = f"res://{exe_path}/{resource_name}"
    if url_query is not None:
        url += f"?{url_query}"
    if url_fragment is not None:
        url += f"#{url_fragment}"
    return url