"""Drive v2 REST endpoints and query builders."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

API_BASE_URL: str = "https://www.googleapis.com/drive/v2"
UPLOAD_URL: str = "https://www.googleapis.com/upload/drive/v2/files"

ITEM_FIELDS: str = "kind,id,title,mimeType,alternateLink,parents(id,isRoot)"

LIST_FIELDS: str = f"kind,nextPageToken,items({ITEM_FIELDS})"


def build_parent_query(parent_id: str, *, include_trashed: bool = False) -> str:
    q = f"'{parent_id}' in parents"
    if not include_trashed:
        q = f"({q}) and trashed=false"
    return q


def build_list_url(
    parent_id: str,
    *,
    api_base_url: str = API_BASE_URL,
    page_token: Optional[str] = None,
) -> str:
    params = {"q": build_parent_query(parent_id), "fields": LIST_FIELDS}
    if page_token:
        params["pageToken"] = page_token
    return f"{api_base_url}/files?{urlencode(params)}"


def build_upload_url(*, upload_url: str = UPLOAD_URL) -> str:
    params = {"uploadType": "multipart", "fields": ITEM_FIELDS}
    return f"{upload_url}?{urlencode(params)}"


def bearer_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
