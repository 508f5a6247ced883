import os
from typing import Any, Dict, List, Optional, Tuple

import httpx

from endpoints import AUTH, FILES
from .client import CloudClient
from .errors import ApiError
from .models import FileItem, FolderRecord


def _json_or_raise(resp: httpx.Response) -> Any:
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError as exc:
        raise ApiError(resp.status_code, detail=f"Non-JSON response: {resp.text[:200]}") from exc


def _rows(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get("files") or payload.get("items") or payload.get("data") or []
    if not isinstance(payload, list):
        raise ApiError(None, detail=f"Unexpected listing: {payload!r}")
    return [row for row in payload if isinstance(row, dict)]


def login(client: CloudClient, email: str, password: str) -> Tuple[str, Optional[str]]:
    payload = {"email": email, "password": password}
    resp = client.request(AUTH["login"]["method"], AUTH["login"]["path"], json=payload)
    data = _json_or_raise(resp)
    access_token = data.get("accessToken") if isinstance(data, dict) else None
    if not access_token:
        raise ApiError(resp.status_code, detail="Missing accessToken in login response")
    return access_token, data.get("refreshToken")


def refresh_access_token(client: CloudClient, refresh_token: str) -> str:
    payload = {"refreshToken": refresh_token}
    resp = client.request(AUTH["refresh"]["method"], AUTH["refresh"]["path"], json=payload)
    data = _json_or_raise(resp)
    access_token = data.get("accessToken") if isinstance(data, dict) else None
    if not access_token:
        raise ApiError(resp.status_code, detail="Missing accessToken in refresh response")
    return access_token


def logout(client: CloudClient, refresh_token: Optional[str], access_token: Optional[str] = None) -> None:
    payload = {"refreshToken": refresh_token or ""}
    client.request(AUTH["logout"]["method"], AUTH["logout"]["path"], token=access_token, json=payload)


def create_folder(client: CloudClient, name: str, parent_id: Optional[str], access_token: str) -> FolderRecord:
    payload = {"name": name, "parentId": parent_id}
    resp = client.request(
        FILES["create_folder"]["method"],
        FILES["create_folder"]["path"],
        token=access_token,
        json=payload,
    )
    data = _json_or_raise(resp)
    if isinstance(data, dict) and isinstance(data.get("folder"), dict):
        data = data["folder"]
    record = FolderRecord.from_json(data if isinstance(data, dict) else {})
    if not record.name:
        record.name = name
    if record.parent_id is None:
        record.parent_id = parent_id
    return record


def list_files(
    client: CloudClient,
    folder_id: Optional[str],
    access_token: str,
    search: str = "",
) -> List[FileItem]:
    params: Dict[str, Any] = {}
    if folder_id:
        params["folderId"] = folder_id
    if search:
        params["search"] = search
    resp = client.request(FILES["list"]["method"], FILES["list"]["path"], token=access_token, params=params)
    return [FileItem.from_json(row) for row in _rows(_json_or_raise(resp))]


def recent_files(client: CloudClient, access_token: str, limit: int = 20) -> List[FileItem]:
    params = {"limit": int(limit)}
    resp = client.request(FILES["recent"]["method"], FILES["recent"]["path"], token=access_token, params=params)
    return [FileItem.from_json(row) for row in _rows(_json_or_raise(resp))]


def upload_file(client: CloudClient, path: str, folder_id: Optional[str], access_token: str) -> FileItem:
    filename = os.path.basename(path)
    form: Dict[str, Any] = {}
    if folder_id:
        form["folderId"] = folder_id
    with open(path, 'rb') as handle:
        files = {"file": (filename, handle, "application/octet-stream")}
        resp = client.request(
            FILES["upload"]["method"],
            FILES["upload"]["path"],
            token=access_token,
            data=form,
            files=files,
        )
    data = _json_or_raise(resp)
    if isinstance(data, dict) and isinstance(data.get("file"), dict):
        data = data["file"]
    item = FileItem.from_json(data if isinstance(data, dict) else {})
    if not item.name:
        item.name = filename
    return item


def delete_item(client: CloudClient, item_id: str, access_token: str) -> None:
    path = FILES["delete"]["path"].format(id=item_id)
    resp = client.request(FILES["delete"]["method"], path, token=access_token)
    _json_or_raise(resp)
