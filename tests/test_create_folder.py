"""
Folder creation: local validation, the retry-once-on-401 path and error texts.
"""
import pytest

from fscloud.controller import NavigationController
from fscloud.errors import ApiError, AuthRequired, Messages, SessionExpired, ValidationError

CREATE = ("POST", "/api/files/folder")
REFRESH = ("POST", "/api/auth/refresh-token")

FOLDER = {"_id": "f1", "name": "Docs", "parentId": None}


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_blank_name_fails_without_network(controller, server, name):
    assert controller.create_folder(name) is False

    assert isinstance(controller.last_error, ValidationError)
    assert controller.error == Messages.FOLDER_NAME_REQUIRED
    assert server.requests == []


def test_missing_token_fails_without_network(controller, server, store):
    store.clear()

    assert controller.create_folder("Docs") is False

    assert isinstance(controller.last_error, AuthRequired)
    assert controller.error == Messages.LOGIN_REQUIRED
    assert server.requests == []


def test_valid_token_creates_without_refresh(controller, server):
    server.add(*CREATE, (201, FOLDER))
    controller.open_folder_dialog()
    controller.set_folder_name("  Docs  ")

    assert controller.create_folder() is True

    calls = server.calls(*CREATE)
    assert len(calls) == 1
    assert server.body(calls[0]) == {"name": "Docs", "parentId": None}
    assert calls[0].headers["Authorization"] == "Bearer access-1"
    assert server.calls(*REFRESH) == []
    assert controller.folder_name == ""
    assert controller.folder_dialog_open is False
    assert controller.error == ""
    assert controller.refresh_counter == 1


def test_created_under_current_folder(controller, server):
    server.add(*CREATE, (201, {"_id": "f2", "name": "Sub", "parentId": "p9"}))
    controller.enter_folder("Projects", "p9")

    controller.create_folder("Sub")

    assert server.body(server.calls(*CREATE)[0])["parentId"] == "p9"


def test_expired_token_refreshes_and_retries_once(controller, server, store):
    server.add(*CREATE, (401, {"message": "Token expired"}), (201, FOLDER))
    server.add(*REFRESH, (200, {"accessToken": "access-2"}))

    controller.create_folder("Docs")

    creates = server.calls(*CREATE)
    refreshes = server.calls(*REFRESH)
    assert len(refreshes) == 1
    assert server.body(refreshes[0]) == {"refreshToken": "refresh-1"}
    assert len(creates) == 2
    assert creates[0].headers["Authorization"] == "Bearer access-1"
    assert creates[1].headers["Authorization"] == "Bearer access-2"
    assert store.access_token == "access-2"
    assert controller.error == ""
    assert controller.refresh_counter == 1


def test_refresh_failure_surfaces_session_expired(controller, server):
    server.add(*CREATE, (401, None))
    server.add(*REFRESH, (401, None))

    controller.create_folder("Docs")

    assert len(server.calls(*REFRESH)) == 1
    assert len(server.calls(*CREATE)) == 1
    assert isinstance(controller.last_error, SessionExpired)
    assert controller.error == Messages.SESSION_EXPIRED
    assert controller.refresh_counter == 0


def test_refresh_failure_prefers_server_message(controller, server):
    server.add(*CREATE, (401, None))
    server.add(*REFRESH, (403, {"message": "Invalid refresh token"}))

    controller.create_folder("Docs")

    assert isinstance(controller.last_error, SessionExpired)
    assert controller.error == "Invalid refresh token"


def test_second_unauthorized_is_not_retried(controller, server):
    server.add(*CREATE, (401, None))
    server.add(*REFRESH, (200, {"accessToken": "access-2"}))

    controller.create_folder("Docs")

    assert len(server.calls(*REFRESH)) == 1
    assert len(server.calls(*CREATE)) == 2
    assert isinstance(controller.last_error, SessionExpired)
    assert controller.error == Messages.SESSION_EXPIRED


def test_missing_refresh_token_skips_refresh_call(controller, server, store):
    store.store_session("access-1", None)
    server.add(*CREATE, (401, None))

    controller.create_folder("Docs")

    assert server.calls(*REFRESH) == []
    assert isinstance(controller.last_error, SessionExpired)


def test_api_error_shows_server_message(controller, server):
    server.add(*CREATE, (409, {"message": "Folder already exists"}))

    controller.create_folder("Docs")

    assert isinstance(controller.last_error, ApiError)
    assert controller.last_error.status == 409
    assert controller.error == "Folder already exists"
    assert server.calls(*REFRESH) == []


def test_api_error_without_message_uses_fallback(controller, server):
    server.add(*CREATE, (500, None))

    controller.create_folder("Docs")

    assert controller.error == Messages.CREATE_FOLDER_FAILED


def test_failure_keeps_dialog_input(controller, server):
    server.add(*CREATE, (500, None))
    controller.open_folder_dialog()
    controller.set_folder_name("Docs")

    controller.create_folder()

    assert controller.folder_dialog_open is True
    assert controller.folder_name == "Docs"


def test_close_dialog_clears_name_and_error(controller):
    controller.open_folder_dialog()
    controller.set_folder_name("   ")
    controller.create_folder()
    assert controller.error

    controller.close_folder_dialog()

    assert controller.folder_dialog_open is False
    assert controller.folder_name == ""
    assert controller.error == ""


def test_result_after_logout_is_dropped(client, store, scheduler, server, runner):
    controller = NavigationController(client, store, scheduler=scheduler, runner=runner)
    controller.load_session()
    server.add(*CREATE, (201, FOLDER))
    server.add("POST", "/api/auth/logout", (200, {}))

    controller.create_folder("Docs")
    controller.logout()
    runner.complete(1)
    runner.complete(0)

    assert controller.authenticated is False
    assert controller.refresh_counter == 0
