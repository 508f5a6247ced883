"""
Session and folder-navigation controller behind the dashboard.

The controller owns the view mode (folder tree or recent files), the breadcrumb
path, the debounced search term and the login state. Presentation layers call
its operations and re-render when a subscribed callback reports which facet
changed. Network work goes through an injected runner so a GUI can keep it off
the event loop; results always fold back through the runner's callbacks.
"""
from typing import Any, Callable, List, Optional

from . import api
from .auth import AuthenticatedCall
from .client import CloudClient
from .debounce import Debouncer
from .errors import AuthRequired, InvalidArgument, Messages, ValidationError, user_message
from .models import ROOT_ENTRY, FileItem, FolderRecord, PathEntry, SearchState, ViewMode
from .session_store import TokenStore
from .utils import get_logger

Listener = Callable[[str], None]


class ImmediateRunner:
    """Runs work inline; same call shape as the Qt ``TaskRunner``."""

    def run(
        self,
        fn: Callable[[], Any],
        on_result: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_finished: Optional[Callable[[], None]] = None,
    ) -> None:
        try:
            result = fn()
        except Exception as exc:
            if on_error is None:
                raise
            on_error(exc)
        else:
            if on_result:
                on_result(result)
        finally:
            if on_finished:
                on_finished()


class NavigationController:
    def __init__(
        self,
        client: CloudClient,
        store: TokenStore,
        scheduler: Any,
        runner: Any = None,
        redirect_to_login: Optional[Callable[[], None]] = None,
        search_debounce_ms: int = 300,
    ) -> None:
        self.client = client
        self.store = store
        self.auth = AuthenticatedCall(client, store)
        self.runner = runner or ImmediateRunner()
        self._redirect_to_login = redirect_to_login or (lambda: None)
        self.logger = get_logger("fscloud.controller")

        self.authenticated = False
        self.view_mode = ViewMode.FOLDER
        self._path: List[PathEntry] = [ROOT_ENTRY]
        self.search = SearchState()
        self.error = ""
        self.last_error: Optional[Exception] = None
        self.refresh_counter = 0
        self.items: List[FileItem] = []
        self.loading = False
        self.folder_dialog_open = False
        self.folder_name = ""

        self._listeners: List[Listener] = []
        self._generation = 0
        self._live_listing = 0
        self._epoch = 0
        self._debouncer = Debouncer(scheduler, search_debounce_ms, self._settle_search)

    # ---------- observers ----------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, *events: str) -> None:
        for event in events:
            for listener in list(self._listeners):
                listener(event)

    # ---------- read side ----------
    @property
    def path(self) -> List[PathEntry]:
        return list(self._path)

    @property
    def current_folder_id(self) -> Optional[str]:
        return self._path[-1].id

    @property
    def is_recent_view(self) -> bool:
        return self.view_mode is ViewMode.RECENT

    # ---------- session ----------
    def load_session(self) -> bool:
        try:
            session = self.store.load()
        except (OSError, ValueError) as exc:
            self.logger.warning("Session load failed: %s", exc)
            self.store.clear()
            session = self.store.session()
        if not session.access_token:
            self.logger.info("No access token found, login required")
            self.authenticated = False
            self._emit("auth")
            self._redirect_to_login()
            return False
        self._enter_authenticated()
        return True

    def login(self, email: str, password: str) -> None:
        email = (email or "").strip()
        if not email or not password:
            self._fail(ValidationError("Email and password are required"), Messages.LOGIN_FAILED)
            return

        def work():
            return api.login(self.client, email, password)

        def done(tokens):
            access_token, refresh_token = tokens
            self.store.store_session(access_token, refresh_token)
            self.logger.info("Logged in as %s", email)
            self._enter_authenticated()

        self.runner.run(work, on_result=done, on_error=lambda exc: self._fail(exc, Messages.LOGIN_FAILED))

    def logout(self) -> None:
        refresh_token = self.store.refresh_token
        access_token = self.store.access_token

        def work():
            api.logout(self.client, refresh_token, access_token)

        def failed(exc: Exception) -> None:
            self.logger.warning("Logout failed: %s", exc)

        self.runner.run(work, on_error=failed, on_finished=self._finish_logout)

    def _enter_authenticated(self) -> None:
        self._epoch += 1
        self.authenticated = True
        self._reset_view()
        self.error = ""
        self.last_error = None
        self._emit("auth", "path", "mode", "search", "error")

    def _finish_logout(self) -> None:
        self._epoch += 1
        self.store.clear()
        self.authenticated = False
        self._reset_view()
        self.items = []
        self.loading = False
        self.folder_dialog_open = False
        self.folder_name = ""
        self.error = ""
        self.last_error = None
        self.logger.info("Logged out")
        self._emit("auth", "path", "mode", "search", "items", "dialog", "error")
        self._redirect_to_login()

    def _reset_view(self) -> None:
        self.view_mode = ViewMode.FOLDER
        self._path = [ROOT_ENTRY]
        self._reset_search()
        self._generation += 1

    # ---------- navigation ----------
    def enter_folder(self, name: str, folder_id: Optional[str]) -> None:
        if folder_id is None:
            raise InvalidArgument("folder id is required")
        self._path.append(PathEntry(name, str(folder_id)))
        self._navigated()

    def jump_to_breadcrumb(self, index: int) -> None:
        if not 0 <= index < len(self._path):
            raise InvalidArgument(f"breadcrumb index {index} out of range 0..{len(self._path) - 1}")
        del self._path[index + 1:]
        self._navigated()

    def show_recent(self) -> None:
        self.view_mode = ViewMode.RECENT
        self._reset_search()
        self._generation += 1
        self._emit("mode", "search")

    def show_dashboard_root(self) -> None:
        self._path = [ROOT_ENTRY]
        self._navigated()

    def _navigated(self) -> None:
        self.view_mode = ViewMode.FOLDER
        self._reset_search()
        self._generation += 1
        self._emit("path", "mode", "search")

    # ---------- search ----------
    def update_search_input(self, text: str) -> None:
        self.search.raw = text
        self.search.pending = True
        self._debouncer.trigger()
        self._emit("search")

    def clear_search(self) -> None:
        settled = self.search.debounced
        self._reset_search()
        if settled:
            self._generation += 1
        self._emit("search")

    def _reset_search(self) -> None:
        self._debouncer.cancel()
        self.search = SearchState()

    def _settle_search(self) -> None:
        changed = self.search.debounced != self.search.raw
        self.search.debounced = self.search.raw
        self.search.pending = False
        if changed:
            self._generation += 1
        self.logger.debug("Search settled on %r", self.search.debounced)
        self._emit("search")

    # ---------- listing ----------
    def refresh(self) -> None:
        self.refresh_counter += 1
        self._emit("refresh")

    def reload_items(self) -> None:
        if not self.authenticated:
            return
        self._generation += 1
        generation = self._generation
        self._live_listing = generation
        recent = self.is_recent_view
        folder_id = self.current_folder_id
        search = self.search.debounced

        def work():
            if recent:
                return self.auth.execute(lambda token: api.recent_files(self.client, token))
            return self.auth.execute(lambda token: api.list_files(self.client, folder_id, token, search=search))

        def done(items: List[FileItem]) -> None:
            if generation != self._generation:
                self.logger.debug("Dropping stale listing (generation %s)", generation)
                self._drop_listing()
                return
            self.items = items
            self.loading = False
            self._emit("items")

        def failed(exc: Exception) -> None:
            if generation != self._generation:
                self._drop_listing()
                return
            self.loading = False
            self._fail(exc, Messages.LOAD_FILES_FAILED)
            self._emit("items")

        self.loading = True
        self.runner.run(work, on_result=done, on_error=failed)

    def _drop_listing(self) -> None:
        # no newer request is in flight for the current generation
        if self.loading and self._live_listing != self._generation:
            self.loading = False
            self._emit("items")

    # ---------- folder creation ----------
    def open_folder_dialog(self) -> None:
        self.folder_dialog_open = True
        self._emit("dialog")

    def set_folder_name(self, text: str) -> None:
        self.folder_name = text

    def close_folder_dialog(self) -> None:
        self.folder_dialog_open = False
        self.folder_name = ""
        self.dismiss_error()
        self._emit("dialog")

    def create_folder(self, name: Optional[str] = None) -> bool:
        """Create a folder under the current breadcrumb.

        ``name`` defaults to the dialog's input. Returns False when the request
        was rejected locally (empty name, no token); the reason is in
        ``error``/``last_error``. Server outcomes arrive through the runner.
        """
        trimmed = (self.folder_name if name is None else name or "").strip()
        if not trimmed:
            self._fail(ValidationError(Messages.FOLDER_NAME_REQUIRED), Messages.CREATE_FOLDER_FAILED)
            return False
        if not self.store.access_token:
            self._fail(AuthRequired(Messages.LOGIN_REQUIRED), Messages.CREATE_FOLDER_FAILED)
            return False

        parent_id = self.current_folder_id
        epoch = self._epoch

        def work():
            return self.auth.execute(lambda token: api.create_folder(self.client, trimmed, parent_id, token))

        def done(record: FolderRecord) -> None:
            if epoch != self._epoch:
                return
            self.logger.info("Folder created: %s (id=%s)", record.name, record.id)
            self.folder_name = ""
            self.folder_dialog_open = False
            self.error = ""
            self.last_error = None
            self._emit("dialog", "error")
            self.refresh()

        def failed(exc: Exception) -> None:
            if epoch != self._epoch:
                return
            self._fail(exc, Messages.CREATE_FOLDER_FAILED)

        self.runner.run(work, on_result=done, on_error=failed)
        return True

    # ---------- file actions ----------
    def upload_file(self, path: str) -> None:
        folder_id = self.current_folder_id
        epoch = self._epoch

        def work():
            return self.auth.execute(lambda token: api.upload_file(self.client, path, folder_id, token))

        def done(item: FileItem) -> None:
            if epoch != self._epoch:
                return
            self.logger.info("Uploaded %s (id=%s)", item.name, item.id)
            self.dismiss_error()
            self.refresh()

        def failed(exc: Exception) -> None:
            if epoch == self._epoch:
                self._fail(exc, Messages.UPLOAD_FAILED)

        self.runner.run(work, on_result=done, on_error=failed)

    def delete_item(self, item: FileItem) -> None:
        epoch = self._epoch

        def work():
            return self.auth.execute(lambda token: api.delete_item(self.client, item.id, token))

        def done(_) -> None:
            if epoch != self._epoch:
                return
            self.logger.info("Deleted %s (id=%s)", item.name, item.id)
            self.refresh()

        def failed(exc: Exception) -> None:
            if epoch == self._epoch:
                self._fail(exc, Messages.DELETE_FAILED)

        self.runner.run(work, on_result=done, on_error=failed)

    # ---------- errors ----------
    def dismiss_error(self) -> None:
        if self.error or self.last_error:
            self.error = ""
            self.last_error = None
            self._emit("error")

    def _fail(self, exc: Exception, fallback: str) -> None:
        self.last_error = exc
        self.error = user_message(exc, fallback)
        self.logger.info("%s (%s)", self.error, type(exc).__name__)
        self._emit("error")
