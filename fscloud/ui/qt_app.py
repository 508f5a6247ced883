from typing import Optional, Tuple

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QDialog,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from ..client import CloudClient
from ..config import Settings
from ..controller import NavigationController
from ..session_store import TokenStore
from .threads import QtScheduler, TaskRunner
from .views.files_view import FilesView
from .views.folder_dialog import FolderDialog
from .views.login_dialog import LoginDialog

ListingKey = Tuple[bool, Optional[str], str, int]


class MainWindow(QMainWindow):
    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.setWindowTitle("File Storage")
        self.resize(1100, 760)

        self.client = CloudClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
            http_log_path=settings.http_log_path,
        )
        self.controller = NavigationController(
            self.client,
            TokenStore(settings.session_path),
            scheduler=QtScheduler(self),
            runner=TaskRunner(),
            redirect_to_login=self._redirect_to_login,
            search_debounce_ms=settings.search_debounce_ms,
        )
        self._listing_key: Optional[ListingKey] = None

        central = QWidget(self)
        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._build_sidebar())
        self.files_view = FilesView(self.controller)
        layout.addWidget(self.files_view, 1)
        self.setCentralWidget(central)

        self.controller.subscribe(self._on_event)
        self.statusBar().showMessage("Ready")
        QTimer.singleShot(0, self.controller.load_session)

    def _build_sidebar(self) -> QFrame:
        sidebar = QFrame()
        sidebar.setObjectName("sidebar")
        sidebar.setFixedWidth(220)
        sidebar.setStyleSheet("#sidebar { background: #ffffff; border-right: 1px solid #e5e7eb; }")
        nav = QVBoxLayout(sidebar)
        nav.setContentsMargins(16, 24, 16, 24)
        nav.setSpacing(8)

        title = QLabel("File Storage")
        title.setStyleSheet("font-size: 18px; font-weight: 700; color: #1f2937;")
        nav.addWidget(title)

        self.recent_btn = self._nav_button("Recent", self.controller.show_recent)
        self.dashboard_btn = self._nav_button("Dashboard", self.controller.show_dashboard_root)
        nav.addWidget(self.recent_btn)
        nav.addWidget(self.dashboard_btn)
        nav.addWidget(self._nav_button("Upload Files", self._upload_dialog))
        nav.addWidget(self._nav_button("New Folder", self._folder_dialog))
        nav.addStretch(1)
        nav.addWidget(self._nav_button("Logout", self.controller.logout))
        return sidebar

    def _nav_button(self, text: str, slot) -> QPushButton:
        btn = QPushButton(text)
        btn.setCursor(Qt.PointingHandCursor)
        btn.setCheckable(text in ("Recent", "Dashboard"))
        btn.clicked.connect(lambda _checked=False: slot())
        return btn

    def _on_event(self, event: str) -> None:
        if event == "mode":
            recent = self.controller.is_recent_view
            self.recent_btn.setChecked(recent)
            self.dashboard_btn.setChecked(not recent)
        elif event == "error" and self.controller.error:
            self.statusBar().showMessage(f"Error: {self.controller.error}")
        elif event == "items" and not self.controller.error:
            self.statusBar().showMessage(f"{len(self.controller.items)} item(s) loaded.")
        if event in ("auth", "path", "mode", "search", "refresh"):
            self._reload_if_needed()

    def _reload_if_needed(self) -> None:
        controller = self.controller
        if not controller.authenticated:
            self._listing_key = None
            return
        if controller.search.pending:
            return
        key = (
            controller.is_recent_view,
            controller.current_folder_id,
            controller.search.debounced,
            controller.refresh_counter,
        )
        if key == self._listing_key:
            return
        self._listing_key = key
        self.statusBar().showMessage("Loading files...")
        controller.reload_items()

    def _redirect_to_login(self) -> None:
        # deferred so the controller finishes its transition first
        QTimer.singleShot(0, self._show_login)

    def _show_login(self) -> None:
        if self.controller.authenticated:
            return
        dialog = LoginDialog(self.controller, self)
        if dialog.exec() != QDialog.Accepted:
            self.close()

    def _upload_dialog(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Select file to upload")
        if not path:
            return
        self.statusBar().showMessage(f"Uploading {path}...")
        self.controller.upload_file(path)

    def _folder_dialog(self) -> None:
        self.controller.open_folder_dialog()
        FolderDialog(self.controller, self).exec()

    def closeEvent(self, event) -> None:
        try:
            self.client.close()
        except Exception:
            pass
        super().closeEvent(event)
