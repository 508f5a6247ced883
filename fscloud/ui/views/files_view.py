from typing import Callable, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from ...controller import NavigationController
from ...models import FileItem
from ...utils import format_bytes


def _format_created(value: Optional[str]) -> str:
    if not value:
        return "-"
    # ISO timestamps from the server; keep date and minutes
    return value.replace("T", " ")[:16]


class FileRow(QFrame):
    def __init__(
        self,
        item: FileItem,
        on_open: Callable[[FileItem], None],
        on_delete: Callable[[FileItem], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.item = item
        self.setObjectName("fileRow")
        self.setStyleSheet(
            "#fileRow { background: #ffffff; border-radius: 10px; border: 1px solid #e6e6e6; }"
        )

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(12)

        badge = QLabel("DIR" if item.is_folder else "FILE")
        badge.setFixedWidth(44)
        badge.setAlignment(Qt.AlignCenter)
        badge.setStyleSheet(
            "background: #1d4d8f; color: #ffffff; padding: 2px 6px; border-radius: 6px;"
            if item.is_folder
            else "background: #e5e7eb; color: #111111; padding: 2px 6px; border-radius: 6px;"
        )
        layout.addWidget(badge)

        name_label = QLabel(item.name)
        name_label.setStyleSheet("font-weight: 600; color: #111111;")
        name_label.setWordWrap(True)
        layout.addWidget(name_label, 1)

        size_text = "-" if item.is_folder else format_bytes(item.size_bytes)
        meta = QLabel(f"{size_text}   {_format_created(item.created_at)}")
        meta.setStyleSheet("color: #444444;")
        layout.addWidget(meta)

        if item.is_folder:
            open_btn = QPushButton("Open")
            open_btn.setStyleSheet("background: #1d6fd6; color: #ffffff;")
            open_btn.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
            open_btn.setCursor(Qt.PointingHandCursor)
            open_btn.clicked.connect(lambda: on_open(self.item))
            layout.addWidget(open_btn)

        delete_btn = QPushButton("Delete")
        delete_btn.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        delete_btn.setCursor(Qt.PointingHandCursor)
        delete_btn.clicked.connect(lambda: on_delete(self.item))
        layout.addWidget(delete_btn)


class FilesView(QWidget):
    """Breadcrumb, search box, error banner and the listing of the current view."""

    def __init__(self, controller: NavigationController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._controller = controller

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(10)

        self.breadcrumb = QWidget()
        self.breadcrumb_layout = QHBoxLayout(self.breadcrumb)
        self.breadcrumb_layout.setContentsMargins(0, 0, 0, 0)
        self.breadcrumb_layout.setSpacing(4)
        root.addWidget(self.breadcrumb)

        self.title = QLabel("File Storage Dashboard")
        self.title.setStyleSheet("font-size: 20px; font-weight: 700; color: #1f2937;")
        root.addWidget(self.title)

        search_row = QHBoxLayout()
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search files and folders...")
        self.search_edit.textEdited.connect(controller.update_search_input)
        self.clear_btn = QPushButton("Clear")
        self.clear_btn.setCursor(Qt.PointingHandCursor)
        self.clear_btn.clicked.connect(controller.clear_search)
        self.pending_label = QLabel("")
        self.pending_label.setStyleSheet("color: #3b82f6;")
        search_row.addWidget(self.search_edit, 1)
        search_row.addWidget(self.pending_label)
        search_row.addWidget(self.clear_btn)
        self.search_row = QWidget()
        self.search_row.setLayout(search_row)
        root.addWidget(self.search_row)

        self.searching_label = QLabel("")
        self.searching_label.setStyleSheet("color: #4b5563;")
        root.addWidget(self.searching_label)

        self.error_label = QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet(
            "background: #fef2f2; border: 1px solid #fecaca; border-radius: 8px; color: #dc2626; padding: 8px;"
        )
        self.error_label.hide()
        root.addWidget(self.error_label)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        container = QWidget()
        self.list_layout = QVBoxLayout(container)
        self.list_layout.setSpacing(8)
        self.list_layout.addStretch(1)
        self.scroll.setWidget(container)
        root.addWidget(self.scroll, 1)

        self.empty_label = QLabel("")
        self.empty_label.setStyleSheet("color: #6b7280;")
        root.addWidget(self.empty_label)

        controller.subscribe(self._on_event)
        self.render_all()

    def render_all(self) -> None:
        self._render_path()
        self._render_mode()
        self._render_search()
        self._render_error()
        self._render_items()

    def _on_event(self, event: str) -> None:
        if event == "path":
            self._render_path()
        elif event == "mode":
            self._render_mode()
        elif event == "search":
            self._render_search()
        elif event == "error":
            self._render_error()
        elif event == "items":
            self._render_items()

    def _render_path(self) -> None:
        while self.breadcrumb_layout.count():
            item = self.breadcrumb_layout.takeAt(0)
            widget = item.widget()
            if widget:
                widget.deleteLater()
        path = self._controller.path
        for index, entry in enumerate(path):
            btn = QPushButton(entry.name)
            btn.setFlat(True)
            btn.setCursor(Qt.PointingHandCursor)
            btn.clicked.connect(lambda _checked=False, i=index: self._controller.jump_to_breadcrumb(i))
            self.breadcrumb_layout.addWidget(btn)
            if index < len(path) - 1:
                self.breadcrumb_layout.addWidget(QLabel(">"))
        self.breadcrumb_layout.addStretch(1)

    def _render_mode(self) -> None:
        recent = self._controller.is_recent_view
        self.breadcrumb.setVisible(not recent)
        self.search_row.setVisible(not recent)
        self.title.setText("Recent Files" if recent else "File Storage Dashboard")

    def _render_search(self) -> None:
        search = self._controller.search
        if self.search_edit.text() != search.raw:
            self.search_edit.setText(search.raw)
        self.clear_btn.setVisible(bool(search.raw))
        self.pending_label.setText("Searching..." if search.pending else "")
        if search.debounced:
            self.searching_label.setText(f'Searching for: "{search.debounced}"')
        else:
            self.searching_label.setText("")

    def _render_error(self) -> None:
        error = self._controller.error
        self.error_label.setText(error)
        self.error_label.setVisible(bool(error))

    def _render_items(self) -> None:
        while self.list_layout.count() > 1:
            item = self.list_layout.takeAt(0)
            widget = item.widget()
            if widget:
                widget.deleteLater()
        items: List[FileItem] = self._controller.items
        for item in items:
            row = FileRow(item, on_open=self._open_item, on_delete=self._delete_item)
            self.list_layout.insertWidget(self.list_layout.count() - 1, row)
        if self._controller.loading:
            self.empty_label.setText("Loading...")
        elif not items:
            self.empty_label.setText("No files found.")
        else:
            self.empty_label.setText("")

    def _open_item(self, item: FileItem) -> None:
        self._controller.enter_folder(item.name, item.id)

    def _delete_item(self, item: FileItem) -> None:
        ok = QMessageBox.question(self, "Delete", f"Delete {item.name}?")
        if ok != QMessageBox.StandardButton.Yes:
            return
        self._controller.delete_item(item)
