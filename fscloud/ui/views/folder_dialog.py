from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from ...controller import NavigationController


class FolderDialog(QDialog):
    def __init__(self, controller: NavigationController, parent=None) -> None:
        super().__init__(parent)
        self._controller = controller

        self.setWindowTitle("Create New Folder")
        self.setModal(True)
        self.setFixedWidth(420)

        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(10)

        self.name_edit = QLineEdit(controller.folder_name)
        self.name_edit.setPlaceholderText("Enter folder name...")
        self.name_edit.textChanged.connect(self._on_text)
        self.name_edit.returnPressed.connect(self._submit)
        root.addWidget(self.name_edit)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #ef4444;")
        self.error_label.setWordWrap(True)
        root.addWidget(self.error_label)

        footer = QHBoxLayout()
        footer.addStretch(1)
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.clicked.connect(self.reject)
        self.create_btn = QPushButton("Create Folder")
        self.create_btn.setCursor(Qt.PointingHandCursor)
        self.create_btn.clicked.connect(self._submit)
        footer.addWidget(self.cancel_btn)
        footer.addWidget(self.create_btn)
        root.addLayout(footer)

        self._on_text(self.name_edit.text())
        controller.subscribe(self._on_event)
        self.rejected.connect(controller.close_folder_dialog)
        self.finished.connect(lambda _code: controller.unsubscribe(self._on_event))

    def _on_text(self, text: str) -> None:
        self._controller.set_folder_name(text)
        self.create_btn.setEnabled(bool(text.strip()))

    def _submit(self) -> None:
        if not self.name_edit.text().strip():
            return
        self.create_btn.setEnabled(False)
        self._controller.create_folder()

    def _on_event(self, event: str) -> None:
        if event == "dialog" and not self._controller.folder_dialog_open:
            self.accept()
        elif event == "error":
            self.error_label.setText(self._controller.error)
            self.create_btn.setEnabled(bool(self.name_edit.text().strip()))
