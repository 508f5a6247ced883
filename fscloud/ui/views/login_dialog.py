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


class LoginDialog(QDialog):
    def __init__(self, controller: NavigationController, parent=None) -> None:
        super().__init__(parent)
        self._controller = controller

        self.setWindowTitle("File Storage - Login")
        self.setModal(True)
        self.setMinimumWidth(380)

        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(10)

        title = QLabel("Sign in to your storage")
        title.setStyleSheet("font-size: 16px; font-weight: 600; color: #111111;")
        root.addWidget(title)

        self.email_edit = QLineEdit()
        self.email_edit.setPlaceholderText("Email")
        self.password_edit = QLineEdit()
        self.password_edit.setPlaceholderText("Password")
        self.password_edit.setEchoMode(QLineEdit.Password)
        self.password_edit.returnPressed.connect(self._submit)
        root.addWidget(self.email_edit)
        root.addWidget(self.password_edit)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #dc2626;")
        self.error_label.setWordWrap(True)
        root.addWidget(self.error_label)

        footer = QHBoxLayout()
        footer.addStretch(1)
        self.cancel_btn = QPushButton("Quit")
        self.cancel_btn.clicked.connect(self.reject)
        self.login_btn = QPushButton("Login")
        self.login_btn.setCursor(Qt.PointingHandCursor)
        self.login_btn.setDefault(True)
        self.login_btn.clicked.connect(self._submit)
        footer.addWidget(self.cancel_btn)
        footer.addWidget(self.login_btn)
        root.addLayout(footer)

        controller.subscribe(self._on_event)
        self.finished.connect(lambda _code: controller.unsubscribe(self._on_event))

    def _set_busy(self, busy: bool) -> None:
        self.login_btn.setEnabled(not busy)
        self.email_edit.setEnabled(not busy)
        self.password_edit.setEnabled(not busy)

    def _submit(self) -> None:
        self.error_label.setText("")
        self._set_busy(True)
        self._controller.login(self.email_edit.text(), self.password_edit.text())

    def _on_event(self, event: str) -> None:
        if event == "auth" and self._controller.authenticated:
            self.accept()
        elif event == "error" and self._controller.error:
            self.error_label.setText(self._controller.error)
            self._set_busy(False)
