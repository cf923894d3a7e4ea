"""Application entry point and setup for Totem Trace."""

import logging
import os
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from totemtrace.core.profiles import DEFAULT_PROFILE, ProfileRepository
from totemtrace.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def selected_profile_key() -> str:
    """Profile chosen through TOTEMTRACE_PROFILE, falling back to the classic set."""
    return os.environ.get("TOTEMTRACE_PROFILE", "").strip() or DEFAULT_PROFILE


def run() -> None:
    """Load the generation profile and start the main window."""
    configure_logging()
    app = QApplication(sys.argv)

    profiles = ProfileRepository()
    key = selected_profile_key()
    try:
        profile = profiles.get(key)
    except KeyError:
        logging.warning(f"Unknown profile {key!r}, using {DEFAULT_PROFILE!r}; available: {profiles.keys()}")
        profile = profiles.get(DEFAULT_PROFILE)

    app.setApplicationName(profile.title)
    app.setApplicationDisplayName(profile.title)
    logging.info(f"Using profile: {profile.key}")

    window = MainWindow(profile=profile)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.setGeometry(geometry)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
