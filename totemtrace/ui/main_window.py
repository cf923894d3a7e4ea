from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QFileDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from totemtrace.core.errors import InvalidInput, TierLocked
from totemtrace.core.profiles import GenerationProfile
from totemtrace.core.session import GameState, RoundSession, SessionSnapshot
from totemtrace.core.summary import SessionSummary
from totemtrace.ui.card_widgets import CardGridWidget, TierBarWidget
from totemtrace.ui.colors import GameColors, accent_for
from totemtrace.ui.feedback import QtFeedback
from totemtrace.ui.models import card_states, format_clock, tier_button_states
from totemtrace.ui.qt_scheduler import QtScheduler

logger = logging.getLogger(__name__)

# The engine changes state on its own timers; the view polls it at this rate.
_REFRESH_MS = 50


class MainWindow(QMainWindow):
    """Three screens: home (name + start), play (tier bar + card grid), summary.

    The window owns one RoundSession and only ever reads its snapshot; all
    game decisions stay in the engine.
    """

    def __init__(self, profile: GenerationProfile, rng: Optional[random.Random] = None) -> None:
        super().__init__()
        self._profile = profile
        self._scheduler = QtScheduler(self)
        self._session = RoundSession(
            profile,
            self._scheduler,
            rng=rng,
            feedback=QtFeedback(on_cue=self._on_cue),
        )
        self._summary: Optional[SessionSummary] = None

        self._stack: Optional[QStackedWidget] = None
        self._home_screen: Optional[QWidget] = None
        self._play_screen: Optional[QWidget] = None
        self._summary_screen: Optional[QWidget] = None
        self._name_edit: Optional[QLineEdit] = None
        self._score_label: Optional[QLabel] = None
        self._timer_label: Optional[QLabel] = None
        self._goal_label: Optional[QLabel] = None
        self._tier_bar: Optional[TierBarWidget] = None
        self._card_grid: Optional[CardGridWidget] = None
        self._summary_total: Optional[QLabel] = None
        self._summary_rank: Optional[QLabel] = None
        self._summary_tiers: dict[str, QLabel] = {}
        self._summary_clicks: Optional[QLabel] = None
        self._summary_accuracy: Optional[QLabel] = None

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setInterval(_REFRESH_MS)
        self._refresh_timer.timeout.connect(self._refresh)

        self.setWindowTitle(profile.title)
        self._build_ui()

    # -- Construction -------------------------------------------------------

    def _build_ui(self) -> None:
        self._stack = QStackedWidget()
        self._home_screen = self._build_home_screen()
        self._play_screen = self._build_play_screen()
        self._summary_screen = self._build_summary_screen()
        for screen in (self._home_screen, self._play_screen, self._summary_screen):
            self._stack.addWidget(screen)

        self._stack.setStyleSheet(
            f"""
            QStackedWidget > QWidget {{
                background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                    stop:0 {GameColors.BG_TOP},
                    stop:0.5 {GameColors.BG_MIDDLE},
                    stop:1 {GameColors.BG_BOTTOM});
            }}
            QLabel {{
                color: {GameColors.TEXT_PRIMARY};
                background: transparent;
            }}
            """
        )
        self.setCentralWidget(self._stack)
        self._stack.setCurrentWidget(self._home_screen)

    def _build_home_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.setAlignment(Qt.AlignCenter)
        layout.setSpacing(24)

        title = QLabel(self._profile.title)
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 64px; font-weight: 900;")

        tagline = QLabel("Hyper-focus logic battle")
        tagline.setAlignment(Qt.AlignCenter)
        tagline.setStyleSheet(f"font-size: 20px; color: {GameColors.TEXT_MUTED}; font-style: italic;")

        self._name_edit = QLineEdit()
        self._name_edit.setPlaceholderText("Your name (for the summary)")
        self._name_edit.setMaxLength(24)
        self._name_edit.setFixedWidth(320)
        self._name_edit.setStyleSheet(
            "padding: 10px; border-radius: 12px; font-size: 16px; background: white; color: black;"
        )

        start = QPushButton("Start challenge")
        start.setCursor(Qt.PointingHandCursor)
        start.setStyleSheet(
            "QPushButton { background: white; color: black; border-radius: 20px;"
            " padding: 18px 48px; font-size: 28px; font-weight: 900; }"
        )
        start.clicked.connect(self._start_session)

        layout.addWidget(title)
        layout.addWidget(tagline)
        layout.addWidget(self._name_edit, 0, Qt.AlignHCenter)
        layout.addWidget(start, 0, Qt.AlignHCenter)
        return screen

    def _build_play_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.setContentsMargins(24, 16, 24, 24)
        layout.setSpacing(16)

        header = QHBoxLayout()
        self._score_label = QLabel("🏆 0")
        self._timer_label = QLabel("⏱ 0s")
        for label in (self._score_label, self._timer_label):
            label.setAlignment(Qt.AlignCenter)
            label.setStyleSheet("font-size: 36px; font-weight: 900;")
            header.addWidget(label, 1)

        self._tier_bar = TierBarWidget(on_tier_clicked=self._change_tier)

        self._goal_label = QLabel("")
        self._goal_label.setAlignment(Qt.AlignCenter)
        self._goal_label.setStyleSheet("font-size: 30px; font-weight: 900;")

        self._card_grid = CardGridWidget(on_card_clicked=self._select_card)

        layout.addLayout(header)
        layout.addWidget(self._tier_bar, 0, Qt.AlignHCenter)
        layout.addWidget(self._goal_label)
        layout.addWidget(self._card_grid, 1)
        return screen

    def _build_summary_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.setAlignment(Qt.AlignCenter)
        layout.setSpacing(16)

        caption = QLabel("FINAL SCORE")
        caption.setAlignment(Qt.AlignCenter)
        caption.setStyleSheet(f"font-size: 18px; font-weight: 900; color: {GameColors.PRIMARY_LIGHT};")

        self._summary_rank = QLabel("")
        self._summary_rank.setAlignment(Qt.AlignCenter)

        self._summary_total = QLabel("0")
        self._summary_total.setAlignment(Qt.AlignCenter)
        self._summary_total.setStyleSheet("font-size: 120px; font-weight: 900;")

        tiers = QGridLayout()
        for col, tier in enumerate(self._profile.catalog.all()):
            name = QLabel(tier.name.upper())
            name.setAlignment(Qt.AlignCenter)
            name.setStyleSheet(f"font-size: 12px; color: {GameColors.TEXT_MUTED}; font-weight: 900;")
            value = QLabel("0")
            value.setAlignment(Qt.AlignCenter)
            value.setStyleSheet("font-size: 36px; font-weight: 900;")
            tiers.addWidget(name, 0, col)
            tiers.addWidget(value, 1, col)
            self._summary_tiers[tier.key] = value

        self._summary_clicks = QLabel("")
        self._summary_accuracy = QLabel("")
        stats = QHBoxLayout()
        for label in (self._summary_clicks, self._summary_accuracy):
            label.setAlignment(Qt.AlignCenter)
            label.setStyleSheet("font-size: 22px; font-weight: 800;")
            stats.addWidget(label, 1)

        buttons = QHBoxLayout()
        save = QPushButton("Save image")
        again = QPushButton("Play again")
        for button in (save, again):
            button.setCursor(Qt.PointingHandCursor)
            button.setStyleSheet(
                f"QPushButton {{ background: {GameColors.PRIMARY}; color: white; border-radius: 16px;"
                " padding: 12px 32px; font-size: 18px; font-weight: 900; }"
            )
            buttons.addWidget(button)
        save.clicked.connect(self._save_summary_image)
        again.clicked.connect(self._start_session)

        layout.addWidget(caption)
        layout.addWidget(self._summary_rank)
        layout.addWidget(self._summary_total)
        layout.addLayout(tiers)
        layout.addLayout(stats)
        layout.addLayout(buttons)
        return screen

    # -- Input --------------------------------------------------------------

    def _start_session(self) -> None:
        self._summary = None
        self._session.start_session()
        self._stack.setCurrentWidget(self._play_screen)
        self._refresh_timer.start()
        self._refresh()

    def _change_tier(self, key: str) -> None:
        try:
            self._session.change_tier(key)
        except (TierLocked, InvalidInput) as e:
            logger.debug("Ignoring tier change: %s", e)
            return
        self._refresh()

    def _select_card(self, index: int) -> None:
        try:
            self._session.submit_selection(index)
        except InvalidInput as e:
            # The grid can outlive the session by one frame; the click is stale.
            logger.debug("Ignoring card click: %s", e)
            return
        self._refresh()

    def _on_cue(self, cue: str) -> None:
        if cue == "session_end":
            QTimer.singleShot(0, self._refresh)

    # -- Rendering ----------------------------------------------------------

    def _refresh(self) -> None:
        snapshot = self._session.snapshot()
        if snapshot.game_state is GameState.EXPIRED:
            self._show_summary()
            return
        if snapshot.game_state is GameState.IDLE:
            return
        self._render_play(snapshot)

    def _render_play(self, snapshot: SessionSnapshot) -> None:
        tier = self._profile.catalog.get(snapshot.tier)
        self._score_label.setText(f"🏆 {snapshot.score}")
        warning = snapshot.remaining_seconds < 10
        self._timer_label.setText(f"⏱ {format_clock(snapshot.remaining_seconds)}")
        self._timer_label.setStyleSheet(
            f"font-size: 36px; font-weight: 900; color: "
            f"{GameColors.TIMER_WARNING if warning else GameColors.TEXT_PRIMARY};"
        )
        self._goal_label.setText(snapshot.goal)
        self._goal_label.setStyleSheet(
            f"font-size: 30px; font-weight: 900; color: "
            f"{accent_for(tier.key) if tier.is_chaos else GameColors.TEXT_PRIMARY};"
        )
        self._tier_bar.set_states(tier_button_states(self._profile.catalog, snapshot))
        self._card_grid.set_cards(
            card_states(snapshot),
            columns=tier.columns,
            tier_key=tier.key,
            faulted=snapshot.game_state is GameState.FAULT,
        )

    def _show_summary(self) -> None:
        self._refresh_timer.stop()
        if self._summary is None:
            self._summary = self._session.summary(self._name_edit.text())
        summary = self._summary

        self._summary_total.setText(str(summary.total_score))
        if summary.rank is not None:
            color = GameColors.RANK.get(summary.rank.label, GameColors.GOLD)
            self._summary_rank.setText(summary.rank.label)
            self._summary_rank.setStyleSheet(f"font-size: 72px; font-weight: 900; font-style: italic; color: {color};")
            self._summary_rank.show()
        else:
            self._summary_rank.hide()
        for key, label in self._summary_tiers.items():
            label.setText(str(summary.per_tier.get(key, 0)))
        self._summary_clicks.setText(f"Clicks: {summary.total_clicks}")
        self._summary_accuracy.setText(f"Accuracy: {summary.accuracy}%")
        self._stack.setCurrentWidget(self._summary_screen)

    def _save_summary_image(self) -> None:
        if self._summary is None:
            return
        suggested = str(Path.home() / self._summary.export_filename(".png"))
        path, _ = QFileDialog.getSaveFileName(self, "Save summary", suggested, "Images (*.png *.jpg)")
        if not path:
            return
        if not self._summary_screen.grab().save(path):
            logger.warning("Could not save summary image to %s", path)
            return
        logger.info("Saved summary image to %s", path)
