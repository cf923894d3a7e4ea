"""Play screen widgets: the card grid and the tier selector bar."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QGraphicsDropShadowEffect,
    QGridLayout,
    QHBoxLayout,
    QPushButton,
    QSizePolicy,
    QWidget,
)

from totemtrace.ui.colors import GameColors, accent_for, blend_hex
from totemtrace.ui.models import CardState, TierButtonState


class CardButton(QPushButton):
    """One square card. Selected cards take the tier accent, masked cards fade out."""

    def __init__(self, on_click: Callable[[int], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._on_click = on_click
        self._index = -1
        self.setCursor(Qt.PointingHandCursor)
        self.setMinimumSize(72, 72)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.clicked.connect(self._handle_click)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(22)
        shadow.setOffset(0, 8)
        shadow.setColor(QColor(0, 0, 0, 120))
        self.setGraphicsEffect(shadow)

    def set_state(self, state: CardState, tier_key: str, faulted: bool) -> None:
        self._index = state.index
        self.setEnabled(state.clickable and not faulted)
        if state.masked:
            self.setText("")
            background = GameColors.CARD_MASKED
            border = GameColors.CARD_MASKED
            color = GameColors.TEXT_MUTED
        elif state.selected:
            self.setText(state.symbol)
            background = accent_for(tier_key)
            border = blend_hex(background, "#FFFFFF", 0.3)
            color = GameColors.TEXT_PRIMARY
        else:
            self.setText(state.symbol)
            background = GameColors.FAULT_FLASH if faulted else GameColors.CARD_BG
            border = GameColors.CARD_BORDER
            color = GameColors.TEXT_SECONDARY
        self.setStyleSheet(
            f"""
            QPushButton {{
                background: {background};
                border: 3px solid {border};
                border-radius: 24px;
                color: {color};
                font-size: 40px;
                font-weight: 900;
            }}
            QPushButton:disabled {{
                color: {color};
            }}
            """
        )

    def _handle_click(self) -> None:
        if self._index >= 0:
            self._on_click(self._index)


class CardGridWidget(QWidget):
    """Grid of CardButtons; buttons are reused between rounds."""

    def __init__(self, on_card_clicked: Callable[[int], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._on_card_clicked = on_card_clicked
        self._buttons: list[CardButton] = []
        self._columns = 3
        self._layout = QGridLayout(self)
        self._layout.setSpacing(12)
        self._layout.setContentsMargins(0, 0, 0, 0)

    def set_cards(self, states: list[CardState], columns: int, tier_key: str, faulted: bool) -> None:
        while len(self._buttons) < len(states):
            self._buttons.append(CardButton(self._on_card_clicked, self))

        if columns != self._columns or self._layout.count() != len(states):
            self._columns = max(1, columns)
            for button in self._buttons:
                self._layout.removeWidget(button)
            for i, state in enumerate(states):
                self._layout.addWidget(self._buttons[i], i // self._columns, i % self._columns)

        for i, state in enumerate(states):
            self._buttons[i].show()
            self._buttons[i].set_state(state, tier_key, faulted)
        for button in self._buttons[len(states):]:
            button.hide()


class TierBarWidget(QWidget):
    """Row of tier buttons; tiers below the highest reached are disabled."""

    def __init__(self, on_tier_clicked: Callable[[str], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._on_tier_clicked = on_tier_clicked
        self._buttons: dict[str, QPushButton] = {}
        self._row = QHBoxLayout(self)
        self._row.setContentsMargins(4, 4, 4, 4)
        self._row.setSpacing(4)

    def set_states(self, states: list[TierButtonState]) -> None:
        for state in states:
            key = state.tier.key
            button = self._buttons.get(key)
            if button is None:
                button = QPushButton(self)
                button.setCursor(Qt.PointingHandCursor)
                button.clicked.connect(lambda _checked=False, k=key: self._on_tier_clicked(k))
                self._row.addWidget(button)
                self._buttons[key] = button

            button.setText(state.label if state.unlocked else f"🔒 {state.tier.name}")
            button.setEnabled(state.unlocked)
            accent = accent_for(key)
            background = accent if state.is_current else "transparent"
            color = GameColors.TEXT_PRIMARY if state.is_current else GameColors.TEXT_MUTED
            button.setStyleSheet(
                f"""
                QPushButton {{
                    background: {background};
                    color: {color};
                    border: none;
                    border-radius: 12px;
                    padding: 8px 18px;
                    font-size: 16px;
                    font-weight: 900;
                }}
                QPushButton:hover {{
                    color: {GameColors.TEXT_PRIMARY};
                }}
                QPushButton:disabled {{
                    color: rgba(255, 255, 255, 0.2);
                }}
                """
            )
