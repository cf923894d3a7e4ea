"""Theme colors and color utilities for the UI."""


class GameColors:
    """Dark arena palette; CHAOS switches the accent to red."""

    BG_TOP = "#1e1b4b"
    BG_MIDDLE = "#0a0a0a"
    BG_BOTTOM = "#450a0a"

    PRIMARY = "#4f46e5"
    PRIMARY_LIGHT = "#6366f1"
    CHAOS = "#dc2626"
    CHAOS_LIGHT = "#ef4444"
    GOLD = "#fbbf24"

    CARD_BG = "#171717"
    CARD_BORDER = "#262626"
    CARD_MASKED = "rgba(255, 255, 255, 0.04)"
    FAULT_FLASH = "#7f1d1d"

    TEXT_PRIMARY = "#ffffff"
    TEXT_SECONDARY = "#d4d4d4"
    TEXT_MUTED = "#737373"
    TIMER_WARNING = "#fca5a5"

    # Rank label colors on the summary screen
    RANK = {
        "GOD": "#ef4444",
        "SSS": "#fbbf24",
        "S": "#f59e0b",
        "A": "#6366f1",
        "C": "#737373",
    }


def accent_for(tier_key: str) -> str:
    """Accent color for the selected state of cards and tier buttons."""
    return GameColors.CHAOS if tier_key == "CHAOS" else GameColors.PRIMARY


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except (TypeError, ValueError):
        return a
