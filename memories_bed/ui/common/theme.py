"""
Look and feel for Memories Bed: palette, type scale, spacing and the Qt
stylesheet fragments built from them.

    from memories_bed.ui.common.theme import Colors, Spacing, Styles

    button.setStyleSheet(Styles.button_primary())
    icon = qta.icon('fa5s.heart', color=Colors.ACCENT_FAVORITE)
"""
from typing import Optional


class Colors:
    """
    Dark palette with the indigo brand accent that the QR codes also use.
    """

    ACCENT_PRIMARY = "#667eea"
    ACCENT_PRIMARY_HOVER = "#7b90f0"
    ACCENT_PRIMARY_PRESSED = "#5468d4"
    ACCENT_SUCCESS = "#10b981"
    ACCENT_ERROR = "#ef4444"
    ACCENT_FAVORITE = "#ef4444"

    TEXT_PRIMARY = "#e6e6e6"
    TEXT_SECONDARY = "#9ca3af"
    TEXT_MUTED = "#6b7280"
    TEXT_DISABLED = "#666666"
    TEXT_WHITE = "#ffffff"

    # darkest first
    BG_PRIMARY = "#141414"
    BG_INPUT = "#161616"
    BG_SECONDARY = "#1b1b1b"
    BG_TERTIARY = "#232323"
    BG_HOVER = "#2e2e2e"
    STATE_DISABLED_BG = "#242424"

    # Lightbox
    BG_OVERLAY = "rgba(0, 0, 0, 0.92)"
    BG_CONTROL = "rgba(255, 255, 255, 0.13)"
    BG_CONTROL_HOVER = "rgba(255, 255, 255, 0.26)"
    ICON_ON_MEDIA = TEXT_WHITE

    BORDER_DEEP = "#111111"
    BORDER_DEFAULT = "#2e2e2e"


class Fonts:
    # pixels
    SIZE_XS = 11
    SIZE_SM = 12
    SIZE_MD = 13
    SIZE_LG = 14
    SIZE_XL = 15
    SIZE_XXL = 16
    SIZE_TITLE = 24

    WEIGHT_NORMAL = 400
    WEIGHT_MEDIUM = 500
    WEIGHT_SEMIBOLD = 600
    WEIGHT_BOLD = 700


class Spacing:
    XS = 4
    SM = 8
    MD = 12
    LG = 16
    XL = 20
    XXL = 24

    RADIUS_SM = 4
    RADIUS_MD = 6
    RADIUS_LG = 8
    RADIUS_XL = 10

    ICON_MD = 20
    ICON_LG = 24
    ICON_XL = 32

    HEADER_HEIGHT = 70
    BTN_LG = 44  # round lightbox buttons

    THUMB_MIN_WIDTH = 220
    THUMB_ASPECT = 0.75  # height / width of a 400x300 thumbnail
    GRID_MAX_COLUMNS = 4

    DOT_SIZE = 8
    MULTILINE_MIN_HEIGHT = 60
    MULTILINE_MAX_HEIGHT = 100


def _circle(size: int) -> str:
    return (
        f"border-radius: {size // 2}px; min-width: {size}px; max-width: {size}px;"
        f" min-height: {size}px; max-height: {size}px;"
    )


def _button(
    bg: str,
    fg: str,
    border: str,
    hover_bg: str,
    hover_border: str,
    padding: str,
    weight: int = Fonts.WEIGHT_MEDIUM,
    pressed_bg: Optional[str] = None,
) -> str:
    """QPushButton rules shared by the filled and outlined variants"""
    pressed = ""
    if pressed_bg:
        pressed = f"QPushButton:pressed {{ background-color: {pressed_bg}; border-color: {pressed_bg}; }}"
    return f"""
        QPushButton {{
            background-color: {bg};
            color: {fg};
            border: 1px solid {border};
            border-radius: {Spacing.RADIUS_LG}px;
            padding: {padding};
            font-weight: {weight};
        }}
        QPushButton:hover {{ background-color: {hover_bg}; border-color: {hover_border}; }}
        {pressed}
        QPushButton:disabled {{
            background-color: {Colors.STATE_DISABLED_BG};
            border-color: {Colors.STATE_DISABLED_BG};
            color: {Colors.TEXT_DISABLED};
        }}
    """


class Styles:
    """Stylesheet fragments; methods build them on demand, constants are fixed."""

    HEADER = f"background-color: {Colors.BG_SECONDARY}; border-bottom: 1px solid {Colors.BORDER_DEEP};"

    SCROLLBAR = f"""
        QScrollBar:vertical {{
            background-color: {Colors.BG_PRIMARY};
            width: 8px;
            border-radius: {Spacing.RADIUS_SM}px;
        }}
        QScrollBar::handle:vertical {{
            background-color: {Colors.BORDER_DEFAULT};
            border-radius: {Spacing.RADIUS_SM}px;
            min-height: 32px;
        }}
        QScrollBar::handle:vertical:hover {{ background-color: {Colors.TEXT_MUTED}; }}
        QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical {{ height: 0px; }}
    """

    @staticmethod
    def label(
        color: str = Colors.TEXT_PRIMARY,
        size: int = Fonts.SIZE_MD,
        weight: int = Fonts.WEIGHT_NORMAL,
        padding: Optional[int] = None,
        bg: Optional[str] = None,
    ) -> str:
        rules = [f"color: {color}", f"font-size: {max(1, size or Fonts.SIZE_MD)}px", f"font-weight: {weight}"]
        if padding is not None:
            rules.append(f"padding: {padding}px")
        if bg is not None:
            rules += [f"background-color: {bg}", f"border-radius: {Spacing.RADIUS_MD}px"]
        return "QLabel { %s; }" % "; ".join(rules)

    @staticmethod
    def button_primary() -> str:
        return _button(
            Colors.ACCENT_PRIMARY, Colors.TEXT_WHITE, Colors.ACCENT_PRIMARY,
            Colors.ACCENT_PRIMARY_HOVER, Colors.ACCENT_PRIMARY_HOVER,
            "9px 18px", Fonts.WEIGHT_SEMIBOLD, pressed_bg=Colors.ACCENT_PRIMARY_PRESSED,
        )

    @staticmethod
    def button_secondary() -> str:
        return _button(
            Colors.BG_TERTIARY, Colors.TEXT_PRIMARY, Colors.BORDER_DEFAULT,
            Colors.BG_HOVER, Colors.ACCENT_PRIMARY, "9px 16px",
        )

    @staticmethod
    def button_flat() -> str:
        """Text-only button, e.g. the comment form's cancel."""
        return f"""
            QPushButton {{
                background: none;
                border: none;
                color: {Colors.TEXT_SECONDARY};
                padding: {Spacing.XS}px;
            }}
            QPushButton:hover {{
                color: {Colors.TEXT_PRIMARY};
                background-color: {Colors.BG_TERTIARY};
                border-radius: {Spacing.RADIUS_LG}px;
            }}
        """

    @staticmethod
    def round_media_button(size: int = Spacing.BTN_LG) -> str:
        """Translucent circle drawn over media (close, arrows, download, like)"""
        return f"""
            QPushButton {{ background-color: {Colors.BG_CONTROL}; border: none; {_circle(size)} }}
            QPushButton:hover {{ background-color: {Colors.BG_CONTROL_HOVER}; }}
            QPushButton:disabled {{ background: none; }}
        """

    @staticmethod
    def input_field() -> str:
        return f"""
            QLineEdit, QTextEdit {{
                background-color: {Colors.BG_INPUT};
                color: {Colors.TEXT_PRIMARY};
                border: 1px solid {Colors.BORDER_DEFAULT};
                border-radius: {Spacing.RADIUS_LG}px;
                padding: 6px 10px;
                selection-background-color: {Colors.ACCENT_PRIMARY};
            }}
            QLineEdit:focus, QTextEdit:focus {{ border-color: {Colors.ACCENT_PRIMARY}; }}
        """

    @staticmethod
    def volume_slider() -> str:
        """White track and knob; the knob turns accent on hover"""
        inset = f"margin: 0px {Spacing.SM}px;"
        return f"""
            QSlider::groove:horizontal {{
                background-color: {Colors.BG_CONTROL_HOVER}; height: 4px; border-radius: 2px; {inset}
            }}
            QSlider::sub-page:horizontal {{
                background-color: {Colors.TEXT_WHITE}; border-radius: 2px; {inset}
            }}
            QSlider::handle:horizontal {{
                background-color: {Colors.TEXT_WHITE}; width: 12px; margin: -4px 0; border-radius: 6px;
            }}
            QSlider::handle:horizontal:hover {{ background-color: {Colors.ACCENT_PRIMARY}; }}
        """

    @staticmethod
    def zoom_button() -> str:
        return f"""
            QPushButton {{
                background-color: {Colors.BG_OVERLAY};
                color: {Colors.TEXT_WHITE};
                border: 1px solid {Colors.BORDER_DEFAULT};
                border-radius: {Spacing.RADIUS_SM}px;
                font-size: {Fonts.SIZE_SM}px;
                padding: {Spacing.XS}px {Spacing.SM}px;
            }}
            QPushButton:hover {{ border-color: {Colors.ACCENT_PRIMARY}; }}
        """

    @staticmethod
    def thumbnail_card() -> str:
        return f"""
            QFrame {{
                background-color: {Colors.BG_SECONDARY};
                border: 1px solid {Colors.BG_TERTIARY};
                border-radius: {Spacing.RADIUS_LG}px;
            }}
            QFrame:hover {{ border-color: {Colors.ACCENT_PRIMARY}; }}
        """

    @staticmethod
    def tab_button(active: bool = False) -> str:
        """Filter pill: filled when active, hover-highlighted otherwise."""
        shape = f"border: none; border-radius: {Spacing.RADIUS_LG}px; padding: {Spacing.SM}px {Spacing.LG}px;"
        if active:
            return (
                f"QPushButton {{ {shape} background-color: {Colors.ACCENT_PRIMARY};"
                f" color: {Colors.TEXT_WHITE}; font-weight: {Fonts.WEIGHT_MEDIUM}; }}"
            )
        return (
            f"QPushButton {{ {shape} background: none; color: {Colors.TEXT_SECONDARY}; }}"
            f" QPushButton:hover {{ background-color: {Colors.BG_HOVER}; color: {Colors.TEXT_PRIMARY}; }}"
        )

    @staticmethod
    def dot(active: bool = False) -> str:
        color = Colors.TEXT_WHITE if active else "rgba(255, 255, 255, 0.35)"
        return f"QPushButton {{ background-color: {color}; border: none; {_circle(Spacing.DOT_SIZE)} }}"

    @staticmethod
    def scroll_area_transparent() -> str:
        return f"QScrollArea {{ border: none; background-color: {Colors.BG_PRIMARY}; }}"

    @staticmethod
    def status_label() -> str:
        return f"QLabel {{ color: {Colors.TEXT_SECONDARY}; font-size: {Fonts.SIZE_SM}px; padding: {Spacing.SM}px; }}"
