"""Common utilities and shared components."""

from .theme import Colors, Fonts, Spacing, Styles

__all__ = ['Colors', 'Fonts', 'Spacing', 'Styles']
