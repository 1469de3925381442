"""Colour palette for the desktop editor."""

THEME = {
    "background": "#10161a",
    "surface": "#19222a",
    "surface_alt": "#212c35",
    "border": "#2c3a45",
    "text": "#eef3f6",
    "accent": "#5a9e25",
    "accent_hover": "#4b8a1c",
    "folder": "#e0b050",
    "link": "#6fb6ff",
    "success": "#4fd68e",
    "danger": "#ff6b81",
    "preview_bg": "#0b1014",
}
