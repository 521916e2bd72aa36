"""Built-in theme descriptors — executive, slancia and nexa.

Each theme is written in the same dict shape a YAML theme file uses and
parsed through ``ThemeDescriptor.from_dict`` so built-ins get the same
load-time validation as user themes.  Every theme covers all eleven slide
types.  Slide dimensions: 13.333" x 7.5" (standard 16:9).

The three themes share one page grid (margins, title band, list origin)
and differ in palette, fonts, accent shapes and list styles:

    executive — deep purple and gold, chevron accents, rounded chips
    slancia   — blue and red, diagonal bars, dash bullets
    nexa      — navy and amber, hexagon/circle geometry (premium)
"""

from slidesmind.errors import NotFoundError

from .theme import ThemeDescriptor

# Shared page grid
_MARGIN_X = 0.8
_CONTENT_W = 11.7
_TITLE_Y = 0.45
_TITLE_H = 0.9
_BODY_Y = 1.7


def _title_text(color: str = "textDark", size: float = 32.0, **extra) -> dict:
    spec = {
        "source": "slide.title",
        "x": _MARGIN_X, "y": _TITLE_Y, "w": _CONTENT_W, "h": _TITLE_H,
        "fontType": "heading", "fontSize": size, "fontWeight": "bold",
        "color": color, "valign": "middle",
    }
    spec.update(extra)
    return spec


def _list_geometry(start_y: float = _BODY_Y, spacing: float = 0.85,
                   w: float = _CONTENT_W, start_x: float = _MARGIN_X,
                   font_size: float = 20.0) -> dict:
    return {
        "startX": start_x, "startY": start_y, "spacingY": spacing,
        "w": w, "h": spacing - 0.15, "fontSize": font_size,
        "fontType": "body", "color": "textDark",
    }


def _columns(style: dict) -> tuple[dict, dict]:
    half = (_CONTENT_W - 0.5) / 2
    left = {**_list_geometry(w=half, font_size=18.0), "style": style}
    right = {**_list_geometry(w=half, start_x=_MARGIN_X + half + 0.5,
                              font_size=18.0), "style": style}
    return left, right


def _common_layouts(accent: list[dict], chip: dict, bullet_style: dict,
                    plan_style: dict, card_shape: str) -> dict:
    """Layouts for the body slide types; title/quote/closing are per theme."""
    left, right = _columns(bullet_style)
    return {
        "plan": {
            "background": "background",
            "decorations": accent,
            "titleText": _title_text(),
            "plan": {**_list_geometry(spacing=0.8), "style": plan_style,
                     "itemDecoration": chip},
        },
        "content": {
            "background": "background",
            "decorations": accent,
            "titleText": _title_text(),
            "bullets": {**_list_geometry(), "style": bullet_style,
                        "itemDecoration": chip},
        },
        "twoColumn": {
            "background": "background",
            "decorations": accent,
            "titleText": _title_text(),
            "leftColumn": left,
            "rightColumn": right,
        },
        "timeline": {
            "background": "background",
            "decorations": accent,
            "titleText": _title_text(),
            "bullets": {**_list_geometry(spacing=1.05, font_size=18.0),
                        "style": {"type": "number"},
                        "itemDecoration": {**chip, "padding": 0.05}},
        },
        "comparison": {
            "background": "background",
            "shapes": [{
                "type": "line",
                "x": _MARGIN_X + _CONTENT_W / 2, "y": _BODY_Y,
                "w": 0.0, "h": 5.0,
                "line": {"color": "secondary", "width": 2.0, "dashType": "dash"},
            }],
            "decorations": accent,
            "titleText": _title_text(),
            "leftColumn": left,
            "rightColumn": right,
        },
        "cards": {
            "background": "background",
            "decorations": accent,
            "titleText": _title_text(),
            "grid": {
                "columns": 3,
                "baseX": _MARGIN_X, "baseY": _BODY_Y,
                "spacingX": 3.95, "spacingY": 2.6,
                "cellW": 3.7, "cellH": 2.4,
                "shape": card_shape, "shapeFill": "surface",
                "shapeLine": {"color": "secondary", "width": 1.0},
                "radius": 0.08,
                "fontSize": 18.0, "color": "textDark",
            },
        },
        "stats": {
            "background": "background",
            "decorations": accent,
            "titleText": _title_text(),
            "subtitleText": {
                "source": "slide.subtitle",
                "x": _MARGIN_X, "y": 1.3, "w": _CONTENT_W, "h": 0.5,
                "fontSize": 16.0, "color": "textLight",
            },
            "grid": {
                "columns": 3,
                "baseX": _MARGIN_X, "baseY": 2.2,
                "spacingX": 3.95, "spacingY": 2.4,
                "cellW": 3.7, "cellH": 2.2,
                "shape": card_shape, "shapeFill": "primary",
                "radius": 0.1,
                "fontSize": 22.0, "fontType": "heading", "color": "white",
                "textFormat": "${value}\n${label}",
            },
        },
        "chart": {
            "background": "background",
            "decorations": accent,
            "titleText": _title_text(),
            "chart": {"x": _MARGIN_X, "y": _BODY_Y, "w": _CONTENT_W, "h": 5.2,
                      "color": "primary", "labelColor": "textDark"},
        },
    }


# ---------------------------------------------------------------------------
# Executive
# ---------------------------------------------------------------------------

def build_executive_theme() -> ThemeDescriptor:
    accent = [
        {"type": "chevron", "x": 12.4, "y": 0.55, "w": 0.5, "h": 0.7,
         "fill": "secondary"},
        {"type": "rect", "x": 0.0, "y": 7.3, "w": 13.333, "h": 0.2,
         "fill": "primary"},
    ]
    chip = {"enabled": True, "zIndex": "back", "shape": "roundRect",
            "offsetX": -0.15, "fill": "primary", "transparency": 90,
            "radius": 0.2}
    layouts = _common_layouts(
        accent, chip,
        bullet_style={"type": "bullet"},
        plan_style={"type": "numbered", "format": "${number}  ${text}",
                    "numberFormat": "1."},
        card_shape="roundRect",
    )
    layouts["title"] = {
        "background": "primary",
        "shapes": [
            {"type": "rect", "x": 0.0, "y": 0.0, "w": 0.35, "h": 7.5,
             "fill": "secondary"},
            {"type": "chevron", "x": 10.6, "y": 2.6, "w": 1.6, "h": 2.2,
             "fill": "gradientMid", "transparency": 40},
            {"type": "chevron", "x": 11.5, "y": 2.6, "w": 1.6, "h": 2.2,
             "fill": "gradientLight", "transparency": 60},
        ],
        "titleText": _title_text("white", 48.0, y=2.4, h=1.5, w=9.5),
        "subtitleText": {
            "source": "slide.subtitle",
            "x": _MARGIN_X, "y": 4.0, "w": 9.5, "h": 0.8,
            "fontSize": 22.0, "color": "secondary",
        },
    }
    layouts["quote"] = {
        "background": "primary",
        "shapes": [{"type": "rect", "x": 1.2, "y": 2.0, "w": 0.12, "h": 3.0,
                    "fill": "secondary"}],
        "titleText": {
            "source": "slide.quote.text",
            "x": 1.7, "y": 1.9, "w": 10.0, "h": 2.6,
            "fontType": "heading", "fontSize": 30.0, "italic": True,
            "color": "white", "valign": "middle",
        },
        "subtitleText": {
            "source": "slide.quote.author",
            "x": 1.7, "y": 4.6, "w": 10.0, "h": 0.6,
            "fontSize": 18.0, "color": "secondary",
        },
    }
    layouts["closing"] = {
        "background": "primary",
        "shapes": [{"type": "rect", "x": 0.0, "y": 7.1, "w": 13.333, "h": 0.4,
                    "fill": "secondary"}],
        "titleText": _title_text("white", 44.0, y=2.6, h=1.3, align="center"),
        "subtitleText": {
            "source": "slide.subtitle", "fallback": "Questions?",
            "x": _MARGIN_X, "y": 4.0, "w": _CONTENT_W, "h": 0.8,
            "fontSize": 22.0, "color": "secondary", "align": "center",
        },
    }
    return ThemeDescriptor.from_dict({
        "id": "executive",
        "name": "Executive",
        "description": "Professional and dynamic business presentation style",
        "colors": {
            "primary": "#3D2E5C",
            "secondary": "#FFD700",
            "accent": "#FF6B6B",
            "background": "#FFFFFF",
            "surface": "#F4F1F8",
            "textDark": "#1F2937",
            "textLight": "#6B7280",
            "white": "#FFFFFF",
            "gradientMid": "#5A4578",
            "gradientLight": "#775D94",
        },
        "fonts": {"heading": {"family": "Montserrat"}, "body": {"family": "Open Sans"}},
        "layouts": layouts,
    })


# ---------------------------------------------------------------------------
# Slancia
# ---------------------------------------------------------------------------

def build_slancia_theme() -> ThemeDescriptor:
    accent = [
        {"type": "rect", "x": 11.2, "y": -0.6, "w": 0.35, "h": 2.4,
         "fill": "primary", "rotate": 30},
        {"type": "rect", "x": 11.8, "y": -0.6, "w": 0.2, "h": 2.4,
         "fill": "secondary", "rotate": 30},
    ]
    chip = {"enabled": True, "zIndex": "back", "shape": "rect",
            "offsetX": -0.25, "width": 0.08, "fill": "secondary"}
    layouts = _common_layouts(
        accent, chip,
        bullet_style={"type": "dash"},
        plan_style={"type": "dash", "format": "${number} ${text}"},
        card_shape="rect",
    )
    layouts["title"] = {
        "background": "background",
        "shapes": [
            {"type": "triangle", "x": 8.5, "y": 0.0, "w": 4.833, "h": 7.5,
             "fill": "primary", "rotate": 180},
            {"type": "rect", "x": 9.4, "y": -1.0, "w": 0.4, "h": 9.5,
             "fill": "secondary", "rotate": 20},
        ],
        "titleText": _title_text("textDark", 46.0, y=2.3, h=1.6, w=8.0),
        "subtitleText": {
            "source": "slide.subtitle",
            "x": _MARGIN_X, "y": 4.0, "w": 8.0, "h": 0.8,
            "fontSize": 22.0, "color": "primary",
        },
    }
    layouts["quote"] = {
        "background": "background",
        "decorations": accent,
        "titleText": {
            "source": "slide.quote.text",
            "x": 1.5, "y": 2.0, "w": 10.3, "h": 2.5,
            "fontType": "heading", "fontSize": 30.0, "italic": True,
            "color": "primary", "align": "center", "valign": "middle",
        },
        "subtitleText": {
            "source": "slide.quote.author",
            "x": 1.5, "y": 4.7, "w": 10.3, "h": 0.6,
            "fontSize": 18.0, "color": "textLight", "align": "center",
        },
    }
    layouts["closing"] = {
        "background": "primary",
        "shapes": [{"type": "rect", "x": -1.0, "y": 5.6, "w": 16.0, "h": 0.3,
                    "fill": "secondary", "rotate": -4}],
        "titleText": _title_text("white", 44.0, y=2.4, h=1.3, align="center"),
        "subtitleText": {
            "source": "slide.subtitle", "fallback": "Questions?",
            "x": _MARGIN_X, "y": 3.8, "w": _CONTENT_W, "h": 0.8,
            "fontSize": 22.0, "color": "white", "align": "center",
        },
    }
    return ThemeDescriptor.from_dict({
        "id": "slancia",
        "name": "Slancia",
        "description": "Clean and professional with diagonal accents",
        "colors": {
            "primary": "#0066FF",
            "secondary": "#FF3333",
            "accent": "#FFD700",
            "background": "#FFFFFF",
            "surface": "#F3F6FB",
            "textDark": "#1F2937",
            "textLight": "#6B7280",
            "white": "#FFFFFF",
        },
        "fonts": {"heading": {"family": "Poppins"}, "body": {"family": "Inter"}},
        "layouts": layouts,
    })


# ---------------------------------------------------------------------------
# Nexa (premium)
# ---------------------------------------------------------------------------

def build_nexa_theme() -> ThemeDescriptor:
    accent = [
        {"type": "hexagon", "x": 12.2, "y": 0.4, "w": 0.8, "h": 0.7,
         "fill": "secondary"},
        {"type": "circle", "x": 12.55, "y": 6.75, "w": 0.5, "h": 0.5,
         "fill": "accent", "transparency": 30},
    ]
    chip = {"enabled": True, "zIndex": "back", "shape": "circle",
            "offsetX": -0.6, "offsetY": 0.12, "width": 0.4, "height": 0.4,
            "fill": "accent"}
    layouts = _common_layouts(
        accent, chip,
        bullet_style={"type": "bullet", "prefix": "   "},
        plan_style={"type": "numbered", "format": "${number}   ${text}",
                    "numberFormat": "01."},
        card_shape="hexagon",
    )
    layouts["content"]["bullets"]["startX"] = _MARGIN_X + 0.5
    layouts["title"] = {
        "background": "primary",
        "shapes": [
            {"type": "hexagon", "x": 9.2, "y": 1.2, "w": 3.6, "h": 3.1,
             "fill": "secondary", "transparency": 20},
            {"type": "hexagon", "x": 10.4, "y": 3.9, "w": 2.2, "h": 1.9,
             "fill": "accent", "transparency": 35},
            {"type": "diamond", "x": 8.8, "y": 5.4, "w": 0.8, "h": 0.8,
             "line": {"color": "white", "width": 1.5}},
        ],
        "titleText": _title_text("white", 46.0, y=2.4, h=1.5, w=8.2),
        "subtitleText": {
            "source": "slide.subtitle",
            "x": _MARGIN_X, "y": 4.0, "w": 8.2, "h": 0.8,
            "fontSize": 22.0, "color": "secondary",
        },
    }
    layouts["quote"] = {
        "background": "background",
        "shapes": [{"type": "star", "x": 1.0, "y": 1.6, "w": 0.7, "h": 0.7,
                    "fill": "secondary"}],
        "titleText": {
            "source": "slide.quote.text",
            "x": 2.0, "y": 1.8, "w": 9.8, "h": 2.6,
            "fontType": "heading", "fontSize": 30.0, "italic": True,
            "color": "primary", "valign": "middle",
        },
        "subtitleText": {
            "source": "slide.quote.author",
            "x": 2.0, "y": 4.6, "w": 9.8, "h": 0.6,
            "fontSize": 18.0, "color": "textLight",
        },
    }
    layouts["closing"] = {
        "background": "primary",
        "shapes": [
            {"type": "pentagon", "x": 5.9, "y": 0.9, "w": 1.5, "h": 1.4,
             "fill": "secondary"},
        ],
        "titleText": _title_text("white", 44.0, y=2.7, h=1.3, align="center"),
        "subtitleText": {
            "source": "slide.subtitle", "fallback": "Questions?",
            "x": _MARGIN_X, "y": 4.1, "w": _CONTENT_W, "h": 0.8,
            "fontSize": 22.0, "color": "secondary", "align": "center",
        },
    }
    return ThemeDescriptor.from_dict({
        "id": "nexa",
        "name": "Nexa",
        "description": "Modern corporate style with geometric elements",
        "isPremium": True,
        "colors": {
            "primary": "#1E3A8A",
            "secondary": "#FBBF24",
            "accent": "#10B981",
            "background": "#F9FAFB",
            "surface": "#FFFFFF",
            "textDark": "#111827",
            "textLight": "#6B7280",
            "white": "#FFFFFF",
        },
        "fonts": {"heading": {"family": "Roboto"}, "body": {"family": "Roboto"}},
        "layouts": layouts,
    })


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_BUILDERS = {
    "executive": build_executive_theme,
    "slancia": build_slancia_theme,
    "nexa": build_nexa_theme,
}


def list_builtin_themes() -> list[ThemeDescriptor]:
    """All built-in themes, free ones first."""
    themes = [build() for build in _BUILDERS.values()]
    return sorted(themes, key=lambda t: t.is_premium)


def get_builtin_theme(slug: str) -> ThemeDescriptor:
    """Look up a built-in theme by slug (case-insensitive)."""
    build = _BUILDERS.get(slug.lower())
    if build is None:
        raise NotFoundError("theme", slug)
    return build()
