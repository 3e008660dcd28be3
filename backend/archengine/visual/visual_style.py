from archengine.ir.identifiers import ServiceCategory

# Node appearance and anchor position per service category. Nodes that
# share a category stack downward from the anchor.
VISUAL_STYLE = {
    ServiceCategory.CLIENT: {
        "shape": "circle",
        "color": "#1976D2",
        "offset": (0, 100),
    },
    ServiceCategory.NETWORK: {
        "shape": "rect",
        "color": "#BDBDBD",
        "offset": (200, 100),
    },
    ServiceCategory.CDN: {
        "shape": "rect",
        "color": "#90CAF9",
        "offset": (200, 150),
    },
    ServiceCategory.API: {
        "shape": "hexagon",
        "color": "#FF9800",
        "offset": (300, 100),
    },
    ServiceCategory.COMPUTE: {
        "shape": "rounded_rect",
        "color": "#66BB6A",
        "offset": (400, 100),
    },
    ServiceCategory.SECURITY: {
        "shape": "rect",
        "color": "#EF5350",
        "offset": (400, 200),
    },
    ServiceCategory.MESSAGING: {
        "shape": "parallelogram",
        "color": "#9C27B0",
        "offset": (500, 300),
    },
    ServiceCategory.ML: {
        "shape": "rounded_rect",
        "color": "#26A69A",
        "offset": (500, 200),
    },
    ServiceCategory.STORAGE: {
        "shape": "cylinder",
        "color": "#FFCA28",
        "offset": (600, 100),
    },
    ServiceCategory.DATABASE: {
        "shape": "cylinder",
        "color": "#FFA726",
        "offset": (600, 200),
    },
    ServiceCategory.OBSERVABILITY: {
        "shape": "rect",
        "color": "#78909C",
        "offset": (700, 100),
    },
    ServiceCategory.PAYMENTS: {
        "shape": "rect",
        "color": "#9E9E9E",
        "offset": (700, 300),
    },
    ServiceCategory.DEVOPS: {
        "shape": "rect",
        "color": "#8D6E63",
        "offset": (700, 300),
    },
    ServiceCategory.IOT: {
        "shape": "rounded_rect",
        "color": "#5C6BC0",
        "offset": (0, 300),
    },
}

DEFAULT_STYLE = {
    "shape": "rect",
    "color": "#9E9E9E",
    "offset": (700, 300),
}

# Vertical spacing between nodes in the same category
NODE_SPACING = 60


def style_for(category: ServiceCategory) -> dict:
    return VISUAL_STYLE.get(category, DEFAULT_STYLE)


def node_position(category: ServiceCategory, index_in_category: int) -> dict:
    """Place the n-th node of a category below the category anchor."""
    x, y = style_for(category)["offset"]
    return {"x": x, "y": y + index_in_category * NODE_SPACING}
