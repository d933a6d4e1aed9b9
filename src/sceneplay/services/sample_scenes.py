"""
Sample scenes - canned answers for offline use and demos

mock_answer() stands in for the answer generator when no model backend is
configured: it picks one of a few hand-written explanation + scene pairs by
keyword, or falls back to a pulsing-circle demo.
"""

import copy
from typing import Any, Dict, List

from sceneplay.utils.logger import get_category_logger, LogCategory

log = get_category_logger(LogCategory.SESSION)

_SHADOW = "rgba(0,0,0,0.3)"
_LABEL_BACKGROUND = {"color": "rgba(255,255,255,0.9)"}


def _ball(layer_id: str, y: float, fill: str, light: str, animations: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "id": layer_id,
        "type": "circle",
        "props": {
            "x": 100, "y": y, "r": 25,
            "fill": fill,
            "gradient": {"from": fill, "to": light},
            "shadow": _SHADOW,
            "stroke": "#2C3E50",
            "strokeWidth": 2,
        },
        "animations": animations,
    }


def _label(layer_id: str, x: float, y: float, text: str, size: float = 18) -> Dict[str, Any]:
    return {
        "id": layer_id,
        "type": "text",
        "props": {
            "x": x, "y": y,
            "text": text,
            "fontSize": size,
            "color": "#2C3E50",
            "fontFamily": "Arial, sans-serif",
            "background": dict(_LABEL_BACKGROUND),
            "shadow": "rgba(0,0,0,0.2)",
        },
        "animations": [],
    }


def _planet(layer_id: str, x: float, r: float, fill: str, light: str, radius: float, period_ms: float) -> Dict[str, Any]:
    return {
        "id": layer_id,
        "type": "circle",
        "props": {
            "x": x, "y": 300, "r": r,
            "fill": fill,
            "gradient": {"from": fill, "to": light},
            "shadow": _SHADOW,
            "stroke": "#2C3E50",
            "strokeWidth": 2,
        },
        "animations": [
            {"property": "orbit", "centerX": 300, "centerY": 300, "radius": radius, "duration": period_ms},
        ],
    }


def _orbit_ring(layer_id: str, r: float) -> Dict[str, Any]:
    return {
        "id": layer_id,
        "type": "circle",
        "props": {"x": 300, "y": 300, "r": r, "fill": "transparent", "stroke": "#34495e", "strokeWidth": 2},
        "animations": [],
    }


def _arrow(layer_id: str, x: float, y: float, dx: float, dy: float, color: str, animations) -> Dict[str, Any]:
    return {
        "id": layer_id,
        "type": "arrow",
        "props": {"x": x, "y": y, "dx": dx, "dy": dy, "color": color, "strokeWidth": 3},
        "animations": animations,
    }


def _formula(layer_id: str, x: float, y: float, text: str, color: str) -> Dict[str, Any]:
    return {
        "id": layer_id,
        "type": "text",
        "props": {"x": x, "y": y, "text": text, "fontSize": 14, "color": color},
        "animations": [],
    }


NEWTON_FIRST_LAW = {
    "text": (
        "Newton's First Law states that an object at rest stays at rest, and an object in motion "
        "stays in motion at constant velocity, unless acted upon by an external force. This is "
        "also known as the law of inertia."
    ),
    "visualization": {
        "id": "newton_first_law",
        "duration": 4000,
        "fps": 30,
        "layers": [
            _ball("ball1", 200, "#45B7D1", "#87CEEB", [
                {"property": "x", "from": 100, "to": 400, "start": 0, "end": 3000},
            ]),
            _ball("ball2", 300, "#FF6B6B", "#FF8E8E", []),
            {
                "id": "arrow1",
                "type": "arrow",
                "props": {
                    "x": 90, "y": 200, "dx": 40, "dy": 0,
                    "color": "#E74C3C",
                    "strokeWidth": 4,
                    "glow": "#E74C3C",
                    "headSize": 15,
                },
                "animations": [],
            },
            _label("text1", 250, 150, "Moving ball continues moving"),
            _label("text2", 250, 350, "Stationary ball stays at rest"),
        ],
    },
}

SOLAR_SYSTEM = {
    "text": (
        "The Solar System consists of the Sun at the center with planets orbiting around it due "
        "to gravitational pull. The inner planets orbit faster than the outer planets."
    ),
    "visualization": {
        "id": "solar_system",
        "duration": 6000,
        "fps": 30,
        "layers": [
            {
                "id": "sun",
                "type": "circle",
                "props": {
                    "x": 300, "y": 300, "r": 45,
                    "fill": "#FFD700",
                    "gradient": {"from": "#FFD700", "to": "#FFA500"},
                    "glow": "#FFD700",
                    "shadow": _SHADOW,
                },
                "animations": [],
            },
            _planet("earth", 200, 18, "#4ECDC4", "#87CEEB", radius=100, period_ms=3000),
            _planet("mars", 150, 15, "#FF6B6B", "#FF8E8E", radius=150, period_ms=6000),
            _orbit_ring("orbit_earth", 100),
            _orbit_ring("orbit_mars", 150),
            _label("title", 300, 50, "Solar System", size=24),
        ],
    },
}

PHOTOSYNTHESIS = {
    "text": (
        "Photosynthesis is the process by which plants convert sunlight, carbon dioxide, and "
        "water into glucose and oxygen. This process occurs in the chloroplasts of plant cells."
    ),
    "visualization": {
        "id": "photosynthesis",
        "duration": 5000,
        "fps": 30,
        "layers": [
            {"id": "sun", "type": "circle", "props": {"x": 150, "y": 100, "r": 25, "fill": "#f1c40f"}, "animations": []},
            {
                "id": "plant",
                "type": "rectangle",
                "props": {"x": 200, "y": 200, "width": 20, "height": 100, "fill": "#27ae60"},
                "animations": [],
            },
            _arrow("co2_arrow", 300, 250, -80, -30, "#e74c3c", [
                {"property": "x", "from": 300, "to": 220, "start": 0, "end": 2000},
            ]),
            _arrow("h2o_arrow", 200, 350, 0, -100, "#3498db", [
                {"property": "y", "from": 350, "to": 250, "start": 0, "end": 2000},
            ]),
            _arrow("o2_arrow", 220, 200, 80, -50, "#2ecc71", [
                {"property": "x", "from": 220, "to": 300, "start": 2000, "end": 4000},
            ]),
            _formula("text_co2", 320, 240, "CO₂", "#e74c3c"),
            _formula("text_h2o", 180, 360, "H₂O", "#3498db"),
            _formula("text_o2", 320, 140, "O₂", "#2ecc71"),
        ],
    },
}

DEFAULT_VISUALIZATION = {
    "id": "default_visualization",
    "duration": 3000,
    "fps": 30,
    "layers": [
        {
            "id": "demo_circle",
            "type": "circle",
            "props": {"x": 200, "y": 200, "r": 30, "fill": "#9b59b6"},
            "animations": [
                {"property": "r", "from": 30, "to": 50, "start": 0, "end": 1500},
                {"property": "r", "from": 50, "to": 30, "start": 1500, "end": 3000},
            ],
        },
        {
            "id": "demo_text",
            "type": "text",
            "props": {"x": 200, "y": 280, "text": "Demo Visualization", "fontSize": 16, "color": "#2c3e50"},
            "animations": [],
        },
    ],
}

SAMPLE_ANSWERS = {
    "newton_first_law": NEWTON_FIRST_LAW,
    "solar_system": SOLAR_SYSTEM,
    "photosynthesis": PHOTOSYNTHESIS,
}


def mock_answer(question: str) -> Dict[str, Any]:
    """
    Canned answer for a question.

    Matching (case-insensitive, first hit wins):
    - "newton" and "first"            -> Newton's first law
    - "solar system" or "planets"     -> orbiting planets
    - "photosynthesis"                -> photosynthesis diagram
    - anything else                   -> pulsing circle demo

    Returns:
        {"text": str, "visualization": scene dict} (a fresh copy each call)
    """
    lowered = (question or "").lower()

    if "newton" in lowered and "first" in lowered:
        key = "newton_first_law"
    elif "solar system" in lowered or "planets" in lowered:
        key = "solar_system"
    elif "photosynthesis" in lowered:
        key = "photosynthesis"
    else:
        log.debug("No sample matched, using default", question=question)
        return {
            "text": (
                f"I understand you're asking about: {question}. This is a sample response; "
                "connect an answer generator to get real explanations and visualizations."
            ),
            "visualization": copy.deepcopy(DEFAULT_VISUALIZATION),
        }

    log.debug("Sample matched", question=question, sample=key)
    return copy.deepcopy(SAMPLE_ANSWERS[key])
