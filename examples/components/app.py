"""Reusable components -- partials and embedded tags.

Partials are included with ``render-template`` and receive their own
``data`` while still seeing the including scope. Embedded tags hand
their raw content to a Python translator that returns the replacement
node.

Run:
    python app.py
"""

from pathlib import Path

from webtemplate import EmbeddedTagResult, Environment, FileSystemLoader
from webtemplate.dom import Element, parse_fragment


def alert(source: str, attrs: dict[str, str]) -> EmbeddedTagResult:
    """``<alert level="...">text</alert>`` → a styled div."""
    level = attrs.get("level", "info")
    box = Element("div", {"class": f"alert alert-{level}", "role": "alert"})
    box.append_child(parse_fragment(source))
    return EmbeddedTagResult(box)


templates_dir = Path(__file__).parent / "templates"
env = Environment(loader=FileSystemLoader(str(templates_dir)), embedded_tags={"alert": alert})

features = [
    {"name": "Control elements", "desc": "if-true, or-else and for-each in plain HTML"},
    {"name": "Partials", "desc": "render-template with JSON data"},
    {"name": "Zero deps", "desc": "Pure Python, no dependencies"},
]

output = str(
    env.render_template(
        "page.html",
        {
            "title": "Component Demo",
            "features": features,
            "warning_message": "This is an alpha release. API may change.",
        },
    )
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
