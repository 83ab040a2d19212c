"""File-based templates -- the most common real-world pattern.

Loads templates from disk with FileSystemLoader, composes each page into
a shared skeleton and includes a partial with ``render-template``.

Run:
    python app.py
"""

from pathlib import Path

from webtemplate import Environment, FileSystemLoader

templates_dir = Path(__file__).parent / "templates"
env = Environment(loader=FileSystemLoader(str(templates_dir)))

skeleton_context = {
    "nav_items": [
        {"url": "index.html", "label": "Home"},
        {"url": "about.html", "label": "About"},
    ],
}

home_output = str(
    env.render_template(
        "home.html",
        {
            "message": "This is a webtemplate-powered site.",
            "posts": ["First post", "Second post", "Third post"],
        },
        skeleton_context,
    )
)

about_output = str(
    env.render_template(
        "about.html",
        {"description": "Built with webtemplate and plain HTML."},
        skeleton_context,
    )
)


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)


if __name__ == "__main__":
    main()
