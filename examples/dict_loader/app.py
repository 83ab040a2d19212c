"""DictLoader -- in-memory skeleton and page templates.

Templates from a dictionary. No templates directory needed.
Use case: tests, generated templates, single-file apps.

Run:
    python app.py
"""

from webtemplate import DictLoader, Environment

templates = {
    "skeleton.html": """\
<!DOCTYPE html>
<html>
<head><title>Site</title></head>
<body>
    <nav>
    <for-each over="nav_items" as="item">
        <a href="<%= item.url %>"><%= item.label %></a>
    </for-each>
    </nav>
    <main></main>
</body>
</html>
""",
    "page.html": """\
<title><%= title %></title>
<main body-class="page">
    <h1><%= heading %></h1>
    <p><%= message %></p>
</main>
""",
}

env = Environment(loader=DictLoader(templates))

document = env.render_template(
    "page.html",
    {
        "title": "DictLoader Demo",
        "heading": "In-Memory Templates",
        "message": "No filesystem required. Templates loaded from a dict.",
    },
    {
        "nav_items": [
            {"url": "/", "label": "Home"},
            {"url": "/about", "label": "About"},
        ],
    },
)

output = str(document)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
