"""Forms -- populating controls from nested data.

``onrender="this.populate_from(value)"`` fills an existing form after its
children are expanded; ``hidden-form-data`` flattens a nested value into
hidden inputs with bracket-notation names. Values inside ``<script>``
are written as JSON.

Run:
    python app.py
"""

from pathlib import Path

from webtemplate import Environment, FileSystemLoader

templates_dir = Path(__file__).parent / "templates"
env = Environment(loader=FileSystemLoader(str(templates_dir)))

profile = {
    "name": "Ada",
    "bio": "Analyst & engine enthusiast",
    "plan": "pro",
    "newsletter": "yes",
}

filters = {"tag": "python", "page": {"number": 2, "size": 20}}

document = env.render_template("edit.html", {"profile": profile, "filters": filters})
form = document.find("form")
output = str(document)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
