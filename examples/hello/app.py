"""Hello World -- the simplest webtemplate example.

Parse a template from a string and expand it in place with a Context.
No skeleton and no templates directory needed.

Run:
    python app.py
"""

from webtemplate import Context, DictLoader, Environment

env = Environment(loader=DictLoader({}))

source = "<p>Hello, <%= name %>!</p>"


def render(**bindings) -> str:
    """Expand ``source`` against ``bindings`` and return the markup."""
    root = env.parse_template(source, wrap=True).root
    env.expand(root, Context(bindings))
    return root.inner_html


output = render(name="World")


def main() -> None:
    print(output)
    print()

    # Each render parses a fresh tree; expansion rewrites it in place
    for name in ["webtemplate", "Python", "<script>"]:
        print(render(name=name))


if __name__ == "__main__":
    main()
