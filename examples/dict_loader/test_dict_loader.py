"""Tests for the dict_loader example."""


class TestDictLoaderApp:
    """Verify the dict_loader example renders correctly."""

    def test_output_contains_expected_content(self, example_app) -> None:
        assert "In-Memory Templates" in example_app.output
        assert "No filesystem required" in example_app.output
        assert "<title>DictLoader Demo</title>" in example_app.output

    def test_nav_items_rendered_from_skeleton_context(self, example_app) -> None:
        assert '<a href="/">Home</a>' in example_app.output
        assert '<a href="/about">About</a>' in example_app.output

    def test_body_class_moved(self, example_app) -> None:
        body = example_app.document.find("body")
        assert body.attrs["class"] == "page"
        assert "body-class" not in example_app.output

    def test_doctype_kept(self, example_app) -> None:
        assert example_app.output.startswith("<!DOCTYPE html>")
