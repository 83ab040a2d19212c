"""Tests for the components example."""


class TestComponentsApp:
    """Verify partial inclusion and embedded tag translation end-to-end."""

    def test_card_partials_rendered(self, example_app) -> None:
        assert example_app.output.count("card-header") == 3
        assert "Control elements" in example_app.output
        assert "Zero deps" in example_app.output

    def test_card_body_from_partial_data(self, example_app) -> None:
        assert "render-template with JSON data" in example_app.output
        assert "Pure Python, no dependencies" in example_app.output

    def test_alert_translated_and_expanded(self, example_app) -> None:
        assert 'class="alert alert-warning"' in example_app.output
        assert "alpha release" in example_app.output
        assert "<alert" not in example_app.output

    def test_page_title(self, example_app) -> None:
        assert "<h1>Component Demo</h1>" in example_app.output
        assert "<title>Component Demo</title>" in example_app.output

    def test_partial_sees_loop_variable_and_data(self, example_app) -> None:
        assert example_app.output.count('class="card card-outlined"') == 3
