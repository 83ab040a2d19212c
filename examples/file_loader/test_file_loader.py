"""Tests for the file-loader example."""


class TestFileLoaderApp:
    """Verify file-based loading, skeleton composition and partials."""

    def test_home_has_title(self, example_app) -> None:
        assert "<title>Welcome | My Site</title>" in example_app.home_output

    def test_home_has_content(self, example_app) -> None:
        assert "<h1>Welcome</h1>" in example_app.home_output
        assert "webtemplate-powered site" in example_app.home_output

    def test_partial_limited_by_data(self, example_app) -> None:
        assert "<li>First post</li>" in example_app.home_output
        assert "<li>Second post</li>" in example_app.home_output
        assert "Third post" not in example_app.home_output

    def test_about_has_title(self, example_app) -> None:
        assert "<title>About Us | My Site</title>" in example_app.about_output

    def test_nav_links_rebased(self, example_app) -> None:
        for output in [example_app.home_output, example_app.about_output]:
            assert 'href="/site/index.html"' in output
            assert 'href="/site/about.html"' in output

    def test_footer_replaced_by_id(self, example_app) -> None:
        assert "Powered by webtemplate" in example_app.home_output
        assert "About page footer" in example_app.about_output
        assert "Powered by webtemplate" not in example_app.about_output
