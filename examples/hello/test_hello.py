"""Tests for the hello example."""


class TestHelloApp:
    """Verify the hello example renders correctly."""

    def test_output(self, example_app) -> None:
        assert example_app.output == "<p>Hello, World! Welcome back.</p>"

    def test_rerender_with_different_context(self, example_app) -> None:
        result = example_app.host.render_page("page.html", name="Kumi")
        assert result == "<p>Hello, Kumi! Welcome back.</p>"

    def test_component_registered(self, example_app) -> None:
        assert example_app.host.registry["greeting"] is example_app.Greeting
