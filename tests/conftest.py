"""Shared fixtures for carafe tests."""
import pytest

from carafe import Carafe

MAIN_LAYOUT = "{{ meta.title }}|{{ meta.description }}|{{ content }}"


@pytest.fixture
def layout_path(tmp_path):
    """A layout directory with a ``Default`` and a ``Dark`` theme."""
    root = tmp_path / "layout"
    for theme in ("Default", "Dark"):
        theme_dir = root / "Template" / theme
        theme_dir.mkdir(parents=True)
        (theme_dir / "Main.html").write_text(f"{theme}:{MAIN_LAYOUT}")
    (root / "Template" / "Default" / "Bare.html").write_text("bare|{{ content }}")
    return root


@pytest.fixture
def module_path(tmp_path):
    """A module directory holding views rendered by controllers."""
    root = tmp_path / "modules" / "article"
    root.mkdir(parents=True)
    (root / "Show.html").write_text("<h1>{{ title }}</h1>{{ body }}")
    return root


@pytest.fixture
def app(layout_path):
    app = Carafe(__name__, root_path=str(layout_path.parent))
    app.config.from_mapping(
        ENV="dev",
        THEME_LAYOUT_PATH=str(layout_path),
        META={"title": "Site", "description": "A site"},
    )
    return app
