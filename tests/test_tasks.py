import json
import logging

import dukpy
import pytest

from assetpipe import Runner, UnknownTaskError
from assetpipe.cli import discover_tasks

from conftest import REACT_STUB, write


@pytest.fixture(scope="module")
def registry():
    return discover_tasks()


def files_under(path):
    return sorted(
        p.relative_to(path).as_posix() for p in path.rglob("*") if p.is_file()
    )


def test_discovers_frontend_tasks(registry):
    assert registry.names() == [
        "awesome",
        "default",
        "fonts",
        "javascript",
        "roboto",
        "styles",
    ]
    assert registry.get("fonts").deps == ("awesome", "roboto")
    assert registry.get("default").deps == ("javascript", "fonts", "styles")


def test_javascript_bundle_and_map(registry, project, params):
    Runner(registry, params).run("javascript")
    out = project / "public/js"
    assert files_under(out) == ["bundle.js", "bundle.js.map"]
    bundle = (out / "bundle.js").read_text()
    assert bundle.rstrip().endswith("//# sourceMappingURL=bundle.js.map")
    assert dukpy.evaljs([REACT_STUB, bundle, "result"]) == ["div", 2]
    smap = json.loads((out / "bundle.js.map").read_text())
    assert smap["file"] == "bundle.js"
    assert smap["sources"] == ["index.jsx"]
    assert smap["mappings"]


def test_fonts_copied_byte_identical(registry, project, params):
    report = Runner(registry, params).run("fonts")
    assert [r.name for r in report.results] == ["awesome", "roboto"]
    for vendored, public in [
        ("node_modules/font-awesome/fonts", "public/fonts/font-awesome"),
        ("node_modules/roboto-fontface/fonts/roboto", "public/fonts/roboto"),
    ]:
        names = files_under(project / vendored)
        assert files_under(project / public) == names
        for name in names:
            copied = (project / public / name).read_bytes()
            assert copied == (project / vendored / name).read_bytes()


def test_styles_compiles_with_node_modules_on_include_path(registry, project, params):
    report = Runner(registry, params).run("styles")
    assert report.results[0].status == "ok"
    assert files_under(project / "public/css") == ["style.css"]
    css = (project / "public/css/style.css").read_text()
    assert "#336699" in css
    assert "padding: 8px" in css


def test_invalid_stylesheet_is_logged_not_raised(registry, project, params, caplog):
    write(project / "src/style.scss", "body { color: $nope; }\n")
    with caplog.at_level(logging.ERROR):
        report = Runner(registry, params).run("styles")
    assert report.handled == ["styles"]
    assert not (project / "public/css/style.css").exists()
    assert "sass" in caplog.text


def test_non_utf8_stylesheet_is_logged_not_raised(registry, project, params, caplog):
    write(project / "src/style.scss", b"body { content: '\xff\xfe'; }\n")
    with caplog.at_level(logging.ERROR):
        report = Runner(registry, params).run("styles")
    assert report.handled == ["styles"]
    assert not (project / "public/css/style.css").exists()
    assert "UTF-8" in caplog.text


def test_default_runs_everything_in_order(registry, project, params):
    report = Runner(registry, params).run()
    assert [r.name for r in report.results] == [
        "javascript",
        "awesome",
        "roboto",
        "styles",
    ]
    assert files_under(project / "public") == [
        "css/style.css",
        "fonts/font-awesome/FontAwesome.otf",
        "fonts/font-awesome/fontawesome-webfont.woff",
        "fonts/roboto/Roboto-Regular.woff2",
        "js/bundle.js",
        "js/bundle.js.map",
    ]


def test_nonexistent_task(registry, project, params):
    with pytest.raises(UnknownTaskError):
        Runner(registry, params).run("nonexistent")
    assert not (project / "public").exists()


def test_custom_directories_from_config(registry, project):
    params = {
        "project": {"root": str(project), "public_dir": "static"},
        "javascript": {"bundle": "app.js", "presets": ["es2015", "react"]},
    }
    Runner(registry, params).run("javascript")
    assert files_under(project / "static/js") == ["app.js", "app.js.map"]
