from pathlib import Path

import pytest


REACT_STUB = (
    "var React = {createElement: function (type, props) "
    "{ return {type: type, props: props}; }};"
)

ENTRY_JSX = """
const greet = (name) => <div className="greeting">Hello {name}</div>;

class Counter {
  constructor() { this.count = 1; }
  inc() { return ++this.count; }
}

var result = [greet("you").type, new Counter().inc()];
"""

STYLE_SCSS = """
@import "theme/vars";

$pad: 4px;
body {
  color: $brand;
  .box { padding: $pad * 2; }
}
"""


def write(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, bytes):
        path.write_bytes(data)
    else:
        path.write_text(data, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path):
    """A frontend tree with a JSX entry, a stylesheet and two vendored font dirs."""
    write(tmp_path / "src/index.jsx", ENTRY_JSX)
    write(tmp_path / "src/style.scss", STYLE_SCSS)
    write(tmp_path / "node_modules/theme/_vars.scss", "$brand: #336699;\n")
    awesome = tmp_path / "node_modules/font-awesome/fonts"
    write(awesome / "fontawesome-webfont.woff", b"\x00wOFF\x01\x02")
    write(awesome / "FontAwesome.otf", b"OTTO\xff\x00")
    roboto = tmp_path / "node_modules/roboto-fontface/fonts/roboto"
    write(roboto / "Roboto-Regular.woff2", b"wOF2\x00\x10")
    return tmp_path


@pytest.fixture
def params(project):
    return {"project": {"root": str(project)}}
