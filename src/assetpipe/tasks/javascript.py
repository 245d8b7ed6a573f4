"""Script bundle: transpile the JSX entry, minify, bundle, write a sourcemap."""

from ..core import task
from ..transforms import babel, concat, minify, sourcemaps_init, sourcemaps_write
from ..utils import babel_presets, bundle_name, js_entry, public_dir, src_dir


@task(
    name="javascript",
    src=lambda p: [f"{src_dir(p)}/{js_entry(p)}"],
    dest=lambda p: f"{public_dir(p)}/js",
)
def javascript(params: dict):
    return [
        sourcemaps_init(),
        babel(presets=babel_presets(params)),
        minify(),
        concat(bundle_name(params)),
        sourcemaps_write("."),
    ]
