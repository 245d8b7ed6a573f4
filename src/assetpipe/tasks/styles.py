from ..core import task
from ..transforms import log_error, sass
from ..utils import css_entry, modules_dir, output_style, public_dir, resolve, src_dir


@task(
    name="styles",
    src=lambda p: [f"{src_dir(p)}/{css_entry(p)}"],
    dest=lambda p: f"{public_dir(p)}/css",
)
def styles(params: dict):
    """Compile the Sass entry to CSS.

    Compile errors are logged and leave the previous CSS in place instead of
    failing the run.
    """
    return [
        sass(
            include_paths=[resolve(params, modules_dir(params))],
            output_style=output_style(params),
        ).handle_errors(log_error)
    ]
