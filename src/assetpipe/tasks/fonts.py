"""Vendored web fonts, copied unchanged from node_modules."""

from ..core import composite, task
from ..transforms import copy
from ..utils import modules_dir, public_dir


@task(
    name="awesome",
    src=lambda p: [f"{modules_dir(p)}/font-awesome/fonts/*"],
    dest=lambda p: f"{public_dir(p)}/fonts/font-awesome",
)
def awesome(params: dict):
    return [copy()]


@task(
    name="roboto",
    src=lambda p: [f"{modules_dir(p)}/roboto-fontface/fonts/roboto/*"],
    dest=lambda p: f"{public_dir(p)}/fonts/roboto",
)
def roboto(params: dict):
    return [copy()]


fonts = composite("fonts", ["awesome", "roboto"])
