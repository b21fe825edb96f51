"""Build the app's kida environment and render ``Template`` values.

``App._freeze()`` calls ``create_environment`` once. Templates load
from ``AppConfig.template_dir`` and are re-read on change only in
debug mode.
"""

from collections.abc import Callable, Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from quire.config import AppConfig
from quire.templating.filters import BUILTIN_FILTERS
from quire.templating.returns import Template


def create_environment(
    config: AppConfig,
    filters: Mapping[str, Callable[..., Any]],
    globals_: Mapping[str, Any],
) -> Environment:
    """Environment with quire's filters, then the app's own on top.

    App filters registered under a built-in name replace the built-in.
    """
    env = Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    env.update_filters({**BUILTIN_FILTERS, **filters})
    for name, value in globals_.items():
        env.add_global(name, value)
    return env


def render_template(env: Environment, tpl: Template) -> str:
    return env.get_template(tpl.name).render(tpl.context)
