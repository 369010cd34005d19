# services/config_bridge.py
from __future__ import annotations
from flask import current_app, has_app_context
from services.config_service import ConfigManager

_CM = ConfigManager()


def get_cfg(*keys: str, section: str = "waste", default=None):
    """
    File-backed config accessor (falls back to Flask app.config).
    - get_cfg()                   -> whole `section` dict (default 'waste')
    - get_cfg("a.b")              -> dotted path inside the section
    """
    if len(keys) == 1 and "." in keys[0]:
        keys = tuple(keys[0].split("."))

    root = _CM.get(section, default=None)

    # If file didn’t load this section, try Flask app.config
    if root is None and has_app_context():
        root = current_app.config.get(section)

    if root is None:
        err = _CM.last_load_error
        if err:
            raise RuntimeError(
                "Config JSON is invalid.\n"
                f"File: {_CM.resolved_path}\n"
                f"Line {err.lineno}, column {err.colno}: {err.msg}"
            )
        return default

    node = root
    for k in keys:
        if not isinstance(node, dict) or k not in node:
            return default
        node = node[k]
    return node


def where_cfg(section: str = "waste") -> str:
    path = _CM.resolved_path
    loaded = _CM.get(section) is not None
    return f"config.json path={path!r}; section_present={loaded}; last_error={_CM.last_load_error}"
