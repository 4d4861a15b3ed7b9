from __future__ import annotations

import re
from typing import Any

import yaml

DUMP_ERROR = "<error while dumping object>"

_LINE_START = re.compile(r"^", re.MULTILINE)


def dump_entry(obj: Any) -> str:
    """Render a raw entry as tab-indented YAML for a log message.

    Never raises: warnings about a broken entry must not fail because the
    entry cannot be dumped either.
    """
    try:
        text = yaml.safe_dump(obj, indent=4, default_flow_style=False, sort_keys=False)
        return _LINE_START.sub("\t", text.rstrip("\n"))
    except Exception:
        return DUMP_ERROR
