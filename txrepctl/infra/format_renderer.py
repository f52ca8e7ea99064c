import json
from typing import Any

import yaml

from txrepctl.core.ports.render import Renderer


class JsonRenderer(Renderer):
    def render(self, document: dict[str, Any]) -> str:
        return json.dumps(document, indent=2, sort_keys=False)


class YamlRenderer(Renderer):
    def render(self, document: dict[str, Any]) -> str:
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True).rstrip("\n")


def renderer_for(fmt: str) -> Renderer:
    if fmt == "json":
        return JsonRenderer()
    if fmt == "yaml":
        return YamlRenderer()
    raise ValueError(f"Unknown output format: {fmt}")
