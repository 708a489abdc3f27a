from __future__ import annotations

import json
from typing import Any

from grc_metrics_cli.formatters.base import BaseFormatter, to_plain


class JsonFormatter(BaseFormatter):
    def render(self, data: Any) -> str:
        return json.dumps(to_plain(data), indent=2, ensure_ascii=False) + "\n"

    def file_extension(self) -> str:
        return ".json"
