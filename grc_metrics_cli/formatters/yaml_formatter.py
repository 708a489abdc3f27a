from __future__ import annotations

from typing import Any

import yaml

from grc_metrics_cli.formatters.base import BaseFormatter, to_plain


class YamlFormatter(BaseFormatter):
    def render(self, data: Any) -> str:
        return yaml.safe_dump(
            to_plain(data),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def file_extension(self) -> str:
        return ".yaml"
