from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from grc_metrics_cli.client import GrcClient
from grc_metrics_cli.formatters.json_formatter import JsonFormatter
from grc_metrics_cli.formatters.markdown_formatter import MarkdownFormatter
from grc_metrics_cli.formatters.yaml_formatter import YamlFormatter


class BaseExporter(ABC):
    def __init__(
        self,
        client: GrcClient,
        output_dir: Path,
        *,
        force: bool = False,
        keep_raw_json: bool = False,
        today: Optional[date] = None,
    ) -> None:
        self.client = client
        self.output_dir = output_dir
        self.force = force
        self.keep_raw_json = keep_raw_json
        self.today = today or date.today()
        self._overwrite_all = False
        self._md_formatter = MarkdownFormatter()
        self._json_formatter = JsonFormatter()
        self._yaml_formatter = YamlFormatter()

    @abstractmethod
    def export(self) -> None:
        """Fetch data from the API, compute the report and write it to output_dir."""
        ...

    def _ensure_output_dir(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _log(self, message: str) -> None:
        print(message)

    def _should_write(self, path: Path) -> bool:
        """Check whether *path* should be written, prompting if needed."""
        if not path.exists():
            return True
        if self.force or self._overwrite_all:
            return True
        while True:
            answer = input(
                f"Overwrite existing {path.name}? [Yes/No/All] "
            ).strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            if answer in ("a", "all"):
                self._overwrite_all = True
                return True

    def _base_frontmatter(self) -> Dict[str, Any]:
        return {
            "generated": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "as_of": self.today.strftime("%Y-%m-%d"),
        }

    def _write_report(self, name: str, title: str, body: str, data: Any) -> None:
        """Write a Markdown report plus the structured data as YAML (and JSON on request)."""
        md_path = self.output_dir / (name + self._md_formatter.file_extension())
        if self._should_write(md_path):
            content = MarkdownFormatter.document(
                title=title, body=body, frontmatter=self._base_frontmatter(),
            )
            self._md_formatter.write(content, md_path)

        yaml_path = self.output_dir / (name + self._yaml_formatter.file_extension())
        if self._should_write(yaml_path):
            self._yaml_formatter.write(data, yaml_path)

        if self.keep_raw_json:
            json_path = self.output_dir / (name + self._json_formatter.file_extension())
            if self._should_write(json_path):
                self._json_formatter.write(data, json_path)
