from __future__ import annotations

import textwrap
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import yaml

from grc_metrics_cli.formatters.base import BaseFormatter, to_plain


class MarkdownFormatter(BaseFormatter):
    _MAX_LINE_LENGTH = 120

    def render(self, data: Any) -> str:
        if isinstance(data, str):
            return data
        payload = to_plain(data)
        if not isinstance(payload, dict):
            return str(payload)

        frontmatter = payload.get("frontmatter")
        if not isinstance(frontmatter, dict):
            excluded = {"title", "body", "frontmatter"}
            frontmatter = {k: v for k, v in payload.items() if k not in excluded} or None

        return self.document(
            title=str(payload.get("title", "")),
            body=str(payload.get("body", "")),
            frontmatter=frontmatter,
        )

    def file_extension(self) -> str:
        return ".md"

    @classmethod
    def document(
        cls,
        title: str,
        body: str,
        frontmatter: Optional[Dict[str, Any]] = None,
    ) -> str:
        parts = []
        if frontmatter:
            fm_text = yaml.safe_dump(
                to_plain(frontmatter),
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            ).rstrip("\n")
            parts.append(f"---\n{fm_text}\n---\n")
        if title:
            parts.append(f"# {title}\n")
        if body:
            parts.append(cls._wrap_body(body.rstrip("\n")) + "\n")
        return "\n".join(parts)

    @staticmethod
    def table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
        """Pipe table; numeric columns are right-aligned."""
        numeric = [
            bool(rows) and all(isinstance(row[i], (int, float, Decimal)) for row in rows)
            for i in range(len(headers))
        ]
        lines: List[str] = [
            "| " + " | ".join(headers) + " |",
            "|" + "|".join("---:" if n else "---" for n in numeric) + "|",
        ]
        for row in rows:
            lines.append("| " + " | ".join(str(cell) for cell in row) + " |")
        return "\n".join(lines)

    @classmethod
    def _wrap_body(cls, body: str) -> str:
        wrapped_lines = []
        for line in body.splitlines():
            if cls._should_preserve_line(line):
                wrapped_lines.append(line)
                continue
            wrapped_lines.append(
                textwrap.fill(
                    line,
                    width=cls._MAX_LINE_LENGTH,
                    break_long_words=False,
                    break_on_hyphens=False,
                )
            )
        return "\n".join(wrapped_lines)

    @classmethod
    def _should_preserve_line(cls, line: str) -> bool:
        if len(line) <= cls._MAX_LINE_LENGTH:
            return True
        return line.startswith(("#", "- ", "* ", "> ", "|", "```", "    ", "\t"))
