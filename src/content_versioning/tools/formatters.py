"""Compact output formatters for MCP tool responses."""

import json
from typing import Any

from content_versioning.models.history import HistoryEntry
from content_versioning.models.newsletter import NewsletterDocument


def format_newsletter_header(newsletter: NewsletterDocument) -> str:
    """Format: [news-1] v3 | Spring Issue (published)."""
    status = "published" if newsletter.is_published else "draft"
    return f"[{newsletter.id}] v{newsletter.current_version} | {newsletter.title} ({status})"


def format_newsletter(newsletter: NewsletterDocument) -> str:
    """Header + branch/hash + tags + audit line."""
    lines = [format_newsletter_header(newsletter)]
    if newsletter.versioning:
        v = newsletter.versioning
        lines.append(f"  branch {v.branch} | hash {v.current_hash}")
    if newsletter.tags:
        lines.append("  " + " ".join(f"#{t}" for t in newsletter.tags))
    if newsletter.updated_at:
        lines.append(f"  updated {newsletter.updated_at} by {newsletter.updated_by or 'unknown'}")
    return "\n".join(lines)


def _short_value(value: Any, limit: int = 60) -> str:
    text = json.dumps(value, ensure_ascii=False, default=str)
    return text if len(text) <= limit else text[: limit - 3] + "..."


def format_changes(changes: dict[str, list[Any]]) -> list[str]:
    """One line per changed field, sorted: field: old -> new."""
    lines: list[str] = []
    for field_name in sorted(changes):
        old, new = changes[field_name]
        lines.append(f"{field_name}: {_short_value(old)} -> {_short_value(new)}")
    return lines


def format_history_entry(entry: HistoryEntry) -> str:
    """Format: v3 publish by u1 [main], then comment and changed fields."""
    when = f" at {entry.timestamp.isoformat()}" if entry.timestamp else ""
    lines = [
        f"v{entry.version} {entry.change_type.value} by {entry.user_id} [{entry.branch}]{when}"
    ]
    if entry.comment:
        lines.append(f"  ↳ {entry.comment}")
    if entry.changes:
        lines.extend(f"  {line}" for line in format_changes(entry.changes))
    else:
        lines.append("  (no field changes)")
    return "\n".join(lines)


def format_result_list(formatted_entries: list[str], header: str | None = None) -> str:
    """Header + count + entries joined by blank lines."""
    if not formatted_entries:
        return "No results found."

    lines: list[str] = []
    if header:
        lines.append(header)
    lines.append(f"{len(formatted_entries)} result(s)")
    lines.append("")
    lines.append("\n\n".join(formatted_entries))
    return "\n".join(lines)
