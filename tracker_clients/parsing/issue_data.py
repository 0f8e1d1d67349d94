"""Key/value block kept at the bottom of GitHub issue bodies.

An issue body carries free text followed by a separator and one entry per
line::

    Some description written by a human.

    ---
    **_Aha_**: https://company.aha.io/features/APP-12
    **_Owner_**: @someone

Entries are ``(label, value)`` pairs; a label may appear more than once with
different values.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


ENTRY_PREFIX = "**_"
ENTRY_SEPARATOR = "_**: "


def _trim_trailing(lines: List[str]) -> List[str]:
    """Drop trailing blank and ``---`` lines."""
    end = len(lines)
    while end > 0 and lines[end - 1].strip() in ("", "---"):
        end -= 1
    return lines[:end]


@dataclass
class IssueData:
    """Parsed issue body: free-text lines plus the labelled entries."""
    body: List[str] = field(default_factory=list)
    entries: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> 'IssueData':
        data = cls()

        for line in (text or "").split("\n"):
            index = line.find(ENTRY_SEPARATOR)
            if index < 2 or not line.startswith(ENTRY_PREFIX):
                data.body.append(line)
                continue

            label = line[len(ENTRY_PREFIX):index].strip()
            value = line[index + len(ENTRY_SEPARATOR):].strip()
            data.add(label, value)

        data.body = _trim_trailing(data.body)
        return data

    def render(self) -> str:
        """Serialize back to issue body text, entries sorted by label then value."""
        self.body = _trim_trailing(self.body)

        result = "".join(line + "\n" for line in self.body)

        if self.entries:
            result += "\n---\n"
            for label, value in sorted(self.entries):
                result += f"**_{label}_**: {value}\n"

        return result

    def add(self, label: str, value: str) -> None:
        if (label, value) in self.entries:
            return
        self.entries.append((label, value))

    def delete(self, label: str, value: str = "") -> bool:
        """Remove entries for ``label``; an empty ``value`` matches any value.

        Returns True when at least one entry was removed.
        """
        kept = [
            (entry_label, entry_value) for entry_label, entry_value in self.entries
            if not (entry_label == label and (value == "" or entry_value == value))
        ]
        removed = len(kept) != len(self.entries)
        self.entries = kept
        return removed

    def has(self, label: str, value: str) -> bool:
        return (label, value) in self.entries

    def set(self, label: str, value: str) -> None:
        """Replace every entry for ``label`` with a single one."""
        self.delete(label)
        self.add(label, value)

    def values(self, label: str) -> List[str]:
        return [entry_value for entry_label, entry_value in self.entries if entry_label == label]

    def first(self, label: str) -> str:
        for entry_label, entry_value in self.entries:
            if entry_label == label:
                return entry_value
        return ""
