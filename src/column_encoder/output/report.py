"""
Report Generator - Generates mapping reports for a registry.

This module handles:
- Text mapping reports (original name, identifier, type) per encoder
- JSON mapping reports with summary counts
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, List

from column_encoder import __version__
from column_encoder.core.name_table import NameTable
from column_encoder.core.registry import Registry


@dataclass
class MappingReport:
    """Mapping report of every live encoder in a registry."""

    generated_at: str = field(default_factory=lambda: datetime.now().isoformat())
    tool_version: str = __version__
    encoders: List[NameTable] = field(default_factory=list)

    @classmethod
    def from_registry(cls, registry: Registry) -> "MappingReport":
        return cls(encoders=registry.live_encoders())

    @property
    def total_names(self) -> int:
        return sum(len(table.encoding_map) for table in self.encoders)

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary."""
        return {
            "metadata": {
                "generated_at": self.generated_at,
                "tool_version": self.tool_version,
            },
            "summary": {
                "encoders": len(self.encoders),
                "total_names": self.total_names,
            },
            "encoders": [table.to_dict() for table in self.encoders],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def save_json(self, path: Path) -> None:
        """Save report as JSON file."""
        path.write_text(self.to_json())

    def to_text(self) -> str:
        """Convert report to readable text format."""
        lines = [
            "COLUMN NAME MAPPING REPORT",
            "=" * 70,
            "",
        ]

        for table in self.encoders:
            lines.append(f"{table.role.value.upper()} ENCODER ({table.prefix}*{table.suffix})")
            lines.append("-" * 70)
            lines.append(f"{'ORIGINAL':<30} {'ENCODED':<28} TYPE")
            lines.append("-" * 70)

            # Bare names first, then their qualified variants
            for name in sorted(table.encoding_map, key=lambda n: (n not in table.dataset_types, n)):
                encoded = table.encoding_map[name]
                lines.append(f"{name:<30} {encoded:<28} {table.type_of(encoded).value}")
            lines.append("")

        lines.append(f"Total: {self.total_names} names in {len(self.encoders)} encoder(s)")
        return "\n".join(lines)


def create_mapping_report(registry: Registry) -> str:
    """
    Create a text mapping report.

    Args:
        registry: The registry whose live encoders are reported

    Returns:
        Formatted text report
    """
    return MappingReport.from_registry(registry).to_text()
