"""
Tests for mapping reports.
"""

import json

from column_encoder.core.column_types import ColumnType
from column_encoder.output.report import MappingReport, create_mapping_report


class TestMappingReport:
    """Tests for MappingReport."""

    def test_empty_registry(self, registry):
        """A registry without encoders gives an empty report."""
        report = MappingReport.from_registry(registry)
        assert report.encoders == []
        assert report.total_names == 0
        assert "Total: 0 names in 0 encoder(s)" in report.to_text()

    def test_counts(self, loaded_registry):
        """Totals count every encodable name."""
        report = MappingReport.from_registry(loaded_registry)
        # 3 typed columns * 4 names + 1 factor level
        assert report.total_names == 13

    def test_to_dict(self, loaded_registry):
        """The dictionary form carries metadata, summary and tables."""
        data = MappingReport.from_registry(loaded_registry).to_dict()
        assert data["metadata"]["tool_version"] == "1.0.0"
        assert data["summary"] == {"encoders": 1, "total_names": 13}
        assert data["encoders"][0]["role"] == "primary"

    def test_save_json(self, loaded_registry, tmp_path):
        """The JSON report can be saved."""
        path = tmp_path / "report.json"
        MappingReport.from_registry(loaded_registry).save_json(path)
        assert json.loads(path.read_text())["summary"]["encoders"] == 1


class TestCreateMappingReport:
    """Tests for the text report."""

    def test_lists_names(self, loaded_registry):
        """Every name appears with its identifier and type."""
        text = create_mapping_report(loaded_registry)
        assert "COLUMN NAME MAPPING REPORT" in text
        assert "age.nominal" in text
        assert "JaspColumn_2_Encoded" in text
        assert "level 1" in text

    def test_bare_names_first(self, registry):
        """Bare names are listed before their qualified variants."""
        registry.set_names({"age": ColumnType.SCALE})
        lines = create_mapping_report(registry).splitlines()
        rows = [line for line in lines if line.startswith("age")]
        assert rows[0].split()[0] == "age"
        assert rows[0].split()[-1] == "scale"

    def test_auxiliary_section(self, loaded_registry):
        """Auxiliary encoders get their own section."""
        with loaded_registry.auxiliary() as aux:
            aux.set_names({"tmp": ColumnType.UNKNOWN})
            text = create_mapping_report(loaded_registry)
        assert "AUXILIARY ENCODER (JASPColumn_*_For_Replacement)" in text
        assert "Total: 14 names in 2 encoder(s)" in text
