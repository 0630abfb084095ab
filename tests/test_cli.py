"""
Tests for the command-line interface and configuration handling.
"""

import io
import json

import pytest

from column_encoder.cli import (
    args_to_config,
    create_parser,
    load_names,
    main,
    parse_args,
)
from column_encoder.config import (
    Config,
    create_default_config,
    merge_configs,
)
from column_encoder.core.column_types import ColumnType
from column_encoder.exceptions import ConfigError


class TestConfig:
    """Tests for Config dataclass."""

    def test_create_default_config(self):
        """Create config with default values."""
        config = create_default_config()
        assert config.prefix == "JaspColumn_"
        assert config.suffix == "_Encoded"
        assert config.replacement_prefix == "JASPColumn_"
        assert config.replacement_suffix == "_For_Replacement"
        assert config.allowed_prefixes == []
        assert config.escape_square_brackets is True
        assert config.skip_function_calls is False

    def test_config_from_dict(self):
        """Create config from dictionary, ignoring unknown keys."""
        config = Config.from_dict({"prefix": "Col_", "unknown": 1, "allowed_prefixes": "data."})
        assert config.prefix == "Col_"
        assert config.allowed_prefixes == ["data."]

    def test_config_save_and_load(self, tmp_path):
        """Save and load config from file."""
        config = Config(prefix="Col_", allowed_prefixes=["data."], verbose=True)

        config_file = tmp_path / "config.json"
        config.save_to_file(config_file)

        loaded = Config.load_from_file(config_file)
        assert loaded == config

    def test_config_validate_valid(self):
        """Default config passes validation."""
        assert Config().validate() == []
        assert Config().is_valid()

    @pytest.mark.parametrize("prefix", ["", "1Col", "_Col", "Col umn", "Col-"])
    def test_config_invalid_prefix(self, prefix):
        """Prefixes must start with a letter and use identifier characters."""
        errors = Config(prefix=prefix).validate()
        assert any("prefix" in e for e in errors)

    def test_config_invalid_suffix(self):
        """Suffixes must use identifier characters."""
        errors = Config(suffix="-x").validate()
        assert any("suffix" in e for e in errors)

    def test_config_same_prefixes(self):
        """Primary and replacement prefixes must differ."""
        errors = Config(prefix="X_", replacement_prefix="X_").validate()
        assert any("must differ" in e for e in errors)

    def test_config_invalid_log_level(self):
        """Unknown log levels fail validation."""
        assert not Config(log_level="LOUD").is_valid()


class TestMergeConfigs:
    """Tests for config merging."""

    def test_merge_override_wins(self):
        """Override config takes precedence."""
        base = Config(prefix="Base_", verbose=False)
        override = Config(prefix="Over_", verbose=True)

        merged = merge_configs(base, override)
        assert merged.prefix == "Over_"
        assert merged.verbose is True

    def test_merge_keeps_base_defaults(self):
        """Base values kept when override is default."""
        base = Config(allowed_prefixes=["data."])
        override = Config()

        merged = merge_configs(base, override)
        assert merged.allowed_prefixes == ["data."]


class TestArgParser:
    """Tests for argument parser."""

    def test_create_parser(self):
        """Parser is created with its program name."""
        parser = create_parser()
        assert parser.prog == "column-encode"

    def test_parse_encode_script(self, tmp_path):
        """encode-script takes names, prefixes and input."""
        args = parse_args([
            "encode-script",
            "--names", str(tmp_path / "n.json"),
            "--prefix", "data.",
            "--prefix", "d.",
            "--show-found",
        ])
        assert args.command == "encode-script"
        assert args.prefix == ["data.", "d."]
        assert args.show_found is True
        assert args.input is None

    def test_parse_remove(self):
        """remove takes several columns."""
        args = parse_args(["remove", "--column", "a", "--column", "b"])
        assert args.column == ["a", "b"]

    def test_command_required(self):
        """A subcommand is required."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestArgsToConfig:
    """Tests for turning arguments into a config."""

    def test_verbose(self):
        """--verbose switches to debug logging."""
        config = args_to_config(parse_args(["-v", "remove", "--column", "a"]))
        assert config.verbose is True
        assert config.log_level == "DEBUG"

    def test_quiet(self):
        """--quiet only logs errors."""
        config = args_to_config(parse_args(["-q", "remove", "--column", "a"]))
        assert config.log_level == "ERROR"

    def test_config_file(self, tmp_path):
        """A config file is loaded and merged."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"prefix": "Col_"}))
        config = args_to_config(parse_args(["-c", str(config_file), "remove", "--column", "a"]))
        assert config.prefix == "Col_"

    def test_missing_config_file(self, tmp_path):
        """A missing config file is an error."""
        args = parse_args(["-c", str(tmp_path / "none.json"), "remove", "--column", "a"])
        with pytest.raises(ConfigError):
            args_to_config(args)


class TestLoadNames:
    """Tests for names files."""

    def test_object(self, tmp_path):
        """An object maps names to types."""
        path = tmp_path / "names.json"
        path.write_text(json.dumps({"age": "scale", "x": "whatever"}))
        assert load_names(path) == {"age": ColumnType.SCALE, "x": ColumnType.UNKNOWN}

    def test_list(self, tmp_path):
        """A list gives names of unknown type."""
        path = tmp_path / "names.json"
        path.write_text(json.dumps(["a", "b"]))
        assert load_names(path) == {"a": ColumnType.UNKNOWN, "b": ColumnType.UNKNOWN}

    def test_invalid(self, tmp_path):
        """Anything else is rejected."""
        path = tmp_path / "names.json"
        path.write_text("3")
        with pytest.raises(ConfigError):
            load_names(path)


class TestMainFunction:
    """Tests for main CLI entry point."""

    def test_encode_script(self, tmp_path, names_file, sample_script, capsys):
        """encode-script prints the encoded script."""
        script = tmp_path / "analysis.R"
        script.write_text(sample_script)

        result = main(["encode-script", "--names", str(names_file), "--input", str(script)])

        assert result == 0
        out = capsys.readouterr().out
        assert "`JaspColumn_3_Encoded` ~ JaspColumn_0_Encoded" in out
        assert 'print("age")' in out

    def test_encode_script_stdin(self, names_file, monkeypatch, capsys):
        """Without --input the script is read from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO("age + group"))
        result = main(["encode-script", "--names", str(names_file)])
        assert result == 0
        assert capsys.readouterr().out == "JaspColumn_0_Encoded + JaspColumn_8_Encoded"

    def test_encode_script_show_found(self, names_file, monkeypatch, capsys):
        """--show-found lists names per prefix on stderr."""
        monkeypatch.setattr("sys.stdin", io.StringIO("data.age + group"))
        result = main([
            "encode-script", "--names", str(names_file), "--prefix", "data.", "--show-found",
        ])
        assert result == 0
        captured = capsys.readouterr()
        assert captured.out == "data.JaspColumn_0_Encoded + JaspColumn_8_Encoded"
        assert "Found: group" in captured.err
        assert "Found: data.age" in captured.err

    def test_decode_script(self, tmp_path, names_file, capsys):
        """decode-script restores the column names."""
        script = tmp_path / "encoded.R"
        script.write_text("mean(JaspColumn_3_Encoded)")
        assert main(["decode-script", "--names", str(names_file), "--input", str(script)]) == 0
        assert capsys.readouterr().out == "mean(body mass)"

    def test_encode_options(self, tmp_path, names_file, capsys):
        """encode-options prints the encoded options and the typed names."""
        options_file = tmp_path / "options.json"
        options_file.write_text(json.dumps({
            "variables": {"value": ["age"], "types": ["ordinal"]},
            "levels": ["low"],
            ".meta": {
                "variables": {"shouldEncode": True},
                "levels": {"shouldEncode": True, "encodeThis": ["low"]},
            },
        }))

        result = main([
            "encode-options", "--options", str(options_file), "--names", str(names_file), "--preloading",
        ])

        assert result == 0
        output = json.loads(capsys.readouterr().out)
        assert output["options"]["variables"] == ["JaspColumn_1_Encoded"]
        assert output["options"]["levels"] == ["JaspColumn_10_Encoded"]
        assert output["columns"] == [["age.ordinal", "ordinal"]]

    def test_encode_options_keeps_declared_type(self, tmp_path, capsys):
        """A declared column also listed under encodeThis keeps its type."""
        names_path = tmp_path / "names.json"
        names_path.write_text(json.dumps({"age": "scale"}))
        options_file = tmp_path / "options.json"
        options_file.write_text(json.dumps({
            "vars": {"value": ["age"], "types": ["scale"]},
            "labels": ["age"],
            ".meta": {
                "vars": {"shouldEncode": True},
                "labels": {"encodeThis": "age"},
            },
        }))

        result = main([
            "encode-options", "--options", str(options_file), "--names", str(names_path), "--preloading",
        ])

        assert result == 0
        output = json.loads(capsys.readouterr().out)
        assert output["options"]["vars"] == ["JaspColumn_0_Encoded"]
        assert output["columns"] == [["age.scale", "scale"]]

    def test_rename(self, tmp_path, monkeypatch, capsys):
        """rename applies a mapping file."""
        mapping = tmp_path / "mapping.json"
        mapping.write_text(json.dumps({"age": "years"}))
        monkeypatch.setattr("sys.stdin", io.StringIO("mean(age)"))
        assert main(["rename", "--mapping", str(mapping)]) == 0
        assert capsys.readouterr().out == "mean(years)"

    def test_remove(self, monkeypatch, capsys):
        """remove replaces columns with a failing call."""
        monkeypatch.setattr("sys.stdin", io.StringIO("mean(age)"))
        assert main(["remove", "--column", "age"]) == 0
        assert "stop('column age was removed from this RScript')" in capsys.readouterr().out

    def test_mapping(self, names_file, capsys):
        """mapping prints the report."""
        assert main(["mapping", "--names", str(names_file)]) == 0
        out = capsys.readouterr().out
        assert "PRIMARY ENCODER" in out
        assert "body mass.ordinal" in out

    def test_mapping_json(self, names_file, capsys):
        """mapping --json prints a JSON report."""
        assert main(["mapping", "--names", str(names_file), "--json"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["summary"]["encoders"] == 1

    def test_missing_names_file(self, tmp_path, capsys):
        """A missing input file is reported on stderr."""
        result = main(["mapping", "--names", str(tmp_path / "missing.json")])
        assert result == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        """An invalid config file fails before running."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"prefix": "1bad"}))
        result = main(["-c", str(config_file), "remove", "--column", "a"])
        assert result == 1
        assert "Configuration error" in capsys.readouterr().err
