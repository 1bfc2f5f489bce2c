"""Tests for the command-line entry point."""

import io
import json

import pytest

import main


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestConvert:
    def test_string_to_array(self, data_dir, capsys):
        src = _write(data_dir / "in.txt", "你好[CQ:at,qq=123]\n")
        assert main.main(["convert", src, "--to", "array"]) == 0
        out = capsys.readouterr().out
        assert json.loads(out) == [
            {"type": "text", "data": {"text": "你好"}},
            {"type": "at", "data": {"qq": "123"}},
        ]

    def test_array_to_string(self, data_dir, capsys):
        src = _write(
            data_dir / "in.json",
            '[{"type":"text","data":{"text":"a,b"}},{"type":"face","data":{"id":1}}]',
        )
        assert main.main(["convert", src, "--to", "string"]) == 0
        assert capsys.readouterr().out == "a,b[CQ:face,id=1]\n"

    def test_default_target_is_string(self, data_dir, capsys):
        src = _write(data_dir / "in.json", '[{"type":"face","data":{"id":1}}]')
        assert main.main(["convert", src]) == 0
        assert capsys.readouterr().out == "[CQ:face,id=1]\n"

    def test_stdin(self, data_dir, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("[CQ:face,id=2]"))
        assert main.main(["convert", "--to", "array"]) == 0
        assert capsys.readouterr().out == '[{"type":"face","data":{"id":2}}]\n'

    def test_output_file(self, data_dir, capsys):
        src = _write(data_dir / "in.txt", "[CQ:face,id=1]")
        dst = data_dir / "out" / "msg.json"
        assert main.main(["convert", src, "-o", str(dst), "--to", "array"]) == 0
        assert dst.read_text(encoding="utf-8") == '[{"type":"face","data":{"id":1}}]'
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Converted" in captured.err

    def test_invalid_segments_kept_as_text(self, data_dir, capsys):
        src = _write(data_dir / "in.txt", "a[CQ:mystery,x=1]b")
        assert main.main(["convert", src, "--to", "array"]) == 0
        assert json.loads(capsys.readouterr().out) == [
            {"type": "text", "data": {"text": "a[CQ:mystery,x=1]b"}},
        ]

    def test_ignore_invalid(self, data_dir, capsys):
        src = _write(data_dir / "in.txt", "a[CQ:face,id=x]b")
        assert main.main(["convert", src, "--ignore-invalid"]) == 0
        assert capsys.readouterr().out == "ab\n"


class TestConfig:
    def test_explicit_config(self, data_dir, capsys):
        cfg = _write(data_dir / "settings.yml", "message:\n  post-format: array\n")
        src = _write(data_dir / "in.txt", "[CQ:face,id=1]")
        assert main.main(["--config", cfg, "convert", src]) == 0
        assert capsys.readouterr().out == '[{"type":"face","data":{"id":1}}]\n'

    def test_config_after_subcommand(self, data_dir, capsys):
        cfg = _write(data_dir / "settings.yml", "message:\n  post-format: array\n")
        src = _write(data_dir / "in.txt", "[CQ:face,id=1]")
        assert main.main(["convert", src, "--config", cfg]) == 0
        assert capsys.readouterr().out == '[{"type":"face","data":{"id":1}}]\n'

    def test_config_found_in_data_dir(self, data_dir, capsys):
        _write(data_dir / "cqcode.json", '{"message": {"ignore-invalid-cqcode": "true"}}')
        src = _write(data_dir / "in.txt", "x[CQ:mystery]y")
        assert main.main(["convert", src]) == 0
        assert capsys.readouterr().out == "xy\n"

    def test_flag_overrides_config(self, data_dir, capsys):
        _write(data_dir / "cqcode.json", '{"message": {"post-format": "array"}}')
        src = _write(data_dir / "in.txt", "[CQ:face,id=1]")
        assert main.main(["convert", src, "--to", "string"]) == 0
        assert capsys.readouterr().out == "[CQ:face,id=1]\n"

    def test_missing_config(self, data_dir, capsys):
        src = _write(data_dir / "in.txt", "hi")
        assert main.main(["--config", str(data_dir / "nope.yml"), "convert", src]) == 1
        assert "config file not found" in capsys.readouterr().err

    def test_invalid_config(self, data_dir, capsys):
        cfg = _write(data_dir / "bad.json", '{"message": {"post-format": "xml"}}')
        src = _write(data_dir / "in.txt", "hi")
        assert main.main(["--config", cfg, "convert", src]) == 1
        assert "Config error" in capsys.readouterr().err


class TestInspect:
    def test_lists_tokens(self, data_dir, capsys):
        src = _write(data_dir / "in.txt", "hi[CQ:face,id=1][CQ:mystery]")
        assert main.main(["inspect", src]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        assert lines[0] == "0\ttext\t'hi'"
        assert lines[1].startswith("1\tface\tFace(")
        assert lines[2].startswith("2\tmystery\tUnknownShape:")


class TestErrors:
    def test_missing_source(self, data_dir, capsys):
        assert main.main(["convert", str(data_dir / "missing.txt")]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            main.main([])
