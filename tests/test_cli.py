"""Tests for the unigalaxy CLI.

Uses typer.testing.CliRunner for isolated CLI testing.
"""

from __future__ import annotations

import json

import pytest
import yaml
from typer.testing import CliRunner

from unigalaxy.cli import app
from unigalaxy.cli import _errors as cli_errors
from unigalaxy.cli._config import UnigalaxyConfig, get_config

runner = CliRunner()


@pytest.fixture
def corpus(tmp_path, snippet_tree):
    out = tmp_path / "data"
    result = runner.invoke(app, ["convert", str(snippet_tree), "--output", str(out)])
    assert result.exit_code == 0, result.output
    return out


# =========================================================================
# App structure
# =========================================================================


class TestAppStructure:
    def test_app_has_all_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "convert" in result.output
        assert "inspect" in result.output
        assert "mcp-serve" in result.output

    def test_inspect_help(self):
        result = runner.invoke(app, ["inspect", "--help"])
        assert result.exit_code == 0
        for name in ("stats", "list", "show", "rules"):
            assert name in result.output


# =========================================================================
# Config
# =========================================================================


class TestConfig:
    def test_defaults(self, monkeypatch):
        for var in ("UNIGALAXY_DATA_DIR", "UNIGALAXY_RULES_PATH", "UNIGALAXY_SEARCH_LIMIT"):
            monkeypatch.delenv(var, raising=False)
        cfg = get_config()
        assert isinstance(cfg, UnigalaxyConfig)
        assert cfg.data_dir == "./data"
        assert cfg.rules_path is None
        assert cfg.search_limit == 10
        assert cfg.list_limit == 50

    def test_bad_integer_exits(self, monkeypatch):
        monkeypatch.setenv("UNIGALAXY_LIST_LIMIT", "many")
        with pytest.raises(SystemExit):
            UnigalaxyConfig()


# =========================================================================
# convert
# =========================================================================


class TestConvert:
    def test_writes_corpus(self, corpus):
        index = json.loads((corpus / "metadata" / "component-index.json").read_text())
        assert index["total"] == 3
        assert (corpus / "components" / "loaders" / "carol_spinner.json").is_file()

    def test_reports_counts(self, tmp_path, snippet_tree):
        result = runner.invoke(
            app, ["convert", str(snippet_tree), "--output", str(tmp_path / "out")]
        )
        assert result.exit_code == 0
        assert "Converted 3 of 3 snippets" in result.output
        assert "buttons" in result.output

    def test_category_filter(self, tmp_path, snippet_tree):
        out = tmp_path / "out"
        result = runner.invoke(
            app, ["convert", str(snippet_tree), "-o", str(out), "--category", "Loaders"]
        )
        assert result.exit_code == 0
        index = json.loads((out / "metadata" / "component-index.json").read_text())
        assert [c["id"] for c in index["components"]] == ["carol_spinner"]

    def test_malformed_snippet_reported_not_fatal(self, tmp_path, snippet_tree):
        (snippet_tree / "Buttons" / "zed_broken.html").write_bytes(b"\xff\xfe\xfa")
        result = runner.invoke(app, ["convert", str(snippet_tree), "-o", str(tmp_path / "out")])
        assert result.exit_code == 0
        assert "zed_broken" in result.output

    def test_all_malformed_fails(self, tmp_path):
        src = tmp_path / "src" / "Buttons"
        src.mkdir(parents=True)
        (src / "zed_broken.html").write_bytes(b"\xff\xfe\xfa")
        result = runner.invoke(app, ["convert", str(tmp_path / "src"), "-o", str(tmp_path / "out")])
        assert result.exit_code == 1

    def test_missing_source(self, tmp_path):
        result = runner.invoke(app, ["convert", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Source directory not found" in result.output

    def test_custom_rules(self, tmp_path, snippet_tree):
        rules = tmp_path / "rules.yaml"
        rules.write_text("css_unit_conversion:\n  px_to_rpx_ratio: 1\n")
        out = tmp_path / "out"
        result = runner.invoke(app, ["convert", str(snippet_tree), "-o", str(out), "-r", str(rules)])
        assert result.exit_code == 0
        record = json.loads((out / "components" / "loaders" / "carol_spinner.json").read_text())
        assert "2rpx solid" in record["uniapp"]["style"]
        assert "<div" in record["uniapp"]["template"]

    def test_bad_rules_file(self, tmp_path, snippet_tree):
        result = runner.invoke(
            app, ["convert", str(snippet_tree), "-r", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 1
        assert "Could not load rule table" in result.output

    def test_reconversion_keeps_created_at(self, corpus, snippet_tree):
        path = corpus / "components" / "loaders" / "carol_spinner.json"
        first = json.loads(path.read_text())
        result = runner.invoke(app, ["convert", str(snippet_tree), "-o", str(corpus)])
        assert result.exit_code == 0
        second = json.loads(path.read_text())
        assert second["created_at"] == first["created_at"]

    def test_category_rerun_keeps_other_categories(self, corpus, snippet_tree):
        result = runner.invoke(
            app, ["convert", str(snippet_tree), "-o", str(corpus), "--category", "Loaders"]
        )
        assert result.exit_code == 0
        assert "Corpus now holds 3 components" in result.output
        index = json.loads((corpus / "metadata" / "component-index.json").read_text())
        assert [c["id"] for c in index["components"]] == [
            "alice_glow-button",
            "bob_frost",
            "carol_spinner",
        ]
        assert index["total"] == 3
        assert index["categories"] == {"buttons": 2, "loaders": 1}
        authors = json.loads((corpus / "metadata" / "authors.json").read_text())
        assert authors["authors"] == ["alice", "bob", "carol"]
        tags = json.loads((corpus / "metadata" / "tags.json").read_text())
        assert "neon" in tags["tags"]

        shown = runner.invoke(app, ["inspect", "show", "alice_glow-button", "-d", str(corpus)])
        assert shown.exit_code == 0

    def test_failed_rerun_keeps_stored_record(self, corpus, snippet_tree):
        (snippet_tree / "Loaders" / "carol_spinner.html").write_bytes(b"\xff\xfe\xfa")
        result = runner.invoke(app, ["convert", str(snippet_tree), "-o", str(corpus)])
        assert result.exit_code == 0
        assert "carol_spinner" in result.output
        index = json.loads((corpus / "metadata" / "component-index.json").read_text())
        assert "carol_spinner" in [c["id"] for c in index["components"]]
        assert index["categories"] == {"buttons": 2, "loaders": 1}

        shown = runner.invoke(
            app, ["inspect", "show", "carol_spinner", "-d", str(corpus), "-f", "json"]
        )
        assert shown.exit_code == 0
        assert json.loads(shown.output)["category"] == "loaders"


# =========================================================================
# inspect
# =========================================================================


class TestInspect:
    def test_stats(self, corpus):
        result = runner.invoke(app, ["inspect", "stats", "--data-dir", str(corpus)])
        assert result.exit_code == 0
        assert "Components: 3" in result.output
        assert "mp_weixin" in result.output

    def test_stats_from_env(self, corpus, monkeypatch):
        monkeypatch.setenv("UNIGALAXY_DATA_DIR", str(corpus))
        result = runner.invoke(app, ["inspect", "stats"])
        assert result.exit_code == 0
        assert "Components: 3" in result.output

    def test_no_corpus(self, tmp_path):
        result = runner.invoke(app, ["inspect", "stats", "-d", str(tmp_path / "nothing")])
        assert result.exit_code == 1
        assert "No converted corpus" in result.output

    def test_list(self, corpus):
        result = runner.invoke(app, ["inspect", "list", "-d", str(corpus), "--sort", "complexity", "--desc"])
        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.startswith(("alice", "bob", "carol"))]
        assert [line.split()[0] for line in lines] == ["alice_glow-button", "carol_spinner", "bob_frost"]

    def test_list_filter_and_limit(self, corpus):
        result = runner.invoke(app, ["inspect", "list", "-d", str(corpus), "-c", "buttons", "-n", "1"])
        assert result.exit_code == 0
        assert "... 1 more" in result.output

    def test_show_yaml(self, corpus):
        result = runner.invoke(app, ["inspect", "show", "bob_frost", "-d", str(corpus)])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["id"] == "bob_frost"
        assert len(data["compatibility"]["mp_weixin"]["issues"]) == 2

    def test_show_json_with_code(self, corpus):
        result = runner.invoke(
            app, ["inspect", "show", "carol_spinner", "-d", str(corpus), "--code", "-f", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["uniapp_code"]["component_name"] == "GalaxySpinner"

    def test_show_unknown(self, corpus):
        result = runner.invoke(app, ["inspect", "show", "nobody_nothing", "-d", str(corpus)])
        assert result.exit_code == 1
        assert "Component nobody_nothing not found" in result.output

    def test_rules_default(self):
        result = runner.invoke(app, ["inspect", "rules"])
        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["html_tag_mapping"]["div"] == "view"
        assert data["css_unit_conversion"]["px_to_rpx_ratio"] == 2.0


# =========================================================================
# Store holder
# =========================================================================


class TestStoreHolder:
    def test_get_store_without_corpus_raises(self, monkeypatch):
        monkeypatch.setattr(cli_errors, "_current_store", None)
        with pytest.raises(RuntimeError, match="require_corpus"):
            cli_errors.get_store()
