"""Tests for the cictt-scorer command line."""

import json

import yaml
from click.testing import CliRunner

from hazard_scorer.cli import main
from hazard_scorer.taxonomy import list_categories

INCIDENT = "Severe wind shears and a microburst on approach, then a bird strike and an engine fire."


def invoke(*args, **kwargs):
    return CliRunner().invoke(main, list(args), **kwargs)


class TestAnalyzeCommand:
    """Tests for 'cictt-scorer analyze'."""

    def test_help(self):
        result = invoke("analyze", "--help")
        assert result.exit_code == 0
        assert "Analyze a document against the CICTT taxonomy" in result.output

    def test_json_output(self):
        result = invoke("analyze", "--text", INCIDENT, "--json-output")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["totalCategories"] == len(list_categories())
        assert data["detectedCount"] > 0
        assert "Weather/Environment hazards identified" in data["summary"]

    def test_reads_file(self, tmp_path):
        path = tmp_path / "report.txt"
        path.write_text(INCIDENT, encoding="utf-8")

        result = invoke("analyze", str(path), "-j")

        assert result.exit_code == 0
        assert json.loads(result.output)["detectedCount"] > 0

    def test_reads_stdin(self):
        result = invoke("analyze", "-j", input=INCIDENT)
        assert result.exit_code == 0
        assert json.loads(result.output)["detectedCount"] > 0

    def test_empty_input(self):
        result = invoke("analyze", "-j", input="   ")

        data = json.loads(result.output)
        assert data["summary"] == "No text provided for analysis."
        assert data["categories"] == []

    def test_edits(self):
        result = invoke(
            "analyze", "--text", INCIDENT, "-j",
            "--disable", "BIRD", "--weight", "WSTRW=2.0", "--add", "ATM",
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        by_code = {c["code"]: c for c in data["categories"]}
        assert by_code["BIRD"]["isEnabled"] is False
        assert by_code["WSTRW"]["userWeight"] == 2.0
        assert by_code["ATM"]["isManuallyAdded"] is True
        assert "Wildlife" not in data["summary"]

    def test_any_edit_reaggregates_over_all_enabled(self):
        plain = json.loads(invoke("analyze", "--text", INCIDENT, "-j").output)
        edited = json.loads(invoke("analyze", "--text", INCIDENT, "-j", "--weight", "WSTRW=1.0").output)

        scores = [c["score"] for c in plain["categories"]]
        detected = [s for s in scores if s > 0]
        assert plain["overallRiskScore"] == round(sum(detected) / len(detected)) == 11
        # zero-score entries join the mean once the category set is edited
        assert edited["overallRiskScore"] == round(sum(scores) / len(scores)) == 2
        assert edited["categories"] == plain["categories"]
        assert edited["detectedCount"] == plain["detectedCount"]

    def test_formatted_output_and_save(self, tmp_path):
        out = tmp_path / "report.json"
        result = invoke("analyze", "--text", INCIDENT, "--out", str(out))

        assert result.exit_code == 0
        assert "CICTT Hazard Analysis" in result.output
        assert "WSTRW" in result.output
        assert json.loads(out.read_text(encoding="utf-8"))["detectedCount"] > 0

    def test_unknown_code_warns(self):
        result = invoke("analyze", "--text", INCIDENT, "--add", "NOPE")
        assert result.exit_code == 0
        assert "Cannot add NOPE" in result.output


class TestEstimateCommand:
    """Tests for 'cictt-scorer estimate'."""

    def test_all_categories(self):
        result = invoke("estimate", "--text", "The aircraft entered a stall")
        assert result.exit_code == 0
        assert "all categories" in result.output
        assert "90/100" in result.output

    def test_single_code(self):
        result = invoke("estimate", "--code", "LOC-I", input="The aircraft entered a stall")
        assert result.exit_code == 0
        assert "(LOC-I)" in result.output
        assert "90/100" in result.output

    def test_no_match(self):
        result = invoke("estimate", "--text", "zzz qqq")
        assert result.exit_code == 0
        assert "0/100 - Low" in result.output

    def test_unknown_code(self):
        result = invoke("estimate", "--text", "stall", "--code", "NOPE")
        assert result.exit_code == 1
        assert "Category not found" in result.output


class TestTaxonomyCommands:
    """Tests for the taxonomy browsing commands."""

    def test_categories(self):
        result = invoke("categories")
        assert result.exit_code == 0
        assert "LOC-I" in result.output

    def test_categories_by_group(self):
        result = invoke("categories", "--group", "Fire/Smoke")
        assert result.exit_code == 0
        assert "F-POST" in result.output
        assert "LOC-I" not in result.output

    def test_categories_unknown_group(self):
        assert invoke("categories", "--group", "Nowhere").exit_code == 1

    def test_groups(self):
        result = invoke("groups")
        assert result.exit_code == 0
        assert "Loss of Control" in result.output

    def test_inspect(self):
        result = invoke("inspect", "FUEL")
        assert result.exit_code == 0
        assert "fuel exhaustion" in result.output

    def test_inspect_unknown(self):
        result = invoke("inspect", "NOPE")
        assert result.exit_code == 1
        assert "Category not found" in result.output

    def test_search(self):
        result = invoke("search", "fuel")
        assert result.exit_code == 0
        assert "FUEL" in result.output


class TestConfigCommands:
    """Tests for validation and configuration commands."""

    def test_validate_bundled(self):
        result = invoke("validate")
        assert result.exit_code == 0
        assert "Taxonomy valid" in result.output

    def test_validate_invalid_file(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"categories": [{"code": "X", "name": "X", "group": "G", "keywords": {}}]}))

        result = invoke("validate", "--taxonomy", str(path))

        assert result.exit_code == 1
        assert "Taxonomy invalid" in result.output

    def test_init_config(self, tmp_path):
        path = tmp_path / "hazard-config.yaml"
        result = invoke("init-config", str(path))

        assert result.exit_code == 0
        assert yaml.safe_load(path.read_text(encoding="utf-8"))["summary"]["top_categories"] == 3

    def test_config_option(self, tmp_path):
        path = tmp_path / "hazard-config.yaml"
        path.write_text(yaml.dump({"summary": {"top_categories": 1}}))

        result = invoke("--config", str(path), "analyze", "--text", INCIDENT, "-j")

        assert result.exit_code == 0
        summary = json.loads(result.output)["summary"]
        assert "(Wind Shear / Wind Gust)" in summary
