"""Integration tests for building from YAML rule files."""

import os

from pymakefile.yaml import load_yaml, main, run_yaml


PIPELINE = """
config:
  root: .
  default: dist/all.txt

rules:
  - target: "build/<name>.upper"
    prerequisites: "src/<name>.txt"
    recipe:
      - "mkdir -p build"
      - "tr a-z A-Z < {dep_0} > {target}"

  - target: dist/all.txt
    prerequisites: [build/a.upper, build/b.upper]
    recipe:
      - "mkdir -p dist"
      - "cat {deps} > {target}"
"""


def write_project(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.txt").write_text("alpha\n")
    (src / "b.txt").write_text("beta\n")
    yaml_file = tmp_path / "makefile.yaml"
    yaml_file.write_text(PIPELINE)
    return yaml_file


class TestRunYAML:
    """End-to-end tests for YAML rule execution."""

    def test_builds_default_target(self, tmp_path):
        yaml_file = write_project(tmp_path)

        result = run_yaml(yaml_file)

        assert result == {'dist/all.txt': True}
        assert (tmp_path / "dist" / "all.txt").read_text() == "ALPHA\nBETA\n"

    def test_second_run_up_to_date(self, tmp_path):
        yaml_file = write_project(tmp_path)
        run_yaml(yaml_file)

        assert run_yaml(yaml_file) == {'dist/all.txt': False}

    def test_touched_source_rebuilds(self, tmp_path):
        yaml_file = write_project(tmp_path)
        run_yaml(yaml_file)

        for path in ("build/a.upper", "build/b.upper", "dist/all.txt"):
            os.utime(tmp_path / path, (1000, 1000))
        (tmp_path / "src" / "b.txt").write_text("gamma\n")

        assert run_yaml(yaml_file) == {'dist/all.txt': True}
        assert (tmp_path / "dist" / "all.txt").read_text() == "ALPHA\nGAMMA\n"

    def test_explicit_targets(self, tmp_path):
        yaml_file = write_project(tmp_path)

        result = run_yaml(yaml_file, targets=["build/a.upper"])

        assert result == {'build/a.upper': True}
        assert (tmp_path / "build" / "a.upper").read_text() == "ALPHA\n"
        assert not (tmp_path / "dist").exists()

    def test_root_relative_to_yaml_file(self, tmp_path):
        yaml_file = write_project(tmp_path)
        mk = load_yaml(yaml_file)
        assert mk.root == tmp_path.resolve()


class TestMain:
    """Tests for the pymake command line."""

    def test_build(self, tmp_path, capsys):
        yaml_file = write_project(tmp_path)

        assert main(["-f", str(yaml_file)]) == 0
        assert "dist/all.txt: rebuilt" in capsys.readouterr().out

    def test_dry_run_builds_nothing(self, tmp_path, capsys):
        yaml_file = write_project(tmp_path)

        assert main(["-f", str(yaml_file), "--dry-run", "build/a.upper"]) == 0
        out = capsys.readouterr().out
        assert "build/a.upper: rule build/<name>.upper" in out
        assert "prerequisites: src/a.txt" in out
        assert not (tmp_path / "build").exists()

    def test_missing_file(self, tmp_path, capsys):
        assert main(["-f", str(tmp_path / "missing.yaml")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_no_rule(self, tmp_path, capsys):
        yaml_file = write_project(tmp_path)

        assert main(["-f", str(yaml_file), "nothing.txt"]) == 1
        assert "no rule to make target 'nothing.txt'" in capsys.readouterr().err

    def test_failing_recipe(self, tmp_path, capsys):
        yaml_file = tmp_path / "makefile.yaml"
        yaml_file.write_text("rules:\n  - target: broken\n    recipe: 'exit 2'\n")

        assert main(["-f", str(yaml_file)]) == 1
        assert "recipe for 'broken' failed" in capsys.readouterr().err

    def test_file_is_directory(self, tmp_path, capsys):
        assert main(["-f", str(tmp_path)]) == 1
        assert "Error:" in capsys.readouterr().err
