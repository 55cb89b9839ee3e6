from click.testing import CliRunner

from neighbors.cli import main

from conftest import build_register, build_template


def _register(input_dir):
    build_register(input_dir / "register.xlsx", [
        {"id": "7", "area": "30", "basis": "deed2", "name": "Petrov/Sidorov", "share": "1"},
        {"id": "9", "area": "12", "basis": "deed5", "name": "Petrov", "share": "1"},
    ])


def test_generate(input_dir):
    _register(input_dir)
    result = CliRunner().invoke(main, ["generate", "--input-dir", str(input_dir), "--workers", "2"])
    assert result.exit_code == 0, result.output
    assert "Persons:  2" in result.output
    assert "Records:  3" in result.output
    assert len(list(input_dir.glob("output_0_50_*.docx"))) == 1


def test_generate_dry_run(input_dir):
    _register(input_dir)
    result = CliRunner().invoke(main, ["generate", "--input-dir", str(input_dir), "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "Dry run" in result.output
    assert not list(input_dir.glob("output_*"))


def test_generate_missing_register(input_dir):
    result = CliRunner().invoke(main, ["generate", "--input-dir", str(input_dir)])
    assert result.exit_code == 1
    assert "Data file is missing" in result.output


def test_generate_template_without_table(tmp_path):
    build_template(tmp_path / "template.docx", table=False)
    _register(tmp_path)
    result = CliRunner().invoke(main, ["generate", "--input-dir", str(tmp_path)])
    assert result.exit_code == 1
    assert "Template error" in result.output


def test_groups_listing(input_dir):
    _register(input_dir)
    result = CliRunner().invoke(main, ["groups", "--input-dir", str(input_dir)])
    assert result.exit_code == 0, result.output
    assert "Petrov  records=2  area=42  share=1.5" in result.output
    assert "Sidorov  records=1  area=30  share=0.5" in result.output
    assert "2 persons" in result.output
