"""
Integration tests for the command line interface
"""

import pytest
import yaml
from click.testing import CliRunner

from field_reorder import __version__
from field_reorder.cli import cli
from field_reorder.core.backup_manager import BackupManager


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return CliRunner()


class TestApplyCommand:
    """Test the apply command end to end"""

    def test_apply_by_line_column(self, runner, sample_rust_file):
        """Test the literal at the cursor is rewritten"""
        result = runner.invoke(
            cli, ["apply", str(sample_rust_file), "--line", "9", "--column", "5"], obj={}
        )

        assert result.exit_code == 0
        assert "4 changes applied" in result.output
        assert "Point { x: 1, y: 2, z: 3 }" in sample_rust_file.read_text()

    def test_apply_by_offset(self, runner, sample_rust_file, sample_rust_code):
        """Test the cursor can be given as an offset"""
        offset = sample_rust_code.index("Point { y")

        result = runner.invoke(
            cli,
            ["apply", str(sample_rust_file), "--offset", str(offset), "--no-backup"],
            obj={},
        )

        assert result.exit_code == 0
        assert "let Point { x, y, .. } = p;" in sample_rust_file.read_text()

    def test_apply_dry_run(self, runner, sample_rust_file, sample_rust_code):
        """Test dry runs print a diff without writing"""
        result = runner.invoke(
            cli,
            ["apply", str(sample_rust_file), "-l", "9", "--col", "5", "--dry-run"],
            obj={},
        )

        assert result.exit_code == 0
        assert "+    Point { x: 1, y: 2, z: 3 }" in result.output
        assert sample_rust_file.read_text() == sample_rust_code

    def test_apply_not_applicable(self, runner, sample_rust_file):
        """Test a cursor outside any construct reports no changes"""
        result = runner.invoke(
            cli, ["apply", str(sample_rust_file), "--offset", "0"], obj={}
        )

        assert result.exit_code == 0
        assert "No changes needed" in result.output

    def test_apply_parse_error(self, runner, tmp_path):
        """Test unparsable files exit with status 1"""
        broken = tmp_path / "broken.rs"
        broken.write_text("struct {\n")

        result = runner.invoke(cli, ["apply", str(broken), "--offset", "0"], obj={})

        assert result.exit_code == 1

    def test_apply_requires_cursor(self, runner, sample_rust_file):
        """Test a missing cursor is a usage error"""
        result = runner.invoke(cli, ["apply", str(sample_rust_file), "--line", "9"], obj={})

        assert result.exit_code == 2
        assert "--offset" in result.output

    def test_apply_rejects_both_cursor_forms(self, runner, sample_rust_file):
        """Test an offset cannot be combined with a line and column"""
        result = runner.invoke(
            cli,
            ["apply", str(sample_rust_file), "--offset", "3", "--line", "1", "--column", "1"],
            obj={},
        )

        assert result.exit_code == 2

    def test_apply_with_config_file(self, runner, sample_rust_file, sample_rust_code, tmp_path):
        """Test --config loads settings from the given file"""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(yaml.safe_dump({"dry_run": True}))

        result = runner.invoke(
            cli,
            ["-c", str(config_file), "apply", str(sample_rust_file), "-l", "9", "--col", "5"],
            obj={},
        )

        assert result.exit_code == 0
        assert sample_rust_file.read_text() == sample_rust_code


class TestCheckCommand:
    """Test the check command end to end"""

    def test_check_reports_findings(self, runner, sample_rust_file):
        """Test out-of-order constructs are listed and exit 1"""
        result = runner.invoke(cli, ["check", str(sample_rust_file)], obj={})

        assert result.exit_code == 1
        assert f"{sample_rust_file}:9:5: Point {{z, y, x}} -> {{x, y, z}}" in result.output
        assert "2 constructs out of order" in result.output

    def test_check_clean_tree(self, runner, tmp_path):
        """Test a tree in order exits 0"""
        src = tmp_path / "src"
        src.mkdir()
        (src / "lib.rs").write_text(
            "struct Foo { a: i32, b: i32 }\nconst F: Foo = Foo { a: 1, b: 2 };\n"
        )

        result = runner.invoke(cli, ["check", str(tmp_path), "--recursive"], obj={})

        assert result.exit_code == 0
        assert "0 constructs out of order" in result.output

    def test_check_quiet(self, runner, sample_rust_file):
        """Test --quiet drops the summary line"""
        result = runner.invoke(cli, ["-q", "check", str(sample_rust_file)], obj={})

        assert result.exit_code == 1
        assert "constructs out of order" not in result.output


class TestInitCommand:
    """Test writing the project configuration"""

    def test_init_creates_config(self, runner, tmp_path):
        """Test init writes a default configuration file"""
        result = runner.invoke(cli, ["init"], obj={})

        assert result.exit_code == 0
        data = yaml.safe_load((tmp_path / ".field-reorder.yaml").read_text())
        assert data["reorder"]["file_extensions"] == [".rs"]

    def test_init_existing_requires_force(self, runner, tmp_path):
        """Test an existing file is only replaced with --force"""
        config_path = tmp_path / ".field-reorder.yaml"
        config_path.write_text("dry_run: true\n")

        result = runner.invoke(cli, ["init"], obj={})
        assert result.exit_code == 1
        assert config_path.read_text() == "dry_run: true\n"

        result = runner.invoke(cli, ["init", "--force"], obj={})
        assert result.exit_code == 0
        assert yaml.safe_load(config_path.read_text())["dry_run"] is False


class TestBackupCommand:
    """Test managing backup sessions"""

    def test_no_sessions(self, runner):
        """Test listing with no sessions"""
        result = runner.invoke(cli, ["backup", "--sessions"], obj={})

        assert result.exit_code == 0
        assert "No backup sessions found" in result.output

    def test_list_restore_and_clean(self, runner, sample_rust_file, sample_rust_code, tmp_path):
        """Test a session created by apply can be listed, restored and removed"""
        runner.invoke(cli, ["apply", str(sample_rust_file), "-l", "9", "--col", "5"], obj={})
        assert sample_rust_file.read_text() != sample_rust_code

        sessions = BackupManager(backup_dir=str(tmp_path / ".backups")).list_sessions()
        session_id = sessions[0]["session_id"]

        result = runner.invoke(cli, ["backup", "--sessions"], obj={})
        assert session_id in result.output

        result = runner.invoke(cli, ["backup", "--restore", session_id], obj={})
        assert result.exit_code == 0
        assert sample_rust_file.read_text() == sample_rust_code

        result = runner.invoke(cli, ["backup", "--clean"], obj={})
        assert "Removed 1 backup sessions" in result.output

    def test_apply_without_changes_keeps_backups(self, runner, sample_rust_file, tmp_path):
        """Test an apply that changes nothing leaves earlier sessions alone"""
        config_file = tmp_path / "keep_one.yaml"
        config_file.write_text(yaml.safe_dump({"backup": {"keep_sessions": 1}}))
        args = ["-c", str(config_file), "apply", str(sample_rust_file)]

        runner.invoke(cli, args + ["-l", "9", "--col", "5"], obj={})
        manager = BackupManager(backup_dir=str(tmp_path / ".backups"))
        sessions = manager.list_sessions()
        assert len(sessions) == 1

        result = runner.invoke(cli, args + ["-l", "9", "--col", "5"], obj={})
        assert "No changes needed" in result.output

        assert manager.list_sessions() == sessions

    def test_restore_unknown_session(self, runner):
        """Test restoring a missing session exits 1"""
        result = runner.invoke(cli, ["backup", "--restore", "session_missing"], obj={})

        assert result.exit_code == 1


class TestVersion:
    """Test version output"""

    def test_version(self, runner):
        """Test --version prints the program name and version"""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"field-reorder, version {__version__}" in result.output
