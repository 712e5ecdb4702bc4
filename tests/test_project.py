"""Tests for project bootstrap (infra/project.py) and settings (utils/settings.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from hdb_helper.exceptions import ValidationError
from hdb_helper.infra.project import Project
from hdb_helper.utils import constants
from hdb_helper.utils.settings import Settings


# ---------------------------------------------------------------------------
# Project.initialize
# ---------------------------------------------------------------------------

class TestInitialize:
    def test_fresh_directory(self, project: Project) -> None:
        notes = project.initialize()

        assert project.is_initialized()
        assert notes == [
            f"Created {constants.ENV_FILE}",
            f"Created {constants.CONFIG_FILE}",
            f"Created {constants.GITIGNORE_FILE}",
        ]
        gitignore = project.settings.gitignore_file.read_text(encoding="utf-8")
        assert gitignore == (
            f"{constants.GITIGNORE_HEADER}\n{constants.CONFIG_FILE}\n{constants.ENV_FILE}\n"
        )

    def test_second_run_changes_nothing(self, project: Project) -> None:
        project.initialize()
        assert project.initialize() == []

    def test_appends_missing_entries(self, project: Project) -> None:
        project.settings.gitignore_file.write_text(
            f"node_modules\n{constants.ENV_FILE}",
            encoding="utf-8",
        )

        notes = project.initialize()

        assert f"Updated {constants.GITIGNORE_FILE}" in notes
        assert project.settings.gitignore_file.read_text(encoding="utf-8") == (
            f"node_modules\n{constants.ENV_FILE}\n{constants.GITIGNORE_HEADER}\n{constants.CONFIG_FILE}\n"
        )

    def test_existing_files_untouched(self, project: Project) -> None:
        project.settings.env_file.write_text("ENV_DEV_INSTANCES=dev\n", encoding="utf-8")

        project.initialize()

        assert project.settings.env_file.read_text(encoding="utf-8") == "ENV_DEV_INSTANCES=dev\n"

    def test_not_initialized_when_one_file_missing(self, project: Project) -> None:
        project.initialize()
        project.settings.config_file.unlink()
        assert not project.is_initialized()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:
    def test_defaults(self, tmp_path: Path) -> None:
        settings = Settings.from_environ({"HDB_PROJECT_DIR": str(tmp_path)})
        assert settings.project_dir == tmp_path
        assert settings.executable == constants.HDB_EXEC
        assert settings.confirm_timeout == constants.CONFIRM_TIMEOUT_SECONDS
        assert settings.env_file == tmp_path / constants.ENV_FILE
        assert settings.config_file == tmp_path / constants.CONFIG_FILE

    def test_cwd_when_unset(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert Settings.from_environ({}).project_dir == tmp_path

    def test_overrides(self) -> None:
        settings = Settings.from_environ(
            {"HDB_EXEC": "/opt/harperdb", "HDB_CONFIRM_TIMEOUT": "0", "HDB_API_TIMEOUT": "2.5"},
        )
        assert settings.executable == "/opt/harperdb"
        assert settings.confirm_timeout == 0.0
        assert settings.api_timeout == 2.5

    @pytest.mark.parametrize("raw", ["soon", "-1", "nan", "inf"])
    def test_invalid_timeout(self, raw: str) -> None:
        with pytest.raises(ValidationError, match="HDB_CONFIRM_TIMEOUT"):
            Settings.from_environ({"HDB_CONFIRM_TIMEOUT": raw})
