#!/usr/bin/env python3
"""
Test suite for candidate file discovery
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from flagcleaner.components.file_search import FileSearch
from flagcleaner.utils.config import CleanerSettings
from flagcleaner.utils.errors import SearchError


@pytest.fixture
def project(tmp_path):
    """Small project tree with files inside and outside the search scope."""
    files = {
        "App/Feature.swift": "#if FEATURE_FLAG\nlet a = 1\n#endif\n",
        "App/Other.swift": "let b = 2\n",
        "App/Legacy.m": "#ifdef FEATURE_FLAG\nA();\n#endif\n",
        "App/Legacy.h": "// FEATURE_FLAG\n",
        "App/notes.txt": "FEATURE_FLAG\n",
        "Pods/Lib/Lib.swift": "#if FEATURE_FLAG\n#endif\n",
        "Resources/Assets.bundle/Embedded.swift": "#if FEATURE_FLAG\n#endif\n",
    }
    for name, text in files.items():
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return tmp_path


@pytest.fixture
def walk_search():
    return FileSearch(CleanerSettings(use_ripgrep=False))


class TestWalkSearch:
    """Test the pure Python scan."""

    def test_collect_source_files(self, project, walk_search):
        found = walk_search.collect_source_files(project)
        assert [p.relative_to(project).as_posix() for p in found] == [
            "App/Feature.swift",
            "App/Legacy.h",
            "App/Legacy.m",
            "App/Other.swift",
        ]

    def test_find_files_containing(self, project, walk_search):
        found = walk_search.find_files_containing(project, "FEATURE_FLAG")
        assert [p.relative_to(project).as_posix() for p in found] == [
            "App/Feature.swift",
            "App/Legacy.h",
            "App/Legacy.m",
        ]

    def test_custom_extensions(self, project):
        settings = CleanerSettings(use_ripgrep=False, objc_extensions=[])
        found = FileSearch(settings).find_files_containing(project, "FEATURE_FLAG")
        assert found == [project / "App" / "Feature.swift"]

    def test_missing_root(self, tmp_path, walk_search):
        with pytest.raises(SearchError, match="does not exist"):
            walk_search.find_files_containing(tmp_path / "missing", "FEATURE_FLAG")

    def test_root_must_be_directory(self, project, walk_search):
        with pytest.raises(SearchError, match="not a directory"):
            walk_search.find_files_containing(project / "App" / "Other.swift", "X")


class TestRipgrepSearch:
    """Test the ripgrep path with the subprocess mocked out."""

    def _completed(self, returncode, stdout="", stderr=""):
        return subprocess.CompletedProcess(
            args=["rg"], returncode=returncode, stdout=stdout, stderr=stderr
        )

    @patch("flagcleaner.components.file_search.subprocess.run")
    @patch("flagcleaner.components.file_search.shutil.which", return_value="/usr/bin/rg")
    def test_matches_are_parsed_and_sorted(self, mock_which, mock_run, tmp_path):
        mock_run.return_value = self._completed(
            0, stdout=f"{tmp_path}/b.swift\n{tmp_path}/a.m\n"
        )

        found = FileSearch().find_files_containing(tmp_path, "FEATURE_FLAG")

        assert found == [tmp_path / "a.m", tmp_path / "b.swift"]
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "/usr/bin/rg"
        assert "-F" in cmd and "FEATURE_FLAG" in cmd
        assert "*.swift" in cmd and "!Pods/" in cmd and "!*.bundle/" in cmd
        assert cmd[-1] == str(tmp_path)

    @patch("flagcleaner.components.file_search.subprocess.run")
    @patch("flagcleaner.components.file_search.shutil.which", return_value="/usr/bin/rg")
    def test_no_matches(self, mock_which, mock_run, tmp_path):
        mock_run.return_value = self._completed(1)
        assert FileSearch().find_files_containing(tmp_path, "FEATURE_FLAG") == []

    @patch("flagcleaner.components.file_search.subprocess.run")
    @patch("flagcleaner.components.file_search.shutil.which", return_value="/usr/bin/rg")
    def test_ripgrep_error(self, mock_which, mock_run, tmp_path):
        mock_run.return_value = self._completed(2, stderr="regex parse error")
        with pytest.raises(SearchError, match="exit code 2"):
            FileSearch().find_files_containing(tmp_path, "FEATURE_FLAG")

    @patch("flagcleaner.components.file_search.subprocess.run")
    @patch("flagcleaner.components.file_search.shutil.which", return_value=None)
    def test_falls_back_when_ripgrep_missing(self, mock_which, mock_run, project):
        found = FileSearch().find_files_containing(project, "FEATURE_FLAG")
        mock_run.assert_not_called()
        assert Path(project / "App" / "Feature.swift") in found

    @patch("flagcleaner.components.file_search.shutil.which")
    def test_ripgrep_disabled(self, mock_which, project, walk_search):
        walk_search.find_files_containing(project, "FEATURE_FLAG")
        mock_which.assert_not_called()
