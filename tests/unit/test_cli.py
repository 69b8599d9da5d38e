#!/usr/bin/env python3
"""
Test suite for the command line entry point
"""

import json

import pytest

from flagcleaner.cli import EXIT_FAILURES, EXIT_OK, EXIT_USAGE, main
from flagcleaner.utils.config import CONFIG_FILE_NAME

FEATURE_SOURCE = "#if FEATURE_FLAG\nlet a = 1\n#else\nlet a = 0\n#endif\n"


@pytest.fixture
def project(tmp_path):
    (tmp_path / CONFIG_FILE_NAME).write_text("use_ripgrep: false\n")
    (tmp_path / "Feature.swift").write_text(FEATURE_SOURCE)
    return tmp_path


class TestMain:
    """Test exit codes and side effects of main()."""

    def test_rewrites_files(self, project):
        assert main(["-f", "FEATURE_FLAG", "-p", str(project)]) == EXIT_OK
        assert (project / "Feature.swift").read_text() == "let a = 1\n"

    def test_nothing_to_do(self, project):
        assert main(["--flag", "OTHER_FLAG", "--path", str(project)]) == EXIT_OK
        assert (project / "Feature.swift").read_text() == FEATURE_SOURCE

    def test_dry_run_with_report(self, project, tmp_path_factory):
        report_path = tmp_path_factory.mktemp("out") / "report.json"

        code = main(
            ["-f", "FEATURE_FLAG", "-p", str(project), "--dry-run", "--report", str(report_path)]
        )

        assert code == EXIT_OK
        assert (project / "Feature.swift").read_text() == FEATURE_SOURCE
        data = json.loads(report_path.read_text())
        assert data["dry_run"] is True
        assert [(f["status"], f["applied"]) for f in data["files"]] == [("written", False)]

    def test_parse_failure_exits_with_failures(self, project):
        (project / "Broken.swift").write_text("#if FEATURE_FLAG\nlet b = 2\n")
        assert main(["-f", "FEATURE_FLAG", "-p", str(project), "-v"]) == EXIT_FAILURES
        assert (project / "Feature.swift").read_text() == "let a = 1\n"

    def test_missing_path(self, tmp_path):
        assert main(["-f", "FEATURE_FLAG", "-p", str(tmp_path / "missing")]) == EXIT_USAGE

    def test_invalid_jobs(self, project):
        assert main(["-f", "FEATURE_FLAG", "-p", str(project), "--jobs", "0"]) == EXIT_USAGE

    def test_missing_config_file(self, project):
        code = main(
            ["-f", "FEATURE_FLAG", "-p", str(project), "--config", str(project / "nope.yaml")]
        )
        assert code == EXIT_USAGE

    def test_swift_precedence_option(self, project):
        (project / "Feature.swift").write_text(
            "#if FEATURE_FLAG || 0 && 0\nlet a = 1\n#endif\nlet b = 2\n"
        )
        assert main(["-f", "FEATURE_FLAG", "-p", str(project), "--precedence", "swift"]) == EXIT_OK
        assert (project / "Feature.swift").read_text() == "let a = 1\nlet b = 2\n"

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["-f", "1_NOT_A_FLAG"],
            ["-f", "FEATURE_FLAG", "--precedence", "c"],
        ],
    )
    def test_usage_errors(self, argv):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == EXIT_USAGE
