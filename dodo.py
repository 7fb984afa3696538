"""
Doit file to wrap development workflow commands.
"""

import shutil
from pathlib import Path

from doit.task import Task
from doit.tools import create_folder

PACKAGE = "docshare"

OUT_PATH = Path("__out__")

# test results and coverage
TEST_OUT_PATH = OUT_PATH / "test"
JUNIT_PATH = TEST_OUT_PATH / "junit.xml"
COV_HTML_PATH = TEST_OUT_PATH / "cov"

# type checking results
MYPY_HTML_PATH = OUT_PATH / "mypy"


def _rmtree(path: Path):
    if path.exists():
        shutil.rmtree(path)


def task_pytest() -> Task:
    """
    Run tests with coverage.
    """
    cmd = [
        "pytest",
        f"--cov={PACKAGE}",
        f"--cov-report=html:{COV_HTML_PATH}",
        f"--junitxml={JUNIT_PATH}",
    ]

    return Task(
        "test",
        actions=[(create_folder, [TEST_OUT_PATH]), " ".join(cmd)],
        targets=[JUNIT_PATH],
        file_dep=[],
        clean=[(_rmtree, [TEST_OUT_PATH])],
    )


def task_format() -> Task:
    """
    Run formatters.
    """
    return Task(
        "format",
        actions=[
            "autoflake --remove-all-unused-imports -i -r .",
            "isort .",
            "black .",
            "toml-sort -i pyproject.toml",
        ],
        file_dep=[],
    )


def task_analysis() -> Task:
    """
    Run type checkers.
    """
    return Task(
        "analysis",
        actions=[
            f"mypy --html-report {MYPY_HTML_PATH} {PACKAGE}",
            f"pyright {PACKAGE}",
        ],
        file_dep=[],
        clean=[(_rmtree, [MYPY_HTML_PATH])],
    )
