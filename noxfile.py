import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Common dependencies for test sessions
COMMON_DEPS = ["-e", ".[test]"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "DATABASE_URL",
    "SECRET_KEY",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "REDIS_URL",
]


def _set_env(session):
    """
    Propagate database and test-related environment variables into the session.
    The suite defaults to in-memory SQLite with the auto-close scheduler off.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    session.env.setdefault("AUTO_CLOSE_ENABLED", "false")
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "rangevote/", "tests/")
    session.run("black", "rangevote/", "tests/")
    session.run("flake8", "rangevote/", "tests/")
    session.run("mypy", "rangevote/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests with coverage.
    Usage:
      nox -s unit             # runs all tests under tests/unit
      nox -s unit -- tests/unit/test_services/test_votes.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/unit"]
    htmlcov_path = ".nox/htmlcov"
    session.run(
        "pytest",
        *tests,
        "-m", "unit",
        "-vv",
        "--tb=short",
        "--cov=rangevote",
        "--cov-report=term-missing",
        "--cov-report=html:" + htmlcov_path,
        "--cov-report=xml",
        "--cov-fail-under=80",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run the HTTP API tests through FastAPI's TestClient.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_api/test_share_links.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "--maxfail=1",
        "-vv",
        "--tb=short",
    )
