"""Nox sessions for luminatex."""

import nox


PYTHON_VERSIONS = ["3.10", "3.11", "3.12", "3.13"]
nox.options.default_venv_backend = "uv"


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run pytest across all supported Python versions."""
    session.install(".[test]")
    session.run("pytest", *session.posargs)


@nox.session(python="3.13")
def coverage(session: nox.Session) -> None:
    """Run tests with coverage reporting once."""
    session.install(".[test]", "pytest-cov")
    session.run(
        "pytest",
        "--cov=luminatex",
        "--cov-report=term-missing",
        *session.posargs,
    )
