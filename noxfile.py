from __future__ import annotations
import nox

# Default sessions when you run plain `nox`
nox.options.sessions = ["lint", "tests"]
# Speed up local iteration
nox.options.reuse_venv = True

PY_VERS = ["3.10", "3.11", "3.12"]


@nox.session
def lint(session: nox.Session) -> None:
    session.install("ruff>=0.5.0", "black>=24.0")
    session.run("ruff", "check", ".")
    session.run("black", "--check", ".")


@nox.session
def typecheck(session: nox.Session) -> None:
    session.install("-e", ".")
    session.install("mypy>=1.5")
    session.run("mypy", "dragpulse")


@nox.session(python=PY_VERS)
def tests(session: nox.Session) -> None:
    session.install("-e", ".[dev]")
    session.env["MPLBACKEND"] = "Agg"
    session.run("pytest", "-q", *session.posargs)


@nox.session
def scenarios(session: nox.Session) -> None:
    """Regenerate the example figures under img/."""
    session.install("-e", ".")
    session.run("dragpulse", "--no-show", "--output-dir", "img")


@nox.session
def build(session: nox.Session) -> None:
    """Produce wheel and sdist."""
    session.install("build>=1.2.1")
    session.run("python", "-m", "build", "--wheel", "--sdist")
