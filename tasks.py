"""Invoke tasks for developing and releasing projopen.

Every task shells out to the `uv` CLI, so local runs use the same environment
as CI. `invoke ci` runs formatting, lint, type checks and the pytest suite.
"""

from __future__ import annotations

import shlex
import shutil
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
DIST_DIR = PROJECT_ROOT / "dist"
LINT_TARGETS = ("src", "tests", "tasks.py")


def _uv(
    ctx: Context,
    args: Sequence[str],
    *,
    dry_run: bool = False,
    echo: bool = True,
    env: Mapping[str, str] | None = None,
) -> None:
    """Run ``uv`` with the given arguments.

    Args:
        ctx: Invoke execution context.
        args: Arguments following the `uv` executable.
        dry_run: Print the command instead of running it.
        echo: Echo the command before running it.
        env: Extra environment variables for the call.
    """
    command = shlex.join(("uv", *args))
    if dry_run:
        print(f"[dry-run] {command}")
        return
    run_env = dict(ctx.config.run.env or {})
    run_env.update(env or {})
    ctx.run(command, echo=echo, pty=True, env=run_env)


@task(help={"dev": "Install the dev extra (pytest, ruff, mypy, invoke)."})
def sync(ctx: Context, dev: bool = True) -> None:
    """Create or refresh the uv environment for projopen."""
    _uv(ctx, ["sync", "--extra", "dev"] if dev else ["sync"])


@task(help={"clean": "Empty dist/ first."})
def build(ctx: Context, clean: bool = False) -> None:
    """Build the projopen sdist and wheel into `dist/`.

    Args:
        ctx: Invoke execution context.
        clean: Remove previous artifacts before building.
    """
    if clean and DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)
    _uv(ctx, ["build"])


@task(
    help={
        "part": "Version component to bump (major, minor, patch).",
        "value": "Exact version to set instead of bumping.",
        "dry_run": "Show the new version without editing pyproject.toml.",
    }
)
def bump_version(
    ctx: Context, part: str = "patch", value: str | None = None, dry_run: bool = False
) -> None:
    """Change the version recorded in pyproject.toml."""
    args = ["version", value] if value else ["version", "--bump", part]
    if dry_run:
        args.append("--dry-run")
    _uv(ctx, args)


@task(
    help={
        "part": "Version component to bump before building.",
        "index_url": "Upload target; defaults to PyPI.",
        "token": "API token for the upload. Not echoed.",
        "dry_run": "Print each step without running it.",
    }
)
def release(
    ctx: Context,
    part: str = "patch",
    index_url: str | None = None,
    token: str | None = None,
    dry_run: bool = False,
) -> None:
    """Bump the version, rebuild `dist/`, and upload it.

    Args:
        ctx: Invoke execution context.
        part: Version component passed to `bump_version`.
        index_url: Package index to upload to.
        token: API token for the upload.
        dry_run: Print the commands instead of running them.
    """
    ctx.invoke(bump_version, part=part, dry_run=dry_run)
    if not dry_run:
        ctx.invoke(build, clean=True)
    args = ["publish"]
    if index_url:
        args.extend(["--index-url", index_url])
    if token:
        args.extend(["--token", token])
    _uv(ctx, args, dry_run=dry_run, echo=token is None)


@task(
    help={
        "k": "pytest -k expression, e.g. 'scanner or matcher'.",
        "path": "Test file or directory; defaults to tests/.",
        "options": "Extra pytest flags, passed through as-is.",
    }
)
def tests(ctx: Context, k: str = "", path: str = "tests", options: str = "") -> None:
    """Run the pytest suite.

    Args:
        ctx: Invoke execution context.
        k: Expression selecting tests by name.
        path: Where pytest should collect from.
        options: Additional pytest arguments.
    """
    args = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    args.extend(shlex.split(options))
    args.append(path)
    _uv(ctx, args)


@task(help={"fix": "Let ruff apply safe fixes.", "check_format": "Also run ruff format --check."})
def lint(ctx: Context, fix: bool = False, check_format: bool = False) -> None:
    """Lint the package, tests and this file with ruff."""
    if check_format:
        _uv(ctx, ["run", "ruff", "format", "--check", *LINT_TARGETS])
    _uv(ctx, ["run", "ruff", "check", *LINT_TARGETS, *(["--fix"] if fix else [])])


@task
def mypy(ctx: Context) -> None:
    """Type-check `src/projopen` with the settings in pyproject.toml."""
    _uv(ctx, ["run", "mypy", "src"])


@task(help={"source": "Directory to register as a source; defaults to the repo's parent."})
def smoke(ctx: Context, source: str = "") -> None:
    """Run projopen against a throwaway home directory.

    Registers one source, then prints the JSON listing and the search
    suggestions, leaving the real ``~/.projopen`` untouched.

    Args:
        ctx: Invoke execution context.
        source: Directory scanned for projects.
    """
    target = source or str(PROJECT_ROOT.parent)
    with tempfile.TemporaryDirectory(prefix="projopen-smoke-") as home:
        env = {"HOME": home}
        _uv(ctx, ["run", "projopen", "sources", "add", target, "--depth", "1"], env=env)
        _uv(ctx, ["run", "projopen", "list", "--json"], env=env)
        _uv(ctx, ["run", "projopen", "suggest"], env=env)


@task
def ci(ctx: Context) -> None:
    """Run the same checks as CI: format, lint, mypy, tests."""
    ctx.invoke(lint, check_format=True)
    ctx.invoke(mypy)
    ctx.invoke(tests)


namespace = Collection(sync, build, bump_version, release, tests, lint, mypy, smoke, ci)
