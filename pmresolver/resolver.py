"""Package manager resolution.

Resolution walks an ordered list of sources and stops at the first one
that names a supported package manager:

1. CLAUDE_PACKAGE_MANAGER environment variable
2. Project preference file (.claude/package-manager.json)
3. packageManager field of package.json
4. Lock file in the project root
5. Global preference file (~/.claude/package-manager.json)
6. First package manager whose executable is on PATH

Every source is a probe function over a ResolutionContext, so the order is
data in SOURCES rather than control flow.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import cast

from pmresolver.constants import ENV_VAR_NAME, MANIFEST_FIELD, MANIFEST_FILENAME
from pmresolver.core.manager import (
    LOCK_FILES,
    PackageManager,
    find_executable,
    parse_package_manager,
)
from pmresolver.exceptions import ConfigReadMalformedError, NoPackageManagerAvailableError
from pmresolver.preferences import (
    global_preference_path,
    project_preference_path,
    read_json_object,
    read_preference,
)


class Source(Enum):
    """Where a resolved package manager came from."""

    ENVIRONMENT = "environment"
    PROJECT_CONFIG = "project-config"
    PACKAGE_JSON = "package.json"
    LOCK_FILE = "lock-file"
    GLOBAL_CONFIG = "global-config"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ResolutionContext:
    """Inputs to resolution: the project directory and an environment snapshot."""

    project_root: Path
    env: Mapping[str, str]


@dataclass(frozen=True)
class SourceResult:
    """Outcome of probing one source.

    Attributes:
        source: The probed source
        package_manager: The candidate it yields, None if it does not match
        detail: What was found (raw value, file path, executable path)
        error: Why the source was skipped, if it could not be read
    """

    source: Source
    package_manager: PackageManager | None = None
    detail: str | None = None
    error: str | None = None

    @property
    def matched(self) -> bool:
        """True if this source yields a package manager."""
        return self.package_manager is not None


@dataclass
class DetectionReport:
    """Result of probing every source, for diagnostics."""

    results: list[SourceResult] = field(default_factory=list)

    @property
    def winner(self) -> SourceResult | None:
        """The first matching source, which is what resolve() returns."""
        for result in self.results:
            if result.matched:
                return result
        return None

    @property
    def package_manager(self) -> PackageManager | None:
        """The resolved package manager, or None if nothing matched."""
        winner = self.winner
        return winner.package_manager if winner else None


Probe = Callable[[ResolutionContext], SourceResult]


def _probe_environment(ctx: ResolutionContext) -> SourceResult:
    raw = ctx.env.get(ENV_VAR_NAME)
    if not raw:
        return SourceResult(Source.ENVIRONMENT)
    return SourceResult(
        Source.ENVIRONMENT,
        package_manager=parse_package_manager(raw),
        detail=f"{ENV_VAR_NAME}={raw}",
    )


def _probe_preference_file(source: Source, path: Path) -> SourceResult:
    try:
        raw = read_preference(path)
    except ConfigReadMalformedError as e:
        return SourceResult(source, detail=str(path), error=str(e))
    if raw is None:
        return SourceResult(source)
    return SourceResult(
        source,
        package_manager=parse_package_manager(raw),
        detail=f"{path} ({raw})",
    )


def _probe_project_config(ctx: ResolutionContext) -> SourceResult:
    return _probe_preference_file(
        Source.PROJECT_CONFIG, project_preference_path(ctx.project_root)
    )


def _probe_package_json(ctx: ResolutionContext) -> SourceResult:
    path = ctx.project_root / MANIFEST_FILENAME
    try:
        data = read_json_object(path)
    except ConfigReadMalformedError as e:
        return SourceResult(Source.PACKAGE_JSON, detail=str(path), error=str(e))
    if data is None:
        return SourceResult(Source.PACKAGE_JSON)

    raw = data.get(MANIFEST_FIELD)
    if not isinstance(raw, str) or not raw.strip():
        return SourceResult(Source.PACKAGE_JSON)

    # "pnpm@8.15.0" -> "pnpm"
    name = raw.strip().partition("@")[0]
    return SourceResult(
        Source.PACKAGE_JSON,
        package_manager=parse_package_manager(name),
        detail=raw,
    )


def _probe_lock_file(ctx: ResolutionContext) -> SourceResult:
    for lock_file, pm in LOCK_FILES.items():
        if (ctx.project_root / lock_file).is_file():
            return SourceResult(Source.LOCK_FILE, package_manager=pm, detail=lock_file)
    return SourceResult(Source.LOCK_FILE)


def _probe_global_config(ctx: ResolutionContext) -> SourceResult:
    return _probe_preference_file(Source.GLOBAL_CONFIG, global_preference_path(ctx.env))


def _probe_fallback(ctx: ResolutionContext) -> SourceResult:
    for pm in PackageManager:
        found = find_executable(pm, ctx.env)
        if found:
            return SourceResult(Source.FALLBACK, package_manager=pm, detail=found)
    return SourceResult(Source.FALLBACK)


# Precedence order: earlier sources shadow later ones
SOURCES: list[tuple[Source, Probe]] = [
    (Source.ENVIRONMENT, _probe_environment),
    (Source.PROJECT_CONFIG, _probe_project_config),
    (Source.PACKAGE_JSON, _probe_package_json),
    (Source.LOCK_FILE, _probe_lock_file),
    (Source.GLOBAL_CONFIG, _probe_global_config),
    (Source.FALLBACK, _probe_fallback),
]


def _make_context(cwd: Path | None, env: Mapping[str, str] | None) -> ResolutionContext:
    return ResolutionContext(
        project_root=Path(cwd) if cwd is not None else Path.cwd(),
        env=dict(os.environ) if env is None else env,
    )


def resolve_source(
    cwd: Path | None = None, env: Mapping[str, str] | None = None
) -> SourceResult:
    """Resolve the package manager and report which source decided it.

    Sources after the first match are never probed.

    Args:
        cwd: Project directory (defaults to current working directory)
        env: Environment snapshot (defaults to the process environment)

    Returns:
        The matching SourceResult

    Raises:
        NoPackageManagerAvailableError: If no source matches
    """
    ctx = _make_context(cwd, env)
    for _source, probe in SOURCES:
        result = probe(ctx)
        if result.matched:
            return result

    valid = ", ".join(pm.value for pm in PackageManager)
    raise NoPackageManagerAvailableError(
        f"No package manager configured and none of {valid} found on PATH"
    )


def resolve(cwd: Path | None = None, env: Mapping[str, str] | None = None) -> PackageManager:
    """Resolve which package manager to use for a project.

    Raises:
        NoPackageManagerAvailableError: If no source matches
    """
    # A matched SourceResult always carries a package manager
    return cast(PackageManager, resolve_source(cwd, env).package_manager)


def detect(cwd: Path | None = None, env: Mapping[str, str] | None = None) -> DetectionReport:
    """Probe every source, including those a match would shadow.

    Never raises for missing or unreadable sources; those are recorded in
    the report instead.
    """
    ctx = _make_context(cwd, env)
    return DetectionReport(results=[probe(ctx) for _source, probe in SOURCES])
