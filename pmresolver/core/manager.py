"""Package manager definitions and specifications.

This module defines the closed set of package managers pmresolver knows
about, and the commands each of them uses for common project tasks.
"""

import os
import shutil
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from pmresolver.constants import ENV_VAR_NAME
from pmresolver.exceptions import InvalidCandidateError


class PackageManager(Enum):
    """Package managers supported by pmresolver.

    Definition order is the detection priority: it breaks ties between
    several lock files and orders the installed-executable fallback.
    """

    PNPM = "pnpm"
    BUN = "bun"
    YARN = "yarn"
    NPM = "npm"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackageManagerSpec:
    """Specification for a package manager.

    Defines how to detect the manager in a project and how to spell its
    common commands.
    """

    manager: PackageManager
    executable: str  # e.g., "pnpm"
    lock_file: str  # e.g., "pnpm-lock.yaml"
    install_cmd: str
    run_cmd: str  # prefix for running a package.json script
    exec_cmd: str  # prefix for running a one-off binary
    test_cmd: str
    build_cmd: str
    dev_cmd: str

    @property
    def name(self) -> str:
        """The candidate identifier (e.g., "pnpm")."""
        return self.manager.value


PNPM_SPEC = PackageManagerSpec(
    manager=PackageManager.PNPM,
    executable="pnpm",
    lock_file="pnpm-lock.yaml",
    install_cmd="pnpm install",
    run_cmd="pnpm",
    exec_cmd="pnpm dlx",
    test_cmd="pnpm test",
    build_cmd="pnpm build",
    dev_cmd="pnpm dev",
)

BUN_SPEC = PackageManagerSpec(
    manager=PackageManager.BUN,
    executable="bun",
    lock_file="bun.lockb",
    install_cmd="bun install",
    run_cmd="bun run",
    exec_cmd="bunx",
    test_cmd="bun test",
    build_cmd="bun run build",
    dev_cmd="bun run dev",
)

YARN_SPEC = PackageManagerSpec(
    manager=PackageManager.YARN,
    executable="yarn",
    lock_file="yarn.lock",
    install_cmd="yarn",
    run_cmd="yarn",
    exec_cmd="yarn dlx",
    test_cmd="yarn test",
    build_cmd="yarn build",
    dev_cmd="yarn dev",
)

NPM_SPEC = PackageManagerSpec(
    manager=PackageManager.NPM,
    executable="npm",
    lock_file="package-lock.json",
    install_cmd="npm install",
    run_cmd="npm run",
    exec_cmd="npx",
    test_cmd="npm test",
    build_cmd="npm run build",
    dev_cmd="npm run dev",
)

_SPECS: dict[PackageManager, PackageManagerSpec] = {
    spec.manager: spec for spec in (PNPM_SPEC, BUN_SPEC, YARN_SPEC, NPM_SPEC)
}

# Lock file name -> package manager, in detection order
LOCK_FILES: dict[str, PackageManager] = {
    spec.lock_file: spec.manager for spec in _SPECS.values()
}


def get_spec(pm: PackageManager) -> PackageManagerSpec:
    """Get the specification for a package manager."""
    return _SPECS[pm]


def get_all_specs() -> list[PackageManagerSpec]:
    """Get all package manager specifications in detection order."""
    return [_SPECS[pm] for pm in PackageManager]


def parse_package_manager(value: object) -> PackageManager | None:
    """Parse a candidate identifier, ignoring case and surrounding whitespace.

    Args:
        value: Raw value from the environment or a config file

    Returns:
        The matching PackageManager, or None if the value is not a known candidate

    Examples:
        >>> parse_package_manager(" PNPM ")
        <PackageManager.PNPM: 'pnpm'>
        >>> parse_package_manager("cargo") is None
        True
    """
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    if not normalized:
        return None
    try:
        return PackageManager(normalized)
    except ValueError:
        return None


def require_package_manager(value: object) -> PackageManager:
    """Parse a candidate identifier or raise.

    Raises:
        InvalidCandidateError: If the value is not a supported package manager
    """
    if isinstance(value, PackageManager):
        return value
    pm = parse_package_manager(value)
    if pm is None:
        valid = ", ".join(m.value for m in PackageManager)
        raise InvalidCandidateError(
            f"Unknown package manager '{value}'. Must be one of: {valid}"
        )
    return pm


def search_path(env: Mapping[str, str]) -> str:
    """Get the executable search path from an environment snapshot."""
    return env.get("PATH", os.defpath)


def find_executable(pm: PackageManager, env: Mapping[str, str]) -> str | None:
    """Find a package manager's executable on the env's search path.

    Returns:
        Full path to the executable, or None if it is not installed
    """
    return shutil.which(get_spec(pm).executable, path=search_path(env))


def is_available(pm: PackageManager, env: Mapping[str, str]) -> bool:
    """Check if a package manager's executable is on the env's search path."""
    return find_executable(pm, env) is not None


def get_available_package_managers(env: Mapping[str, str]) -> list[PackageManager]:
    """Get the installed package managers, in detection order."""
    return [pm for pm in PackageManager if is_available(pm, env)]


def get_run_command(pm: PackageManager, script: str) -> str:
    """Build the command line for running a package.json script.

    The install, test, build and dev scripts use each manager's dedicated
    spelling; anything else goes through the run prefix.

    Examples:
        >>> get_run_command(PackageManager.NPM, "lint")
        'npm run lint'
        >>> get_run_command(PackageManager.NPM, "test")
        'npm test'
        >>> get_run_command(PackageManager.PNPM, "lint")
        'pnpm lint'
    """
    spec = get_spec(pm)
    builtin = {
        "install": spec.install_cmd,
        "test": spec.test_cmd,
        "build": spec.build_cmd,
        "dev": spec.dev_cmd,
    }
    if script in builtin:
        return builtin[script]
    return f"{spec.run_cmd} {script}"


def get_exec_command(pm: PackageManager, binary: str, args: Sequence[str] = ()) -> str:
    """Build the command line for running a one-off package binary.

    Examples:
        >>> get_exec_command(PackageManager.NPM, "prettier", ["--check", "."])
        'npx prettier --check .'
        >>> get_exec_command(PackageManager.BUN, "tsc")
        'bunx tsc'
    """
    parts = [get_spec(pm).exec_cmd, binary, *args]
    return " ".join(parts)


def get_selection_prompt() -> str:
    """Get the text that explains how to choose a package manager."""
    names = ", ".join(pm.value for pm in PackageManager)
    return "\n".join(
        [
            "No package manager preference found.",
            f"Supported package managers: {names}",
            "",
            "To set your preferred package manager:",
            "  Global:  setup-pm --global pnpm",
            "  Project: setup-pm --project pnpm",
            "",
            f"Or set the {ENV_VAR_NAME} environment variable.",
        ]
    )
