"""Core abstractions for pmresolver.

- PackageManager: Enum of supported package managers, in detection order
- PackageManagerSpec: Lock file and command templates for a package manager
- Command helpers: get_run_command, get_exec_command
- Availability probes: is_available, get_available_package_managers
"""

from pmresolver.core.manager import (
    LOCK_FILES,
    PackageManager,
    PackageManagerSpec,
    get_all_specs,
    get_available_package_managers,
    get_exec_command,
    get_run_command,
    get_selection_prompt,
    get_spec,
    find_executable,
    is_available,
    parse_package_manager,
    require_package_manager,
)

__all__ = [
    "PackageManager",
    "PackageManagerSpec",
    "LOCK_FILES",
    "get_spec",
    "get_all_specs",
    "parse_package_manager",
    "require_package_manager",
    "find_executable",
    "is_available",
    "get_available_package_managers",
    "get_run_command",
    "get_exec_command",
    "get_selection_prompt",
]
