"""Centralized constants for the pmresolver package."""

# Tool directory name - used for .claude/ paths
TOOL_DIR_NAME = ".claude"

# Preference file stored in the project and global tool directories
PREFERENCE_FILENAME = "package-manager.json"
PREFERENCE_FIELD = "packageManager"
PREFERENCE_TIMESTAMP_FIELD = "setAt"

# Environment variable that overrides every other source
ENV_VAR_NAME = "CLAUDE_PACKAGE_MANAGER"

# Project manifest and its package manager hint
MANIFEST_FILENAME = "package.json"
MANIFEST_FIELD = "packageManager"

# Session files written by the lifecycle hooks
SESSIONS_SUBDIR = "sessions"
COMPACTION_LOG_FILENAME = "compaction-log.txt"
