"""Core constants used across Gitfetch modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path("~/.gitfetch")
DEFAULT_CONFIG_PATH = Path("~/.config/gitfetch/config.json")
WORKSPACE_DIR_NAME = "workspace"
DEFAULT_GITHUB_URL = "https://github.com"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_SANDBOX_TIMEOUT_SECONDS = 300
DEFAULT_CHECKOUT_REVISION = "HEAD"
DEFAULT_TRUST_MODE = "normal"
UNKNOWN_VALUE = "unknown"
HASH_ALGORITHM = "sha256"
READ_BUFFER_SIZE = 8192
SYMLINK_DIGEST_PREFIX = b"symlink:"
HIDDEN_NAME_PREFIX = "."
IGNORED_DIRECTORY_NAMES = ("node_modules", "target")
SCANNED_EXTENSIONS = (".py", ".js", ".sh", ".bash", ".rb", ".pl", ".php", ".rs")
SUSPICIOUS_PATTERNS = (
    ("eval(", "eval() usage"),
    ("exec(", "exec() usage"),
    ("subprocess", "subprocess usage"),
    ("os.system", "os.system usage"),
    ("shell=true", "shell=True"),
    ("/etc/passwd", "password file access"),
    ("rm -rf", "recursive deletion"),
    ("curl", "network request"),
    ("base64.b64decode", "base64 decode"),
    ("authorized_keys", "SSH keys access"),
    ("bitcoin", "crypto-related"),
)
SANDBOX_EXECUTABLE = "bwrap"
SANDBOX_WORKSPACE_MOUNT = "/workspace"
SANDBOX_PATH = "/usr/bin:/bin"
SANDBOX_REQUIRED_RO_BINDS = ("/usr",)
SANDBOX_OPTIONAL_RO_BINDS = ("/lib", "/lib64", "/bin", "/sbin", "/etc")
SANDBOX_DEVICE_BINDS = ("/dev/null", "/dev/zero", "/dev/urandom")
GIT_EXECUTABLE = "git"
GIT_CONFIG_OVERRIDES = (
    ("core.hooksPath", "/dev/null"),
    ("core.fsmonitor", "false"),
)
GIT_PROBE_TIMEOUT_SECONDS = 30
SEARCH_RESULT_LIMIT = 10
SEARCH_TIMEOUT_SECONDS = 30
SEARCH_USER_AGENT = "gitfetch/0.18"
SCAN_PREVIEW_LIMIT = 5
