"""
Compiled-in policies for the four built-in security levels.

These are the single source of truth for built-in levels. Policy documents
on disk may override them, but only after passing the same validation.
"""

from __future__ import annotations

from safeterm._types import SecurityLevel
from safeterm.policy.config import (
    UNLIMITED,
    CommandRule,
    EnvironmentPolicy,
    Limits,
    PathRestriction,
    PolicyConfig,
)

SAFE_PATH_PATTERN = r"^/?[a-zA-Z0-9._/-]+$"

_AGGRESSIVE_COMMANDS: dict[str, CommandRule] = {
    # File operations (read-only)
    "ls": CommandRule("List directory contents", ("-l", "-a", "-la", "-h", "-R", "--help")),
    "cat": CommandRule("Display file contents", ("--help",), requires_file=True),
    "head": CommandRule("Display first lines of file", ("-n", "--help"), requires_file=True),
    "tail": CommandRule("Display last lines of file", ("-n", "--help"), requires_file=True),
    "file": CommandRule("Determine file type", ("--help",), requires_file=True),
    "wc": CommandRule("Word, line, character count", ("-l", "-w", "-c", "--help"), requires_file=True),
    # Directory operations
    "pwd": CommandRule("Print working directory", ("--help",)),
    "find": CommandRule("Find files and directories", ("-name", "-type", "-maxdepth", "--help")),
    "tree": CommandRule("Display directory tree", ("-L", "-a", "--help")),
    # System information (read-only)
    "whoami": CommandRule("Show current user", ("--help",)),
    "id": CommandRule("Show user and group IDs", ("--help",)),
    "uname": CommandRule("System information", ("-a", "-r", "-s", "--help")),
    "date": CommandRule("Show current date and time", ("--help",)),
    "uptime": CommandRule("Show system uptime", ("--help",)),
    "df": CommandRule("Show disk space usage", ("-h", "--help")),
    "free": CommandRule("Show memory usage", ("-h", "--help")),
    "ps": CommandRule("Show running processes", ("aux", "--help")),
    # Development tools
    "node": CommandRule("Node.js version", ("--version", "--help")),
    "npm": CommandRule("NPM operations (limited)", ("--version", "list", "--help")),
    "git": CommandRule("Git operations (read-only)", ("status", "log", "--oneline", "branch", "diff", "--help")),
    "which": CommandRule("Locate command", ("--help",)),
    "type": CommandRule("Display command type", ("--help",)),
    # Text processing
    "grep": CommandRule("Search text patterns", ("-n", "-i", "-r", "--help"), requires_file=True),
    "sort": CommandRule("Sort lines", ("-n", "-r", "--help"), requires_file=True),
    "uniq": CommandRule("Report unique lines", ("-c", "--help"), requires_file=True),
    # Help and documentation
    "man": CommandRule("Manual pages", ("--help",), requires_file=True),
    "help": CommandRule("Help command", ()),
    "echo": CommandRule("Display text (limited)", ("--help",)),
}

_AGGRESSIVE_PATTERNS: tuple[str, ...] = (
    # Command injection
    r"[;&|`$(){}]",
    # File mutation
    r"\brm\b|\bmv\b|\bcp\b|\btouch\b|\bmkdir\b|\brmdir\b",
    # Network access
    r"\bcurl\b|\bwget\b|\bssh\b|\bscp\b|\brsync\b|\bftp\b|\btelnet\b",
    # Privilege and ownership
    r"\bsudo\b|\bsu\b|\bchmod\b|\bchown\b|\bmount\b|\bumount\b",
    # Process control
    r"\bkill\b|\bkillall\b|\bnohup\b|\bbg\b|\bfg\b|\bjobs\b",
    # Package management
    r"\bapt\b|\byum\b|\bpip\b|\binstall\b|\bremove\b|\bupdate\b|\bupgrade\b",
    # Editors and interactive tools
    r"\bvi\b|\bvim\b|\bnano\b|\bemacs\b|\btop\b|\bhtop\b|\bless\b|\bmore\b",
    # Shell builtins
    r"\bsource\b|\b\.\b|\bexport\b|\balias\b|\bunalias\b|\bhistory\b",
    # Redirection
    r"[<>]",
    # Globbing
    r"[*?\[\]]",
)

_MEDIUM_COMMANDS: dict[str, CommandRule] = {
    # File operations (expanded)
    "ls": CommandRule("List directory contents", ("-l", "-a", "-la", "-h", "-R", "-1", "-F", "-t", "-S", "--help")),
    "cat": CommandRule("Display file contents", ("-n", "-b", "-s", "--help"), requires_file=True),
    "head": CommandRule("Display first lines of file", ("-n", "-c", "--help"), requires_file=True),
    "tail": CommandRule("Display last lines of file", ("-n", "-c", "-f", "--help"), requires_file=True),
    "file": CommandRule("Determine file type", ("--help",), requires_file=True),
    "wc": CommandRule("Word, line, character count", ("-l", "-w", "-c", "--help"), requires_file=True),
    "pwd": CommandRule("Print working directory", ("--help",)),
    "find": CommandRule("Find files and directories", ("-name", "-type", "-maxdepth", "--help")),
    "tree": CommandRule("Display directory tree", ("-L", "-a", "--help")),
    "whoami": CommandRule("Show current user", ("--help",)),
    "id": CommandRule("Show user and group IDs", ("--help",)),
    "uname": CommandRule("System information", ("-a", "-r", "-s", "--help")),
    "date": CommandRule("Show current date and time", ("--help",)),
    "uptime": CommandRule("Show system uptime", ("--help",)),
    "df": CommandRule("Show disk space usage", ("-h", "--help")),
    "free": CommandRule("Show memory usage", ("-h", "--help")),
    "ps": CommandRule("Process status", ("aux", "ef", "-u", "-p", "--help")),
    "netstat": CommandRule("Network statistics", ("-tuln", "-r", "--help")),
    "lsof": CommandRule("List open files", ("-i", "-p", "-u", "--help")),
    # Text processing (expanded)
    "grep": CommandRule(
        "Search text patterns",
        ("-n", "-i", "-r", "-v", "-c", "-l", "-w", "-x", "-E", "-F", "--help"),
        requires_file=True,
    ),
    "sed": CommandRule("Stream editor", ("-n", "-e", "-f", "--help"), requires_file=True),
    "awk": CommandRule("Pattern scanning and processing", ("-F", "-v", "--help"), requires_file=True),
    "sort": CommandRule("Sort lines", ("-n", "-r", "--help"), requires_file=True),
    "uniq": CommandRule("Report unique lines", ("-c", "--help"), requires_file=True),
    # Development tools (expanded)
    "node": CommandRule("Node.js runtime", ("--version", "--help", "-e", "-p", "--eval", "--print")),
    "npm": CommandRule(
        "NPM operations",
        ("--version", "list", "ls", "info", "view", "search", "outdated", "--help"),
    ),
    "git": CommandRule(
        "Git operations",
        ("status", "log", "--oneline", "branch", "diff", "show", "config", "--help"),
    ),
    "which": CommandRule("Locate command", ("--help",)),
    "type": CommandRule("Display command type", ("--help",)),
    "man": CommandRule("Manual pages", ("--help",), requires_file=True),
    "help": CommandRule("Help command", ()),
    "echo": CommandRule("Display text (limited)", ("--help",)),
}

_MEDIUM_PATTERNS: tuple[str, ...] = (
    r"[;&|`$(){}]",
    r"\brm\b -rf|\brm\b -fr",
    r"\bsudo\b|\bsu\b",
    r"\bkill\b -9|\bkillall\b",
    r"\bchmod\b 777|\bchown\b root",
)

AGGRESSIVE = PolicyConfig(
    level=SecurityLevel.AGGRESSIVE,
    description="Maximum security - suitable for untrusted environments",
    command_rules=_AGGRESSIVE_COMMANDS,
    forbidden_patterns=_AGGRESSIVE_PATTERNS,
    path_restriction=PathRestriction(enabled=True, pattern=SAFE_PATH_PATTERN, max_length=255),
    environment_policy=EnvironmentPolicy.whitelist("PATH", "HOME", "USER", "SHELL"),
    limits=Limits(max_arguments=10, max_command_length=1000, timeout_max=10_000, timeout_default=10_000),
)

MEDIUM = PolicyConfig(
    level=SecurityLevel.MEDIUM,
    description="Balanced security - suitable for trusted development environments",
    command_rules=_MEDIUM_COMMANDS,
    forbidden_patterns=_MEDIUM_PATTERNS,
    path_restriction=PathRestriction(enabled=True, pattern=SAFE_PATH_PATTERN, max_length=1000),
    environment_policy=EnvironmentPolicy.blacklist("PASSWORD", "SECRET", "TOKEN", "KEY", "PRIVATE"),
    limits=Limits(max_arguments=20, max_command_length=2000, timeout_max=30_000, timeout_default=10_000),
)

MINIMAL = PolicyConfig(
    level=SecurityLevel.MINIMAL,
    description="Minimal security - basic safety nets for trusted environments",
    command_rules={},
    forbidden_patterns=(r"\bsudo\b rm -rf /", r"\bchmod\b 777 /"),
    path_restriction=PathRestriction(enabled=False),
    environment_policy=EnvironmentPolicy.passthrough(),
    limits=Limits(max_arguments=100, max_command_length=10_000, timeout_max=300_000, timeout_default=30_000),
)

NONE = PolicyConfig(
    level=SecurityLevel.NONE,
    description="Zero security limits - complete freedom (maximum trust only, also UNSAFE)",
    command_rules={},
    forbidden_patterns=(),
    path_restriction=PathRestriction(enabled=False),
    environment_policy=EnvironmentPolicy.passthrough(),
    limits=Limits(
        max_arguments=UNLIMITED,
        max_command_length=UNLIMITED,
        timeout_max=UNLIMITED,
        timeout_default=UNLIMITED,
    ),
)

BUILTIN_POLICIES: dict[SecurityLevel, PolicyConfig] = {
    SecurityLevel.AGGRESSIVE: AGGRESSIVE,
    SecurityLevel.MEDIUM: MEDIUM,
    SecurityLevel.MINIMAL: MINIMAL,
    SecurityLevel.NONE: NONE,
}


def builtin_policy(level: SecurityLevel) -> PolicyConfig:
    """
    Return the compiled-in policy for a built-in level.

    CUSTOM has no compiled-in policy and maps to AGGRESSIVE.
    """
    return BUILTIN_POLICIES.get(level, AGGRESSIVE)
