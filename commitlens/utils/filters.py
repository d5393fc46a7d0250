"""Path filtering and language detection helpers."""

import re
from pathlib import PurePosixPath
from re import Pattern

# Directories never searched when resolving suggestion paths
EXCLUDED_DIRECTORIES: frozenset[str] = frozenset(
    {
        ".git",
        "node_modules",
        "__pycache__",
        "venv",
        ".venv",
        ".mypy_cache",
        ".pytest_cache",
        ".tox",
        ".idea",
        ".vscode",
    }
)

# Patterns for files that should be left out of review prompts
EXCLUDED_PATTERNS: list[Pattern[str]] = [
    # Lock files
    re.compile(r"package-lock\.json$"),
    re.compile(r"yarn\.lock$"),
    re.compile(r"Pipfile\.lock$"),
    re.compile(r"poetry\.lock$"),
    re.compile(r"uv\.lock$"),
    re.compile(r"Gemfile\.lock$"),
    re.compile(r"pnpm-lock\.yaml$"),
    re.compile(r"composer\.lock$"),
    # Dependencies
    re.compile(r"(^|/)node_modules/"),
    re.compile(r"(^|/)vendor/"),
    re.compile(r"(^|/)\.?venv/"),
    # Generated code
    re.compile(r"\.generated\.[^/]+$"),
    re.compile(r"\.pb\.go$"),
    re.compile(r"_pb2\.py$"),
    # Minified files
    re.compile(r"\.min\.js$"),
    re.compile(r"\.min\.css$"),
    # Binary/media files
    re.compile(r"\.(png|jpg|jpeg|gif|ico|webp)$"),
    re.compile(r"\.(pdf|zip|tar|gz|rar|7z)$"),
    re.compile(r"\.(ttf|woff|woff2|eot|otf)$"),
]

# Fence languages for suggested code blocks, keyed by file extension
LANGUAGE_BY_EXTENSION: dict[str, str] = {
    "ts": "typescript",
    "js": "javascript",
    "tsx": "tsx",
    "jsx": "jsx",
    "py": "python",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "cs": "csharp",
    "php": "php",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "swift": "swift",
    "kt": "kotlin",
    "scala": "scala",
    "html": "html",
    "css": "css",
    "scss": "scss",
    "less": "less",
    "json": "json",
    "xml": "xml",
    "yaml": "yaml",
    "yml": "yaml",
    "sql": "sql",
    "sh": "bash",
    "bash": "bash",
    "zsh": "zsh",
    "ps1": "powershell",
    "md": "markdown",
    "vue": "vue",
    "svelte": "svelte",
}


def should_review_file(file_path: str) -> bool:
    """Determine if a changed file should be sent for review.

    Args:
        file_path: Repository-relative path using forward slashes

    Returns:
        True if the file should be reviewed, False if it should be excluded
    """
    return all(not pattern.search(file_path) for pattern in EXCLUDED_PATTERNS)


def is_excluded_directory(name: str) -> bool:
    """Check if a directory name is skipped during workspace searches."""
    return name in EXCLUDED_DIRECTORIES


def language_for_path(file_path: str) -> str:
    """Return the code fence language for a file, or "text" when unknown.

    Args:
        file_path: Path to the file

    Returns:
        Language identifier suitable for a markdown code fence
    """
    extension = PurePosixPath(file_path).suffix.lstrip(".").lower()
    return LANGUAGE_BY_EXTENSION.get(extension, "text")
