"""Programming language guessed from a file extension."""

from pathlib import PurePosixPath

DEFAULT_LANGUAGE = "Other"

EXTENSION_LANGUAGES = {
    "c": "C/C++",
    "cpp": "C/C++",
    "h": "C/C++",
    "json": "JSON",
    "js": "JavaScript",
    "gs": "JavaScript",
    "java": "Java",
    "py": "Python",
    "md": "Markdown",
    "yaml": "YAML",
    "php": "PHP",
    "go": "Go",
    "rb": "Ruby",
    "m": "Objective-C",
    "swift": "Swift",
    "css": "CSS",
}


def language_for(path: str) -> str:
    extension = PurePosixPath(path).suffix.lstrip(".").lower()
    return EXTENSION_LANGUAGES.get(extension, DEFAULT_LANGUAGE)
