"""
CodeVault — Language Labels

Snippets carry a free-form language label. The popular list feeds the
language picker; anything else is accepted as a custom label.
"""

from typing import List

from core.errors import ValidationError


POPULAR_LANGUAGES = [
    "JavaScript", "Python", "Java", "C++", "C#", "TypeScript",
    "Ruby", "Go", "Rust", "PHP", "Swift", "Kotlin",
    "HTML", "CSS", "SQL", "Bash", "PowerShell",
    "Skript", "Lua", "Perl", "R", "Scala", "Haskell"
]

MAX_LANGUAGE_LENGTH = 50

PLACEHOLDERS = {
    "skript": '# Write your Skript code here...\non load:\n    broadcast "Hello World!"',
    "javascript": '// Write your JavaScript code here...\nconsole.log("Hello World!");',
    "html": (
        "<!-- Write your HTML code here... -->\n"
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        "    <title>My Page</title>\n"
        "</head>\n"
        "<body>\n"
        "    <h1>Hello World!</h1>\n"
        "</body>\n"
        "</html>"
    ),
}


def search_languages(query: str = "") -> List[str]:
    """
    Case-insensitive substring filter over the popular list.
    """

    needle = (query or "").strip().lower()
    if not needle:
        return list(POPULAR_LANGUAGES)

    return [lang for lang in POPULAR_LANGUAGES if needle in lang.lower()]


def normalize_language(label) -> str:
    if not isinstance(label, str) or not label.strip():
        raise ValidationError("language is required")

    label = label.strip()
    if len(label) > MAX_LANGUAGE_LENGTH:
        raise ValidationError(
            f"language must be at most {MAX_LANGUAGE_LENGTH} characters"
        )

    return label


def placeholder_for(language: str) -> str:
    return PLACEHOLDERS.get((language or "").strip().lower(), "")
