from __future__ import annotations

from review_insights.schemas import ProgrammingLanguage

EXTENSION_TO_LANGUAGE: dict[str, ProgrammingLanguage] = {
    "js": ProgrammingLanguage.JAVASCRIPT,
    "jsx": ProgrammingLanguage.JSX,
    "ts": ProgrammingLanguage.TYPESCRIPT,
    "tsx": ProgrammingLanguage.TSX,
    "py": ProgrammingLanguage.PYTHON,
    "java": ProgrammingLanguage.JAVA,
    "cpp": ProgrammingLanguage.CPP,
    "cc": ProgrammingLanguage.CPP,
    "cxx": ProgrammingLanguage.CPP,
    "c": ProgrammingLanguage.C,
    "go": ProgrammingLanguage.GOLANG,
    "rs": ProgrammingLanguage.RUST,
}

SUPPORTED_EXTENSIONS_TEXT = ".js, .ts, .jsx, .tsx, .py, .java, .cpp, .c, .go, .rs"


def detect_language(file_name: str) -> ProgrammingLanguage | None:
    if not file_name or "." not in file_name:
        return None
    extension = file_name.rsplit(".", 1)[-1].lower()
    return EXTENSION_TO_LANGUAGE.get(extension)


def is_supported_file(file_name: str) -> bool:
    return detect_language(file_name) is not None


def count_lines_of_code(code: str) -> int:
    """Count newline-delimited lines; N newlines means N + 1 lines."""
    return len(code.split("\n"))


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"
