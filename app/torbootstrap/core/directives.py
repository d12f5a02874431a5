"""Keyword directive editing for sshd_config style files.

Only the global section is edited: everything from the first ``Match``
line on belongs to conditional blocks and is left alone. Keywords are
matched case-insensitively, as sshd does.
"""

import re


def _directive_pattern(key: str, *, commented: bool) -> re.Pattern[str]:
    prefix = r"#?\s*" if commented else ""
    return re.compile(rf"^\s*{prefix}{re.escape(key)}(?:\s|=|$)", re.IGNORECASE)


def _global_section_end(lines: list[str]) -> int:
    """Index of the first Match line, or the line count if there is none."""
    match_line = re.compile(r"^\s*Match\s", re.IGNORECASE)
    for index, line in enumerate(lines):
        if match_line.match(line):
            return index
    return len(lines)


def remove_directive(lines: list[str], key: str) -> list[str]:
    """Drop every active occurrence of a directive from the global section."""
    pattern = _directive_pattern(key, commented=False)
    end = _global_section_end(lines)
    kept = [line for line in lines[:end] if not pattern.match(line)]
    return kept + lines[end:]


def insert_directive(lines: list[str], key: str, value: str) -> list[str]:
    """Add a directive at the end of the global section.

    The directive goes above any blank lines that close the section, so
    removing and re-inserting it gives back the same file.
    """
    index = _global_section_end(lines)
    while index > 0 and not lines[index - 1].strip():
        index -= 1
    return [*lines[:index], f"{key} {value}", *lines[index:]]


def set_directive(lines: list[str], key: str, value: str) -> list[str]:
    """Set a directive to a value in the global section.

    The first line that sets or comments out the directive is replaced;
    later active or commented occurrences are dropped. If the directive
    does not appear at all it is inserted.

    Args:
        lines: File content split into lines, without line endings.
        key: Directive keyword, e.g. ``PasswordAuthentication``.
        value: Value to set.

    Returns:
        New list of lines.
    """
    pattern = _directive_pattern(key, commented=True)
    end = _global_section_end(lines)

    result: list[str] = []
    replaced = False
    for line in lines[:end]:
        if pattern.match(line):
            if not replaced:
                result.append(f"{key} {value}")
                replaced = True
            continue
        result.append(line)

    if not replaced:
        return insert_directive(lines, key, value)
    return result + lines[end:]
