"""
SQL change files.
"""

from schemasupport.models import Statement

# Whitespace and control characters trimmed from both ends of a script
TRIM_CHARS = "\t\v\r\n "


def translate_sql(path: str) -> list[Statement]:
    """
    Read a SQL script as a single statement

    The script is sent as-is (multiple semicolon-separated statements are
    fine) with no parameters, so a literal % needs no escaping. A script
    that is empty after trimming yields no statements.
    """
    with open(path, encoding="utf-8") as f:
        text = f.read().strip(TRIM_CHARS)

    if not text:
        return []
    return [Statement(sql=text)]
