"""Conversion of snake_case column names to camelCase."""


def sql_column_to_hump_style(text: str) -> str:
    """Drop underscores and upper-case the character following each run of them."""
    parts: list[str] = []
    previous = ""
    for position, char in enumerate(text):
        if position > 0 and previous == "_" and char != "_":
            parts.append(char.upper())
        elif char != "_":
            parts.append(char)
        previous = char
    return "".join(parts)