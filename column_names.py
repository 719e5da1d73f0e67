def get_column_name(index: int) -> str:
    """Spreadsheet-style header for a zero-based column index (A..Z, AA, AB..)."""
    index = max(0, int(index))
    name = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        name = chr(ord("A") + rem) + name
    return name
