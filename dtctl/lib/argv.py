"""Argv helpers for alias templates: quote-aware splitting and $N substitution."""


def split_command(command: str) -> list[str]:
    """Split a command string on unquoted whitespace.

    Quote characters are dropped from the token. Quotes do not nest: inside
    single quotes a double quote is literal and vice versa. An unterminated
    quote runs to the end of the string.

    Returns an empty list for empty or all-whitespace input.
    """
    parts: list[str] = []
    current: list[str] = []
    in_single = False
    in_double = False

    for ch in command:
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch.isspace() and not in_single and not in_double:
            if current:
                parts.append("".join(current))
                current = []
        else:
            current.append(ch)

    if current:
        parts.append("".join(current))
    return parts


def substitute_params(token: str, args: list[str], max_used: int = 0) -> tuple[str, int]:
    """Replace $1..$9 in token with values from args.

    Placeholders beyond len(args) are left as-is. Only a single digit is read,
    so "$10" is "$1" followed by "0".

    Returns (substituted token, highest index seen including max_used).
    """
    if "$" not in token:
        return token, max_used

    out: list[str] = []
    i = 0
    n = len(token)
    while i < n:
        ch = token[i]
        if ch == "$" and i + 1 < n and "1" <= token[i + 1] <= "9":
            idx = ord(token[i + 1]) - ord("0")
            max_used = max(max_used, idx)
            if idx <= len(args):
                out.append(args[idx - 1])
            else:
                out.append(token[i : i + 2])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out), max_used
