"""
Tokenizer for the subsystem rule language.

Rule text is split on whitespace and commas. Braces and parentheses are
single-character tokens, except that a "(" met while an identifier is being
read becomes part of that identifier, along with everything up to its
matching ")". This lets role abbreviations such as "1.3s1(a)" stay whole.
"""

from __future__ import annotations

# Reserved words of the rule language
KEYWORDS = frozenset({"and", "or", "not", "of"})

OPEN_PAREN = "("
CLOSE_PAREN = ")"
OPEN_BRACE = "{"
CLOSE_BRACE = "}"
BRACKETS = frozenset({OPEN_PAREN, CLOSE_PAREN, OPEN_BRACE, CLOSE_BRACE})

SEPARATORS = ","


def tokenize(line: str) -> list[str]:
    """
    Split a rule string into tokens.

    Args:
        line: One rule (comments and the rule name already removed)

    Returns:
        Ordered list of token strings
    """
    tokens: list[str] = []
    buffer: list[str] = []
    # Depth of parentheses embedded in the identifier being built
    depth = 0

    def end_token() -> None:
        if buffer:
            tokens.append("".join(buffer))
            buffer.clear()

    for ch in line:
        if ch.isspace() or ch in SEPARATORS:
            end_token()
        elif ch in (OPEN_BRACE, CLOSE_BRACE, CLOSE_PAREN):
            if depth == 0:
                end_token()
                tokens.append(ch)
            else:
                # Braces inside an embedded group are identifier text.
                buffer.append(ch)
                if ch == CLOSE_PAREN:
                    depth -= 1
        elif ch == OPEN_PAREN:
            if buffer:
                buffer.append(ch)
                depth += 1
            else:
                tokens.append(ch)
        else:
            buffer.append(ch)
    end_token()
    return tokens


def is_number(token: str) -> bool:
    """Check if a token is a threshold count (all digits)."""
    return token.isdecimal()


def is_keyword(token: str) -> bool:
    """Check if a token is a reserved word."""
    return token in KEYWORDS


def is_bracket(token: str) -> bool:
    """Check if a token is a structural bracket."""
    return token in BRACKETS


def is_identifier(token: str) -> bool:
    """Check if a token names a rule in the namespace."""
    return not (is_number(token) or is_keyword(token) or is_bracket(token))


__all__ = [
    "KEYWORDS",
    "BRACKETS",
    "tokenize",
    "is_number",
    "is_keyword",
    "is_bracket",
    "is_identifier",
]
