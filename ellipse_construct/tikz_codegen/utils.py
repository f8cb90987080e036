import re
import unicodedata

_SPECIALS = {
    '\\': r'\textbackslash{}',
    '&': r'\&',
    '%': r'\%',
    '#': r'\#',
    '_': r'\_',
    '{': r'\{',
    '}': r'\}',
    '~': r'\textasciitilde{}',
    '^': r'\textasciicircum{}',
    '$': r'\$',
    '<': r'\textless{}',
    '>': r'\textgreater{}',
}

_PRIME_RE = re.compile(r"^([A-Za-z0-9]+)('+)$")


def _strip_combining(text: str) -> str:
    text = unicodedata.normalize('NFC', text)
    return ''.join(ch for ch in text if unicodedata.category(ch) != 'Mn')


def latex_escape_text(s: str) -> str:
    """Escape free text for a TikZ node body."""
    return ''.join(_SPECIALS.get(c, c) for c in _strip_combining(s))


def format_point_label(label: str) -> str:
    """Typeset point names as math: ``A'`` -> ``$A'$``, ``F1`` -> ``$F_{1}$``."""
    m = _PRIME_RE.match(label)
    base, primes = (m.group(1), m.group(2)) if m else (label, '')
    if not base.isalnum():
        return latex_escape_text(label)
    if base[0].isalpha() and len(base) > 1 and base[1:].isdigit():
        base = f'{base[0]}_{{{base[1:]}}}'
    return f'${base}{primes}$'
