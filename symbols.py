"""Symbol matching against the dream lexicon."""
from knowledge import DREAM_SYMBOLS
from models import SymbolEntry

MAX_SYMBOLS = 5


def match_symbols(dream_text: str, lexicon=DREAM_SYMBOLS, limit: int = MAX_SYMBOLS) -> list[SymbolEntry]:
    """Return lexicon entries whose token appears anywhere in ``dream_text``.

    Matching is plain, case-sensitive substring containment: no tokenizing
    and no word boundaries, so a token inside a longer word still counts.
    Results follow lexicon order, not position in the text, and are cut to
    the first ``limit`` hits.
    """
    found = []
    for symbol, meaning in lexicon.items():
        if len(found) >= limit:
            break
        if symbol in dream_text:
            found.append(SymbolEntry(symbol=symbol, meaning=meaning))
    return found
