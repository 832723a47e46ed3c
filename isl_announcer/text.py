"""Text helpers used before phrase matching."""

import re
from typing import List, Optional

_DIGIT = re.compile(r"(\d)")
_STRIPPED_PUNCTUATION = re.compile(r"[.,]")

DIGIT_WORDS = {
    "hi": {
        "0": "शून्य", "1": "एक", "2": "दो", "3": "तीन", "4": "चार",
        "5": "पांच", "6": "छह", "7": "सात", "8": "आठ", "9": "नौ",
    },
    "mr": {
        "0": "शून्य", "1": "एक", "2": "दोन", "3": "तीन", "4": "चार",
        "5": "पाच", "6": "सहा", "7": "सात", "8": "आठ", "9": "नऊ",
    },
    "gu": {
        "0": "શૂન્ય", "1": "એક", "2": "બે", "3": "ત્રણ", "4": "ચાર",
        "5": "પાંચ", "6": "છ", "7": "સાત", "8": "આઠ", "9": "નવ",
    },
}


def normalize_digits(text: str) -> str:
    """Surround every digit with spaces so each digit becomes its own token.

    ``"Train 12"`` becomes ``"Train  1  2 "``.
    """
    return _DIGIT.sub(r" \1 ", text)


def tokenize(text: str) -> List[str]:
    """Lowercase, drop ``.`` and ``,`` and split on whitespace runs."""
    return _STRIPPED_PUNCTUATION.sub("", text.lower()).split()


def spell_digits(number: str, lang: str) -> Optional[str]:
    """Spell a train number digit by digit in the given language.

    Characters without a spelling are kept as-is.

    Returns:
        Space-separated digit words, or None if there is no digit map for
        ``lang``.
    """
    words = DIGIT_WORDS.get(lang)
    if words is None:
        return None
    return " ".join(words.get(ch, ch) for ch in str(number))
