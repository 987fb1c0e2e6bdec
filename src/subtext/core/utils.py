"""Utility functions for subtext."""

import re
import unicodedata


def slugify(text: str) -> str:
    """
    Convert text to a slug.

    - Lowercase
    - Unicode normalize (NFKD), drop combining marks
    - Remove punctuation except spaces, hyphens and `/`
    - Convert whitespace to single `-`
    - Collapse repeated `-` and `/`, strip them from both ends

    Examples:
        >>> slugify("Frozen yogurt")
        'frozen-yogurt'
        >>> slugify("the/quick brown/fox")
        'the/quick-brown/fox'
    """
    text = text.lower()

    # Dash variants read as plain hyphens
    text = text.replace('–', '-').replace('—', '-').replace('−', '-')

    text = unicodedata.normalize('NFKD', text)
    text = ''.join(c for c in text if not unicodedata.combining(c))

    text = re.sub(r'[^\w\s/-]', '', text)
    text = text.strip()
    text = re.sub(r'\s+', '-', text)
    text = re.sub(r'-+', '-', text)
    text = re.sub(r'/+', '/', text)

    return text.strip('-/')


def unslugify(slug: str) -> str:
    """
    Turn a slug into a sentence-cased title.

    Examples:
        >>> unslugify("frozen-yogurt")
        'Frozen yogurt'
    """
    words = re.sub(r'[-_/]+', ' ', slug).strip()
    if not words:
        return words
    return words[0].upper() + words[1:]
