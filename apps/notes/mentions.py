# apps/notes/mentions.py
"""
Wzmianki w treści notatki.

Edytor zapisuje wzmiankę jako
<span data-type="mention" data-id="<id użytkownika>" data-label="...">@Imię</span>;
kolejność atrybutów bywa różna, więc szukamy obu w obrębie jednego znacznika.
"""
import re
from typing import List

MENTION_TAG = re.compile(r'<span\b[^>]*\bdata-type="mention"[^>]*>', re.IGNORECASE)
MENTION_ID = re.compile(r'\bdata-id="(\d+)"')


def extract_mentioned_ids(content: str) -> List[int]:
    """ID wspomnianych użytkowników w kolejności wystąpienia, bez duplikatów."""
    ids = []
    for tag in MENTION_TAG.findall(content or ""):
        match = MENTION_ID.search(tag)
        if match:
            user_id = int(match.group(1))
            if user_id not in ids:
                ids.append(user_id)
    return ids
