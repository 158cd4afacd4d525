# src/services/ids.py
import hashlib
import re

_RECIPE_ID_RE = re.compile(r"^[0-9a-f]{64}$")


def canonical_hash(canonical_url: str) -> str:
    """SHA-256 hex digest da URL canonica; usado como id da receita."""
    return hashlib.sha256(canonical_url.encode("utf-8")).hexdigest()


def is_recipe_id(value: str) -> bool:
    return bool(_RECIPE_ID_RE.match(value or ""))
