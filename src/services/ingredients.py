# src/services/ingredients.py
import re

# Opcoes fixas oferecidas pelo editor de ingredientes e pelo formulario de tags
UNIT_OPTIONS = ("g", "ml", "大さじ", "小さじ", "つ", "人分", "適量", "秒")
TAG_OPTIONS = ("レンジ", "フライパン", "鍋", "オーブン", "時短", "じっくり", "作り置き")

_DASHES_RE = re.compile(r"[‐-―−\-]")
_NOT_AMOUNT_RE = re.compile(r"[^0-9/.\s]")
_WHITESPACE_RE = re.compile(r"\s+")

_AMOUNT_PATTERNS = (
    re.compile(r"^[0-9]+(\.[0-9]+)?$"),
    re.compile(r"^[0-9]+/[1-9][0-9]*$"),
    re.compile(r"^[0-9]+\s+[0-9]+/[1-9][0-9]*$"),
)


def normalize_amount(raw: str) -> str:
    """Remove tracos e qualquer caractere que nao seja digito, '/', '.' ou espaco."""
    value = _DASHES_RE.sub("", raw or "")
    value = _NOT_AMOUNT_RE.sub("", value)
    return _WHITESPACE_RE.sub(" ", value).strip()


def is_valid_amount(value: str) -> bool:
    """Aceita vazio, inteiro, decimal, fracao ('1/2') ou fracao mista ('1 1/2')."""
    if value == "":
        return True
    return any(pattern.match(value) for pattern in _AMOUNT_PATTERNS)


def normalize_tags(values: list[str]) -> list[str]:
    out: list[str] = []
    for item in values:
        text = str(item).strip()
        if text and text not in out:
            out.append(text)
    return out
