"""
Parser heurístico de texto libre → seed de receta.

Reglas conservadoras y explicables, por línea. Determinístico, O(n) y total:
nunca lanza; ante texto vacío o que no parece receta devuelve listas vacías y
confianza 0.

Caminos
-------
- "headers": hay encabezados explícitos ("Ingredients", "Instructions",
  "Directions", "Steps", "Method"...). Lo que sigue a cada encabezado va a su
  lista.
- "markers": no hay encabezados. Cada línea se clasifica por sus marcadores:
  numeradas o con verbo imperativo → instrucciones; viñetas o cantidad/unidad
  al inicio → ingredientes.
- "empty": no había líneas.

`mode` es solo diagnóstico; no se usa para nada que afecte la validez.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, Tuple

from .config import get_settings
from .domain_models import ParseResult

logger = logging.getLogger(__name__)


# ============================================================
# Patrones
# ============================================================

INGREDIENT_HEADER = re.compile(
    r"^#*\s*(ingredients?|ingredient\s+list)\s*:?$", re.IGNORECASE
)
INSTRUCTION_HEADER = re.compile(
    r"^#*\s*(instructions?|directions?|method|steps?|preparation)\s*:?$", re.IGNORECASE
)

BULLET_PREFIX = re.compile(r"^[-*•–]\s+")
NUMBERED_PREFIX = re.compile(r"^(?:step\s+)?\d+\s*[.):]\s+", re.IGNORECASE)

UNIT_TOKENS = re.compile(
    r"\b(cups?|tbsps?|tablespoons?|tsps?|teaspoons?|oz|ounces?|lbs?|pounds?|g|grams?|kg|"
    r"ml|l|liters?|litres?|cloves?|pieces?|slices?|cans?|packages?|pinch(?:es)?|dash(?:es)?|"
    r"sticks?|bunch(?:es)?|sprigs?|handfuls?)\b",
    re.IGNORECASE,
)

# "2 eggs", "1/2 cup", "1 1/2 cups", "1.5 kg", "½ tsp", "200g flour"
QUANTITY_PREFIX = re.compile(
    r"^(\d+\s+\d+/\d+|\d+\s*/\s*\d+|\d+(?:[.,]\d+)?|[½⅓⅔¼¾⅛])(?:\s|[a-zA-Z]|$)"
)

IMPERATIVE_VERBS = frozenset({
    "add", "arrange", "bake", "beat", "blend", "boil", "bring", "brown", "brush",
    "chill", "chop", "combine", "cook", "cool", "cover", "crack", "cut", "dice",
    "dissolve", "drain", "drizzle", "fill", "flip", "fold", "fry", "garnish",
    "grate", "grease", "grill", "heat", "knead", "layer", "let", "line", "marinate",
    "mash", "melt", "microwave", "mince", "mix", "peel", "place", "pour", "preheat",
    "put", "reduce", "refrigerate", "remove", "repeat", "rest", "rinse", "roast",
    "roll", "saute", "sauté", "season", "serve", "set", "shape", "simmer", "slice",
    "soak", "spread", "sprinkle", "steam", "stir", "strain", "stuff", "taste",
    "toast", "top", "toss", "transfer", "turn", "wash", "whisk", "wrap",
})

# Señales que suman confianza
HEADERS_BASE = 0.5
MARKERS_BASE = 0.3
HEADER_SIGNAL = 0.15
BOTH_LISTS_SIGNAL = 0.1
CONSISTENT_MARKERS_SIGNAL = 0.1


# ============================================================
# Helpers de línea
# ============================================================

def normalize_lines(text: str) -> List[str]:
    """Normaliza saltos de línea y devuelve líneas recortadas no vacías."""
    return [
        line.strip()
        for line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        if line.strip()
    ]


def strip_list_prefix(line: str) -> str:
    """Quita viñetas ("- ", "* ", "• ") y numeración ("1. ", "2) ")."""
    stripped = BULLET_PREFIX.sub("", line.strip(), count=1)
    stripped = NUMBERED_PREFIX.sub("", stripped, count=1)
    return stripped.strip()


def is_header(line: str) -> bool:
    return bool(INGREDIENT_HEADER.match(line) or INSTRUCTION_HEADER.match(line))


def is_list_marker(line: str) -> bool:
    return bool(BULLET_PREFIX.match(line) or NUMBERED_PREFIX.match(line))


def is_numbered(line: str) -> bool:
    return bool(NUMBERED_PREFIX.match(line))


def starts_with_quantity(content: str) -> bool:
    return bool(QUANTITY_PREFIX.match(content))


def starts_with_imperative(content: str) -> bool:
    first = re.split(r"[\s,.:;!]+", content.strip(), maxsplit=1)[0].lower()
    return first in IMPERATIVE_VERBS


def is_ingredient_like(line: str) -> bool:
    """
    Heurística de ingrediente: cantidad al inicio, unidad, o viñeta que no
    empieza con verbo imperativo. Las líneas numeradas no cuentan.
    """
    if is_numbered(line):
        return False
    content = strip_list_prefix(line)
    if not content:
        return False
    if starts_with_quantity(content):
        return True
    if starts_with_imperative(content):
        return False
    if BULLET_PREFIX.match(line):
        return True
    return bool(UNIT_TOKENS.search(content))


def classify_line(line: str) -> Optional[str]:
    """
    Clasificación por marcadores (camino "markers").

    Returns:
        "ingredient" | "instruction" | None si la línea no da señales.
    """
    if is_numbered(line):
        return "instruction"
    content = strip_list_prefix(line)
    if not content:
        return None
    if starts_with_quantity(content):
        return "ingredient"
    if starts_with_imperative(content):
        return "instruction"
    if BULLET_PREFIX.match(line):
        return "ingredient"
    if UNIT_TOKENS.search(content):
        return "ingredient"
    return None


def _is_title_candidate(line: str, max_length: int) -> bool:
    return len(line) <= max_length and not is_list_marker(line) and not is_header(line)


def _consistent(lines: List[str], predicate) -> bool:
    return bool(lines) and all(predicate(line) for line in lines)


# ============================================================
# Caminos
# ============================================================

def _parse_with_headers(lines: List[str], max_length: int) -> ParseResult:
    has_ing_header = any(INGREDIENT_HEADER.match(l) for l in lines)
    has_ins_header = any(INSTRUCTION_HEADER.match(l) for l in lines)

    preamble: List[str] = []
    raw_ingredients: List[str] = []
    raw_instructions: List[str] = []
    section = "preamble"

    for line in lines:
        if INGREDIENT_HEADER.match(line):
            section = "ingredients"
            continue
        if INSTRUCTION_HEADER.match(line):
            section = "instructions"
            continue

        # Solo "Ingredients:" → la primera línea que no parece ingrediente
        # abre las instrucciones.
        if (
            section == "ingredients"
            and not has_ins_header
            and raw_ingredients
            and not is_ingredient_like(line)
        ):
            section = "instructions"

        if section == "preamble":
            preamble.append(line)
        elif section == "ingredients":
            raw_ingredients.append(line)
        else:
            raw_instructions.append(line)

    title: Optional[str] = None
    for line in preamble:
        if _is_title_candidate(line, max_length):
            title = line
            break

    # Solo "Instructions:" → líneas tipo ingrediente antes del encabezado
    if not has_ing_header:
        raw_ingredients = [l for l in preamble if l != title and is_ingredient_like(l)]

    ingredients = [c for c in (strip_list_prefix(l) for l in raw_ingredients) if c]
    instructions = [c for c in (strip_list_prefix(l) for l in raw_instructions) if c]

    if not ingredients and not instructions:
        return ParseResult(title, [], [], 0.0, "headers")

    confidence = HEADERS_BASE
    if has_ing_header:
        confidence += HEADER_SIGNAL
    if has_ins_header:
        confidence += HEADER_SIGNAL
    if ingredients and instructions:
        confidence += BOTH_LISTS_SIGNAL
    if _consistent(raw_ingredients, is_ingredient_like) or _consistent(raw_instructions, is_numbered):
        confidence += CONSISTENT_MARKERS_SIGNAL

    return ParseResult(title, ingredients, instructions, round(min(confidence, 1.0), 2), "headers")


def _parse_with_markers(lines: List[str], max_length: int) -> ParseResult:
    classified: List[Tuple[str, Optional[str]]] = [(l, classify_line(l)) for l in lines]

    # el título solo puede aparecer antes de la primera línea clasificada
    title: Optional[str] = None
    for line, kind in classified:
        if kind is not None:
            break
        if _is_title_candidate(line, max_length):
            title = line
            break

    raw_ingredients: List[str] = []
    raw_instructions: List[str] = []
    for line, kind in classified:
        if kind == "ingredient":
            raw_ingredients.append(line)
        elif kind == "instruction":
            raw_instructions.append(line)
        elif raw_instructions and line != title:
            # prosa después del primer paso: continúa las instrucciones
            raw_instructions.append(line)

    ingredients = [c for c in (strip_list_prefix(l) for l in raw_ingredients) if c]
    instructions = [c for c in (strip_list_prefix(l) for l in raw_instructions) if c]

    if not ingredients and not instructions:
        return ParseResult(title, [], [], 0.0, "markers")

    confidence = MARKERS_BASE
    if ingredients:
        confidence += 0.05
    if instructions:
        confidence += 0.05
    if ingredients and instructions:
        confidence += BOTH_LISTS_SIGNAL
    if _consistent(raw_ingredients, lambda l: bool(BULLET_PREFIX.match(l))) or _consistent(
        raw_instructions, is_numbered
    ):
        confidence += CONSISTENT_MARKERS_SIGNAL

    return ParseResult(title, ingredients, instructions, round(min(confidence, 1.0), 2), "markers")


# ============================================================
# Entrada principal
# ============================================================

def parse_freeform(text: Any, title_max_length: Optional[int] = None) -> ParseResult:
    """
    Convierte texto libre de receta en `ParseResult`.

    Args:
        text:
            Texto arbitrario (cualquier largo, vacío, o que no sea receta).
            Si no es str se trata como vacío.
        title_max_length:
            Largo máximo de una línea para ser título. Por defecto
            `Settings.title_max_length`.

    Returns:
        ParseResult con confianza en [0, 1]. Misma entrada → mismo resultado.
    """
    max_length = title_max_length or get_settings().title_max_length

    lines = normalize_lines(text) if isinstance(text, str) else []
    if not lines:
        return ParseResult(None, [], [], 0.0, "empty")

    if any(is_header(line) for line in lines):
        result = _parse_with_headers(lines, max_length)
    else:
        result = _parse_with_markers(lines, max_length)

    logger.debug(
        "parse_freeform: mode=%s confidence=%.2f ingredients=%d instructions=%d",
        result.mode,
        result.confidence,
        len(result.ingredients),
        len(result.instructions),
    )
    return result
