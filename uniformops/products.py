from typing import Dict, List, Optional
from rapidfuzz import process, fuzz, utils

from .backend import Row

def suggest_product(text: str, catalog: List[Row], school: Optional[str] = None, score_cutoff: int = 75) -> Dict:
    """Closest catalog product for a parsed product name.

    Products of the order's school are preferred; the whole catalog is used
    when the school has none.
    """
    rows = [p for p in catalog if school and p.get("school") == school] or catalog
    choices = {}
    for p in rows:
        choices.setdefault(p["name"], p)

    best = process.extractOne(
        text,
        list(choices.keys()),
        scorer=fuzz.WRatio,
        processor=utils.default_process,
    ) if text and choices else None

    if best and best[1] >= score_cutoff:
        prod = choices[best[0]]
        return {"product_id": prod["id"], "name": prod["name"], "price": float(prod.get("price") or 0), "score": best[1]}

    return {"product_id": None, "name": text, "price": None, "score": best[1] if best else 0}
