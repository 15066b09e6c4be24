from ..schemas import ParsedItem
from .rules import (
    PRODUCT_NOISE_RE, QUANTITY_RE, SIZE_RE, STANDARD_SIZE, TRAILING_SIZE_RE, UNDEFINED_ITEM,
)


def _cut(text: str, start: int, end: int) -> str:
    return (text[:start] + text[end:]).strip()


def parse_item_line(raw: str) -> ParsedItem:
    """Split one raw item line, e.g. ``"2 vestidos tam 4"``, into quantity/product/size."""
    rest = raw.strip()
    quantity = 1
    mqty = QUANTITY_RE.match(rest)
    if mqty:
        quantity = int(mqty.group(1)) or 1
        rest = rest[mqty.end():]

    size = STANDARD_SIZE
    msize = SIZE_RE.search(rest)
    if msize:
        size = msize.group(1).upper()
        rest = _cut(rest, msize.start(), msize.end())
    else:
        mtrail = TRAILING_SIZE_RE.search(rest)
        if mtrail:
            size = mtrail.group(1)
            rest = _cut(rest, mtrail.start(), mtrail.end())

    product = PRODUCT_NOISE_RE.sub("", rest).strip() or UNDEFINED_ITEM
    return ParsedItem(quantity=quantity, product=product, size=size)
