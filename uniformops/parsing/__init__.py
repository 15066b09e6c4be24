from .items import parse_item_line
from .text_parser import OrderAccumulator, finalize, parse_orders, split_lines, step

__all__ = ["OrderAccumulator", "finalize", "parse_item_line", "parse_orders", "split_lines", "step"]
