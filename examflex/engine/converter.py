"""
Mark Converter
Scales raw part marks by their conversion percentage and rounds them
"""
import math
from typing import Dict, Iterable, Mapping, Optional

from examflex.core.constants import RoundingMethod
from examflex.utils import clean_float, non_negative, to_float


def round_mark(value: float, method) -> float:
    """
    Apply a rounding method to a mark.

    Without Fraction rounds half up at .50. Every method is idempotent.
    """
    method = RoundingMethod.parse(method)
    value = clean_float(value)

    if method == RoundingMethod.ALWAYS_DOWN:
        return float(math.floor(value))
    if method == RoundingMethod.ALWAYS_UP:
        return float(math.ceil(value))
    if method == RoundingMethod.WITHOUT_FRACTION:
        whole = math.floor(value)
        return float(whole + 1) if value - whole >= 0.50 else float(whole)
    return value


def obtained_part_mark(part_marks: Mapping[str, Optional[float]], part) -> float:
    """Raw mark for one part, clamped to [0, total_mark]; missing counts as 0"""
    obtained = non_negative(to_float(part_marks.get(part.exam_code_title)))
    if part.total_mark > 0:
        obtained = min(obtained, part.total_mark)
    return obtained


def convert_part(obtained: float, conversion: float) -> float:
    return obtained * conversion / 100


def convert(
    part_marks: Mapping[str, Optional[float]],
    part_configs: Iterable,
    rounding_method=RoundingMethod.AT_ACTUAL,
) -> float:
    """
    Converted mark of a subject.

    Each part is scaled and rounded on its own before summation; a part's
    own rounding_method overrides the subject's. A rounded part never
    exceeds its own converted maximum.
    """
    total = 0.0
    for part in part_configs:
        method = part.rounding_method or rounding_method
        converted = convert_part(obtained_part_mark(part_marks, part), part.conversion)
        part_max = convert_part(part.total_mark, part.conversion)
        total += min(round_mark(converted, method), part_max)
    return clean_float(total)


def converted_max(part_configs: Iterable) -> float:
    """Highest attainable converted mark"""
    return clean_float(sum(convert_part(p.total_mark, p.conversion) for p in part_configs))


def apply_grace(converted: float, grace: float, rounding_method=RoundingMethod.AT_ACTUAL) -> float:
    """Final mark = converted + grace, rounded again"""
    return round_mark(converted + non_negative(grace), rounding_method)


def percentage_of(final_mark: float, max_mark: float) -> float:
    if max_mark <= 0:
        return 0.0
    return final_mark / max_mark * 100


def part_breakdown(part_marks: Mapping[str, Optional[float]], part_configs: Iterable) -> Dict[str, float]:
    """Obtained mark per part code, as used by the pass checks"""
    return {p.exam_code_title: obtained_part_mark(part_marks, p) for p in part_configs}
