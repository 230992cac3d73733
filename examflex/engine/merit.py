"""
Merit Ranking Engine

One global sort and rank pass over the whole class. Grouped outputs are
partitions of that ranked list; an independent per-group ranking is only
computed when explicitly requested and never replaces merit_position.
"""
from collections import OrderedDict
from dataclasses import dataclass, asdict, replace
from functools import reduce
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from examflex.core.constants import (
    GROUPING_FIELDS,
    UNKNOWN_GROUP,
    MeritMetric,
    RankDiscipline,
    ResultStatus,
)
from examflex.utils import group_key, roll_sort_key

DEFAULT_MERIT_TYPE = "total_mark_sequential"


@dataclass(frozen=True)
class MeritType:
    """Ranking metric and ranking discipline, parsed from e.g. 'grade_point_non_sequential'"""
    metric: MeritMetric = MeritMetric.TOTAL_MARK
    discipline: RankDiscipline = RankDiscipline.SEQUENTIAL

    @classmethod
    def parse(cls, raw: Optional[str]) -> "MeritType":
        text = (raw or DEFAULT_MERIT_TYPE).strip().lower().replace(" ", "_").replace("-", "_")

        if "gpa" in text or "grade_point" in text or "gradepoint" in text:
            metric = MeritMetric.GPA
        else:
            metric = MeritMetric.TOTAL_MARK

        if "non_sequential" in text or "nonsequential" in text:
            discipline = RankDiscipline.NON_SEQUENTIAL
        elif "sequential" in text:
            discipline = RankDiscipline.SEQUENTIAL
        else:
            discipline = RankDiscipline.NON_SEQUENTIAL

        return cls(metric=metric, discipline=discipline)

    @property
    def is_sequential(self) -> bool:
        return self.discipline == RankDiscipline.SEQUENTIAL

    @property
    def label(self) -> str:
        return f"{self.metric.value}_{self.discipline.value}"


@dataclass(frozen=True)
class MeritInput:
    """What the ranking needs to know about one student"""
    student_id: Any
    total_mark: float
    gpa: float
    result_status: ResultStatus
    roll: Any = None
    student_name: str = "N/A"
    gpa_without_optional: float = 0.0
    letter_grade: str = "F"
    shift: Any = None
    section: Any = None
    group: Any = None
    gender: Any = None
    religion: Any = None

    @property
    def passed(self) -> bool:
        return self.result_status == ResultStatus.PASS

    def primary(self, merit_type: MeritType) -> float:
        return self.gpa if merit_type.metric == MeritMetric.GPA else self.total_mark

    def secondary(self, merit_type: MeritType) -> float:
        return self.total_mark if merit_type.metric == MeritMetric.GPA else self.gpa

    def attribute(self, name: str) -> Any:
        return getattr(self, name) if name in GROUPING_FIELDS else None


@dataclass(frozen=True)
class MeritRecord:
    """A ranked student; only this module creates these"""
    entry: MeritInput
    merit_position: int
    group_merit_position: Optional[int] = None

    def to_dict(self) -> Dict:
        result = asdict(self.entry)
        result["result_status"] = self.entry.result_status.value
        result["merit_position"] = self.merit_position
        if self.group_merit_position is not None:
            result["group_merit_position"] = self.group_merit_position
        return result


class _RankState(NamedTuple):
    previous_metric: Optional[float]
    previous_rank: int


def sort_cohort(entries: Iterable[MeritInput], merit_type: MeritType) -> List[MeritInput]:
    """
    Pass before Fail, primary metric desc, secondary metric desc, roll asc.

    Missing or non-numeric rolls go last.
    """
    return sorted(
        entries,
        key=lambda e: (
            0 if e.passed else 1,
            -e.primary(merit_type),
            -e.secondary(merit_type),
            roll_sort_key(e.roll),
        ),
    )


def sequential_ranks(count: int) -> List[int]:
    return list(range(1, count + 1))


def competition_ranks(metrics: Sequence[float]) -> List[int]:
    """
    Standard competition ranking over an already sorted metric sequence.

    1, 1, 3, 4, 4, 6: ties share a rank and the following ranks are skipped.
    """

    def step(acc: Tuple[Tuple[int, ...], _RankState], item: Tuple[int, float]):
        ranks, state = acc
        index, metric = item
        rank = state.previous_rank if metric == state.previous_metric else index + 1
        return ranks + (rank,), _RankState(previous_metric=metric, previous_rank=rank)

    ranks, _ = reduce(step, enumerate(metrics), ((), _RankState(None, 0)))
    return list(ranks)


def assign_ranks(sorted_entries: Sequence[MeritInput], merit_type: MeritType) -> List[MeritRecord]:
    """Rank a cohort that is already in merit order"""
    if merit_type.is_sequential:
        ranks = sequential_ranks(len(sorted_entries))
    else:
        ranks = competition_ranks([e.primary(merit_type) for e in sorted_entries])
    return [MeritRecord(entry=e, merit_position=r) for e, r in zip(sorted_entries, ranks)]


def rank_cohort(entries: Iterable[MeritInput], merit_type: MeritType) -> List[MeritRecord]:
    """The single class-wide sort and rank pass"""
    return assign_ranks(sort_cohort(entries, merit_type), merit_type)


def group_view(records: Iterable[MeritRecord], field: str) -> Dict[str, List[MeritRecord]]:
    """Partition ranked records by one attribute; order and ranks untouched"""
    view: "OrderedDict[str, List[MeritRecord]]" = OrderedDict()
    for record in records:
        view.setdefault(group_key(record.entry.attribute(field), UNKNOWN_GROUP), []).append(record)
    return view


def composite_key(record: MeritRecord, fields: Sequence[str]) -> str:
    return "|".join(group_key(record.entry.attribute(f), UNKNOWN_GROUP) for f in fields)


def composite_view(records: Iterable[MeritRecord], fields: Sequence[str]) -> Dict[str, List[MeritRecord]]:
    """Partition by several attributes at once, keyed 'Morning|A'"""
    view: "OrderedDict[str, List[MeritRecord]]" = OrderedDict()
    for record in records:
        view.setdefault(composite_key(record, fields), []).append(record)
    return view


def rank_within_groups(
    records: Iterable[MeritRecord],
    fields: Sequence[str],
    merit_type: MeritType,
) -> Dict[str, List[MeritRecord]]:
    """
    Re-sort and rank each group on its own.

    The group rank goes to group_merit_position; merit_position keeps the
    class-wide rank.
    """
    view: "OrderedDict[str, List[MeritRecord]]" = OrderedDict()
    for key, members in composite_view(records, fields).items():
        by_id = {id(r.entry): r for r in members}
        ranked = rank_cohort([r.entry for r in members], merit_type)
        view[key] = [
            replace(by_id[id(g.entry)], group_merit_position=g.merit_position)
            for g in ranked
        ]
    return view
