"""
Application constants
"""
from enum import Enum


class RoundingMethod(str, Enum):
    """How a converted mark is rounded"""
    AT_ACTUAL = "At Actual"
    ALWAYS_DOWN = "Always Down"
    ALWAYS_UP = "Always Up"
    WITHOUT_FRACTION = "Without Fraction"

    @classmethod
    def parse(cls, value) -> "RoundingMethod":
        """Accept 'Always Up', 'AlwaysUp', 'always_up'; anything else is At Actual"""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.AT_ACTUAL
        wanted = str(value).replace(" ", "").replace("_", "").replace("-", "").lower()
        for method in cls:
            if method.value.replace(" ", "").lower() == wanted:
                return method
        return cls.AT_ACTUAL


class ResultStatus(str, Enum):
    """Pass/fail outcome"""
    PASS = "Pass"
    FAIL = "Fail"


class SubjectType(str, Enum):
    """Whether a subject's grade point counts toward the GPA"""
    COUNTABLE = "Countable"
    UNCOUNTABLE = "Uncountable"


class MeritMetric(str, Enum):
    """Primary ranking metric"""
    TOTAL_MARK = "total_mark"
    GPA = "gpa"


class RankDiscipline(str, Enum):
    """Ordinal ranking versus competition ranking"""
    SEQUENTIAL = "sequential"
    NON_SEQUENTIAL = "non_sequential"


class GradeRules:
    """Fixed grading rules"""
    FAIL_GRADE = "F"
    FAIL_GRADE_POINT = 0.0
    # Optional (4th) subject: grade points above this count as bonus
    OPTIONAL_GP_BASE = 2.0
    # Optional subject: this share of its max mark is not counted as bonus
    OPTIONAL_FREE_MARK_RATIO = 0.40
    # A student must score strictly above the highest fail mark
    THRESHOLD_STEP = 0.01
    DEFAULT_SUBJECT_MAX = 100.0


# Merit grouping attributes, in the order they appear in exam config
GROUPING_FIELDS = ("shift", "section", "group", "gender", "religion")

UNKNOWN_GROUP = "unknown"


# API Response Messages
class Messages:
    """API response messages"""

    # Success messages
    CONFIG_SAVED = "config_saved"
    MARKS_CALCULATED = "Marks calculated and ready to save"
    RESULTS_CALCULATED = "Marks Calculated Successfully"
    MERIT_CALCULATED = "Merit Calculated Successfully"

    # Error messages
    GRADE_RULES_MISSING = "Grade rules missing"
    NO_RESULTS_FOUND = "No results found"
    NO_SUBJECTS = "At least one subject is required"
    CONFIG_EXPIRED = "Config expired or invalid"
    UNAUTHORIZED = "Unauthorized"
    TOO_MANY_STUDENTS = "Too many students in one request (max {limit})"
