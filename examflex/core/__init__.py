# Core package
from .constants import (
    RoundingMethod,
    ResultStatus,
    SubjectType,
    MeritMetric,
    RankDiscipline,
    GradeRules,
    Messages,
    GROUPING_FIELDS,
    UNKNOWN_GROUP,
)
from .exceptions import (
    BaseAPIException,
    UnauthorizedException,
    BadRequestException,
    ConfigExpiredException,
)
from .logger import logger, setup_logger, mark_entry_logger, result_logger, merit_logger

__all__ = [
    # Constants
    "RoundingMethod",
    "ResultStatus",
    "SubjectType",
    "MeritMetric",
    "RankDiscipline",
    "GradeRules",
    "Messages",
    "GROUPING_FIELDS",
    "UNKNOWN_GROUP",
    # Exceptions
    "BaseAPIException",
    "UnauthorizedException",
    "BadRequestException",
    "ConfigExpiredException",
    # Logging
    "logger",
    "setup_logger",
    "mark_entry_logger",
    "result_logger",
    "merit_logger",
]
