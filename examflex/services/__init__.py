# Services package
from .mark_service import mark_service, MarkService
from .result_service import result_service, ResultService
from .merit_service import merit_service, MeritService
from .config_store import config_store, ConfigStore
from .auth_service import authenticate_client, hash_password, verify_password

__all__ = [
    "mark_service",
    "MarkService",
    "result_service",
    "ResultService",
    "merit_service",
    "MeritService",
    "config_store",
    "ConfigStore",
    "authenticate_client",
    "hash_password",
    "verify_password",
]
