"""
Configuration Management Module
"""
from .settings import (
    Settings,
    get_settings,
    get_llm_settings,
    get_storage_settings,
    get_workflow_settings,
    get_scheduler_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_llm_settings",
    "get_storage_settings",
    "get_workflow_settings",
    "get_scheduler_settings",
]
