"""
Service Layer

Service classes for workspace file access and configuration.
"""

from ngimport.services.file_service import FileService
from ngimport.services.config_service import ConfigService

__all__ = [
    "FileService",
    "ConfigService",
]
