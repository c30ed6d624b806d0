from .duplicate_service import DuplicateService, SelectionState
from .file_service import FileService

__all__ = ["DuplicateService", "SelectionState", "FileService"]
