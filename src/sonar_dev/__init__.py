"""Development helpers for analysis-server plugins: artifact upload and whitespace trimming."""

from sonar_dev.errors import ConfigurationError, FileIOError, RemoteError, SonarDevError
from sonar_dev.trimmer import TrimResult, TrimStatus, trim_directory, trim_file, trim_text
from sonar_dev.uploader import UploadResult, copy_artifacts, restart_server, upload

__all__ = [
    "ConfigurationError",
    "FileIOError",
    "RemoteError",
    "SonarDevError",
    "TrimResult",
    "TrimStatus",
    "UploadResult",
    "copy_artifacts",
    "restart_server",
    "trim_directory",
    "trim_file",
    "trim_text",
    "upload",
]
