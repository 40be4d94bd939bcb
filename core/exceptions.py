"""Custom exceptions for SimConsultant"""

from typing import Optional


class SimConsultantError(Exception):
    """Base exception for all SimConsultant errors"""
    retryable: bool = True
    user_message: str = "An unexpected error occurred during the analysis."


class StageError(SimConsultantError):
    """A stage received input it cannot work with"""
    retryable = False

    def __init__(self, stage: int, message: str):
        super().__init__(f"Stage {stage}: {message}")
        self.stage = stage
        self.message = message


class DecodeError(SimConsultantError):
    """Workbook content is corrupt or in an unsupported format"""
    user_message = "The file could not be read. Upload a valid .xlsx or .xls workbook."

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.file_name = file_name


class NoReadableDataError(SimConsultantError):
    """Workbook decoded but holds no readable sheets"""
    user_message = "No readable data was found in the file."

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.file_name = file_name


class ConfigurationError(SimConsultantError):
    """Missing credential or invalid engine configuration"""
    retryable = False
    user_message = "The analysis engine is not configured. Set an API key and restart."


class TransportError(SimConsultantError):
    """Engine unreachable or the call failed"""
    user_message = "The analysis service could not be reached. Try again."

    def __init__(self, message: str, provider: Optional[str] = None, retries: int = 0):
        super().__init__(message)
        self.provider = provider
        self.retries = retries


class EmptyResponseError(SimConsultantError):
    """Engine answered without any text"""
    user_message = "The analysis service returned an empty response. Try again."

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class MalformedReportError(SimConsultantError):
    """Engine answered but the report does not have the expected shape"""
    user_message = "The analysis service returned an unusable report. Try again."

    def __init__(self, field_path: str, message: str, payload: Optional[str] = None):
        super().__init__(f"{field_path}: {message}" if field_path else message)
        self.field_path = field_path
        self.message = message
        self.payload = payload
