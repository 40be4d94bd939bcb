"""Progress tracking"""

from abc import ABC, abstractmethod


class ProgressTracker(ABC):
    """Abstract progress tracker"""

    @abstractmethod
    def start_stage(self, stage_num: int, stage_name: str):
        """Start a stage"""
        pass

    @abstractmethod
    def complete_stage(self, stage_num: int):
        """Complete a stage"""
        pass

    @abstractmethod
    def fail(self, stage_num: int, message: str):
        """Mark stage as failed"""
        pass

    @abstractmethod
    def complete(self):
        """Mark pipeline as complete"""
        pass


class NullProgress(ProgressTracker):
    """Tracker that ignores every event"""

    def start_stage(self, stage_num: int, stage_name: str):
        pass

    def complete_stage(self, stage_num: int):
        pass

    def fail(self, stage_num: int, message: str):
        pass

    def complete(self):
        pass
