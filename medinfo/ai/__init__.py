from .base import AnalysisError, AnalysisHTTPError, AnalysisTimeoutError, BaseAnalysisService
from .factory import get_analysis_service
from .retry import RetriesExhausted, RetryPolicy
from .types import AIAnalysisResult, LabTestFinding, MedicineFinding

__all__ = [
    'AIAnalysisResult',
    'AnalysisError',
    'AnalysisHTTPError',
    'AnalysisTimeoutError',
    'BaseAnalysisService',
    'LabTestFinding',
    'MedicineFinding',
    'RetriesExhausted',
    'RetryPolicy',
    'get_analysis_service',
]
