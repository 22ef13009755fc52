from .items import materialize_items
from .orchestrator import PrescriptionIntake, submit_prescription
from .types import IntakeRequest, IntakeResult
from .validation import parse_intake_request

__all__ = [
    'IntakeRequest',
    'IntakeResult',
    'PrescriptionIntake',
    'materialize_items',
    'parse_intake_request',
    'submit_prescription',
]
