from app.core.models.class_model import SchoolClass
from app.core.models.student import Student
from app.core.models.class_fee import ClassFee
from app.core.models.fee_transaction import FeeTransaction

__all__ = [
    "SchoolClass",
    "Student",
    "ClassFee",
    "FeeTransaction",
]
