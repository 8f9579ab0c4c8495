from enum import Enum


class FeeType(str, Enum):
    MONTHLY = "monthly"
    EXAMINATION = "examination"
    ADMISSION = "admission"
    REGISTRATION = "registration"
    OTHER = "other"

    @classmethod
    def normalize(cls, value) -> "FeeType":
        """Map stored fee type strings (including legacy aliases) to a FeeType."""
        if isinstance(value, cls):
            return value
        raw = (str(value) if value is not None else "").strip()
        legacy = {
            "admissionFees": cls.ADMISSION,
            "registrationFees": cls.REGISTRATION,
        }
        if raw in legacy:
            return legacy[raw]
        try:
            return cls(raw.lower())
        except ValueError:
            return cls.OTHER


class TransactionStatus(str, Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"


class FeeReportStatus(str, Enum):
    PAID = "Paid"
    DUE = "Due"
