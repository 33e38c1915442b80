"""
Contract service error taxonomy.

Only InputValidationError reaches the HTTP layer. The rest are raised by
collaborators and absorbed by ContractService, which records them as
diagnostics on the result.
"""
from typing import List


class ContractServiceError(Exception):
    """Base class for contract generation pipeline errors."""

    stage: str = "unknown"


class InputValidationError(ContractServiceError):
    """Required generation fields are missing or blank."""

    stage = "validation"

    def __init__(self, missing_fields: List[str]):
        self.missing_fields = missing_fields
        super().__init__(f"Missing required fields: {', '.join(missing_fields)}")


class MemoryFetchFailure(ContractServiceError):
    stage = "memory_fetch"


class GenerationUnavailable(ContractServiceError):
    """Primary text generation could not produce a contract."""

    stage = "generation"


class PersistFailure(ContractServiceError):
    stage = "persist"


class ExtractionUnavailable(ContractServiceError):
    """The extraction model call failed or no model is configured."""

    stage = "extraction"


class ExtractionParseError(ContractServiceError):
    """The extraction reply was not a JSON object."""

    stage = "extraction_parse"

    def __init__(self, message: str, raw_reply: str = ""):
        self.raw_reply = raw_reply
        super().__init__(message)


class MemoryUpdateFailure(PersistFailure):
    """Merging an extraction into the preference store failed."""

    stage = "memory_update"
