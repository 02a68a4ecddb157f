"""
Error kinds raised by the cryptosuite.

A single exception type carries a machine-readable :class:`ErrorKind`
plus a human-readable message.  Every error is raised synchronously and
none of them is retryable.  A signature that simply does not verify is
not an error: verification returns ``False`` instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


class ErrorKind(str, Enum):
    """Closed set of failure categories."""

    # key material
    INVALID_SCALAR = "INVALID_SCALAR"
    INVALID_LENGTH = "INVALID_LENGTH"
    DERIVATION_ERROR = "DERIVATION_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    DECOMPRESSION_ERROR = "DECOMPRESSION_ERROR"
    MISSING_KEY = "MISSING_KEY"
    MISSING_PRIVATE_KEY = "MISSING_PRIVATE_KEY"
    KEY_MISMATCH = "KEY_MISMATCH"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"

    # multibase / verification method
    INVALID_MULTIBASE = "INVALID_MULTIBASE"
    INVALID_PREFIX = "INVALID_PREFIX"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_TYPE = "INVALID_TYPE"

    # cryptosuite
    UNSUPPORTED_CRYPTOSUITE = "UNSUPPORTED_CRYPTOSUITE"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    CRYPTOSUITE_MISMATCH = "CRYPTOSUITE_MISMATCH"
    VERIFICATION_METHOD_MISMATCH = "VERIFICATION_METHOD_MISMATCH"
    INVALID_DATETIME = "INVALID_DATETIME"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # data integrity proof
    PROOF_GENERATION_ERROR = "PROOF_GENERATION_ERROR"
    PROOF_VERIFICATION_ERROR = "PROOF_VERIFICATION_ERROR"
    INVALID_CHALLENGE_ERROR = "INVALID_CHALLENGE_ERROR"
    PARSING_ERROR = "PARSING_ERROR"


class Bip340Error(Exception):
    """Raised for structural or binding violations."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(f"{kind.value}: {message}")

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.kind.value, "message": self.message}
