# api/validation.py
"""
Submission validation utilities.

Provides the high-level validate_submission(...) used by the compile relay.
Structural checks on the code itself are left to the remote compiler.
"""

from typing import Tuple, Optional

# Tunable limits
MAX_CODE_LENGTH = 5000  # characters


def validate_submission(code) -> Tuple[bool, Optional[str]]:
    """
    Returns (True, None) if the submission may be compiled, otherwise
    (False, "<error message>").
    """
    if code is None:
        return False, "No code provided."
    if not isinstance(code, str):
        return False, "'code' must be a string."
    if len(code.strip()) == 0:
        return False, "No code provided."
    if len(code) > MAX_CODE_LENGTH:
        return False, f"Code is too long (max {MAX_CODE_LENGTH} characters)."
    return True, None
