# app/shared/utils/input_validation.py

import re
from typing import Optional, Tuple


class InputValidator:
    """
    Validation and sanitization of caller input, complementing the
    Pydantic validations.
    """

    MAX_NAME_LENGTH = 255
    MAX_MESSAGE_LENGTH = 1600
    MAX_SENDER_ID_LENGTH = 11

    # Letters (accented too), digits, spaces, hyphens, apostrophes, dots, ampersands
    NAME_PATTERN = re.compile(r'^[A-Za-zÀ-ÖØ-öø-ÿ0-9\s\-\'\.&]+$')
    # Alphanumeric sender ids, as accepted by SMS providers
    SENDER_ID_PATTERN = re.compile(r'^[A-Za-z0-9 ]+$')
    DANGEROUS_CHARS = re.compile(r'[<>";%{}\[\]]')

    @classmethod
    def validate_name(cls, name: str) -> Tuple[bool, Optional[str]]:
        """
        Validate a client display name.

        Returns:
            Tuple (valid, error_message)
        """
        if not name or not name.strip():
            return False, "Name cannot be empty"

        if len(name) > cls.MAX_NAME_LENGTH:
            return False, f"Name is too long (max {cls.MAX_NAME_LENGTH} characters)"

        if cls.DANGEROUS_CHARS.search(name):
            return False, "Name contains characters that are not allowed"

        if not cls.NAME_PATTERN.match(name):
            return False, "Name contains invalid characters"

        return True, None

    @classmethod
    def sanitize_name(cls, name: str) -> str:
        """Collapse whitespace and truncate to the maximum length."""
        sanitized = re.sub(r'\s+', ' ', name.strip())
        return sanitized[:cls.MAX_NAME_LENGTH]

    @classmethod
    def validate_message(cls, message: str) -> Tuple[bool, Optional[str]]:
        if not message or not message.strip():
            return False, "Message cannot be empty"

        if len(message) > cls.MAX_MESSAGE_LENGTH:
            return False, f"Message is too long (max {cls.MAX_MESSAGE_LENGTH} characters)"

        return True, None

    @classmethod
    def validate_sender_id(cls, sender_id: str) -> Tuple[bool, Optional[str]]:
        if not sender_id:
            return True, None

        if len(sender_id) > cls.MAX_SENDER_ID_LENGTH:
            return False, f"Sender id is too long (max {cls.MAX_SENDER_ID_LENGTH} characters)"

        if not cls.SENDER_ID_PATTERN.match(sender_id):
            return False, "Sender id must be alphanumeric"

        return True, None
