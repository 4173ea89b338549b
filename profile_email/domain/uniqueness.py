"""
E-mail uniqueness check over the profile-emails index.

The index yields its entries lazily; the check stops at the first
conflicting entry and closes the generator either way.
"""

from contextlib import closing

from .ports import ProfileEmailReader


def is_email_already_taken(reader: ProfileEmailReader, email: str, fiscal_code: str) -> bool:
    """
    Tell whether another citizen already uses this e-mail.

    Entries owned by ``fiscal_code`` itself are not conflicts.
    Exceptions raised by the reader while iterating propagate.
    """
    with closing(reader.list(email)) as entries:
        return any(entry.fiscal_code != fiscal_code for entry in entries)
