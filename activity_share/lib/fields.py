"""
Convenience functions to make consistent field conventions easier.

Stored files are identified by a hash of their bytes, and every timestamp we
write is set by the caller (in UTC) rather than generated by the database.
"""
from __future__ import annotations

import hashlib
from datetime import datetime, timezone

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

# Length of the hex string produced by create_hash_digest.
HASH_DIGEST_LENGTH = 40


def create_hash_digest(data_bytes: bytes) -> str:
    """
    Create a 40-byte, lower-case hex string representation of a hash digest.

    The hash digest itself is 20-bytes using BLAKE2b.

    The file store de-duplicates blobs by this value, so changing the hash
    function means existing rows will no longer find their bytes. Add a new
    function and migrate the data instead of modifying this one.
    """
    return hashlib.blake2b(data_bytes, digest_size=20).hexdigest()


def validate_utc_datetime(dt: datetime):
    if dt.tzinfo != timezone.utc:
        raise ValidationError(
            _("The timezone for %(datetime)s is not UTC."),
            params={"datetime": dt},
        )


def hash_field() -> models.CharField:
    """
    Holds a hash digest identifying the bytes of a stored file.

    Use the create_hash_digest function to generate data suitable for this
    field. A blank value means the hash is not known yet, which the packaging
    pipeline treats as an invalid file.
    """
    return models.CharField(
        max_length=HASH_DIGEST_LENGTH,
        blank=True,
        null=False,
        editable=False,
        db_index=True,
    )


def manual_date_time_field() -> models.DateTimeField:
    """
    DateTimeField that does not auto-generate values.

    The datetimes entered for this field *must be UTC* or it will raise a
    ValidationError. Callers pick the time up front, so that a file copied
    during a packaging run carries exactly the timestamp that was used to
    build its itemid.
    """
    return models.DateTimeField(
        auto_now=False,
        auto_now_add=False,
        null=False,
        validators=[
            validate_utc_datetime,
        ],
    )
