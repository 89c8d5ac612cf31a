"""Translate component errors into HTTP responses."""

from collections.abc import Sequence
from typing import NoReturn

from fastapi import HTTPException

from linkbio.domain.errors import DomainError

STATUS_BY_KIND = {
    "not_found": 404,
    "forbidden": 403,
    "conflict": 409,
    "invalid_input": 422,
}


def raise_for_errors(errors: Sequence[DomainError]) -> NoReturn:
    """Raise an HTTPException for a failed component result.

    The status comes from the first error; all errors are listed in detail.
    """
    code = STATUS_BY_KIND.get(errors[0].kind, 400) if errors else 500
    raise HTTPException(
        status_code=code,
        detail=[
            {"kind": err.kind, "code": err.code, "message": err.message, "field": err.field}
            for err in errors
        ],
    )
