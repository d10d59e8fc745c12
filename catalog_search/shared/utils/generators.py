"""Identifier generation: CUID2 ids for saved searches and analytics events."""

from cuid2 import Cuid

_cuid = Cuid(length=24)


def generate_cuid() -> str:
    return _cuid.generate()
