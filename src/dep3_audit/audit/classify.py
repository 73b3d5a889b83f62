from __future__ import annotations

import re
from typing import Iterable

from ..config import PatchClass

FALLBACK_CLASS = "other"


def classify_patch(name: str, classes: Iterable[PatchClass]) -> str:
    for patch_class in classes:
        if re.search(patch_class.pattern, name):
            return patch_class.name
    return FALLBACK_CLASS
