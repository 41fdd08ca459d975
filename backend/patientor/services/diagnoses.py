"""Read-only diagnosis code catalog."""

from typing import Dict, Iterable, List

from patientor.entries.models import Diagnosis


class DiagnosisCatalog:
    """Lookup over the diagnoses fetched for the current session."""

    def __init__(self, diagnoses: Iterable[Diagnosis] = ()):
        self._by_code: Dict[str, Diagnosis] = {d.code: d for d in diagnoses}

    def lookup(self, code: str) -> bool:
        return code in self._by_code

    def all(self) -> List[Diagnosis]:
        return list(self._by_code.values())

    def __len__(self) -> int:
        return len(self._by_code)
