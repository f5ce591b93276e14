"""
Extractor registry.

An extractor computes one named field of a record's feature map. Extractors
are registered per record kind and run in registration order, which fixes the
field order of the exported JSON.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from exporter.errors import ExtractionError

logger = logging.getLogger(__name__)

ExtractorFunc = Callable[[Any], Any]


@dataclass(frozen=True)
class Extractor:
    """Named pure function of a record. Returning ``None`` means not applicable."""

    name: str
    func: ExtractorFunc

    def __call__(self, record: Any) -> Any:
        return self.func(record)


class ExtractorRegistry:
    """Ordered extractor lists, one per record kind."""

    def __init__(self):
        self._extractors: Dict[str, List[Extractor]] = {}

    def register(self, kind: str, name: str, func: ExtractorFunc) -> Extractor:
        """
        Append an extractor to the list for ``kind``.

        Raises:
            ValueError: If ``kind`` already has an extractor for field ``name``
        """
        extractors = self._extractors.setdefault(kind, [])
        if any(e.name == name for e in extractors):
            raise ValueError(f"Duplicate field '{name}' for record kind '{kind}'")

        extractor = Extractor(name=name, func=func)
        extractors.append(extractor)
        logger.debug(f"Registered extractor {kind}.{name}")
        return extractor

    def extractor(self, kind: str, name: str) -> Callable[[ExtractorFunc], ExtractorFunc]:
        """Decorator form of :meth:`register`."""

        def decorator(func: ExtractorFunc) -> ExtractorFunc:
            self.register(kind, name, func)
            return func

        return decorator

    def kinds(self) -> List[str]:
        return list(self._extractors)

    def fields(self, kind: str) -> List[str]:
        return [e.name for e in self._extractors.get(kind, [])]

    def run_all(self, kind: str, record: Any) -> Dict[str, Any]:
        """
        Build the feature map of one record.

        Args:
            kind: Record kind whose extractors to run
            record: Record exposing a stable ``key``

        Returns:
            Insertion-ordered dict of field name to JSON value

        Raises:
            ExtractionError: If any extractor raises
        """
        features: Dict[str, Any] = {}
        for extractor in self._extractors.get(kind, []):
            try:
                value = extractor(record)
            except Exception as e:
                raise ExtractionError(extractor.name, _record_key(record), e) from e
            if value is not None:
                features[extractor.name] = value
        return features


def _record_key(record: Any) -> str:
    return str(getattr(record, "key", record))
