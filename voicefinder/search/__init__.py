# Makes the folder importable as a package.
# Exports the retriever, the catalog client and the core types for convenience.

from .catalog import CatalogError, CatalogQuery, VoiceCatalog
from .retriever import Retriever
from .types import SearchMode, SearchPlan, SourceTier, VoiceCandidate

__all__ = [
    "CatalogError",
    "CatalogQuery",
    "VoiceCatalog",
    "Retriever",
    "SearchMode",
    "SearchPlan",
    "SourceTier",
    "VoiceCandidate",
]
