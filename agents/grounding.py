"""
Boundary models for Gemini responses and their normalization into `DossierResult`.

The SDK response is loosely shaped: every nested field may be missing.  It is
validated into the optional-field models below right after the call, and
nothing past `normalize_response` touches the provider's shape.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from dossier_state_manager import DossierResult, Source

logger = logging.getLogger(__name__)

EMPTY_ANALYSIS_TEXT = "No analysis generated."


class _Payload(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class WebReference(_Payload):
    uri: Optional[str] = None
    title: Optional[str] = None


class GroundingChunk(_Payload):
    web: Optional[WebReference] = None


class GroundingMetadata(_Payload):
    grounding_chunks: Optional[List[GroundingChunk]] = None


class Candidate(_Payload):
    grounding_metadata: Optional[GroundingMetadata] = None


class ProviderResponse(_Payload):
    text: Optional[str] = None
    candidates: Optional[List[Candidate]] = None

    @property
    def grounding_chunks(self) -> List[GroundingChunk]:
        if not self.candidates:
            return []
        metadata = self.candidates[0].grounding_metadata
        if metadata is None:
            return []
        return metadata.grounding_chunks or []


def web_sources(chunks: Iterable[GroundingChunk]) -> List[Source]:
    """Keep web citations only, dropping entries without a uri."""

    sources: List[Source] = []
    for chunk in chunks:
        if chunk.web is None or not chunk.web.uri:
            continue
        sources.append(Source(uri=chunk.web.uri, title=chunk.web.title or ""))
    return sources


def unique_sources(sources: Iterable[Source]) -> List[Source]:
    """De-duplicate by uri; the first occurrence wins and order is kept."""

    seen: dict[str, Source] = {}
    for source in sources:
        seen.setdefault(source.uri, source)
    return list(seen.values())


def normalize_response(raw: Any) -> DossierResult:
    """Validate an SDK response (or any object of the same shape) into a `DossierResult`.

    Raises `pydantic.ValidationError` when a present field has the wrong type.
    """

    response = ProviderResponse.model_validate(raw)
    text = response.text or EMPTY_ANALYSIS_TEXT
    chunks = response.grounding_chunks
    sources = unique_sources(web_sources(chunks))
    logger.info("Normalized response: %d grounding chunks, %d unique web sources.", len(chunks), len(sources))
    return DossierResult(text=text, sources=tuple(sources))
