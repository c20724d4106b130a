from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from agents.grounding import EMPTY_ANALYSIS_TEXT, normalize_response
from dossier_state_manager import Source
from conftest import fake_response, web_chunk


def test_duplicate_uris_keep_first_occurrence_in_order():
    response = fake_response(
        "Dossier",
        [web_chunk("a", "X"), web_chunk("b", "Y"), web_chunk("a", "Z")],
    )

    result = normalize_response(response)

    assert result.sources == (Source(uri="a", title="X"), Source(uri="b", title="Y"))


def test_non_web_chunks_and_missing_uris_are_dropped():
    retrieved = SimpleNamespace(web=None, retrieved_context=SimpleNamespace(uri="gs://doc"))
    response = fake_response("Dossier", [retrieved, web_chunk(None, "No link"), web_chunk("https://example.org/p")])

    result = normalize_response(response)

    assert result.sources == (Source(uri="https://example.org/p", title=""),)


@pytest.mark.parametrize("text", [None, ""])
def test_empty_text_is_replaced_by_placeholder(text):
    result = normalize_response(fake_response(text, []))

    assert result.text == EMPTY_ANALYSIS_TEXT


def test_missing_candidates_and_metadata_yield_no_sources():
    assert normalize_response(SimpleNamespace(text="t", candidates=None)).sources == ()
    assert normalize_response(SimpleNamespace(text="t", candidates=[SimpleNamespace(grounding_metadata=None)])).sources == ()


def test_only_first_candidate_is_used():
    first = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=[web_chunk("a", "A")]))
    second = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=[web_chunk("b", "B")]))

    result = normalize_response(SimpleNamespace(text="t", candidates=[first, second]))

    assert [s.uri for s in result.sources] == ["a"]


def test_plain_dict_payload_is_accepted():
    payload = {
        "text": "Dossier",
        "candidates": [{"grounding_metadata": {"grounding_chunks": [{"web": {"uri": "u", "title": "T"}}]}}],
    }

    assert normalize_response(payload).sources == (Source(uri="u", title="T"),)


def test_wrongly_typed_field_raises_validation_error():
    with pytest.raises(ValidationError):
        normalize_response(SimpleNamespace(text="t", candidates="not-a-list"))
