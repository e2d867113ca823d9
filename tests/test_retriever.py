"""
Tests for the tiered candidate retriever
"""
from voicefinder.search.retriever import Retriever, cap_fallback, filter_quality, merge_candidates
from voicefinder.search.types import SearchPlan, SourceTier, VoiceCandidate

from conftest import FakeCatalog, failing, make_voice


def plan(**kw):
    defaults = {"interface_language": "en", "search_queries": ["calm narrator"]}
    defaults.update(kw)
    return SearchPlan(**defaults)


def by_tier(query):
    """Primary queries carry a search phrase; language tier only a language."""
    if query.search and (query.language or query.gender or query.use_cases or query.descriptives):
        return "primary"
    if query.language and not query.search:
        return "language"
    return "fallback"


def test_each_voice_once_with_most_trusted_tier():
    def responder(query):
        tier = by_tier(query)
        if tier == "primary":
            return [make_voice("a"), make_voice("b")]
        if tier == "language":
            return [make_voice("b"), make_voice("c")]
        return [make_voice("a"), make_voice("c"), make_voice("d")]

    catalog = FakeCatalog(responder)
    voices = Retriever(catalog).retrieve(plan(target_voice_language="en"))

    ids = [v.voice_id for v in voices]
    assert sorted(ids) == ["a", "b", "c", "d"]
    tiers = {v.voice_id: v.tier for v in voices}
    assert tiers == {
        "a": SourceTier.PRIMARY,
        "b": SourceTier.PRIMARY,
        "c": SourceTier.LANGUAGE,
        "d": SourceTier.FALLBACK,
    }


def test_primary_stops_once_enough_candidates():
    calls = []

    def responder(query):
        calls.append(query.search)
        start = len(calls) * 100
        return [make_voice(f"v{start + i}") for i in range(30)]

    queries = ["q1", "q2", "q3", "q4", "q5", "q6"]
    catalog = FakeCatalog(responder)
    voices = Retriever(catalog).retrieve(plan(search_queries=queries, target_gender="male"))

    # 30 after q1, 60 after q2 -> no further primary, language or fallback calls
    assert calls == ["q1", "q2"]
    assert len(voices) == 60


def test_at_most_five_primary_queries():
    seen = []

    def responder(query):
        seen.append(query)
        return []

    catalog = FakeCatalog(responder)
    Retriever(catalog).retrieve(plan(search_queries=[f"q{i}" for i in range(7)], target_gender="female"))

    primary = [q for q in seen if q.gender == "female"]
    assert [q.search for q in primary] == ["q0", "q1", "q2", "q3", "q4"]


def test_primary_query_carries_filters():
    catalog = FakeCatalog()
    Retriever(catalog).retrieve(plan(
        target_voice_language="pl",
        target_accent="polish",
        target_gender="neutral",
        use_cases=["conversational"],
        descriptives=["calm"],
    ))

    first = catalog.queries[0]
    params = first.to_params()
    assert params["language"] == "pl"
    assert params["accent"] == "polish"
    assert "gender" not in params  # only male/female are sent
    assert params["use_cases"] == ["conversational"]
    assert params["descriptives"] == ["calm"]


def test_fallback_never_more_than_ten():
    def responder(query):
        if by_tier(query) == "fallback":
            return [make_voice(f"f{i}", usage_character_count_7d=i) for i in range(40)]
        return [make_voice("p1")]

    voices = Retriever(FakeCatalog(responder)).retrieve(plan(target_gender="female"))

    fallback = [v for v in voices if v.tier is SourceTier.FALLBACK]
    assert len(fallback) == 10
    # most used first, and trusted candidates stay ahead
    assert voices[0].voice_id == "p1"
    assert [v.voice_id for v in fallback[:3]] == ["f39", "f38", "f37"]


def test_failed_tier_does_not_abort_the_rest():
    def responder(query):
        if by_tier(query) == "primary":
            return failing(query)
        if by_tier(query) == "language":
            return [make_voice("lang-1")]
        return [make_voice("fb-1")]

    voices = Retriever(FakeCatalog(responder)).retrieve(plan(target_voice_language="en", target_gender="male"))

    assert {v.voice_id: v.tier for v in voices} == {
        "lang-1": SourceTier.LANGUAGE,
        "fb-1": SourceTier.FALLBACK,
    }


def test_language_filter_applies_only_with_enough_matches():
    polish = [make_voice(f"pl{i}", language="pl") for i in range(8)]
    other = [make_voice(f"en{i}", language="en") for i in range(20)]

    voices = Retriever(FakeCatalog(lambda q: polish + other)).retrieve(plan(target_voice_language="pl"))
    assert {v.voice_id for v in voices} == {f"pl{i}" for i in range(8)}

    few = polish[:3]
    voices = Retriever(FakeCatalog(lambda q: few + other)).retrieve(plan(target_voice_language="pl"))
    assert len(voices) == 23


def test_quality_filter_keeps_set_when_it_would_empty_it():
    standard = [make_voice(f"s{i}") for i in range(20)]

    voices = Retriever(FakeCatalog(lambda q: standard)).retrieve(plan(quality_preference="high_only"))
    assert len(voices) == 20

    mixed = standard + [make_voice("hq", category="high_quality")]
    voices = Retriever(FakeCatalog(lambda q: mixed)).retrieve(plan(quality_preference="high_only"))
    assert [v.voice_id for v in voices] == ["hq"]


def test_merge_never_downgrades():
    pool = {}
    merge_candidates(pool, [VoiceCandidate(voice_id="x", name="X", tier=SourceTier.LANGUAGE)])
    merge_candidates(pool, [VoiceCandidate(voice_id="x", name="X", tier=SourceTier.FALLBACK)])
    assert pool["x"].tier is SourceTier.LANGUAGE

    merge_candidates(pool, [VoiceCandidate(voice_id="x", name="X", tier=SourceTier.PRIMARY)])
    assert pool["x"].tier is SourceTier.PRIMARY


def test_cap_fallback_and_filter_quality_helpers():
    voices = [VoiceCandidate(voice_id=f"f{i}", name="F", tier=SourceTier.FALLBACK) for i in range(12)]
    assert len(cap_fallback(voices)) == 10

    hq = VoiceCandidate(voice_id="h", name="H", high_quality_base_model_ids=["eleven_v3"])
    std = VoiceCandidate(voice_id="s", name="S")
    assert filter_quality([hq, std], "no_high") == [std]
    assert filter_quality([hq], "no_high") == [hq]
    assert filter_quality([hq, std], "any") == [hq, std]


def test_high_only_primary_queries_ask_for_the_category():
    catalog = FakeCatalog(lambda q: [make_voice(f"h{i}", category="high_quality") for i in range(60)])

    Retriever(catalog).retrieve(plan(quality_preference="high_only"))

    assert catalog.queries[0].to_params()["category"] == "high_quality"


def test_high_only_retries_primary_without_category_when_empty():
    def responder(query):
        if query.category:
            return []
        return [make_voice(f"s{i}") for i in range(20)] + [make_voice("hq", sharing={"category": "high_quality"})]

    catalog = FakeCatalog(responder)
    voices = Retriever(catalog).retrieve(plan(quality_preference="high_only", target_gender="male"))

    primary = [q for q in catalog.queries if q.gender == "male"]
    assert [q.category for q in primary] == ["high_quality", None]
    assert [v.voice_id for v in voices] == ["hq"]
