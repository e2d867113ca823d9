"""
Tests for the shortlist presenter
"""
from voicefinder.render.presenter import (
    render_high_quality,
    render_languages,
    render_session,
    summarize_languages,
)
from voicefinder.search.types import SearchPlan, VoiceCandidate
from voicefinder.session.types import FilterState, Session


def voice(vid, gender="female", hq=False, **kw):
    return VoiceCandidate(
        voice_id=vid,
        name=f"Voice {vid}",
        gender=gender,
        category="high_quality" if hq else "professional",
        **kw,
    )


def session(voices, ranking=None, ui_language="en", **filters):
    return Session(
        thread_id="t1",
        original_query="brief",
        plan=SearchPlan(interface_language=ui_language, search_queries=["brief"]),
        voices=voices,
        ranking=ranking if ranking is not None else {v.voice_id: 1.0 for v in voices},
        ui_language=ui_language,
        filters=FilterState(**filters),
    )


def test_layout_snapshot():
    s = session(
        [voice("f1"), voice("m1", gender="male"), voice("h1", gender="male", hq=True)],
        ranking={"f1": 0.9, "m1": 0.5, "h1": 0.7},
    )

    assert render_session(s) == "\n".join([
        "Here are the voices I'd recommend based on your brief:",
        "",
        "### Standard voices (not marked as high quality)",
        "**Female:**",
        "- <https://elevenlabs.io/app/voice-library?search=f1|Voice f1> `f1`",
        "**Male:**",
        "- <https://elevenlabs.io/app/voice-library?search=m1|Voice m1> `m1`",
        "**Other / unspecified:**",
        "– no voices in this section.",
        "",
        "### High quality voices",
        "**Female:**",
        "– no voices in this section.",
        "**Male:**",
        "- <https://elevenlabs.io/app/voice-library?search=h1|Voice h1> `h1`",
        "**Other / unspecified:**",
        "– no voices in this section.",
        "",
        "You can refine this shortlist by asking things like:",
        "• \"show only high quality\"",
        "• \"show only female / only male\"",
        "• \"what languages do these voices support?\"",
        "• or just send a new brief in this thread",
    ])


def test_sorted_by_score_with_stable_ties():
    s = session(
        [voice("a"), voice("b"), voice("c"), voice("d")],
        ranking={"a": 0.1, "b": 0.5, "c": 0.5, "d": 0.9},
    )

    lines = [line for line in render_session(s).splitlines() if line.startswith("- ")]

    assert [line.rsplit("`", 2)[1] for line in lines] == ["d", "b", "c", "a"]


def test_bucket_cap_and_list_all():
    voices = [voice(f"f{i}") for i in range(12)]

    capped = render_session(session(voices))
    assert capped.count("- <") == 5

    listed = render_session(session(voices, list_all=True))
    assert listed.count("- <") == 12


def test_high_only_filter_keeps_sections_stable():
    s = session([voice("f1"), voice("h1", gender="male", hq=True)], quality="high_only", gender="male")

    text = render_session(s)
    standard, high = text.split("### High quality voices")

    assert "**Female:**" not in text
    assert "- <" not in standard
    assert "– no voices in this section." in standard
    assert "`h1`" in high
    assert text.endswith("Say \"show all genders\" if you want to see everything again.")


def test_gender_from_labels_and_other():
    s = session([
        VoiceCandidate(voice_id="lab", name="Lab", labels={"gender": "male"}),
        VoiceCandidate(voice_id="unk", name="Unk"),
    ])

    text = render_session(s)
    male_part = text.split("**Male:**")[1].split("**Other / unspecified:**")[0]
    assert "`lab`" in male_part
    assert "`unk`" in text.split("**Other / unspecified:**")[1]


def test_rendering_is_idempotent():
    s = session([voice(f"v{i}", gender=g) for i, g in enumerate(["female", "male", "x"] * 4)])

    assert render_session(s) == render_session(s)


def test_polish_labels():
    s = session([voice("f1")], ui_language="pl", gender="female")

    text = render_session(s)

    assert "### Standardowe głosy (bez oznaczenia wysokiej jakości)" in text
    assert "**Kobiece:**" in text
    assert "**Męskie:**" not in text


def test_languages_summary():
    voices = [
        voice("a", language="en"),
        voice("b", language="pl", verified_languages=[{"language": "pl"}, {"language": "en"}, {"language": "pl"}]),
        voice("c"),
    ]

    assert summarize_languages(voices) == {"en": 2, "pl": 1}
    assert render_languages(session(voices)) == "\n".join([
        "Languages across the current shortlist:",
        "• en: 2 voices",
        "• pl: 1 voices",
    ])
    assert render_languages(session([voice("c")])).startswith("These voices don't expose")


def test_high_quality_list_sorted_and_capped():
    voices = [voice(f"h{i}", hq=True) for i in range(25)] + [voice("s")]
    ranking = {v.voice_id: i / 100 for i, v in enumerate(voices)}

    text = render_high_quality(session(voices, ranking=ranking))
    lines = text.splitlines()

    assert lines[0] == "From the current shortlist, these are marked as high quality:"
    assert len(lines) == 21
    assert "`h24`" in lines[1]
    assert "`s`" not in text


def test_no_high_quality_voices():
    assert render_high_quality(session([voice("s")])) == (
        "None of the current suggestions are explicitly marked as high quality."
    )
