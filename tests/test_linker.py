"""Tests for the Linker: overlap resolution, replacement and the full pipeline."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import dataclasses
import logging

import pytest

import autolinkify
from autolinkify import (
    SKIP,
    ConfigurationError,
    EmailMatch,
    HashtagMatch,
    Linker,
    LinkerConfig,
    MatchType,
    MentionMatch,
    PhoneMatch,
    UrlMatch,
    replace_matches,
    resolve_overlaps,
)

NEW_WINDOW = ' target="_blank" rel="noopener noreferrer"'

MIXED = (
    "Mail joe@example.com, call (123) 456-7890, "
    "see www.example.com/a_(b) or @joe #tag"
)


def _url(text, offset):
    return UrlMatch(matched_text=text, offset=offset, url=text)


# ── Match model ──────────────────────────────────────────────────────

def test_match_end_offset():
    m = PhoneMatch(matched_text="(123) 456-7890", offset=3, number="1234567890")
    assert m.end_offset == 17
    assert m.type is MatchType.PHONE


def test_match_is_immutable():
    m = EmailMatch(matched_text="a@b.co", offset=0, email="a@b.co")
    with pytest.raises(dataclasses.FrozenInstanceError):
        m.offset = 5


def test_match_with_offset_returns_copy():
    m = EmailMatch(matched_text="a@b.co", offset=0, email="a@b.co")
    moved = m.with_offset(12)
    assert moved.offset == 12
    assert moved.email == "a@b.co"
    assert m.offset == 0


# ── Overlap resolution ───────────────────────────────────────────────

def test_resolve_empty():
    assert resolve_overlaps([]) == []


def test_resolve_url_beats_embedded_phone():
    url = _url("http://x.com/456-7890", 0)
    phone = PhoneMatch(matched_text="456-7890", offset=13, number="4567890")
    assert resolve_overlaps([phone, url]) == [url]


def test_resolve_longer_wins_on_tie():
    short = _url("example.co", 4)
    long = EmailMatch(matched_text="example.com@x.io", offset=4, email="example.com@x.io")
    assert resolve_overlaps([short, long]) == [long]


def test_resolve_earlier_wins_over_longer_later():
    first = _url("ab.com", 0)
    later = _url("b.com/very/long/path", 1)
    assert resolve_overlaps([later, first]) == [first]


def test_resolve_keeps_touching_matches():
    a = _url("a.com", 0)
    b = _url("b.com", 5)
    assert resolve_overlaps([b, a]) == [a, b]


def test_resolve_type_priority():
    mention = MentionMatch(matched_text="@abc", offset=0, mention="abc")
    hashtag = HashtagMatch(matched_text="#abc", offset=0, hashtag="abc")
    assert resolve_overlaps([mention, hashtag]) == [mention]
    assert resolve_overlaps([mention, hashtag], [MatchType.HASHTAG]) == [hashtag]


def test_resolve_logs_only_at_debug(caplog):
    caplog.set_level(logging.INFO, logger="autolinkify")
    resolve_overlaps([_url("a.com", 0), _url("a.co", 0)])
    assert caplog.records == []
    caplog.set_level(logging.DEBUG, logger="autolinkify")
    resolve_overlaps([_url("a.com", 0), _url("a.co", 0)])
    assert "2 -> 1 matches" in caplog.text


def test_resolve_output_sorted_and_disjoint():
    pooled = Linker(LinkerConfig(mention="twitter", hashtag="twitter")).parse(MIXED)
    for a, b in zip(pooled, pooled[1:]):
        assert a.end_offset <= b.offset


# ── Replacer ─────────────────────────────────────────────────────────

def test_replace_matches_basic():
    text = "go to a.com now"
    out = replace_matches(text, [_url("a.com", 6)], lambda m: "<A>")
    assert out == "go to <A> now"


def test_replace_matches_skip_keeps_text():
    text = "go to a.com now"
    assert replace_matches(text, [_url("a.com", 6)], lambda m: SKIP) == text


def test_replace_matches_rejects_overlap():
    with pytest.raises(ValueError):
        replace_matches("abcdefgh", [_url("abcd", 0), _url("cdef", 2)], lambda m: "")


# ── Linker ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("text", ["", "asdf", "123", "plain old text."])
def test_link_no_matches(text):
    assert Linker().link(text) == text


def test_link_url():
    assert Linker().link("Visit example.com") == (
        f'Visit <a href="http://example.com"{NEW_WINDOW}>example.com</a>'
    )


def test_link_email_with_class():
    out = Linker(LinkerConfig(class_name="x")).link("joe@example.com")
    assert out == (
        f'<a href="mailto:joe@example.com" class="x x-email"{NEW_WINDOW}>joe@example.com</a>'
    )


def test_link_phone_no_new_window():
    out = Linker(LinkerConfig(new_window=False)).link("Call (123) 456-7890.")
    assert out == 'Call <a href="tel:1234567890">(123) 456-7890</a>.'


def test_link_mention_classes():
    out = Linker(LinkerConfig(mention="twitter", class_name="auto", new_window=False)).link("hi @joe")
    assert out == (
        'hi <a href="https://twitter.com/joe" class="auto auto-mention auto-mention-twitter">@joe</a>'
    )


def test_parse_url_beats_phone_inside_it():
    matches = Linker().parse("http://example.com/123-456-7890")
    assert len(matches) == 1
    assert matches[0].type is MatchType.URL


def test_parse_email_beats_domain():
    matches = Linker().parse("write to joe@example.com")
    assert [m.type for m in matches] == [MatchType.EMAIL]


def test_parse_url_with_userinfo_links_real_host():
    matches = Linker().parse("see http://user@example.com now")
    assert [(m.type, m.matched_text, m.offset) for m in matches] == [
        (MatchType.URL, "http://user@example.com", 4),
    ]


def test_link_smart_truncation_odd_host():
    linker = Linker(LinkerConfig(truncate={"length": 10, "location": "smart"}))
    out = linker.link("go http://a／b.com/xxxxxxxxxxxxxxxxxxx")
    assert out.startswith("go ")


def test_parse_offsets_are_global():
    text = "<p>Hi</p><div class='x'>Call (123) 456-7890</div>"
    matches = Linker().parse(text)
    assert len(matches) == 1
    m = matches[0]
    assert text[m.offset:m.end_offset] == m.matched_text == "(123) 456-7890"


def test_parse_mixed_types():
    matches = Linker(LinkerConfig(mention="twitter", hashtag="twitter")).parse(MIXED)
    assert [m.type for m in matches] == [
        MatchType.EMAIL, MatchType.PHONE, MatchType.URL, MatchType.MENTION, MatchType.HASHTAG,
    ]
    for m in matches:
        assert MIXED[m.offset:m.end_offset] == m.matched_text


def test_link_skips_existing_anchors():
    text = '<a href="http://x.com">http://x.com</a> and www.y.com'
    assert Linker().link(text) == (
        '<a href="http://x.com">http://x.com</a> and '
        f'<a href="http://www.y.com"{NEW_WINDOW}>y.com</a>'
    )


def test_link_leaves_attributes_alone():
    text = '<img src="http://x.com/a.png" alt="joe@example.com"> hi'
    assert Linker().link(text) == text


def test_link_entity_is_a_boundary():
    out = Linker(LinkerConfig(new_window=False)).link("example.com&nbsp;foo")
    assert out == '<a href="http://example.com">example.com</a>&nbsp;foo'


def test_link_sanitize_html():
    out = Linker(LinkerConfig(sanitize_html=True, new_window=False)).link("<b>example.com</b>")
    assert out == '&lt;b&gt;<a href="http://example.com">example.com</a>&lt;/b&gt;'


def test_link_match_at_both_ends():
    out = Linker(LinkerConfig(new_window=False)).link("a.com b.com")
    assert out == '<a href="http://a.com">a.com</a> <a href="http://b.com">b.com</a>'


# ── replace_fn hook ──────────────────────────────────────────────────

@pytest.mark.parametrize("skip", [SKIP, False])
def test_replace_fn_skip_round_trips(skip):
    linker = Linker(LinkerConfig(mention="twitter", hashtag="twitter"))
    html = f"<p>{MIXED}</p><a href='x'>example.org</a>"
    assert linker.link(html, replace_fn=lambda m: skip) == html


def test_replace_fn_string():
    out = Linker().link("Call (123) 456-7890 now", replace_fn=lambda m: f"[{m.type.value}]")
    assert out == "Call [phone] now"


def test_replace_fn_none_uses_default():
    assert Linker().link("example.com", replace_fn=lambda m: None) == Linker().link("example.com")


def test_replace_fn_html_tag():
    linker = Linker(LinkerConfig(new_window=False))
    out = linker.link(
        "example.com",
        replace_fn=lambda m: linker.tag_builder.build(m).add_class("ext"),
    )
    assert out == '<a href="http://example.com" class="ext">example.com</a>'


def test_replace_fn_selective():
    out = Linker(LinkerConfig(new_window=False)).link(
        "a.com and joe@example.com",
        replace_fn=lambda m: SKIP if m.type is MatchType.EMAIL else None,
    )
    assert out == '<a href="http://a.com">a.com</a> and joe@example.com'


def test_replace_fn_bad_return():
    with pytest.raises(TypeError):
        Linker().link("example.com", replace_fn=lambda m: 42)


# ── Configuration ────────────────────────────────────────────────────

def test_require_scheme():
    linker = Linker(LinkerConfig(urls={"require_scheme": True}, new_window=False))
    out = linker.link("www.example.com and http://example.com")
    assert out == 'www.example.com and <a href="http://example.com">example.com</a>'


def test_require_scheme_conflicts():
    with pytest.raises(ConfigurationError):
        Linker(LinkerConfig(urls={"require_scheme": True, "www_matches": True}))


def test_unknown_url_option():
    with pytest.raises(ConfigurationError):
        Linker(LinkerConfig(urls={"bogus": True}))


def test_all_url_forms_disabled():
    with pytest.raises(ConfigurationError):
        Linker(LinkerConfig(urls={
            "scheme_matches": False, "www_matches": False,
            "tld_matches": False, "ipv4_matches": False,
        }))


def test_unknown_mention_service():
    with pytest.raises(ConfigurationError):
        Linker(LinkerConfig(mention="myspace"))


def test_unknown_type_priority():
    with pytest.raises(ConfigurationError):
        Linker(LinkerConfig(type_priority=["bogus"]))


def test_disable_types():
    linker = Linker(LinkerConfig(urls=False, email=False, phone=False))
    assert linker.matchers == []
    assert linker.link(MIXED) == MIXED


def test_custom_matcher():
    class TicketMatcher:
        def parse_matches(self, text, base_offset=0):
            i = text.find("www.")
            if i == -1:
                return []
            return [_url(text[i:i + 3], base_offset + i)]

    linker = Linker(LinkerConfig(urls=False, custom_matchers=[TicketMatcher()]))
    assert [m.matched_text for m in linker.parse("see www.x.com")] == ["www"]


def test_module_level_link():
    assert autolinkify.link("see a.com", new_window=False) == 'see <a href="http://a.com">a.com</a>'
    assert [m.type for m in autolinkify.parse("see a.com")] == [MatchType.URL]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
