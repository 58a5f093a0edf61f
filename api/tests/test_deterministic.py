import time

from phishshield.config import DEFAULT_CONFIG, RULE_WEIGHTS, URGENCY, SignalWeight
from phishshield.pipeline.deterministic import score_message
from phishshield.pipeline.extract_url import extract_urls
from phishshield.pipeline.link_risk import FLAG_LOOKALIKE
from phishshield.types import RiskLevel, SignalType

PHISH = "urgent: verify now your password at http://secure-paypa1.com"


def _types(result):
    return [s.type for s in result.signals]


def test_benign_text_scores_zero():
    r = score_message("Hi team, the quarterly meeting moves to Thursday afternoon.\nPlease bring your notes.")
    assert r.score == 0
    assert r.level == RiskLevel.LOW
    assert r.signals == ()
    assert r.urls == ()
    assert r.link_findings == ()


def test_empty_text():
    r = score_message("")
    assert (r.score, r.level, r.signals) == (0, RiskLevel.LOW, ())


def test_phishing_scenario():
    links = extract_urls(PHISH)
    assert len(links) == 1 and links[0].has_explicit_scheme

    r = score_message(PHISH)
    assert r.urls == ("http://secure-paypa1.com",)
    assert len(r.link_findings) == 1
    assert FLAG_LOOKALIKE in r.link_findings[0].flags
    assert r.link_findings[0].tld == "com"

    assert _types(r) == [
        SignalType.URGENCY,
        SignalType.CREDENTIALS_REQUEST,
        SignalType.BRAND_IMPERSONATION,
        SignalType.LINKS_PRESENT,
        SignalType.LINK_FLAGS,
    ]
    assert r.level.rank >= RiskLevel.MEDIUM.rank
    # 15 insecure + 50 urgency (capped) + 20 creds + 25 brand + 5 links + 2 flags
    assert r.score == 100
    assert r.level == RiskLevel.HIGH


def test_shouting_and_punctuation():
    r = score_message("CLICK HERE NOW!!!!")
    types = _types(r)
    assert SignalType.SHOUTING in types
    assert SignalType.EXCESSIVE_PUNCTUATION in types
    punct = next(s for s in r.signals if s.type == SignalType.EXCESSIVE_PUNCTUATION)
    assert punct.detail == "4 exclamation marks"
    # urgency 20 ("now") + shouting 20 + punctuation 20
    assert r.score == 60
    assert r.level == RiskLevel.MEDIUM


def test_few_exclamations_score_without_signal():
    r = score_message("Hello there!!")
    assert r.signals == ()
    assert r.score == 10


def test_tld_words_in_prose_do_not_count():
    assert score_message("the top of the list").score == 0


def test_suspicious_tld_on_link():
    r = score_message("see docs.example.tk")
    assert r.link_findings[0].flags == ("Suspicious TLD .tk",)
    # 5 links + 2 flags + 20 suspicious TLD; no scheme typed, so no http penalty
    assert r.score == 27
    assert r.level == RiskLevel.LOW


def test_explicit_http_penalty():
    insecure = score_message("go to http://example.com/a")
    secure = score_message("go to https://example.com/a")
    assert insecure.score - secure.score == RULE_WEIGHTS["insecure_link"].per_hit


def test_findings_match_urls():
    r = score_message("a.com, http://[bad and https://b.org")
    assert len(r.link_findings) == len(r.urls) == 3
    assert [f.url for f in r.link_findings] == list(r.urls)


def test_zero_weight_still_emits_signal():
    config = DEFAULT_CONFIG.with_weights({URGENCY: SignalWeight(per_hit=0, cap=0)})
    r = score_message("urgent", config)
    assert r.score == 0
    assert r.signals[0].type == SignalType.URGENCY
    assert r.signals[0].weight == 0


def test_score_clamped_and_level_consistent():
    samples = [
        "",
        PHISH,
        "FINAL NOTICE!!!! WIRE CASH NOW!!!\nhttp://1.2.3.4 http://x.y.z.tk http://bank1.zip",
        "nothing to see",
        "!" * 500,
    ]
    for text in samples:
        r = score_message(text)
        assert isinstance(r.score, int)
        assert 0 <= r.score <= 100
        assert r.level == RiskLevel.from_score(r.score)


def test_level_thresholds():
    assert RiskLevel.from_score(0) == RiskLevel.LOW
    assert RiskLevel.from_score(34) == RiskLevel.LOW
    assert RiskLevel.from_score(35) == RiskLevel.MEDIUM
    assert RiskLevel.from_score(69) == RiskLevel.MEDIUM
    assert RiskLevel.from_score(70) == RiskLevel.HIGH
    assert RiskLevel.from_score(100) == RiskLevel.HIGH


def test_genuine_brand_link_is_not_impersonation():
    r = score_message("see https://www.google.com")
    assert r.link_findings[0].flags == ()
    assert SignalType.BRAND_IMPERSONATION not in _types(r)
    assert _types(r) == [SignalType.LINKS_PRESENT]


def test_scoring_long_input_stays_fast():
    for text in ("a." * 10000, "1-" * 10000):
        start = time.perf_counter()
        score_message(text)
        assert time.perf_counter() - start < 1.0, text[:10]
