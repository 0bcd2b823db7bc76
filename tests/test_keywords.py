"""Tests for topic keyword detection."""
from quotegate.keywords import match_keywords


def test_primary_keyword_matches():
    on_topic, keywords = match_keywords("אני תומך בחוק הגיוס")
    assert on_topic is True
    assert keywords == ["חוק הגיוס"]


def test_secondary_alone_not_enough():
    on_topic, keywords = match_keywords("military service matters")
    assert on_topic is False
    assert keywords == ["military service"]


def test_case_insensitive():
    on_topic, keywords = match_keywords("The DRAFT LAW and the idf")
    assert on_topic
    assert keywords == ["draft law", "IDF"]


def test_min_primary():
    on_topic, _ = match_keywords("recruitment law / draft law", min_primary=2)
    assert on_topic
    on_topic, _ = match_keywords("recruitment law only", min_primary=2)
    assert not on_topic


def test_no_match():
    assert match_keywords("weather today") == (False, [])
