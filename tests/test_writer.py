"""Tests for the comment record writer."""
import pytest

from quotegate.credibility import CredibilityTable
from quotegate.errors import AlreadyRecordedError, StorageError
from quotegate.models import Classification, SourceChannel, Statement, Verdict
from quotegate.writer import CommentRecordWriter


class RecordingSink:
    def __init__(self):
        self.records = []

    def add(self, record):
        self.records.append(record)
        return 100 + len(self.records)


class FailingSink:
    def __init__(self, error):
        self.error = error

    def add(self, record):
        raise self.error


def _statement(channel=SourceChannel.NEWS, content="  אני תומך בחוק  "):
    return Statement(subject_id=3, content=content, source_url="https://ynet/1", channel=channel,
                     source_name="ynet", keywords=["חוק גיוס"])


def test_writes_one_record_with_verdict():
    sink = RecordingSink()
    writer = CommentRecordWriter(sink)
    verdict = Verdict(classification=Classification.FUZZY_DUPLICATE, duplicate_group="G1", duplicate_of=7)
    record = writer.write(_statement(), verdict)
    assert len(sink.records) == 1
    assert record.id == 101
    assert record.duplicate_of == 7
    assert record.duplicate_group == "G1"
    assert record.classification is Classification.FUZZY_DUPLICATE
    assert not record.is_primary


def test_content_kept_verbatim():
    record = CommentRecordWriter(RecordingSink()).write(
        _statement(), Verdict(classification=Classification.UNIQUE, duplicate_group="g"))
    assert record.content == "  אני תומך בחוק  "
    assert record.normalized_content == "אני תומך בחוק"
    assert record.is_primary


@pytest.mark.parametrize("channel,expected", [
    (SourceChannel.KNESSET, 10),
    (SourceChannel.NEWS, 7),
    (SourceChannel.FACEBOOK, 4),
    (SourceChannel.OTHER, 5),
])
def test_credibility_from_table(channel, expected):
    record = CommentRecordWriter(RecordingSink()).write(
        _statement(channel=channel), Verdict(classification=Classification.UNIQUE, duplicate_group="g"))
    assert record.source_credibility == expected


def test_injected_table():
    writer = CommentRecordWriter(RecordingSink(), CredibilityTable({SourceChannel.NEWS: 2}))
    record = writer.write(_statement(), Verdict(classification=Classification.UNIQUE, duplicate_group="g"))
    assert record.source_credibility == 2


@pytest.mark.parametrize("error", [
    AlreadyRecordedError("abc", "https://ynet/1", 5),
    StorageError("disk full"),
])
def test_sink_errors_propagate(error):
    writer = CommentRecordWriter(FailingSink(error))
    with pytest.raises(type(error)):
        writer.write(_statement(), Verdict(classification=Classification.UNIQUE, duplicate_group="g"))


def test_to_dict_serializable():
    record = CommentRecordWriter(RecordingSink()).write(
        _statement(), Verdict(classification=Classification.UNIQUE, duplicate_group="g"))
    data = record.to_dict()
    assert data["channel"] == "NEWS"
    assert data["classification"] == "UNIQUE"
    assert data["keywords"] == ["חוק גיוס"]
    assert data["ingested_at"] is not None


def test_empty_table_uses_its_default():
    writer = CommentRecordWriter(RecordingSink(), CredibilityTable({}, default=1))
    record = writer.write(_statement(), Verdict(classification=Classification.UNIQUE, duplicate_group="g"))
    assert record.source_credibility == 1
