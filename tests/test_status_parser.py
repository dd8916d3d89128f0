"""Tests for the status table parser."""

import pytest

from pack_platform.core.exceptions import OutputShapeError
from pack_platform.core.models import PackStatusRecord
from pack_platform.deploy.parser import StatusTableParser


@pytest.fixture
def parser():
    return StatusTableParser()


def test_parse_reads_third_line(parser):
    record = parser.parse("H1\nSEP\nA|B|C|D|E\n")

    assert record == PackStatusRecord(
        pack_name="A",
        registry_name="B",
        deployment_name="C",
        job_name="D",
        status="E",
    )


def test_parse_accepts_bytes(parser):
    record = parser.parse(b"H1\nSEP\nA|B|C|D|running\n")

    assert record is not None
    assert record.status == "running"


def test_three_fields_is_no_match(parser):
    assert parser.parse("H1\nSEP\nA|B|C\n") is None
    assert parser.has_match("H1\nSEP\nA|B|C\n") is False


def test_empty_data_row_is_no_match(parser):
    assert parser.parse("H1\nSEP\n\n") is None


def test_fields_are_not_trimmed(parser):
    record = parser.parse("H\nS\n redis | r1 | d1 | redis | running \n")

    assert record.pack_name == " redis "
    assert record.status == " running "


def test_extra_fields_are_ignored(parser):
    record = parser.parse("H\nS\nA|B|C|D|E|F\n")

    assert record.status == "E"


def test_too_few_lines_raises(parser):
    with pytest.raises(OutputShapeError) as exc_info:
        parser.parse("only a header\n")

    assert exc_info.value.code == "unexpected_output"


def test_empty_output_raises(parser):
    with pytest.raises(OutputShapeError):
        parser.parse(b"")


def test_four_fields_raises(parser):
    with pytest.raises(OutputShapeError, match="4 fields"):
        parser.parse("H\nS\nA|B|C|D\n")


def test_find_job_name(parser):
    assert parser.find_job_name("H\nS\nA|B|C|job-1|running\n") == "job-1"
    assert parser.find_job_name("H\nS\nA|B|C|job-1\n") == "job-1"
    assert parser.find_job_name("H\nS\nA|B\n") is None


def test_custom_row_and_delimiter():
    parser = StatusTableParser(row_index=0, delimiter=",")

    record = parser.parse("a,b,c,d,pending")

    assert record.pack_name == "a"
    assert record.status == "pending"


@pytest.mark.parametrize("kwargs", [{"row_index": -1}, {"delimiter": ""}])
def test_invalid_parser_settings(kwargs):
    with pytest.raises(ValueError):
        StatusTableParser(**kwargs)


def test_record_json_uses_tool_field_names(parser):
    record = parser.parse("H\nS\nA|B|C|D|E\n")

    assert record.to_json() == (
        '{"PackName":"A","RegistryName":"B","DeploymentName":"C","JobName":"D","Status":"E"}'
    )
