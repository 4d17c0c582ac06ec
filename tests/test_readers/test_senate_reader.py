"""
Senate reader and routing tests.
"""
import json
from datetime import date

import pytest

from votelink_core.exceptions import InvalidInputError, MalformedDocumentError
from votelink_core.models import VotePosition
from votelink_core.readers import (
    READERS,
    DocumentSource,
    parse_document,
    parse_senate_xml,
    read_senate_file,
    read_vote_files,
)
from votelink_core.readers.senate import parse_senate_document


class TestParseSenateXml:
    """Tests for Senate roll-call XML."""

    def test_identity_fields(self, senate_xml):
        vote = parse_senate_xml(senate_xml)
        assert vote.vote_key == "senate:2024-02-15:45"
        assert vote.chamber == "senate"
        assert vote.congress == 118
        assert vote.session == 2
        assert vote.vote_date == date(2024, 2, 15)
        assert vote.source == "senate_xml"

    def test_bill_from_document(self, senate_xml):
        vote = parse_senate_xml(senate_xml)
        assert vote.bill_key == "118:hr:815"
        assert vote.bill_number == "H.R. 815"

    def test_question_prefers_full_text(self, senate_xml):
        vote = parse_senate_xml(senate_xml)
        assert vote.question == "On Passage of the Bill H.R. 815"
        assert vote.metadata["question_short"] == "On Passage of the Bill"

    def test_absent_counts_as_not_voting(self, senate_xml):
        vote = parse_senate_xml(senate_xml)
        assert (vote.yea_count, vote.nay_count, vote.present_count, vote.not_voting_count) == (67, 32, 0, 1)

    def test_members(self, senate_xml):
        vote = parse_senate_xml(senate_xml)
        assert [m.member_id for m in vote.members] == ["S354", "S397", "S415"]
        assert [m.position for m in vote.members] == [
            VotePosition.YEA,
            VotePosition.NAY,
            VotePosition.NOT_VOTING,
        ]
        assert vote.members[0].name == "Baldwin (D-WI)"
        assert vote.members[0].state == "WI"

    def test_nomination_is_not_a_bill(self, senate_nomination_xml):
        """PN documents carry no bill even when the question mentions one."""
        vote = parse_senate_xml(senate_nomination_xml)
        assert vote.bill_key is None
        assert vote.members == []
        assert vote.not_voting_count == 1

    def test_bill_from_question_without_document(self, senate_xml):
        start = senate_xml.index("<document>")
        end = senate_xml.index("</document>") + len("</document>")
        vote = parse_senate_xml(senate_xml[:start] + senate_xml[end:])
        assert vote.bill_key == "118:hr:815"

    def test_missing_root(self):
        with pytest.raises(MalformedDocumentError):
            parse_senate_xml("<rollcall-vote/>")

    def test_bad_vote_number(self, senate_xml):
        with pytest.raises(MalformedDocumentError):
            parse_senate_xml(senate_xml.replace("<vote_number>45</vote_number>", "<vote_number>0</vote_number>"))

    def test_bad_date(self, senate_xml):
        with pytest.raises(MalformedDocumentError):
            parse_senate_xml(senate_xml.replace("February 15, 2024,  01:45 PM", "whenever"))


class TestSenateDocumentTypes:
    """Tests for Senate <document_type> mapping."""

    @pytest.mark.parametrize(
        "doc_type,expected",
        [("S.", "s"), ("H.R.", "hr"), ("S.J.Res.", "sjres"), ("H.Con.Res.", "hconres"), ("S.Res.", "sres")],
    )
    def test_mapped_types(self, doc_type, expected):
        assert parse_senate_document(doc_type, "12").bill_type == expected

    @pytest.mark.parametrize("doc_type,number", [("PN", "123"), ("Treaty", "5"), ("S.", "x"), ("Q.", "4")])
    def test_unmapped(self, doc_type, number):
        assert parse_senate_document(doc_type, number) is None


class TestRouting:
    """Tests for parse_document and the READERS table."""

    def test_every_source_has_a_reader(self):
        assert set(READERS) == set(DocumentSource)

    def test_routes_by_enum(self, senate_xml):
        assert parse_document(DocumentSource.SENATE_XML, senate_xml).chamber == "senate"

    def test_routes_by_string(self, house_xml):
        assert parse_document("house_xml", house_xml).roll_number == 50

    def test_unknown_source(self, house_xml):
        with pytest.raises(InvalidInputError):
            parse_document("assembly_xml", house_xml)

    def test_wrong_reader_is_malformed(self, house_xml):
        with pytest.raises(MalformedDocumentError):
            parse_document(DocumentSource.SENATE_XML, house_xml)


class TestReadVoteFiles:
    """Tests for batch file loading."""

    def test_directory_skips_bad_documents(self, tmp_path, house_xml, senate_xml, house_json):
        (tmp_path / "a_house.xml").write_text(house_xml)
        (tmp_path / "b_house.json").write_text(json.dumps(house_json))
        (tmp_path / "c_senate.xml").write_text(senate_xml)
        (tmp_path / "d_broken.xml").write_text("<rollcall-vote>")
        (tmp_path / "notes.txt").write_text("ignored")

        votes = read_vote_files(tmp_path)
        assert [v.vote_key for v in votes] == [
            "house:2024-02-15:50",
            "house:2024-02-15:51",
            "senate:2024-02-15:45",
        ]

    def test_glob_pattern(self, tmp_path, house_xml, senate_xml):
        (tmp_path / "roll050.xml").write_text(house_xml)
        (tmp_path / "vote045.xml").write_text(senate_xml)
        votes = read_vote_files(str(tmp_path / "roll*.xml"))
        assert [v.chamber for v in votes] == ["house"]

    def test_list_of_paths_with_forced_source(self, tmp_path, senate_xml):
        path = tmp_path / "vote.xml"
        path.write_text(senate_xml)
        votes = read_vote_files([path], source=DocumentSource.SENATE_XML)
        assert votes[0].vote_key == "senate:2024-02-15:45"

    def test_missing_target(self, tmp_path):
        assert read_vote_files(tmp_path / "nowhere.xml") == []

    def test_read_senate_file(self, tmp_path, senate_xml):
        path = tmp_path / "vote_118_2_00045.xml"
        path.write_text(senate_xml)
        assert read_senate_file(path).roll_number == 45

    def test_read_senate_file_propagates_errors(self, tmp_path):
        path = tmp_path / "bad.xml"
        path.write_text("<roll_call_vote>")
        with pytest.raises(MalformedDocumentError):
            read_senate_file(path)
