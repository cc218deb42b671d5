import io
import itertools
import random

import gemmi
import pytest

from dssprender.annotate import annotate_dssp, conformation_segments, struct_conf_record
from dssprender.cif_io import CifRecordSink
from dssprender.constants import kConfTypeIds
from dssprender.types import SecondaryStructureType as SS


def test_single_helix(stream_factory, recording_sink, fixed_date):
    stream = io.StringIO()

    n = annotate_dssp(stream_factory(" HHH "), recording_sink, stream, today=fixed_date)

    assert n == 1
    assert recording_sink.cleared == ["struct_conf_type", "struct_conf"]
    assert recording_sink.category("struct_conf_type") == [{'id': "HELX_RH_AL_P"}]
    [conf] = recording_sink.category("struct_conf")
    assert conf['conf_type_id'] == "HELX_RH_AL_P"
    assert conf['id'] == "HELX_RH_AL_P0"
    assert conf['beg_label_seq_id'] == 2
    assert conf['end_label_seq_id'] == 4
    assert conf['criteria'] == "DSSP"
    assert recording_sink.software == [("dssp-render", "other", "0.1.0", "2024-01-02")]
    assert recording_sink.written == 1
    assert stream.getvalue() == "persisted\n"


def test_types_declared_once_and_ids_count_per_type(stream_factory, recording_sink):
    annotate_dssp(stream_factory("HHH TT HH GGG HHHH"), recording_sink, io.StringIO())

    types = [r['id'] for r in recording_sink.category("struct_conf_type")]
    ids = [r['id'] for r in recording_sink.category("struct_conf")]

    assert types == ["HELX_RH_AL_P", "TURN_TY1_P", "HELX_RH_3T_P"]
    assert ids == ["HELX_RH_AL_P0", "TURN_TY1_P0", "HELX_RH_AL_P1", "HELX_RH_3T_P0", "HELX_RH_AL_P2"]


def test_bridge_then_strand_gives_two_segments(stream_factory):
    segments = list(conformation_segments(stream_factory("-BEEE-")))

    assert [s.id for s in segments] == ["STRN0", "STRN1"]
    assert (segments[0].first.nr, segments[0].last.nr) == (2, 2)
    assert (segments[1].first.nr, segments[1].last.nr) == (3, 5)


def test_leading_segment_gets_its_own_type(stream_factory):
    segments = list(conformation_segments(stream_factory("EEE--")))
    assert [(s.conf_type_id, s.id) for s in segments] == [("STRN", "STRN0")]
    assert segments[0].first.nr == 1


def test_all_loop_gives_no_segments(stream_factory, recording_sink):
    n = annotate_dssp(stream_factory("-----"), recording_sink, io.StringIO())

    assert n == 0
    assert recording_sink.cleared == ["struct_conf_type", "struct_conf"]
    assert recording_sink.records == []
    assert len(recording_sink.software) == 1


def test_empty_input_only_records_provenance(recording_sink):
    n = annotate_dssp([], recording_sink, io.StringIO())

    assert n == 0
    assert recording_sink.cleared == []
    assert recording_sink.records == []
    assert len(recording_sink.software) == 1
    assert recording_sink.written == 1


def test_explicit_version(stream_factory, recording_sink, fixed_date):
    annotate_dssp(stream_factory("H"), recording_sink, io.StringIO(), version="9.9", today=fixed_date)
    assert recording_sink.software == [("dssp-render", "other", "9.9", "2024-01-02")]


def test_segments_tile_the_non_loop_runs(stream_factory):
    rng = random.Random(17)
    codes = ''.join(rng.choice(" GHIPTSBE") for _ in range(300))
    residues = stream_factory(codes)

    segments = list(conformation_segments(residues))
    runs = [
        (ss, [r.nr for r in group])
        for ss, group in itertools.groupby(residues, key=lambda r: r.ss)
        if ss != SS.LOOP
    ]

    assert len(segments) == len(runs)
    for segment, (ss, nrs) in zip(segments, runs):
        assert segment.conf_type_id == kConfTypeIds[ss]
        assert (segment.first.nr, segment.last.nr) == (nrs[0], nrs[-1])
    ids = [s.id for s in segments]
    assert len(set(ids)) == len(ids)


def test_struct_conf_record_uses_label_and_author_ids(residue_factory):
    first = residue_factory(3, SS.TURN, compound_id='GLY', seq_id=3)._replace(auth_asym_id='X', auth_seq_id=103)
    last = residue_factory(4, SS.TURN, compound_id='PRO', seq_id=4, ins_code='A')._replace(auth_asym_id='X', auth_seq_id=104)

    [segment] = conformation_segments([first, last])
    record = struct_conf_record(segment)

    assert record['beg_label_comp_id'] == 'GLY'
    assert record['end_label_comp_id'] == 'PRO'
    assert record['beg_label_asym_id'] == 'A'
    assert record['beg_auth_asym_id'] == 'X'
    assert record['beg_auth_seq_id'] == 103
    assert record['end_auth_seq_id'] == 104
    assert record['pdbx_end_PDB_ins_code'] == 'A'
    assert len(record) == 17


def test_annotates_real_document(cif_text, stream_factory, fixed_date):
    sink = CifRecordSink(gemmi.cif.read_string(cif_text))
    stream = io.StringIO()

    annotate_dssp(stream_factory("-HHHH--EE-"), sink, stream, today=fixed_date)

    block = gemmi.cif.read_string(stream.getvalue()).sole_block()
    conf_type = block.get_mmcif_category("_struct_conf_type.")
    conf = block.get_mmcif_category("_struct_conf.")
    software = block.get_mmcif_category("_software.")

    assert conf_type['id'] == ["HELX_RH_AL_P", "STRN"]
    assert conf['id'] == ["HELX_RH_AL_P0", "STRN0"]
    assert conf['beg_label_seq_id'] == ["2", "8"]
    assert conf['end_label_seq_id'] == ["5", "9"]
    # The template's own assignment is gone
    assert "HELX_P1" not in conf['id']
    assert conf['pdbx_beg_PDB_ins_code'] == [None, None]
    assert software['name'] == ["REFMAC", "dssp-render"]
    assert software['pdbx_ordinal'] == ["1", "2"]
    assert software['date'] == [None, "2024-01-02"]
    # Unrelated categories survive
    assert block.find_value("_struct_keywords.pdbx_keywords") == "HYDROLASE"


def test_document_untouched_until_written(cif_text, stream_factory):
    document = gemmi.cif.read_string(cif_text)
    sink = CifRecordSink(document)

    sink.clear("struct_conf")
    sink.emplace("struct_conf", {'id': "HELX_RH_AL_P0"})

    assert document.sole_block().get_mmcif_category("_struct_conf.")['id'] == ["HELX_P1"]
    assert sink.records("struct_conf") == [{'id': "HELX_RH_AL_P0"}]


def test_failed_pass_writes_nothing(stream_factory):
    def failing_engine():
        yield from stream_factory("HH")
        raise RuntimeError("engine failure")

    sink = CifRecordSink()
    stream = io.StringIO()

    with pytest.raises(RuntimeError):
        annotate_dssp(failing_engine(), sink, stream)

    assert stream.getvalue() == ""
    assert sink.block.get_mmcif_category("_struct_conf.") == {}
