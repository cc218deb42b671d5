"""Shared test fixtures."""

import datetime
from typing import Any, Dict, List, Tuple

import pytest

from dssprender.types import ResidueAnnotation, SecondaryStructureType


def make_residue(nr: int, ss: SecondaryStructureType = SecondaryStructureType.LOOP,
                 compound_id: str = 'ALA', chain: str = 'A', seq_id: int = None,
                 **kwargs) -> ResidueAnnotation:
    """Residue whose label and author identifiers both follow `nr`."""
    seq_id = nr if seq_id is None else seq_id
    return ResidueAnnotation(
        nr=nr, compound_id=compound_id, asym_id=chain, seq_id=seq_id,
        auth_asym_id=chain, auth_seq_id=seq_id, ss=ss, **kwargs
    )


def make_stream(codes: str, chain: str = 'A') -> List[ResidueAnnotation]:
    """Consecutive residues from a string of DSSP codes ('-' or ' ' for loop)."""
    return [
        make_residue(i + 1, SecondaryStructureType.from_char(code), chain=chain)
        for i, code in enumerate(codes)
    ]


class RecordingSink:
    """Record sink that keeps every call for inspection."""

    def __init__(self):
        self.cleared: List[str] = []
        self.records: List[Tuple[str, Dict[str, Any]]] = []
        self.software: List[Tuple[str, str, str, str]] = []
        self.written = 0

    def clear(self, category):
        self.cleared.append(category)

    def emplace(self, category, record):
        self.records.append((category, dict(record)))

    def add_software(self, name, classification, version, date):
        self.software.append((name, classification, version, date))

    def write(self, stream):
        self.written += 1
        stream.write("persisted\n")

    def category(self, name):
        return [record for category, record in self.records if category == name]


@pytest.fixture
def residue_factory():
    return make_residue


@pytest.fixture
def stream_factory():
    return make_stream


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fixed_date() -> datetime.date:
    return datetime.date(2024, 1, 2)


MINIMAL_CIF = """data_1ABC
_entry.id 1ABC
_struct_keywords.entry_id 1ABC
_struct_keywords.pdbx_keywords HYDROLASE
_pdbx_database_status.recvd_initial_deposition_date 1987-01-02
loop_
_entity.id
_entity.type
_entity.src_method
_entity.pdbx_description
_entity.pdbx_ec
1 polymer man 'LYSOZYME C' 3.2.1.17
2 water nat water ?
_entity_poly.entity_id 1
_entity_poly.pdbx_strand_id A,B
_entity_src_gen.entity_id 1
_entity_src_gen.pdbx_gene_src_scientific_name 'Gallus gallus'
_entity_src_gen.pdbx_gene_src_ncbi_taxonomy_id 9031
_entity_src_gen.pdbx_host_org_scientific_name 'Escherichia coli'
loop_
_audit_author.name
_audit_author.pdbx_ordinal
'Smith, J.' 1
'Doe, A.' 2
loop_
_software.pdbx_ordinal
_software.name
_software.classification
1 REFMAC refinement
loop_
_struct_conf_type.id
_struct_conf_type.criteria
HELX_P PROMOTIF
loop_
_struct_conf.conf_type_id
_struct_conf.id
_struct_conf.beg_label_seq_id
_struct_conf.end_label_seq_id
HELX_P HELX_P1 4 15
"""


@pytest.fixture
def cif_text() -> str:
    return MINIMAL_CIF


@pytest.fixture
def cif_file(tmp_path, cif_text):
    path = tmp_path / "1abc.cif"
    path.write_text(cif_text)
    return str(path)
