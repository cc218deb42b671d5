# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""mmCIF annotation: secondary structure segments as struct_conf records."""

import collections
import datetime
import itertools
import logging
from typing import Any, Dict, Iterable, Iterator, NamedTuple, Optional, Protocol

from .types import ResidueAnnotation, ConformationSegment, SecondaryStructureType
from .constants import (
    kConfTypeIds, kConfCriteria, kProgramName, kProgramVersion, kSoftwareClassification
)

# Get the logger instance configured in __init__
log = logging.getLogger("dssprender")


class RecordSink(Protocol):
    """What the annotator needs from a record store (see `cif_io.CifRecordSink`)."""

    def clear(self, category: str) -> None: ...

    def emplace(self, category: str, record: Dict[str, Any]) -> None: ...

    def add_software(self, name: str, classification: str, version: str, date: str) -> None: ...

    def write(self, stream) -> None: ...


class _OpenSegment(NamedTuple):
    ss: SecondaryStructureType
    first: ResidueAnnotation
    last: ResidueAnnotation


def _close(segment: _OpenSegment, counters: Dict[str, int]) -> Optional[ConformationSegment]:
    conf_type_id = kConfTypeIds.get(segment.ss)
    if conf_type_id is None:
        return None
    occurrence = counters[conf_type_id]
    counters[conf_type_id] += 1
    return ConformationSegment(conf_type_id, f"{conf_type_id}{occurrence}", segment.first, segment.last)


def conformation_segments(annotations: Iterable[ResidueAnnotation]) -> Iterator[ConformationSegment]:
    """Run-length encodes the secondary structure of a residue stream.

    A segment is closed whenever the structure type changes and a new one is
    opened at the transition residue. Loops produce no segment. Two types that
    share an identifier (bridge 'B' followed by strand 'E') still give two
    separate, adjacent segments.

    Yields:
        ConformationSegment with ids numbered per identifier from 0.
    """
    counters: Dict[str, int] = collections.defaultdict(int)
    current: Optional[_OpenSegment] = None

    for res in annotations:
        if current is None:
            current = _OpenSegment(res.ss, res, res)
            continue
        if res.ss != current.ss:
            segment = _close(current, counters)
            if segment is not None:
                yield segment
            current = _OpenSegment(res.ss, res, res)
        else:
            current = current._replace(last=res)

    if current is not None:
        segment = _close(current, counters)
        if segment is not None:
            yield segment


def struct_conf_record(segment: ConformationSegment) -> Dict[str, Any]:
    """The `_struct_conf` row for one segment."""
    rb, re = segment.first, segment.last
    return {
        'conf_type_id': segment.conf_type_id,
        'id': segment.id,
        'beg_label_comp_id': rb.compound_id,
        'beg_label_asym_id': rb.asym_id,
        'beg_label_seq_id': rb.seq_id,
        'pdbx_beg_PDB_ins_code': rb.ins_code,
        'end_label_comp_id': re.compound_id,
        'end_label_asym_id': re.asym_id,
        'end_label_seq_id': re.seq_id,
        'pdbx_end_PDB_ins_code': re.ins_code,
        'beg_auth_comp_id': rb.compound_id,
        'beg_auth_asym_id': rb.auth_asym_id,
        'beg_auth_seq_id': rb.auth_seq_id,
        'end_auth_comp_id': re.compound_id,
        'end_auth_asym_id': re.auth_asym_id,
        'end_auth_seq_id': re.auth_seq_id,
        'criteria': kConfCriteria,
    }


def annotate_dssp(
    annotations: Iterable[ResidueAnnotation],
    sink: RecordSink,
    stream,
    version: Optional[str] = None,
    today: Optional[datetime.date] = None
) -> int:
    """Replaces the struct_conf annotation of `sink` and writes it to `stream`.

    Args:
        annotations: Residues in strictly increasing `nr` order.
        sink: Record store receiving `struct_conf_type`, `struct_conf` and
              `software` records.
        stream: Text stream the sink persists itself to.
        version: Program version for the software record.
        today: Date for the software record (default: today).

    Returns:
        The number of `struct_conf` records written.
    """
    version = version or kProgramVersion
    today = today or datetime.date.today()

    n_segments = 0
    declared = set() # struct_conf_type ids already emitted
    annotations = iter(annotations)
    first = next(annotations, None)

    if first is None:
        log.info("No secondary structure information found")
    else:
        sink.clear("struct_conf_type")
        sink.clear("struct_conf")
        for segment in conformation_segments(itertools.chain([first], annotations)):
            if segment.conf_type_id not in declared:
                sink.emplace("struct_conf_type", {'id': segment.conf_type_id})
                declared.add(segment.conf_type_id)
            sink.emplace("struct_conf", struct_conf_record(segment))
            n_segments += 1
        log.debug(f"Annotated {n_segments} segments of {len(declared)} types.")

    sink.add_software(kProgramName, kSoftwareClassification, version, today.isoformat())
    sink.write(stream)
    return n_segments

