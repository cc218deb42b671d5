# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""Main orchestration: pick an output format and drive the matching writer."""

import datetime
import io
import logging
import os
import sys
from typing import Iterable, Optional, Union

import gemmi

from .types import ResidueAnnotation, StatisticsSummary
from .legacy import write_dssp
from .annotate import annotate_dssp
from .cif_io import CifRecordSink, load_cif_document, pdb_header_lines

# Get the logger instance configured in __init__
log = logging.getLogger("dssprender")

OUTPUT_FORMATS = ("dssp", "mmcif")


def detect_output_format(output: Optional[str], output_format: Optional[str] = None) -> str:
    """Explicit format if given, else 'dssp' for a `.dssp` output file and 'mmcif' otherwise.

    Raises:
        ValueError: If `output_format` is not one of OUTPUT_FORMATS.
    """
    if output_format is not None:
        if output_format not in OUTPUT_FORMATS:
            raise ValueError("Output format should be one of 'dssp' or 'mmcif'")
        return output_format
    if output and os.path.splitext(output)[1].lower() == '.dssp':
        return "dssp"
    return "mmcif"


def render(
    annotations: Iterable[ResidueAnnotation],
    output: Optional[str] = None,
    output_format: Optional[str] = None,
    template: Union[str, gemmi.cif.Document, None] = None,
    stats: Optional[StatisticsSummary] = None,
    today: Optional[datetime.date] = None
) -> str:
    """Writes the residue annotations in legacy DSSP or annotated mmCIF format.

    Args:
        annotations: Residues in strictly increasing `nr` order.
        output: Output file path; standard output if None.
        output_format: 'dssp' or 'mmcif'; chosen from `output` if None.
        template: mmCIF document (or its path/URL) of the structure. It is
                  annotated in mmCIF mode and supplies the HEADER, COMPND,
                  SOURCE and AUTHOR lines in DSSP mode.
        stats: Statistics for the legacy header.
        today: Date stamped into the output.

    Returns:
        The output format that was written.

    Raises:
        FormatIncompatibility: If the structure does not fit the legacy format.
    """
    fmt = detect_output_format(output, output_format)
    annotations = list(annotations)

    document = load_cif_document(template) if isinstance(template, str) else template
    log.info(f"[bold cyan]Writing {fmt} output[/] for [b]{len(annotations)}[/] residues to [i]{output or '<stdout>'}[/]", extra={"markup": True})

    # Render into a buffer first; the output file is only created on success
    buffer = io.StringIO()
    if fmt == "dssp":
        pdb_headers = pdb_header_lines(document.sole_block()) if document is not None else None
        write_dssp(annotations, buffer, stats, pdb_headers, today)
    else:
        sink = CifRecordSink(document)
        n_segments = annotate_dssp(annotations, sink, buffer, today=today)
        log.info(f"--> Annotated [b]{n_segments}[/] secondary structure segments.", extra={"markup": True})

    _emit(buffer.getvalue(), output)
    return fmt


def _emit(text: str, output: Optional[str]) -> None:
    if output is None:
        sys.stdout.write(text)
        return
    with open(output, 'w') as f:
        f.write(text)
    log.info(f"--> Successfully wrote {output}")
