# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""dssp-render: legacy DSSP and annotated mmCIF output for classified residues.

Exposes the writers and configures logging.
"""

import logging
from rich.console import Console
from rich.logging import RichHandler

# --- Configure Logging --- #
# Use RichHandler for console output, on stderr so stdout stays free for
# the rendered files.
# Set level to INFO by default. Can be overridden by user applications.
# Show only the message, no logger name or timestamp by default.
logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]", # Used if format includes date/time
    handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False, show_level=False, show_time=False)]
)

# Get the specific logger instance for this package
log = logging.getLogger("dssprender")

# --- Public API --- #
from .constants import kProgramVersion as __version__
from .errors import FormatIncompatibility
from .types import (
    ResidueAnnotation, StatisticsSummary, SecondaryStructureType, HelixType,
    HelixFlagType, ChainBreak, BridgePartner, HBondPartner, ConformationSegment
)
from .legacy import render_dssp, write_dssp, write_dssp_output
from .annotate import annotate_dssp, conformation_segments
from .cif_io import CifRecordSink, load_cif_document, pdb_header_lines
from .chain import annotations_from_chain, statistics_from_mapping
from .main import render
