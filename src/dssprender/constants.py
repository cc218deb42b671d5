# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""Fixed tables and texts of the legacy DSSP and mmCIF output formats."""

from .types import SecondaryStructureType, HelixType, HelixFlagType

# --- Program identification ---
kProgramName = "dssp-render"
kProgramVersion = "0.1.0"

# --- Legacy format limits ---
kHistogramSize = 30
kHBondDistanceCount = 11 # offsets -5 .. +5
kHeaderMarkerColumn = 127 # 0-based column of the trailing '.' marker
kMaxBridgePartnerNr = 10000 # bridge partner numbers are printed modulo this

# --- Amino acid one-letter codes ---
kAAMap = {
    'ALA': 'A', 'ARG': 'R', 'ASN': 'N', 'ASP': 'D', 'CYS': 'C', 'GLU': 'E',
    'GLN': 'Q', 'GLY': 'G', 'HIS': 'H', 'ILE': 'I', 'LEU': 'L', 'LYS': 'K',
    'MET': 'M', 'PHE': 'F', 'PRO': 'P', 'SER': 'S', 'THR': 'T', 'TRP': 'W',
    'TYR': 'Y', 'VAL': 'V'
}
kUnknownAA = 'X'

# --- Helix columns ---
# Printed left to right in this order.
kHelixColumnOrder = (HelixType.PP, HelixType.HELIX_3_10, HelixType.ALPHA, HelixType.PI)
kHelixMiddleChar = {
    HelixType.HELIX_3_10: '3',
    HelixType.ALPHA: '4',
    HelixType.PI: '5',
    HelixType.PP: 'P',
}
kHelixFlagChar = {
    HelixFlagType.NONE: ' ',
    HelixFlagType.START: '>',
    HelixFlagType.END: '<',
    HelixFlagType.START_END: 'X',
}

# --- mmCIF struct_conf_type identifiers ---
kConfTypeIds = {
    SecondaryStructureType.HELIX_3_10: "HELX_RH_3T_P",
    SecondaryStructureType.HELIX_ALPHA: "HELX_RH_AL_P",
    SecondaryStructureType.HELIX_PI: "HELX_RH_PI_P",
    SecondaryStructureType.HELIX_PP: "HELX_LH_PP_P",
    SecondaryStructureType.TURN: "TURN_TY1_P",
    SecondaryStructureType.BEND: "TURN_P",
    SecondaryStructureType.BETA_BRIDGE: "STRN",
    SecondaryStructureType.BETA_STRAND: "STRN",
}
kConfCriteria = "DSSP"
kSoftwareClassification = "other"

# --- Legacy header texts ---
kFirstLine = "==== Secondary Structure Definition by the program DSSP, NKI version 3.0                           ==== "
kReferenceLine = "REFERENCE W. KABSCH AND C.SANDER, BIOPOLYMERS 22 (1983) 2577-2637"
kCountsCaption = "TOTAL NUMBER OF RESIDUES, NUMBER OF CHAINS, NUMBER OF SS-BRIDGES(TOTAL,INTRACHAIN,INTERCHAIN)"
kSurfaceCaption = "ACCESSIBLE SURFACE OF PROTEIN (ANGSTROM**2)"
kHBondsCaption = "TOTAL NUMBER OF HYDROGEN BONDS OF TYPE O(I)-->H-N(J)  , SAME NUMBER PER 100 RESIDUES"
kHBondsParallelCaption = "TOTAL NUMBER OF HYDROGEN BONDS IN     PARALLEL BRIDGES, SAME NUMBER PER 100 RESIDUES"
kHBondsAntiparallelCaption = "TOTAL NUMBER OF HYDROGEN BONDS IN ANTIPARALLEL BRIDGES, SAME NUMBER PER 100 RESIDUES"
kHBondsDistanceCaption = "TOTAL NUMBER OF HYDROGEN BONDS OF TYPE O(I)-->H-N(I{sign}{distance}), SAME NUMBER PER 100 RESIDUES"
kHistogramHeaderLine = "  1  2  3  4  5  6  7  8  9 10 11 12 13 14 15 16 17 18 19 20 21 22 23 24 25 26 27 28 29 30     *** HISTOGRAMS OF ***           ."
kHistogramCaptions = (
    "    RESIDUES PER ALPHA HELIX         .",
    "    PARALLEL BRIDGES PER LADDER      .",
    "    ANTIPARALLEL BRIDGES PER LADDER  .",
    "    LADDERS PER SHEET                .",
)
kResidueCaptionLine = "  #  RESIDUE AA STRUCTURE BP1 BP2  ACC     N-H-->O    O-->H-N    N-H-->O    O-->H-N    TCO  KAPPA ALPHA  PHI   PSI    X-CA   Y-CA   Z-CA"
kBreakLineTail = "             0   0    0      0, 0.0     0, 0.0     0, 0.0     0, 0.0   0.000 360.0 360.0 360.0 360.0    0.0    0.0    0.0"
kNoHBond = "0, 0.0"

# PDB record names of the four structure metadata lines, in output order.
kPdbHeaderRecords = ("HEADER", "COMPND", "SOURCE", "AUTHOR")
