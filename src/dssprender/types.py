# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""Data structures, Enums, and Type hints for dssp-render."""

from typing import List, Dict, Tuple, Any, NamedTuple, Optional
from enum import IntEnum

# --- Enums ---

class SecondaryStructureType(IntEnum):
    """Represents the DSSP secondary structure classification."""
    LOOP = 0        # L / ' '
    HELIX_3_10 = 1  # G
    HELIX_ALPHA = 2 # H
    HELIX_PI = 3    # I
    HELIX_PP = 4    # P (Polyproline II)
    TURN = 5        # T
    BEND = 6        # S
    BETA_BRIDGE = 7 # B (Single residue beta bridge)
    BETA_STRAND = 8 # E (Extended strand in beta ladder)

    def to_char(self) -> str:
        """Convert the enum member to its single-character DSSP code."""
        return _SS_CHARS[self]

    @classmethod
    def from_char(cls, code: str) -> "SecondaryStructureType":
        """Inverse of `to_char`; '-', 'L' and '.' are accepted for loops."""
        for ss, char in _SS_CHARS.items():
            if char == code:
                return ss
        if code in ('-', 'L', '.', ''):
            return cls.LOOP
        raise ValueError(f"Unknown secondary structure code {code!r}")

_SS_CHARS = {
    SecondaryStructureType.LOOP: ' ', SecondaryStructureType.HELIX_3_10: 'G',
    SecondaryStructureType.HELIX_ALPHA: 'H', SecondaryStructureType.HELIX_PI: 'I',
    SecondaryStructureType.HELIX_PP: 'P', SecondaryStructureType.TURN: 'T',
    SecondaryStructureType.BEND: 'S', SecondaryStructureType.BETA_BRIDGE: 'B',
    SecondaryStructureType.BETA_STRAND: 'E',
}

class HelixType(IntEnum):
    """The four helix kinds tracked per residue; values index `ResidueAnnotation.helix`."""
    HELIX_3_10 = 0
    ALPHA = 1
    PI = 2
    PP = 3

class HelixFlagType(IntEnum):
    """Indicates the role of a residue within a helix (start, middle, end)."""
    NONE = 0
    START = 1
    MIDDLE = 2
    END = 3
    START_END = 4 # Single residue helix

class ChainBreak(IntEnum):
    """Relation of a residue to the previously emitted residue."""
    NONE = 0
    GAP = 1
    NEW_CHAIN = 2

# --- Residue annotation ---

class HBondPartner(NamedTuple):
    """Hydrogen bond partner: serial number of the partner residue and energy."""
    nr: int
    energy: float

class BridgePartner(NamedTuple):
    """Beta bridge partner; `ladder` is the 0-based ladder index, -1 if unknown."""
    nr: int
    ladder: int
    parallel: bool

NO_HELIX = (HelixFlagType.NONE,) * 4

class ResidueAnnotation(NamedTuple):
    """One classified residue as delivered by the secondary structure engine.

    Angles use 360.0 as the "undefined" sentinel, as in the legacy format.
    """
    nr: int
    compound_id: str
    asym_id: str
    seq_id: int
    auth_asym_id: str
    auth_seq_id: int
    ins_code: str = ''
    ss: SecondaryStructureType = SecondaryStructureType.LOOP
    helix: Tuple[HelixFlagType, HelixFlagType, HelixFlagType, HelixFlagType] = NO_HELIX
    bend: bool = False
    alpha: float = 360.0
    tco: float = 0.0
    kappa: float = 360.0
    phi: float = 360.0
    psi: float = 360.0
    ca: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    accessibility: float = 0.0
    bridge_partners: Tuple[Optional[BridgePartner], Optional[BridgePartner]] = (None, None)
    sheet: int = 0
    ss_bridge_nr: int = 0
    acceptors: Tuple[Optional[HBondPartner], Optional[HBondPartner]] = (None, None)
    donors: Tuple[Optional[HBondPartner], Optional[HBondPartner]] = (None, None)
    chain_break: ChainBreak = ChainBreak.NONE

    def helix_state(self, kind: HelixType) -> HelixFlagType:
        return self.helix[kind]

# --- Statistics ---

class StatisticsSummary(NamedTuple):
    """Aggregate counts printed in the legacy header block."""
    n_residues: int = 0
    n_chains: int = 0
    n_ss_bridges: int = 0
    n_intra_chain_ss_bridges: int = 0
    accessible_surface: float = 0.0
    n_hbonds: int = 0
    n_hbonds_parallel: int = 0
    n_hbonds_antiparallel: int = 0
    hbonds_per_distance: Tuple[int, ...] = (0,) * 11 # offsets -5 .. +5
    residues_per_alpha_helix: Tuple[int, ...] = (0,) * 30
    parallel_bridges_per_ladder: Tuple[int, ...] = (0,) * 30
    antiparallel_bridges_per_ladder: Tuple[int, ...] = (0,) * 30
    ladders_per_sheet: Tuple[int, ...] = (0,) * 30

    @property
    def n_inter_chain_ss_bridges(self) -> int:
        return self.n_ss_bridges - self.n_intra_chain_ss_bridges

# --- Derived ---

class ConformationSegment(NamedTuple):
    """A maximal run of residues sharing one non-loop secondary structure."""
    conf_type_id: str
    id: str
    first: ResidueAnnotation
    last: ResidueAnnotation

# Type alias for the dictionary representing a single residue as produced by
# a DSSP engine (see `dssprender.chain.annotations_from_chain` for the keys).
ResiduePytree = Dict[str, Any]

# Type alias for a list of residue dictionaries, representing a protein chain.
ChainPytree = List[ResiduePytree]

# Mapping of PDB record name ('HEADER', 'COMPND', ...) to its rendered line.
PdbHeaders = Dict[str, str]
