# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""Conversion of DSSP engine results (ChainPytree) into residue annotations."""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from .types import (
    ChainPytree, ResiduePytree, ResidueAnnotation, StatisticsSummary,
    SecondaryStructureType, HelixFlagType, ChainBreak, BridgePartner, HBondPartner
)
from .constants import kHistogramSize, kHBondDistanceCount
from .legacy import default_statistics

# Get the logger instance configured in __init__
log = logging.getLogger("dssprender")

# --- Value Helpers --- #

def _angle(value: Any) -> float:
    """Angles are NaN in the engine where undefined; the legacy sentinel is 360."""
    if value is None or np.isnan(value):
        return 360.0
    return float(value)


def _ss_type(value: Any) -> SecondaryStructureType:
    if isinstance(value, str):
        return SecondaryStructureType.from_char(value)
    return SecondaryStructureType(int(value))


def _real(value: Any) -> float:
    """Plain reals; None (JSON null) and NaN become 0.0."""
    if value is None:
        return 0.0
    return float(np.nan_to_num(value, nan=0.0))


def _ca_coords(res: ResiduePytree) -> Tuple[float, float, float]:
    # bb_coords is an AtomCoords in memory and a dict or [N, CA, C, O, H] list after JSON
    bb_coords = res.get('bb_coords')
    if bb_coords:
        if isinstance(bb_coords, Mapping):
            ca = bb_coords.get('CA')
        elif hasattr(bb_coords, 'CA'):
            ca = bb_coords.CA
        else:
            ca = bb_coords[1]
    else:
        ca = res.get('ca_coords')
    if ca is None:
        return (0.0, 0.0, 0.0)
    ca = np.nan_to_num(np.asarray(ca, dtype=np.float64), nan=0.0)
    return (float(ca[0]), float(ca[1]), float(ca[2]))


def _hbond(res: ResiduePytree, kind: str, slot: int, numbers: Dict[int, int]) -> Optional[HBondPartner]:
    idx = res.get(f'hbond_{kind}_{slot}_idx', -1)
    energy = res.get(f'hbond_{kind}_{slot}_nrg', np.inf)
    if idx == -1 or idx not in numbers or not np.isfinite(energy):
        return None
    return HBondPartner(numbers[idx], float(energy))


def _bridge(res: ResiduePytree, slot: int, numbers: Dict[int, int]) -> Optional[BridgePartner]:
    idx = res.get(f'beta_partner_{slot}', -1)
    ladder = res.get(f'ladder_{slot}', -1)
    if idx == -1 or idx not in numbers:
        return None
    ladder = int(ladder) if ladder is not None else -1
    return BridgePartner(numbers[idx], ladder, bool(res.get(f'is_parallel_{slot}', False)))


def _seq_number(value: Any, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback

# --- Main Conversion --- #

def number_residues(chain: ChainPytree) -> Tuple[Dict[int, int], List[ChainBreak]]:
    """Assigns DSSP serial numbers, skipping one number at every break.

    A break is a change of chain id (new chain) or a jump in `res_index`
    (gap).

    Returns:
        Mapping of `res_index` to serial number, and the break type per residue.
    """
    numbers: Dict[int, int] = {}
    breaks: List[ChainBreak] = []
    nr = 0
    prev_res_index, prev_chain_id = None, None

    for i, res in enumerate(chain):
        res_index = res.get('res_index', i)
        chain_id = res.get('chain_id', '?')
        nr += 1
        chain_break = ChainBreak.NONE
        if prev_res_index is not None:
            if chain_id != prev_chain_id:
                chain_break = ChainBreak.NEW_CHAIN
                nr += 1
            elif res_index != prev_res_index + 1:
                chain_break = ChainBreak.GAP
                nr += 1
        numbers[res_index] = nr
        breaks.append(chain_break)
        prev_res_index, prev_chain_id = res_index, chain_id

    return numbers, breaks


def annotations_from_chain(chain: ChainPytree) -> List[ResidueAnnotation]:
    """Converts a ChainPytree (list of residue dicts) into residue annotations.

    Partner indices (`beta_partner_*`, `hbond_*_idx`) refer to `res_index`
    values and are translated into serial numbers. Missing keys fall back to
    the defaults of an unassigned loop residue.
    """
    numbers, breaks = number_residues(chain)
    annotations = []

    for i, (res, chain_break) in enumerate(zip(chain, breaks)):
        res_index = res.get('res_index', i)
        ss = _ss_type(res.get('secondary_structure', SecondaryStructureType.LOOP))
        chain_id = res.get('chain_id', '?')
        seq_id = _seq_number(res.get('seq_id', 0), 0)
        sheet_id = int(res.get('sheet_id', -1))

        annotations.append(ResidueAnnotation(
            nr=numbers[res_index],
            compound_id=res.get('res_name', 'UNK'),
            asym_id=chain_id,
            seq_id=seq_id,
            auth_asym_id=res.get('auth_asym_id', chain_id),
            auth_seq_id=_seq_number(res.get('auth_seq_id'), seq_id),
            ins_code=res.get('pdb_ins_code', '') or '',
            ss=ss,
            helix=(
                HelixFlagType(int(res.get('helix_3_10_flag', HelixFlagType.NONE))),
                HelixFlagType(int(res.get('helix_alpha_flag', HelixFlagType.NONE))),
                HelixFlagType(int(res.get('helix_pi_flag', HelixFlagType.NONE))),
                HelixFlagType(int(res.get('helix_pp_flag', HelixFlagType.NONE))),
            ),
            bend=bool(res.get('bend', ss == SecondaryStructureType.BEND)),
            alpha=_angle(res.get('alpha')),
            tco=_real(res.get('tco')),
            kappa=_angle(res.get('kappa')),
            phi=_angle(res.get('phi')),
            psi=_angle(res.get('psi')),
            ca=_ca_coords(res),
            accessibility=_real(res.get('accessibility')),
            bridge_partners=(_bridge(res, 1, numbers), _bridge(res, 2, numbers)),
            sheet=sheet_id if sheet_id > 0 else 0,
            ss_bridge_nr=int(res.get('ss_bridge_nr', 0)),
            acceptors=(_hbond(res, 'acceptor', 1, numbers), _hbond(res, 'acceptor', 2, numbers)),
            donors=(_hbond(res, 'donor', 1, numbers), _hbond(res, 'donor', 2, numbers)),
            chain_break=chain_break,
        ))

    log.debug(f"Converted {len(annotations)} residues, {sum(b != ChainBreak.NONE for b in breaks)} breaks.")
    return annotations

# --- Statistics --- #

def _counts(values: Any, size: int) -> Tuple[int, ...]:
    counts = np.zeros(size, dtype=np.int64)
    if values is not None:
        values = np.asarray(values, dtype=np.int64)[:size]
        counts[:len(values)] = values
    return tuple(int(c) for c in counts)


def statistics_from_mapping(
    stats: Optional[Mapping[str, Any]],
    annotations: List[ResidueAnnotation]
) -> StatisticsSummary:
    """Builds the header statistics from an engine statistics dictionary.

    Residue and chain counts default to what the residue stream shows; the
    accessible surface defaults to the sum of the residue accessibilities.
    """
    base = default_statistics(annotations)
    if stats is None:
        stats = {}
        log.warning("Statistics dictionary not provided, using default values for header.")
    surface = np.sum([r.accessibility for r in annotations]) if annotations else 0.0

    return StatisticsSummary(
        n_residues=int(stats.get('n_residues', base.n_residues)),
        n_chains=int(stats.get('n_chains', base.n_chains)),
        n_ss_bridges=int(stats.get('n_ss_bridges', 0)),
        n_intra_chain_ss_bridges=int(stats.get('n_intra_ss_bridges', 0)),
        accessible_surface=float(stats.get('acc_surf', surface)),
        n_hbonds=int(stats.get('n_hbonds', 0)),
        n_hbonds_parallel=int(stats.get('n_hbonds_par', 0)),
        n_hbonds_antiparallel=int(stats.get('n_hbonds_anti', 0)),
        hbonds_per_distance=_counts(stats.get('hbonds_dist'), kHBondDistanceCount),
        residues_per_alpha_helix=_counts(stats.get('hist_alpha'), kHistogramSize),
        parallel_bridges_per_ladder=_counts(stats.get('hist_par_bridge'), kHistogramSize),
        antiparallel_bridges_per_ladder=_counts(stats.get('hist_anti_bridge'), kHistogramSize),
        ladders_per_sheet=_counts(stats.get('hist_ladder'), kHistogramSize),
    )

# --- JSON Input --- #

def load_chain_json(filename: str) -> Tuple[ChainPytree, Optional[Dict[str, Any]]]:
    """Reads engine output saved as JSON.

    The file holds either a list of residue dicts, or an object with a
    `residues` list and an optional `statistics` dict.
    """
    with open(filename, 'r') as f:
        data = json.load(f)
    if isinstance(data, list):
        return data, None
    if not isinstance(data, dict) or 'residues' not in data:
        raise ValueError(f"{filename}: expected a list of residues or an object with a 'residues' key")
    return data['residues'], data.get('statistics')


def load_stats_json(filename: str) -> Dict[str, Any]:
    with open(filename, 'r') as f:
        stats = json.load(f)
    if not isinstance(stats, dict):
        raise ValueError(f"{filename}: expected an object with statistics")
    return stats
