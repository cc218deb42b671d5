# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""Legacy (fixed column) DSSP output."""

import datetime
import logging
from typing import Iterable, List, Optional, TextIO

from .types import (
    ResidueAnnotation, StatisticsSummary, HBondPartner, HelixType,
    HelixFlagType, ChainBreak, PdbHeaders
)
from .constants import (
    kAAMap, kUnknownAA, kHelixColumnOrder, kHelixMiddleChar, kHelixFlagChar,
    kMaxBridgePartnerNr, kHistogramSize, kHBondDistanceCount, kFirstLine,
    kReferenceLine, kCountsCaption, kSurfaceCaption, kHBondsCaption,
    kHBondsParallelCaption, kHBondsAntiparallelCaption, kHBondsDistanceCaption,
    kHistogramHeaderLine, kHistogramCaptions, kResidueCaptionLine,
    kBreakLineTail, kNoHBond, kPdbHeaderRecords
)
from .errors import FormatIncompatibility
from .formatting import format_int, format_real, letter, round_half_up, terminate, fit

# Get the logger instance configured in __init__
log = logging.getLogger("dssprender")

# --- Residue Lines --- #

def _helix_char(state: HelixFlagType, kind: HelixType) -> str:
    if state == HelixFlagType.MIDDLE:
        return kHelixMiddleChar[kind]
    return kHelixFlagChar[state]


def _format_hbond(res: ResidueAnnotation, partner: Optional[HBondPartner]) -> str:
    if partner is None:
        return kNoHBond
    return f"{partner.nr - res.nr},{partner.energy:3.1f}"


def format_residue_line(res: ResidueAnnotation) -> str:
    """Formats a single residue into the legacy DSSP fixed-width line.

    Column layout (widths):
        5 serial nr, 5 author seq nr, 1 insertion code, 1 chain, ' ',
        1 amino acid, '  ', 1 structure, 4 helix flags (PP, 3-10, alpha, pi),
        1 bend, 1 chirality, 2 bridge labels, 4+4 bridge partners, 1 sheet,
        4 accessibility, ' ', 4x11 H-bonds, '  ', TCO, KAPPA, ALPHA, PHI, PSI
        (6 each) and ' '-separated CA coordinates (6 each).

    Raises:
        FormatIncompatibility: If the chain identifier is longer than one
            character or a numeric field overflows.
    """
    if len(res.asym_id) > 1 or len(res.auth_asym_id) > 1:
        raise FormatIncompatibility(
            f"Chain '{res.auth_asym_id}' (label '{res.asym_id}') of residue {res.nr}: "
            "this file contains data that won't fit in the original DSSP format"
        )

    # --- Amino Acid Code ---
    aa_char = kAAMap.get(res.compound_id, kUnknownAA)
    if aa_char == 'C' and res.ss_bridge_nr:
        # Cystines in a disulfide share a lowercase letter per bridge
        aa_char = letter(res.ss_bridge_nr, lowercase=True)

    # --- Structure ---
    helix_flags = ''.join(_helix_char(res.helix_state(kind), kind) for kind in kHelixColumnOrder)
    bend_char = 'S' if res.bend else ' '
    chirality = ' ' if res.alpha == 360 else ('-' if res.alpha < 0 else '+')

    # --- Bridge Partners ---
    bp_nr = [0, 0]
    bp_label = [' ', ' ']
    for i, partner in enumerate(res.bridge_partners):
        if partner is None:
            continue
        bp_nr[i] = partner.nr % kMaxBridgePartnerNr
        if partner.ladder != -1:
            bp_label[i] = letter(partner.ladder + 1, lowercase=partner.parallel)

    sheet_label = letter(res.sheet) if res.sheet != 0 else ' '

    # --- H-Bonds ---
    nho = [_format_hbond(res, acceptor) for acceptor in res.acceptors]
    onh = [_format_hbond(res, donor) for donor in res.donors]

    ca_x, ca_y, ca_z = res.ca

    return (format_int(res.nr, 5)
            + format_int(res.auth_seq_id, 5)
            + f"{res.ins_code:1.1}"
            + f"{res.auth_asym_id:1.1}"
            + f" {aa_char}  "
            + res.ss.to_char()
            + helix_flags
            + bend_char
            + chirality
            + bp_label[0] + bp_label[1]
            + format_int(bp_nr[0], 4)
            + format_int(bp_nr[1], 4)
            + sheet_label
            + format_int(round_half_up(res.accessibility), 4)
            + f" {nho[0]:>11}{onh[0]:>11}{nho[1]:>11}{onh[1]:>11}  "
            + format_real(res.tco, 6, 3)
            + format_real(res.kappa, 6, 1)
            + format_real(res.alpha, 6, 1)
            + format_real(res.phi, 6, 1)
            + format_real(res.psi, 6, 1)
            + " " + format_real(ca_x, 6, 1)
            + " " + format_real(ca_y, 6, 1)
            + " " + format_real(ca_z, 6, 1))


def format_break_line(nr: int, chain_break: ChainBreak) -> str:
    """Placeholder line for the serial number `nr` skipped at a break."""
    break_char = '*' if chain_break == ChainBreak.NEW_CHAIN else ' '
    return f"{format_int(nr, 5)}        !{break_char}{kBreakLineTail}"

# --- Header --- #

def _per_100(count: int, n_residues: int) -> float:
    return count * 100.0 / n_residues if n_residues > 0 else 0.0


def _histogram(values: Iterable[int], caption: str) -> str:
    values = list(values)
    if len(values) > kHistogramSize:
        raise FormatIncompatibility(
            f"Histogram '{caption.strip(' .')}' has {len(values)} buckets, at most {kHistogramSize} fit"
        )
    values += [0] * (kHistogramSize - len(values))
    return ''.join(format_int(v, 3) for v in values) + caption


def build_header(
    stats: StatisticsSummary,
    pdb_headers: Optional[PdbHeaders] = None,
    today: Optional[datetime.date] = None
) -> List[str]:
    """Builds the header block of a legacy DSSP file, without line terminators.

    Args:
        stats: Aggregate statistics of the classified structure.
        pdb_headers: Pre-formatted HEADER/COMPND/SOURCE/AUTHOR lines. Missing
                     records are written as the bare record name.
        today: Date printed in the title line (default: today).
    """
    today = today or datetime.date.today()
    pdb_headers = pdb_headers or {}
    n_res = stats.n_residues

    lines = [
        terminate(f"{kFirstLine}DATE={today.isoformat()}"),
        terminate(kReferenceLine),
    ]
    lines += [fit(pdb_headers.get(record) or record) for record in kPdbHeaderRecords]

    # --- Statistics Section ---
    lines.append(terminate(
        format_int(n_res, 5)
        + format_int(stats.n_chains, 3)
        + format_int(stats.n_ss_bridges, 3)
        + format_int(stats.n_intra_chain_ss_bridges, 3)
        + format_int(stats.n_inter_chain_ss_bridges, 3)
        + f" {kCountsCaption}"))
    lines.append(terminate(f"{format_real(stats.accessible_surface, 8, 1)}   {kSurfaceCaption}"))

    for count, caption in ((stats.n_hbonds, kHBondsCaption),
                           (stats.n_hbonds_parallel, kHBondsParallelCaption),
                           (stats.n_hbonds_antiparallel, kHBondsAntiparallelCaption)):
        lines.append(terminate(f"{format_int(count, 5)}{format_real(_per_100(count, n_res), 5, 1)}   {caption}"))

    hbonds_dist = list(stats.hbonds_per_distance)
    for k in range(kHBondDistanceCount):
        count = hbonds_dist[k] if k < len(hbonds_dist) else 0
        caption = kHBondsDistanceCaption.format(sign='-' if k - 5 < 0 else '+', distance=abs(k - 5))
        lines.append(terminate(f"{format_int(count, 5)}{format_real(_per_100(count, n_res), 5, 1)}   {caption}"))

    # --- Histograms Section ---
    lines.append(kHistogramHeaderLine)
    histograms = (stats.residues_per_alpha_helix, stats.parallel_bridges_per_ladder,
                  stats.antiparallel_bridges_per_ladder, stats.ladders_per_sheet)
    for values, caption in zip(histograms, kHistogramCaptions):
        lines.append(_histogram(values, caption))

    return lines

# --- Main Legacy DSSP Output Functions --- #

def default_statistics(annotations: List[ResidueAnnotation]) -> StatisticsSummary:
    """Statistics with only the counts that follow from the residue stream itself."""
    n_chains = 0
    if annotations:
        n_chains = 1 + sum(1 for r in annotations if r.chain_break == ChainBreak.NEW_CHAIN)
    return StatisticsSummary(n_residues=len(annotations), n_chains=n_chains)


def render_dssp(
    annotations: Iterable[ResidueAnnotation],
    stats: Optional[StatisticsSummary] = None,
    pdb_headers: Optional[PdbHeaders] = None,
    today: Optional[datetime.date] = None
) -> str:
    """Renders a complete legacy DSSP file.

    Args:
        annotations: Residues in strictly increasing `nr` order.
        stats: Statistics for the header; derived counts are used if omitted.
        pdb_headers: Structure metadata lines, see `build_header`.
        today: Date for the title line.

    Returns:
        The file contents, one newline per line.

    Raises:
        FormatIncompatibility: If any value does not fit the legacy format.
    """
    annotations = list(annotations)
    if stats is None:
        log.warning("Statistics not provided, using counts derived from the residues for the header.")
        stats = default_statistics(annotations)

    lines = build_header(stats, pdb_headers, today)
    lines.append(kResidueCaptionLine)

    n_breaks = 0
    last = 0
    for res in annotations:
        # Missing residues or a new chain: one placeholder line for the skipped number
        if res.nr != last + 1:
            lines.append(format_break_line(last + 1, res.chain_break))
            n_breaks += 1
        lines.append(format_residue_line(res))
        last = res.nr

    log.debug(f"Rendered {len(annotations)} residue lines and {n_breaks} break lines.")
    return ''.join(line + '\n' for line in lines)


def write_dssp(
    annotations: Iterable[ResidueAnnotation],
    stream: TextIO,
    stats: Optional[StatisticsSummary] = None,
    pdb_headers: Optional[PdbHeaders] = None,
    today: Optional[datetime.date] = None
) -> None:
    """Writes a legacy DSSP file to `stream`; nothing is written if rendering fails."""
    stream.write(render_dssp(annotations, stats, pdb_headers, today))


def write_dssp_output(
    annotations: Iterable[ResidueAnnotation],
    filename: str,
    stats: Optional[StatisticsSummary] = None,
    pdb_headers: Optional[PdbHeaders] = None,
    today: Optional[datetime.date] = None
) -> None:
    """Writes output in legacy DSSP format to `filename`.

    The file is only created once the whole report rendered successfully.
    """
    log.info(f"[bold cyan]Legacy DSSP Output[/] - Writing to [i]{filename}[/]", extra={"markup": True})
    text = render_dssp(annotations, stats, pdb_headers, today)
    with open(filename, 'w') as f:
        f.write(text)
    log.info(f"--> Successfully wrote legacy DSSP output to {filename}")
