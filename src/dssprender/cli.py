# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""Command line entry point: render saved DSSP engine results."""

import argparse
import logging
import sys
from typing import List, Optional

# Rich imports for table output
import rich
from rich.console import Console
from rich.table import Table

from .types import ResidueAnnotation, HelixType, HelixFlagType
from .constants import kProgramName, kProgramVersion
from .errors import FormatIncompatibility
from .chain import load_chain_json, load_stats_json, annotations_from_chain, statistics_from_mapping
from .main import render, OUTPUT_FORMATS

# Get the logger configured in the dssprender package
log = logging.getLogger("dssprender")


def print_summary(annotations: List[ResidueAnnotation], num_residues_to_print: int = 50):
    """Prints a summary of the residue annotations using a rich Table."""
    if not annotations:
        log.warning("Attempted to print summary for an empty residue stream.")
        return

    console = Console(stderr=True)
    num_to_show = min(len(annotations), num_residues_to_print)

    table = Table(
        title=f"DSSP Annotation Summary (First {num_to_show} Residues)",
        show_header=True,
        header_style="bold magenta",
        show_edge=True,
        box=rich.box.ROUNDED
    )

    table.add_column("#", style="dim", width=5, justify="right")
    table.add_column("RESIDUE", style="cyan", width=10) # Chain:SeqId Ins
    table.add_column("AA", style="green", width=3)
    table.add_column("STRUCTURE", style="bold yellow", width=1, justify="center")
    table.add_column("BP1", width=4, justify="right")
    table.add_column("BP2", width=4, justify="right")
    table.add_column("SHT", width=3, justify="right")
    table.add_column("ACC", style="blue", width=6, justify="right")
    table.add_column("PHI", width=7, justify="right")
    table.add_column("PSI", width=7, justify="right")
    table.add_column("HELIX FLAGS", width=4, justify="center") # 3, alpha, pi, PP

    for res in annotations[:num_to_show]:
        ss_char = res.ss.to_char()
        helix_flags = ''.join(
            code if res.helix_state(kind) != HelixFlagType.NONE else '-'
            for kind, code in zip(HelixType, "GHIP")
        )
        bp = [str(p.nr) if p is not None else '.' for p in res.bridge_partners]
        table.add_row(
            str(res.nr),
            f"{res.auth_asym_id}:{res.auth_seq_id}{res.ins_code}",
            res.compound_id,
            f"[bold yellow]{ss_char}[/]" if ss_char != ' ' else ' ',
            bp[0],
            bp[1],
            str(res.sheet) if res.sheet else '.',
            f"{res.accessibility:.1f}",
            f"{res.phi:.1f}",
            f"{res.psi:.1f}",
            helix_flags
        )

    console.print(table)
    if len(annotations) > num_to_show:
        console.print(f"(... and {len(annotations) - num_to_show} more residues)", style="dim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=kProgramName,
        description="Write DSSP results (saved as JSON) in legacy DSSP or annotated mmCIF format."
    )
    parser.add_argument("input", help="JSON file with the per-residue DSSP results.")
    parser.add_argument("output", nargs="?", help="Output file (default: standard output).")
    parser.add_argument("--output-format", choices=OUTPUT_FORMATS,
                        help="'dssp' for classic DSSP or 'mmcif' for annotated mmCIF. "
                             "The default is chosen based on the extension of the output file.")
    parser.add_argument("--xyzin", help="URL or path of the mmCIF file of the structure, "
                                        "annotated in mmcif mode and used for the header in dssp mode.")
    parser.add_argument("--stats", help="JSON file with the structure statistics for the DSSP header. "
                                        "Overrides statistics stored in the input file.")
    parser.add_argument("--summary", type=int, default=0, metavar="N",
                        help="Print a summary table of the first N residues.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose DEBUG logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s version {kProgramVersion}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        log.setLevel(logging.DEBUG)
        log.debug("Verbose logging enabled.")

    try:
        chain, stats = load_chain_json(args.input)
        if args.stats:
            stats = load_stats_json(args.stats)
        annotations = annotations_from_chain(chain)
        if args.summary:
            print_summary(annotations, num_residues_to_print=args.summary)
        render(
            annotations,
            output=args.output,
            output_format=args.output_format,
            template=args.xyzin,
            stats=statistics_from_mapping(stats, annotations),
        )
    except FileNotFoundError as e:
        log.error(str(e))
        return 1
    except FormatIncompatibility as e:
        log.error(f"Cannot write legacy DSSP output: {e}")
        return 1
    except Exception as e:
        log.exception(f"An error occurred while writing DSSP output: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
