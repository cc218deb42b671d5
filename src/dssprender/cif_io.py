# SPDX-License-Identifier: BSD-2-Clause
# Copyright (c) 2020 NKI/AVL, Netherlands Cancer Institute
# Substantial portions of this code are derived from the DSSP C++ implementation
# by Maarten L. Hekkelman and contributors, licensed under the BSD-2-Clause license.
# Full C++ source and license available at: https://github.com/PDB-REDO/dssp
"""mmCIF access through gemmi: template loading, record sink and PDB header lines."""

import collections
import logging
import os
from typing import Any, Dict, List, Optional, TextIO

import gemmi
import requests

from .types import PdbHeaders

# Get the logger instance configured in __init__
log = logging.getLogger("dssprender")

# --- Template Loading --- #

def load_cif_document(cif_url_or_file: str) -> gemmi.cif.Document:
    """Downloads (if URL) or reads (if local path) a CIF file into a gemmi Document.

    Raises:
        RuntimeError: If downloading the CIF file fails.
        FileNotFoundError: If `cif_url_or_file` is a local path and not found.
    """
    is_url = cif_url_or_file.lower().startswith(('http:', 'https:'))
    if is_url:
        log.debug(f"--> Downloading mmCIF template {cif_url_or_file}...")
        try:
            response = requests.get(cif_url_or_file, timeout=30)
            response.raise_for_status() # Raise HTTPError for bad responses (4xx or 5xx)
        except requests.exceptions.RequestException as e:
            log.error(f"Failed to download CIF file from URL: {cif_url_or_file}")
            raise RuntimeError(f"Failed to download CIF file: {e}") from e
        return gemmi.cif.read_string(response.text)

    if not os.path.exists(cif_url_or_file):
        log.error(f"Input file not found: {cif_url_or_file}")
        raise FileNotFoundError(f"Input file not found: {cif_url_or_file}")
    log.debug(f"--> Reading mmCIF template {cif_url_or_file}...")
    return gemmi.cif.read(cif_url_or_file)

# --- Record Sink --- #

def _cif_value(value: Any) -> Optional[str]:
    # '' and None are both written as '?' (unknown)
    if value is None or value == '':
        return None
    return str(value)


class CifRecordSink:
    """Collects category records and writes them into a gemmi CIF block.

    Records are buffered; the underlying document is only modified by
    `write`, so an annotation pass that fails halfway leaves the document
    untouched.
    """

    def __init__(self, document: Optional[gemmi.cif.Document] = None, block_name: str = "dssp"):
        if document is None:
            document = gemmi.cif.Document()
            document.add_new_block(block_name)
        self.document = document
        self.block = document.sole_block()
        self._cleared: List[str] = []
        self._records: Dict[str, List[Dict[str, Optional[str]]]] = collections.OrderedDict()
        self._software: List[Dict[str, Optional[str]]] = []

    def clear(self, category: str) -> None:
        """Drops all existing rows of `category` (e.g. 'struct_conf') on write."""
        if category not in self._cleared:
            self._cleared.append(category)

    def emplace(self, category: str, record: Dict[str, Any]) -> None:
        """Appends one record to `category`."""
        row = {tag: _cif_value(value) for tag, value in record.items()}
        self._records.setdefault(category, []).append(row)

    def add_software(self, name: str, classification: str, version: str, date: str) -> None:
        """Adds a `_software` provenance row; its ordinal follows the existing rows."""
        self._software.append({
            'name': name, 'version': _cif_value(version),
            'date': _cif_value(date), 'classification': classification,
        })

    def records(self, category: str) -> List[Dict[str, Optional[str]]]:
        """Buffered records of `category` (not yet written)."""
        return list(self._records.get(category, []))

    def _apply(self) -> None:
        for category in self._cleared:
            if category not in self._records and self.block.get_mmcif_category(f"_{category}."):
                self.block.find_mmcif_category(f"_{category}.").erase()

        for category, rows in self._records.items():
            existing = {} if category in self._cleared else self.block.get_mmcif_category(f"_{category}.")
            self._set_category(category, existing, rows)

        if self._software:
            existing = self.block.get_mmcif_category("_software.")
            n_existing = len(next(iter(existing.values()))) if existing else 0
            rows = [dict(row, pdbx_ordinal=str(n_existing + i + 1)) for i, row in enumerate(self._software)]
            self._set_category("software", existing, rows)

        self._cleared, self._records, self._software = [], collections.OrderedDict(), []

    def _set_category(self, category: str, existing: Dict[str, list], rows: List[Dict[str, Optional[str]]]) -> None:
        n_existing = len(next(iter(existing.values()))) if existing else 0
        tags = list(existing.keys())
        for row in rows:
            tags += [tag for tag in row if tag not in tags]
        data = {}
        for tag in tags:
            column = list(existing.get(tag, [None] * n_existing))
            column += [row.get(tag) for row in rows]
            data[tag] = column
        self.block.set_mmcif_category(f"_{category}.", data)

    def write(self, stream: TextIO) -> None:
        """Applies the buffered records and writes the document to `stream`."""
        self._apply()
        stream.write(self.document.as_string())

# --- PDB Header Lines --- #

_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def cif_to_pdb_date(date: str) -> str:
    """Converts '1987-01-02' into the PDB 'DD-MON-YY' form ('02-JAN-87')."""
    try:
        year, month, day = date.split('-')
        return f"{int(day):02d}-{_MONTHS[int(month) - 1]}-{year[-2:]}"
    except (ValueError, IndexError):
        return date


def _rows(block: gemmi.cif.Block, category: str) -> List[Dict[str, str]]:
    """Category as a list of row dicts; unknown ('?') and inapplicable ('.') become ''."""
    table = block.get_mmcif_category(f"_{category}.")
    if not table:
        return []
    n_rows = len(next(iter(table.values())))
    return [
        {tag: (values[i] if isinstance(values[i], str) else '') for tag, values in table.items()}
        for i in range(n_rows)
    ]


def _first(block: gemmi.cif.Block, category: str, tag: str) -> str:
    for row in _rows(block, category):
        if row.get(tag):
            return row[tag]
    return ''


def _header_line(block: gemmi.cif.Block) -> str:
    keywords = _first(block, "struct_keywords", "pdbx_keywords")
    date = _first(block, "pdbx_database_status", "recvd_initial_deposition_date")
    if not date:
        date = _first(block, "database_PDB_rev", "date_original")
    if date:
        date = cif_to_pdb_date(date)
    return f"HEADER    {keywords:<40.40}{date:<9.9}   {block.name:<4.4}"


def _compnd_line(block: gemmi.cif.Block) -> str:
    polys = {row.get('entity_id'): row for row in _rows(block, "entity_poly")}
    synonyms = _rows(block, "entity_name_com")
    compnd = []
    mol_id = 0
    for entity in _rows(block, "entity"):
        if entity.get('type') != 'polymer':
            continue
        entity_id = entity.get('id')
        mol_id += 1
        compnd.append(f"MOL_ID: {mol_id}")
        compnd.append(f"MOLECULE: {entity.get('pdbx_description', '')}")
        poly = polys.get(entity_id)
        if poly is not None:
            compnd.append("CHAIN: " + poly.get('pdbx_strand_id', '').replace(',', ', '))
        if entity.get('pdbx_fragment'):
            compnd.append(f"FRAGMENT: {entity['pdbx_fragment']}")
        for synonym in synonyms:
            if synonym.get('entity_id') == entity_id and synonym.get('name'):
                compnd.append(f"SYNONYM: {synonym['name']}")
        if entity.get('pdbx_mutation'):
            compnd.append(f"MUTATION: {entity['pdbx_mutation']}")
        if entity.get('pdbx_ec'):
            compnd.append(f"EC: {entity['pdbx_ec']}")
        if entity.get('src_method') in ('man', 'syn'):
            compnd.append("ENGINEERED: YES")
        if entity.get('details'):
            compnd.append(f"OTHER_DETAILS: {entity['details']}")
    return "COMPND    " + "; ".join(compnd)


# (SOURCE key, entity_src_gen tag, entity_src_nat tag)
_SOURCE_FIELDS = (
    ("ORGANISM_SCIENTIFIC", "pdbx_gene_src_scientific_name", "pdbx_organism_scientific"),
    ("ORGANISM_COMMON", "gene_src_common_name", "common_name"),
    ("ORGANISM_TAXID", "pdbx_gene_src_ncbi_taxonomy_id", "pdbx_ncbi_taxonomy_id"),
    ("STRAIN", "gene_src_strain", "strain"),
    ("GENE", "pdbx_gene_src_gene", None),
    ("ORGAN", "pdbx_gene_src_organ", "pdbx_organ"),
    ("EXPRESSION_SYSTEM", "pdbx_host_org_scientific_name", None),
    ("EXPRESSION_SYSTEM_COMMON", "host_org_common_name", None),
    ("EXPRESSION_SYSTEM_TAXID", "pdbx_host_org_ncbi_taxonomy_id", None),
    ("EXPRESSION_SYSTEM_STRAIN", "pdbx_host_org_strain", None),
    ("EXPRESSION_SYSTEM_VECTOR_TYPE", "pdbx_host_org_vector_type", None),
    ("EXPRESSION_SYSTEM_PLASMID", "plasmid_name", None),
)


def _source_line(block: gemmi.cif.Block) -> str:
    src_gen = {row.get('entity_id'): row for row in _rows(block, "entity_src_gen")}
    src_nat = {row.get('entity_id'): row for row in _rows(block, "entity_src_nat")}
    source = []
    mol_id = 0
    for entity in _rows(block, "entity"):
        if entity.get('type') != 'polymer':
            continue
        entity_id = entity.get('id')
        mol_id += 1
        source.append(f"MOL_ID: {mol_id}")
        gen, nat = src_gen.get(entity_id), src_nat.get(entity_id)
        for key, gen_tag, nat_tag in _SOURCE_FIELDS:
            value = ''
            if gen is not None:
                value = gen.get(gen_tag, '')
            elif nat is not None and nat_tag is not None:
                value = nat.get(nat_tag, '')
            if value:
                source.append(f"{key}: {value}")
    return "SOURCE    " + "; ".join(source)


def _author_line(block: gemmi.cif.Block) -> str:
    authors = [row['name'] for row in _rows(block, "audit_author") if row.get('name')]
    return "AUTHOR    " + ", ".join(authors)


def pdb_header_lines(block: gemmi.cif.Block) -> PdbHeaders:
    """Builds the HEADER, COMPND, SOURCE and AUTHOR lines for a legacy DSSP header."""
    return {
        'HEADER': _header_line(block),
        'COMPND': _compnd_line(block),
        'SOURCE': _source_line(block),
        'AUTHOR': _author_line(block),
    }
