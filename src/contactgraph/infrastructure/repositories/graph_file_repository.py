# src/contactgraph/infrastructure/repositories/graph_file_repository.py
"""Plain text graph files and a directory-backed repository of them."""

import logging
import os
import re
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, TextIO, Tuple, Union

from ...core.domain.models.amino_acids import UNKNOWN_ONE_LETTER
from ...core.domain.models.contact_type import CROSSED_SEPARATOR
from ...core.domain.models.edges import RIGEdge
from ...core.domain.models.protein_graph import (
    GraphBuilder,
    GraphMetadata,
    RIGraph,
    rig_builder_for_sequence,
)
from ...core.exceptions import GraphFileFormatError, InvalidContactTypeError
from ...core.interfaces.repository import Repository

logger = logging.getLogger(__name__)

GRAPH_FILE_FORMAT_VERSION = "1.0"
GRAPH_FILE_HEADER = f"#OWL GRAPH FILE ver: {GRAPH_FILE_FORMAT_VERSION}"
GRAPH_FILE_EXTENSION = ".graph"

_VERSION_RE = re.compile(r"^#(?:AGLAPPE|CMVIEW|OWL).*ver: (\d\.\d)")
_SEQUENCE_RE = re.compile(r"^#SEQUENCE:\s*(\w*)$")
_PDB_RE = re.compile(r"^#PDB:\s*(\S*)")
_CHAIN_RE = re.compile(r"^#CHAIN:\s*(\S*)")
_MODEL_RE = re.compile(r"^#MODEL:\s*(\d+)")
_CT_RE = re.compile(r"^#CT:\s*([A-Za-z/+]+)")
_CUTOFF_RE = re.compile(r"^#CUTOFF:\s*(\d+(?:\.\d+)?)")
_DIRECTED_RE = re.compile(r"^#DIRECTED:\s*(true|false)\s*$", re.IGNORECASE)
_CONTACT_RE = re.compile(r"^\s*(\d+)\s+(\d+)(?:\s+(\d+(?:\.\d+)?))?\s*$")

Source = Union[str, os.PathLike, TextIO]


@contextmanager
def _open(target: Source, mode: str) -> Iterator[TextIO]:
    if isinstance(target, (str, os.PathLike)):
        with open(target, mode) as handle:
            yield handle
    else:
        yield target


def write_graph(graph: RIGraph, target: Source) -> None:
    """
    Write a graph in the text graph format.

    Edges are written one per line as ``i<TAB>j<TAB>weight`` in ascending
    order, after the header lines with the graph metadata.

    Args:
        graph: Residue interaction graph
        target: File path or writable text stream
    """
    lines = [
        GRAPH_FILE_HEADER,
        f"#SEQUENCE: {graph.sequence}",
        f"#PDB: {graph.structure_id or ''}",
        f"#CHAIN: {graph.chain_id or ''}",
        f"#MODEL: {graph.model}",
        f"#CT: {graph.contact_type or ''}",
        f"#CUTOFF: {graph.cutoff}",
        f"#DIRECTED: {str(graph.directed).lower()}",
    ]
    lines.extend(f"{i}\t{j}\t{edge.weight:6.3f}" for i, j, edge in graph.edges())
    with _open(target, "w") as handle:
        handle.write("\n".join(lines) + "\n")
    logger.debug(f"Wrote graph with {graph.num_edges} contacts")


def _parse_header_line(line: str, header: Dict[str, str]) -> None:
    for key, pattern in (
        ("sequence", _SEQUENCE_RE),
        ("structure_id", _PDB_RE),
        ("chain_id", _CHAIN_RE),
        ("model", _MODEL_RE),
        ("contact_type", _CT_RE),
        ("cutoff", _CUTOFF_RE),
        ("directed", _DIRECTED_RE),
    ):
        match = pattern.match(line)
        if match:
            header[key] = match.group(1)


def read_graph(source: Source, simple: bool = False) -> RIGraph:
    """
    Read a graph file.

    Args:
        source: File path or readable text stream
        simple: Read a bare edge list; the sequence is then all ``X`` up to
            the largest serial

    Returns:
        Graph with a node per serial found in the edges. Directedness comes
        from the ``#DIRECTED`` line; files without one are directed iff their
        contact type is crossed.

    Raises:
        GraphFileFormatError: For an unknown first line or format version, a
            missing sequence, a serial outside the sequence, or a directed
            graph with a contact type that is not crossed
    """
    header: Dict[str, str] = {}
    contacts: Dict[Tuple[int, int], float] = {}
    with _open(source, "r") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.rstrip("\n")
            if not simple:
                version = _VERSION_RE.match(line)
                if version:
                    if version.group(1) != GRAPH_FILE_FORMAT_VERSION:
                        raise GraphFileFormatError(
                            f"Graph file has format version {version.group(1)}, "
                            f"supported version is {GRAPH_FILE_FORMAT_VERSION}"
                        )
                elif line_number == 1:
                    raise GraphFileFormatError("Not a graph file: missing version header")
                _parse_header_line(line, header)
            contact = _CONTACT_RE.match(line)
            if contact:
                weight = float(contact.group(3)) if contact.group(3) else 1.0
                contacts[(int(contact.group(1)), int(contact.group(2)))] = weight

    serials = sorted({serial for pair in contacts for serial in pair})
    if simple:
        header["sequence"] = UNKNOWN_ONE_LETTER * (serials[-1] if serials else 0)
    if "sequence" not in header:
        raise GraphFileFormatError("No sequence present in graph file")
    sequence = header["sequence"]
    for serial in serials:
        if not 1 <= serial <= len(sequence):
            raise GraphFileFormatError(
                f"Residue serial {serial} outside sequence of length {len(sequence)}"
            )

    contact_type = header.get("contact_type")
    if "directed" in header:
        directed = header["directed"].lower() == "true"
    else:
        directed = contact_type is not None and CROSSED_SEPARATOR in contact_type
    try:
        metadata = GraphMetadata(
            sequence=sequence,
            structure_id=header.get("structure_id") or None,
            chain_id=header.get("chain_id") or None,
            model=int(header.get("model", 1)),
            contact_type=contact_type,
            cutoff=float(header.get("cutoff", 0.0)),
            directed=directed,
        )
    except InvalidContactTypeError as e:
        raise GraphFileFormatError(str(e)) from e
    # only residues appearing in a contact become nodes
    full = rig_builder_for_sequence(metadata)
    builder: GraphBuilder = GraphBuilder(metadata)
    for serial in serials:
        builder.add_node(serial, full.get_node(serial))
    for (i, j), weight in sorted(contacts.items()):
        builder.add_edge(i, j, RIGEdge(weight=weight))
    graph = builder.build()
    logger.debug(f"Read graph with {graph.obs_length} residues and {graph.num_edges} contacts")
    return graph


class GraphFileRepository(Repository[RIGraph]):
    """Repository storing each graph as ``<id>.graph`` in one directory."""

    def __init__(self, directory: str):
        """
        Initialize repository with a directory, creating it if needed.

        Args:
            directory: Directory holding the graph files
        """
        self._directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, id: str) -> str:
        return os.path.join(self._directory, f"{id}{GRAPH_FILE_EXTENSION}")

    def get(self, id: str) -> Optional[RIGraph]:
        path = self._path(id)
        if not os.path.exists(path):
            return None
        return read_graph(path)

    def list(self) -> List[str]:
        return sorted(
            os.path.splitext(file_name)[0]
            for file_name in os.listdir(self._directory)
            if file_name.endswith(GRAPH_FILE_EXTENSION)
        )

    def create(self, id: str, entity: RIGraph) -> RIGraph:
        path = self._path(id)
        if os.path.exists(path):
            raise FileExistsError(f"Graph {id!r} already exists")
        write_graph(entity, path)
        logger.info(f"Stored graph {id} in {self._directory}")
        return entity

    def update(self, id: str, entity: RIGraph) -> RIGraph:
        path = self._path(id)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Graph {id!r} does not exist")
        write_graph(entity, path)
        return entity

    def delete(self, id: str) -> None:
        path = self._path(id)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Graph {id!r} does not exist")
        os.remove(path)
