"""Adapters turning Biopython structures and alignments into domain objects."""

import logging
from typing import Dict, List, Optional

from Bio import AlignIO
from Bio.Align import MultipleSeqAlignment
from Bio.PDB.Chain import Chain

from ...core.domain.implementations.multiple_alignment import MultipleSequenceAlignment
from ...core.domain.models.amino_acids import UNKNOWN_ONE_LETTER, is_standard, three_to_one
from ...core.domain.models.chain_structure import ChainStructure
from ...core.domain.models.residue import Residue

logger = logging.getLogger(__name__)


class BiopythonStructureAdapter:
    """Adapter for Bio.PDB chains."""

    def chain_from_biopython(
        self, chain: Chain, structure_id: Optional[str] = None, model: int = 1
    ) -> ChainStructure:
        """
        Convert a Bio.PDB chain to a ChainStructure.

        Residue serials are counted from the lowest kept residue number of
        the chain, which gets serial 1. Numbering gaps and non-standard residues
        become ``X`` in the sequence and are left out of the residues.
        Hetero residues and residues with insertion codes are skipped.

        Args:
            chain: Parsed chain
            structure_id: Identifier of the structure, e.g. a PDB code
            model: Model number

        Returns:
            ChainStructure with the observed standard residues
        """
        kept = []
        hetero = 0
        for bio_residue in chain:
            hetflag, resseq, icode = bio_residue.get_id()
            if hetflag.strip():
                hetero += 1
                continue
            if icode.strip():
                logger.warning(
                    f"Skipping residue {bio_residue.get_resname()} {resseq}{icode} "
                    f"of chain {chain.id}: insertion codes are not supported"
                )
                continue
            kept.append(bio_residue)
        if hetero:
            logger.warning(f"Skipped {hetero} hetero residues of chain {chain.id}")

        if not kept:
            return ChainStructure(sequence="", structure_id=structure_id, chain_id=chain.id, model=model)

        first = min(bio_residue.get_id()[1] for bio_residue in kept)
        last = max(bio_residue.get_id()[1] for bio_residue in kept)
        letters: List[str] = [UNKNOWN_ONE_LETTER] * (last - first + 1)
        residues: Dict[int, Residue] = {}
        next_atom_serial = 1
        for bio_residue in kept:
            resname = bio_residue.get_resname()
            if not is_standard(resname):
                logger.debug(f"Non-standard residue {resname} kept as X")
                continue
            serial = bio_residue.get_id()[1] - first + 1
            letters[serial - 1] = three_to_one(resname)
            residue = Residue(serial=serial, residue_type=resname)
            for bio_atom in bio_residue:
                atom_serial = bio_atom.get_serial_number()
                if atom_serial is None:
                    atom_serial = next_atom_serial
                next_atom_serial = max(next_atom_serial, atom_serial) + 1
                residue.add_atom(atom_serial, bio_atom.get_name(), bio_atom.get_coord())
            residues[serial] = residue

        structure = ChainStructure(
            sequence="".join(letters),
            residues=residues,
            structure_id=structure_id,
            chain_id=chain.id,
            model=model,
        )
        logger.debug(
            f"Chain {chain.id}: {structure.full_length} positions, {structure.obs_length} observed"
        )
        return structure


class BiopythonAlignmentAdapter:
    """Adapter for Bio.Align alignments."""

    def from_msa(self, msa: MultipleSeqAlignment) -> MultipleSequenceAlignment:
        """Alignment tagged by record id; sequences are upper-cased."""
        return MultipleSequenceAlignment.from_pairs(
            [(record.id, str(record.seq).upper()) for record in msa]
        )

    def read(self, path: str, format: str = "fasta") -> MultipleSequenceAlignment:
        """
        Read an alignment file.

        Args:
            path: Alignment file
            format: Any format Bio.AlignIO reads, FASTA by default
        """
        msa = AlignIO.read(path, format)
        logger.info(f"Read alignment of {len(msa)} sequences from {path}")
        return self.from_msa(msa)
