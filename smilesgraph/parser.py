"""
SMILES string parser.

This module converts SMILES text into immutable Molecule objects. Text is
first lexed by the tokenizer; the parser then walks the token stream with
an explicit branch stack and ring-closure table, so nesting depth is bounded
by configuration rather than by the interpreter's call stack.

Supported features:
    - Organic subset and bracket atoms (isotope, hydrogens, charge)
    - Aromatic atoms and bonds
    - Ring closures (0-9, %nn)
    - Branches (parentheses)
    - Multi-component molecules (dot separator)
    - Substructure patterns: wildcard atoms (*) and any bonds (~)

Chirality and bond direction markers are accepted and ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from smilesgraph.config import DEFAULT_PARSE_LIMITS, ParseLimits
from smilesgraph.elements import (
    AtomCategory,
    BondOrder,
    max_valence,
)
from smilesgraph.exceptions import (
    InvalidValenceError,
    ResourceLimitExceeded,
    SmilesSyntaxError,
    UnclosedRingError,
)
from smilesgraph.tokenizer import Token, TokenKind, tokenize
from smilesgraph.types import Molecule, MoleculeBuilder

logger = logging.getLogger(__name__)

# Aromatic elements that keep one valence unit for the ring pi bond when neutral
_PI_VALENCE_ELEMENTS = frozenset({5, 6, 14})


@dataclass(slots=True)
class _OpenRing:
    """A ring-closure number waiting for its partner."""

    atom_idx: int
    bond: Token | None
    offset: int


@dataclass
class _ParserState:
    """Mutable state for a single parse."""

    # Ring closure tracking: ring number -> pending closure
    open_rings: dict[int, _OpenRing] = field(default_factory=dict)

    # Branch stack: (atom to return to, offset of the '(')
    branch_stack: list[tuple[int, int]] = field(default_factory=list)

    prev_atom: int | None = None
    pending_bond: Token | None = None
    prev_kind: TokenKind | None = None


class SmilesParser:
    """SMILES string parser.

    Example:
        >>> parser = SmilesParser("CCO")
        >>> mol = parser.parse()
        >>> len(mol.atoms)
        3

    For convenience, use the module-level `parse()` function:
        >>> from smilesgraph import parse
        >>> mol = parse("CCO")
    """

    def __init__(
        self,
        smiles: str,
        limits: ParseLimits | None = None,
        allow_patterns: bool = False,
    ) -> None:
        """Initialize parser with a SMILES string.

        Args:
            smiles: SMILES string to parse.
            limits: Length and nesting bounds (defaults apply if None).
            allow_patterns: Parse as a substructure pattern: accept the any
                bond (~) and skip valence validation.
        """
        self._smiles = smiles
        self._limits = limits or DEFAULT_PARSE_LIMITS
        self._allow_patterns = allow_patterns
        self._builder = MoleculeBuilder()
        self._state = _ParserState()

    def parse(self) -> Molecule:
        """Parse the SMILES string into a Molecule.

        Returns:
            Parsed Molecule object.

        Raises:
            SmilesSyntaxError: If SMILES syntax is invalid.
            UnclosedRingError: If a ring closure is never closed.
            InvalidValenceError: If an atom exceeds its maximum valence.
            ResourceLimitExceeded: If the input exceeds the parser bounds.
        """
        tokens = tokenize(self._smiles, self._limits, self._allow_patterns)
        state = self._state

        for token in tokens:
            kind = token.kind
            if token.is_atom:
                self._handle_atom(token)
            elif kind is TokenKind.BOND:
                self._handle_bond(token)
            elif kind is TokenKind.RING_CLOSURE:
                self._handle_ring_closure(token)
            elif kind is TokenKind.BRANCH_OPEN:
                self._handle_branch_open(token)
            elif kind is TokenKind.BRANCH_CLOSE:
                self._handle_branch_close(token)
            elif kind is TokenKind.DOT:
                self._handle_dot(token)
            state.prev_kind = kind

        self._finish()

        mol = self._builder.build(source=self._smiles)
        if not self._allow_patterns:
            self._validate_valences(mol)

        logger.debug(
            "Parsed %r: %d atoms, %d bonds", self._smiles, mol.num_atoms, mol.num_bonds
        )
        return mol

    def _error(self, message: str, position: int | None) -> SmilesSyntaxError:
        return SmilesSyntaxError(message, self._smiles, position)

    def _handle_atom(self, token: Token) -> None:
        state = self._state
        assert token.symbol is not None

        is_bracket = token.kind is TokenKind.BRACKET_ATOM
        atom_idx = self._builder.add_atom(
            token.symbol,
            charge=token.charge,
            isotope=token.isotope,
            is_aromatic=token.is_aromatic,
            explicit_hydrogens=token.hydrogens,
            category=AtomCategory.BRACKET if is_bracket else AtomCategory.ORGANIC,
            is_wildcard=token.is_wildcard,
            hydrogens_specified=token.hydrogens_specified,
        )

        if state.prev_atom is not None:
            self._add_bond(state.prev_atom, atom_idx, state.pending_bond, token.offset)

        state.prev_atom = atom_idx
        state.pending_bond = None

    def _handle_bond(self, token: Token) -> None:
        state = self._state
        if state.prev_atom is None:
            raise self._error("Bond symbol without preceding atom", token.offset)
        if state.pending_bond is not None:
            raise self._error("Consecutive bond symbols", token.offset)
        state.pending_bond = token

    def _handle_ring_closure(self, token: Token) -> None:
        state = self._state
        number = token.ring_number
        assert number is not None

        if state.prev_atom is None:
            raise self._error("Ring closure without preceding atom", token.offset)

        if number in state.open_rings:
            opened = state.open_rings.pop(number)
            bond = self._resolve_closure_bond(opened.bond, state.pending_bond, token.offset)
            if opened.atom_idx == state.prev_atom:
                raise self._error(
                    f"Ring closure {number} bonds an atom to itself", token.offset
                )
            self._add_bond(
                opened.atom_idx,
                state.prev_atom,
                bond,
                token.offset,
                is_ring_closure=True,
            )
        else:
            if len(state.open_rings) >= self._limits.max_ring_closures:
                raise ResourceLimitExceeded(
                    f"More than {self._limits.max_ring_closures} open ring closures",
                    self._smiles,
                    token.offset,
                    limit="max_ring_closures",
                    value=self._limits.max_ring_closures,
                    actual=len(state.open_rings) + 1,
                )
            state.open_rings[number] = _OpenRing(
                state.prev_atom, state.pending_bond, token.offset
            )

        state.pending_bond = None

    def _resolve_closure_bond(
        self,
        opening: Token | None,
        closing: Token | None,
        offset: int,
    ) -> Token | None:
        """Pick the bond symbol for a ring closure written at either end."""
        if opening is None:
            return closing
        if closing is None:
            return opening
        if opening.text != closing.text:
            raise self._error(
                f"Conflicting ring closure bonds '{opening.text}' and '{closing.text}'",
                offset,
            )
        return opening

    def _handle_branch_open(self, token: Token) -> None:
        state = self._state
        if state.prev_atom is None:
            raise self._error("Branch without preceding atom", token.offset)
        if state.pending_bond is not None:
            raise self._error("Bond symbol before branch", token.offset)
        if len(state.branch_stack) >= self._limits.max_branch_depth:
            raise ResourceLimitExceeded(
                f"Branch nesting deeper than {self._limits.max_branch_depth}",
                self._smiles,
                token.offset,
                limit="max_branch_depth",
                value=self._limits.max_branch_depth,
                actual=len(state.branch_stack) + 1,
            )
        state.branch_stack.append((state.prev_atom, token.offset))

    def _handle_branch_close(self, token: Token) -> None:
        state = self._state
        if not state.branch_stack:
            raise self._error("Unmatched ')'", token.offset)
        if state.prev_kind is TokenKind.BRANCH_OPEN:
            raise self._error("Empty branch", token.offset)
        if state.pending_bond is not None:
            raise self._error("Bond symbol at end of branch", token.offset)
        state.prev_atom, _ = state.branch_stack.pop()

    def _handle_dot(self, token: Token) -> None:
        state = self._state
        if state.pending_bond is not None:
            raise self._error("Bond symbol before '.'", token.offset)
        if state.branch_stack:
            raise self._error("Fragment separator inside branch", token.offset)
        state.prev_atom = None

    def _finish(self) -> None:
        """Check end-of-input conditions."""
        state = self._state
        if state.pending_bond is not None:
            raise self._error("Bond symbol at end of input", state.pending_bond.offset)
        if state.branch_stack:
            _, offset = state.branch_stack[-1]
            raise self._error("Unclosed branch '('", offset)
        if state.open_rings:
            unclosed = sorted(state.open_rings)
            first = state.open_rings[unclosed[0]]
            raise UnclosedRingError(
                f"Unclosed ring indices: {unclosed}",
                self._smiles,
                first.offset,
                ring_index=unclosed[0],
            )

    def _add_bond(
        self,
        atom1_idx: int,
        atom2_idx: int,
        bond: Token | None,
        offset: int,
        is_ring_closure: bool = False,
    ) -> None:
        """Add a bond using an explicit symbol or the default rule."""
        builder = self._builder
        if builder.has_bond(atom1_idx, atom2_idx):
            raise self._error(
                f"Atoms {atom1_idx} and {atom2_idx} are already bonded", offset
            )

        is_any = False
        if bond is None:
            # Implicit bond: aromatic between two aromatic atoms, else single
            if builder.is_aromatic(atom1_idx) and builder.is_aromatic(atom2_idx):
                order = BondOrder.AROMATIC
            else:
                order = BondOrder.SINGLE
        elif bond.bond_order is None:
            order = BondOrder.SINGLE
            is_any = True
        else:
            order = bond.bond_order

        builder.add_bond(
            atom1_idx,
            atom2_idx,
            order=order,
            is_ring_closure=is_ring_closure,
            is_any=is_any,
        )

    def _validate_valences(self, mol: Molecule) -> None:
        """Reject atoms whose bonds and hydrogens exceed the maximum valence."""
        for atom in mol.atoms:
            if atom.is_wildcard:
                continue
            atomic_num = atom.atomic_number
            allowed = max_valence(atomic_num, atom.charge)
            if allowed is None:
                continue

            actual = mol.bond_valence(atom.idx) + atom.total_hydrogens
            if (
                atom.is_aromatic
                and atom.charge == 0
                and atomic_num in _PI_VALENCE_ELEMENTS
                and not _has_multiple_bond(mol, atom.idx)
            ):
                actual += 1

            if actual > allowed:
                raise InvalidValenceError(
                    f"Atom {atom.idx} ({atom.symbol}) has valence {actual}, "
                    f"maximum is {allowed}",
                    self._smiles,
                    atom_symbol=atom.symbol,
                    atom_index=atom.idx,
                    expected_valence=allowed,
                    actual_valence=actual,
                )


def _has_multiple_bond(mol: Molecule, atom_idx: int) -> bool:
    return any(
        bond.order in (BondOrder.DOUBLE, BondOrder.TRIPLE)
        for bond in mol.atoms[atom_idx].get_bonds(mol)
    )


def parse(smiles: str, limits: ParseLimits | None = None) -> Molecule:
    """Parse a SMILES string into a Molecule.

    Args:
        smiles: SMILES string to parse.
        limits: Optional parser bounds.

    Returns:
        Parsed Molecule object.

    Raises:
        ParseError: If the SMILES is invalid (see SmilesParser.parse).

    Example:
        >>> mol = parse("CCO")
        >>> len(mol.atoms)
        3
    """
    return SmilesParser(smiles, limits).parse()


def parse_pattern(smiles: str, limits: ParseLimits | None = None) -> Molecule:
    """Parse a substructure pattern.

    Patterns use SMILES syntax plus the any bond (~); wildcard atoms (*)
    match any element, and valences are not checked.
    """
    return SmilesParser(smiles, limits, allow_patterns=True).parse()
