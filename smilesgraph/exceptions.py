"""
Custom exceptions for smilesgraph.

This module defines a hierarchy of exceptions for handling chemistry-related
errors in a structured way. Every failure raised while turning text into a
Molecule derives from ParseError.
"""

from __future__ import annotations


class ChemError(Exception):
    """Base exception for all chemistry-related errors."""

    pass


class ParseError(ChemError):
    """Error during SMILES parsing.

    Attributes:
        position: Character position in the SMILES string where error occurred.
        smiles: The SMILES string being parsed.
        message: Description of what went wrong.
    """

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        position: int | None = None,
    ) -> None:
        self.message = message
        self.smiles = smiles
        self.position = position

        parts = [message]
        if smiles is not None and position is not None:
            parts.append(f"\n  {smiles}")
            parts.append(f"\n  {' ' * position}^")
        elif smiles is not None:
            parts.append(f" in: {smiles}")

        super().__init__("".join(parts))


class SmilesSyntaxError(ParseError):
    """Malformed SMILES text.

    Attributes:
        offset: Character offset of the offending input (alias of position).
        reason: Short description of the problem (alias of message).
    """

    @property
    def offset(self) -> int | None:
        return self.position

    @property
    def reason(self) -> str:
        return self.message


class UnbalancedBracketError(SmilesSyntaxError):
    """Unmatched '[' or ']'."""

    pass


class UnexpectedCharacterError(SmilesSyntaxError):
    """Character that cannot start any token."""

    pass


class InvalidAtomSymbolError(SmilesSyntaxError):
    """Atom text that is not a valid atom symbol in its context."""

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        position: int | None = None,
        symbol: str | None = None,
    ) -> None:
        self.symbol = symbol
        super().__init__(message, smiles, position)


class UnknownElementError(InvalidAtomSymbolError):
    """Bracket atom naming an element that is not in the periodic table."""

    pass


class RingError(ParseError):
    """Error related to ring handling in SMILES.

    Attributes:
        ring_index: The problematic ring closure index.
    """

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        position: int | None = None,
        ring_index: int | None = None,
    ) -> None:
        self.ring_index = ring_index
        super().__init__(message, smiles, position)


class UnclosedRingError(RingError):
    """Ring closure opened but never closed."""

    pass


class ResourceLimitExceeded(ParseError):
    """Input exceeds a configured parser bound.

    Attributes:
        limit: Name of the exceeded bound.
        value: The configured maximum.
        actual: The size the input reached (length, depth or count).
    """

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        position: int | None = None,
        limit: str | None = None,
        value: int | None = None,
        actual: int | None = None,
    ) -> None:
        self.limit = limit
        self.value = value
        self.actual = actual
        super().__init__(message, smiles, position)


class PatternParseError(ParseError):
    """A substructure pattern could not be parsed.

    The underlying parse failure is available as ``__cause__``.
    """

    pass


class ValenceError(ChemError):
    """Error related to invalid valence or bonding.

    Attributes:
        atom_symbol: The element symbol of the problematic atom.
        atom_index: Index of the problematic atom.
        expected_valence: The maximum allowed valence.
        actual_valence: The valence found.
    """

    def __init__(
        self,
        message: str,
        atom_symbol: str | None = None,
        atom_index: int | None = None,
        expected_valence: int | None = None,
        actual_valence: int | None = None,
    ) -> None:
        self.message = message
        self.atom_symbol = atom_symbol
        self.atom_index = atom_index
        self.expected_valence = expected_valence
        self.actual_valence = actual_valence
        super().__init__(message)


class InvalidValenceError(ParseError, ValenceError):
    """Parsed atom whose bonds and hydrogens exceed its maximum valence."""

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        atom_symbol: str | None = None,
        atom_index: int | None = None,
        expected_valence: int | None = None,
        actual_valence: int | None = None,
    ) -> None:
        # ParseError.__init__ chains into ValenceError.__init__ via the MRO
        ParseError.__init__(self, message, smiles)
        self.message = message
        self.atom_symbol = atom_symbol
        self.atom_index = atom_index
        self.expected_valence = expected_valence
        self.actual_valence = actual_valence
