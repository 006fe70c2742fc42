"""
SMILES tokenizer.

Lexes SMILES text into a flat list of tokens. Tokenizing is
all-or-nothing: either the complete token list is returned or an
exception pointing at the offending character is raised.

Token kinds:
    - Bracket atoms ``[13CH3+]`` with isotope, element, hydrogens and charge
    - Organic-subset atoms (B, C, N, O, P, S, F, Cl, Br, I and aromatic b c n o p s)
    - Wildcard atoms ``*``
    - Bond symbols ``- = # :`` (``/`` and ``\\`` read as single bonds)
    - Ring closures ``1``..``9`` and ``%nn``
    - Branch open/close ``(`` ``)`` and the fragment separator ``.``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final

from smilesgraph.config import DEFAULT_PARSE_LIMITS, ParseLimits
from smilesgraph.elements import (
    AROMATIC_ORGANIC_SUBSET,
    BOND_SYMBOL_ORDERS,
    ORGANIC_SUBSET,
    TWO_LETTER_ORGANIC,
    BondOrder,
    is_known_element,
)
from smilesgraph.exceptions import (
    InvalidAtomSymbolError,
    ResourceLimitExceeded,
    UnbalancedBracketError,
    UnexpectedCharacterError,
    UnknownElementError,
)

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    """Closed set of token kinds."""

    BRACKET_ATOM = "bracket_atom"
    ORGANIC_ATOM = "organic_atom"
    BOND = "bond"
    RING_CLOSURE = "ring_closure"
    BRANCH_OPEN = "branch_open"
    BRANCH_CLOSE = "branch_close"
    DOT = "dot"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexical unit of SMILES text.

    Attributes:
        kind: Token kind.
        text: The exact source text of the token.
        offset: Character offset of the token's first character.
        symbol: Atom symbol (atoms only); lower case when aromatic.
        is_aromatic: Aromatic atom flag (atoms only).
        isotope: Mass number (bracket atoms only).
        charge: Formal charge (bracket atoms only).
        hydrogens: Hydrogen count (bracket atoms only).
        hydrogens_specified: Whether an H count was written in the bracket.
        is_wildcard: Wildcard atom ``*``.
        bond_order: Bond order (bond tokens only); None for the ``~`` any-bond.
        ring_number: Closure number (ring closure tokens only).
    """

    kind: TokenKind
    text: str
    offset: int
    symbol: str | None = None
    is_aromatic: bool = False
    isotope: int | None = None
    charge: int = 0
    hydrogens: int = 0
    hydrogens_specified: bool = False
    is_wildcard: bool = False
    bond_order: BondOrder | None = None
    ring_number: int | None = None

    @property
    def is_atom(self) -> bool:
        return self.kind in (TokenKind.BRACKET_ATOM, TokenKind.ORGANIC_ATOM)


# Lower case aromatic symbols accepted inside brackets, longest first
_BRACKET_AROMATIC: Final[tuple[str, ...]] = ("se", "as", "b", "c", "n", "o", "p", "s")

_SINGLE_CHAR_TOKENS: Final[dict[str, TokenKind]] = {
    "(": TokenKind.BRANCH_OPEN,
    ")": TokenKind.BRANCH_CLOSE,
    ".": TokenKind.DOT,
}


class _Scanner:
    """Character cursor over a SMILES string with lookahead."""

    __slots__ = ("_string", "_pos")

    def __init__(self, string: str) -> None:
        self._string = string
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def peek(self, offset: int = 0) -> str | None:
        """Character at current position + offset, or None past the end."""
        pos = self._pos + offset
        if pos >= len(self._string):
            return None
        return self._string[pos]

    def next(self) -> str | None:
        """Consume and return the next character."""
        if self._pos >= len(self._string):
            return None
        char = self._string[self._pos]
        self._pos += 1
        return char

    def read_number(self) -> int | None:
        """Read and return an integer, or None if no digits present."""
        start = self._pos
        while self._pos < len(self._string) and self._string[self._pos].isdigit():
            self._pos += 1
        digits = self._string[start:self._pos]
        return int(digits) if digits else None

    def is_eof(self) -> bool:
        return self._pos >= len(self._string)


class SmilesTokenizer:
    """Converts SMILES text into tokens.

    Args:
        smiles: Text to tokenize.
        limits: Parser bounds; only ``max_length`` applies here.
        allow_patterns: Accept the ``~`` any-bond used in substructure patterns.

    Example:
        >>> [t.kind.value for t in SmilesTokenizer("C=O").tokenize()]
        ['organic_atom', 'bond', 'organic_atom']
    """

    def __init__(
        self,
        smiles: str,
        limits: ParseLimits | None = None,
        allow_patterns: bool = False,
    ) -> None:
        self._smiles = smiles
        self._limits = limits or DEFAULT_PARSE_LIMITS
        self._allow_patterns = allow_patterns
        self._scanner = _Scanner(smiles)

    def tokenize(self) -> list[Token]:
        """Tokenize the whole input.

        Raises:
            ResourceLimitExceeded: If the input is longer than allowed.
            UnbalancedBracketError: On an unmatched '[' or ']'.
            InvalidAtomSymbolError: On atom text that is not a valid symbol.
            UnexpectedCharacterError: On any other unexpected character.
        """
        if len(self._smiles) > self._limits.max_length:
            raise ResourceLimitExceeded(
                f"Input length {len(self._smiles)} exceeds maximum of "
                f"{self._limits.max_length} characters",
                position=self._limits.max_length,
                limit="max_length",
                value=self._limits.max_length,
                actual=len(self._smiles),
            )

        tokens: list[Token] = []
        scan = self._scanner

        while not scan.is_eof():
            char = scan.peek()
            start = scan.position

            if char in _SINGLE_CHAR_TOKENS:
                scan.next()
                tokens.append(Token(_SINGLE_CHAR_TOKENS[char], char, start))
            elif char == "[":
                tokens.append(self._read_bracket_atom())
            elif char == "]":
                raise UnbalancedBracketError(
                    "Unmatched ']'", self._smiles, start
                )
            elif char in BOND_SYMBOL_ORDERS:
                scan.next()
                tokens.append(Token(
                    TokenKind.BOND, char, start, bond_order=BOND_SYMBOL_ORDERS[char]
                ))
            elif char == "~" and self._allow_patterns:
                scan.next()
                tokens.append(Token(TokenKind.BOND, char, start))
            elif char.isdigit():
                scan.next()
                tokens.append(Token(
                    TokenKind.RING_CLOSURE, char, start, ring_number=int(char)
                ))
            elif char == "%":
                tokens.append(self._read_two_digit_closure())
            elif char == "*":
                scan.next()
                tokens.append(Token(
                    TokenKind.ORGANIC_ATOM, char, start, symbol="*", is_wildcard=True
                ))
            elif char.isalpha():
                tokens.append(self._read_organic_atom())
            else:
                raise UnexpectedCharacterError(
                    f"Unexpected character: '{char}'", self._smiles, start
                )

        logger.debug("Tokenized %d characters into %d tokens", len(self._smiles), len(tokens))
        return tokens

    def _read_two_digit_closure(self) -> Token:
        """Read a ``%nn`` ring closure."""
        scan = self._scanner
        start = scan.position
        d1 = scan.peek(1)
        d2 = scan.peek(2)
        if not (d1 and d1.isdigit() and d2 and d2.isdigit()):
            raise UnexpectedCharacterError(
                "Expected two digits after '%'", self._smiles, start
            )
        scan.next()
        scan.next()
        scan.next()
        return Token(
            TokenKind.RING_CLOSURE, f"%{d1}{d2}", start, ring_number=int(d1 + d2)
        )

    def _read_organic_atom(self) -> Token:
        """Read an atom written outside brackets."""
        scan = self._scanner
        start = scan.position
        char1 = scan.next()
        assert char1 is not None

        char2 = scan.peek()
        if char2 is not None and char1 + char2 in TWO_LETTER_ORGANIC:
            scan.next()
            symbol = char1 + char2
            return Token(TokenKind.ORGANIC_ATOM, symbol, start, symbol=symbol)

        if char1 in ORGANIC_SUBSET:
            return Token(TokenKind.ORGANIC_ATOM, char1, start, symbol=char1)

        if char1 in AROMATIC_ORGANIC_SUBSET:
            return Token(
                TokenKind.ORGANIC_ATOM, char1, start, symbol=char1, is_aromatic=True
            )

        raise InvalidAtomSymbolError(
            f"Invalid atom symbol '{char1}' outside brackets",
            self._smiles,
            start,
            symbol=char1,
        )

    def _read_bracket_atom(self) -> Token:
        """Read a bracket atom ``[isotope symbol chirality H charge :class]``.

        Chirality and atom class are accepted and discarded.
        """
        scan = self._scanner
        start = scan.position
        closing = self._smiles.find("]", start + 1)
        nested = self._smiles.find("[", start + 1)
        if closing == -1 or (nested != -1 and nested < closing):
            raise UnbalancedBracketError("Unmatched '['", self._smiles, start)

        scan.next()  # consume '['
        isotope = scan.read_number()

        symbol, is_aromatic, is_wildcard = self._read_bracket_symbol()

        # Chirality markers (@, @@) are parsed and dropped
        while scan.peek() == "@":
            scan.next()

        hydrogens = 0
        hydrogens_specified = False
        if scan.peek() == "H":
            scan.next()
            count = scan.read_number()
            hydrogens = 1 if count is None else count
            hydrogens_specified = True

        charge = self._read_charge()

        if scan.peek() == ":":
            scan.next()
            if scan.read_number() is None:
                raise UnexpectedCharacterError(
                    "Expected atom class number after ':'",
                    self._smiles,
                    scan.position,
                )

        if scan.peek() != "]":
            raise UnexpectedCharacterError(
                f"Unexpected character in bracket atom: '{scan.peek()}'",
                self._smiles,
                scan.position,
            )
        scan.next()  # consume ']'

        return Token(
            TokenKind.BRACKET_ATOM,
            self._smiles[start:scan.position],
            start,
            symbol=symbol,
            is_aromatic=is_aromatic,
            isotope=isotope,
            charge=charge,
            hydrogens=hydrogens,
            hydrogens_specified=hydrogens_specified,
            is_wildcard=is_wildcard,
        )

    def _read_bracket_symbol(self) -> tuple[str, bool, bool]:
        """Read the element part of a bracket atom.

        Returns:
            Tuple of (symbol, is_aromatic, is_wildcard).
        """
        scan = self._scanner
        start = scan.position
        char1 = scan.peek()

        if char1 == "*":
            scan.next()
            return "*", False, True

        if char1 is None or not char1.isalpha():
            raise InvalidAtomSymbolError(
                "Expected element symbol in bracket atom",
                self._smiles,
                start,
            )

        if char1.islower():
            for candidate in _BRACKET_AROMATIC:
                if self._smiles.startswith(candidate, start):
                    for _ in candidate:
                        scan.next()
                    return candidate, True, False
            raise UnknownElementError(
                f"Unknown aromatic element '{char1}'",
                self._smiles,
                start,
                symbol=char1,
            )

        scan.next()
        char2 = scan.peek()
        # No lower case letter can follow an element symbol inside brackets
        if char2 is not None and char2.islower():
            text = char1 + char2
            if is_known_element(text):
                scan.next()
                return text, False, False
        else:
            text = char1
            if is_known_element(text):
                return text, False, False

        raise UnknownElementError(
            f"Unknown element '{text}'", self._smiles, start, symbol=text
        )

    def _read_charge(self) -> int:
        """Read an optional charge (+, -, ++, --, +2, -3)."""
        scan = self._scanner
        char = scan.peek()
        if char not in ("+", "-"):
            return 0

        sign = 1 if char == "+" else -1
        count = 0
        while scan.peek() == char:
            scan.next()
            count += 1

        num = scan.read_number()
        if num is not None:
            if count > 1:
                raise UnexpectedCharacterError(
                    "Charge cannot combine repeated signs and a number",
                    self._smiles,
                    scan.position,
                )
            return sign * num
        return sign * count


def tokenize(
    smiles: str,
    limits: ParseLimits | None = None,
    allow_patterns: bool = False,
) -> list[Token]:
    """Tokenize SMILES text.

    This is a convenience function that creates a SmilesTokenizer and calls
    tokenize().

    Example:
        >>> [t.text for t in tokenize("C1CC1")]
        ['C', '1', 'C', 'C', '1']
    """
    return SmilesTokenizer(smiles, limits, allow_patterns).tokenize()
