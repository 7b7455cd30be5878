#!/usr/bin/env python3
"""
Old Phone Keypad Decoder/Encoder

Decode strings typed on a 12-key phone keypad using the multi-tap method.
Pressing a digit N times selects the Nth letter on that key, wrapping around.

Keys:
    0-9 : letter keys (0 = space, 1 = '&')
    ' ' : pause, separates two letters on the same key
    '*' : backspace
    '#' : end of input (presses not followed by '#' are dropped)

Examples:
    # Decode
    python3 phonepad.py decode "4433555 555666#"
    # Output: HELLO

    # Decode, adding a missing end marker
    python3 phonepad.py decode --append-end "8 88777444666*664"
    # Output: TURING

    # Reject anything that is not a keypad character
    python3 phonepad.py decode --strict "2a3#"

    # Encode
    python3 phonepad.py encode "cab"
    # Output: 222 2 22#
"""

import sys
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)


# Keypad Mapping

DIGITS = '0123456789'
DIGIT_SET = frozenset(DIGITS)
SEPARATOR = ' '
BACKSPACE = '*'
END_MARKER = '#'
ALLOWED_CHARS = DIGIT_SET | {SEPARATOR, BACKSPACE, END_MARKER}

# Emitted for a key with no letters assigned
SENTINEL = '?'


def build_keypad(entries: Sequence[str]) -> Tuple[str, ...]:
    """
    Build an immutable keypad from one letter string per digit.

    Args:
        entries: Exactly 10 strings, entry N holds the letters of key N

    Returns:
        Keypad tuple usable by decode()
    """
    keypad = tuple(entries)
    if len(keypad) != len(DIGITS):
        raise ValueError(
            f"Keypad needs {len(DIGITS)} entries, got {len(keypad)}"
        )

    for digit, letters in zip(DIGITS, keypad):
        if not isinstance(letters, str):
            raise ValueError(f"Keypad entry for key '{digit}' is not a string")

    return keypad


# Index = digit pressed
KEYPAD = build_keypad((
    ' ',     # 0
    '&',     # 1
    'ABC',   # 2
    'DEF',   # 3
    'GHI',   # 4
    'JKL',   # 5
    'MNO',   # 6
    'PQRS',  # 7
    'TUV',   # 8
    'WXYZ',  # 9
))


def build_letter_map(keypad: Sequence[str] = KEYPAD) -> Dict[str, Tuple[str, int]]:
    """Build reverse mapping: character -> (key, presses)."""
    letter_map = {}
    for digit, letters in zip(DIGITS, keypad):
        for presses, letter in enumerate(letters, 1):
            letter_map.setdefault(letter, (digit, presses))
    return letter_map


LETTER_MAP = build_letter_map()


# Decoding

@dataclass(frozen=True)
class PendingGroup:
    """Run of identical digit presses not yet turned into a character."""
    digit: Optional[str] = None
    presses: int = 0

    def press(self, digit: str) -> 'PendingGroup':
        return PendingGroup(digit, self.presses + 1)


IDLE = PendingGroup()


def commit_group(output: List[str], group: PendingGroup,
                 keypad: Sequence[str] = KEYPAD) -> PendingGroup:
    """
    Resolve a pending group to a character and append it to output.

    Returns the cleared group.
    """
    if group.presses == 0 or group.digit is None:
        return IDLE

    letters = keypad[DIGITS.index(group.digit)]
    if letters:
        # Press count is 1-based and wraps around the key's letters
        output.append(letters[(group.presses - 1) % len(letters)])
    else:
        output.append(SENTINEL)
        logger.warning("Mapping for key '%s' is empty", group.digit)

    return IDLE


def decode(sequence: Optional[str], keypad: Sequence[str] = KEYPAD) -> str:
    """
    Decode a keypad sequence to text.

    Characters outside the keypad alphabet are ignored. Presses still
    pending when the input ends without '#' are dropped.
    """
    if not sequence:
        logger.debug("Empty keypad sequence")
        return ''

    try:
        output: List[str] = []
        group = IDLE

        for char in sequence:
            if char in DIGIT_SET:
                if group.digit is not None and group.digit != char:
                    group = commit_group(output, group, keypad)
                group = group.press(char)

            elif char == SEPARATOR:
                group = commit_group(output, group, keypad)

            elif char == BACKSPACE:
                group = commit_group(output, group, keypad)
                if output:
                    output.pop()

            elif char == END_MARKER:
                commit_group(output, group, keypad)
                break

        return ''.join(output)

    except Exception:
        logger.exception("Unhandled error while decoding keypad input: %r", sequence)
        raise


# Input Checks

def find_invalid_chars(sequence: Optional[str]) -> List[str]:
    """Return distinct non-keypad characters in order of first appearance."""
    invalid = []
    for char in sequence or '':
        if char not in ALLOWED_CHARS and char not in invalid:
            invalid.append(char)
    return invalid


def classify_input(sequence: Optional[str]) -> Dict[str, int]:
    """Count digits, pauses, backspaces and end markers."""
    sequence = sequence or ''
    return {
        'digits': sum(1 for c in sequence if c in DIGIT_SET),
        'spaces': sequence.count(SEPARATOR),
        'backspaces': sequence.count(BACKSPACE),
        'ends': sequence.count(END_MARKER),
    }


def ensure_end_marker(sequence: str) -> str:
    """Append '#' unless the sequence already contains one."""
    if END_MARKER in sequence:
        return sequence
    return sequence + END_MARKER


# Encoding

def encode_char(char: str, letter_map: Dict[str, Tuple[str, int]] = LETTER_MAP) -> str:
    """Encode single character to its run of presses ('e' -> '33')."""
    target = char if char in letter_map else char.upper()
    if target not in letter_map:
        raise ValueError(f"Unsupported character: '{char}'")

    key, presses = letter_map[target]
    return key * presses


def encode(text: str, letter_map: Dict[str, Tuple[str, int]] = LETTER_MAP) -> str:
    """
    Encode text to a keypad sequence ending in '#'.

    Letters on the same key as the previous one get a pause in between.
    """
    parts = []
    previous_key = None

    for char in text:
        presses = encode_char(char, letter_map)
        if presses[0] == previous_key:
            parts.append(SEPARATOR)
        parts.append(presses)
        previous_key = presses[0]

    parts.append(END_MARKER)
    return ''.join(parts)


# File I/O

def read_input(path: str) -> str:
    """Read input from file or stdin."""
    if path == '-':
        return sys.stdin.read().rstrip('\r\n')

    try:
        return Path(path).read_text(encoding='utf-8').rstrip('\r\n')
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    except UnicodeDecodeError:
        print(f"Error: Invalid UTF-8 encoding: {path}", file=sys.stderr)
        sys.exit(1)


def write_output(content: str, path: Optional[str]) -> None:
    """Write output to file or stdout."""
    if path:
        try:
            Path(path).write_text(content + '\n', encoding='utf-8')
            print(f"Saved: {path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing file: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(content)


def run_decode(sequence: str, strict: bool = False, append_end: bool = False) -> str:
    """Check a sequence the way the command line does, then decode it."""
    if not sequence:
        print("Warning: empty input, nothing to decode", file=sys.stderr)
        return ''

    invalid = find_invalid_chars(sequence)
    if invalid:
        logger.warning("Input has invalid characters: %s", ', '.join(invalid))
        if strict:
            listed = ', '.join(f"'{c}'" for c in invalid)
            raise ValueError(f"Invalid character(s) in input: {listed}")

    if END_MARKER not in sequence:
        if append_end:
            sequence = ensure_end_marker(sequence)
            logger.info("Appended end marker, new input: %r", sequence)
            print(f'Updated input: "{sequence}"', file=sys.stderr)
        else:
            print(f"Warning: no end marker '{END_MARKER}', pending presses "
                  "will be dropped", file=sys.stderr)

    logger.debug("Input summary: %s", classify_input(sequence))

    result = decode(sequence)
    logger.info("Decoded %r -> %r", sequence, result)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Old phone keypad multi-tap decoder/encoder',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose logging')

    subparsers = parser.add_subparsers(dest='command', required=True,
                                       help='Operation mode')

    # Decode command
    decode_parser = subparsers.add_parser('decode',
                                          help='Decode keypad presses to text')
    decode_parser.add_argument('sequence', nargs='?',
                               help='Sequence to decode (or use -i for file)')
    decode_parser.add_argument('-i', '--input',
                               help='Input file (use - for stdin)')
    decode_parser.add_argument('-o', '--output',
                               help='Output file (default: stdout)')
    decode_parser.add_argument('--strict', action='store_true',
                               help='Reject characters other than 0-9, space, * and #')
    decode_parser.add_argument('--append-end', action='store_true',
                               help="Append '#' when it is missing")

    # Encode command
    encode_parser = subparsers.add_parser('encode',
                                          help='Encode text to keypad presses')
    encode_parser.add_argument('text', nargs='?',
                               help='Text to encode (or use -i for file)')
    encode_parser.add_argument('-i', '--input',
                               help='Input file (use - for stdin)')
    encode_parser.add_argument('-o', '--output',
                               help='Output file (default: stdout)')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        if args.command == 'decode':
            if args.input:
                input_data = read_input(args.input)
            elif args.sequence is not None:
                input_data = args.sequence
            else:
                parser.error('Provide sequence or use -i for file input')

            result = run_decode(input_data, args.strict, args.append_end)

        else:  # encode
            if args.input:
                input_data = read_input(args.input)
            elif args.text is not None:
                input_data = args.text
            else:
                parser.error('Provide text or use -i for file input')

            result = encode(input_data)

        write_output(result, args.output)

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
