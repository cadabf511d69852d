from concurrent.futures import ThreadPoolExecutor
from functools import partial
import logging
from operator import itemgetter

import structlog

from .errors import EmptyInput, KeysizeTooLarge
from .language import ENGLISH_DISTRIBUTION, language_score
from .utils import average, chunk, hamming_distance, repeating_xor, transpose

"""Substitution ciphers (single-byte and repeating-key XOR)"""

log = structlog.wrap_logger(
    logging.getLogger(__name__),
    processors=[structlog.processors.KeyValueRenderer(key_order=['event'])],
    wrapper_class=structlog.stdlib.BoundLogger,
)

SINGLE_BYTES = tuple(bytes([x]) for x in range(256))
DEFAULT_KEYSIZES = range(2, 41)

def xor_score(key, cipher, distribution=ENGLISH_DISTRIBUTION):
    """Decrypt with a (repeating) XOR key and score the result.

    Returns:
        key (bytes-like): The key tried
        plain (bytes): Decrypted plain-text
        score (float): Language score of the plain-text
    """
    plain = repeating_xor(key, cipher)
    return (key, plain, language_score(plain, distribution))

def best_xor_score(cipher, candidates=SINGLE_BYTES, distribution=ENGLISH_DISTRIBUTION):
    """Try every candidate key and return the (key, plain, score) triple with
    the highest score. The first of several equal scores wins."""
    scores = [xor_score(key, cipher, distribution) for key in candidates]
    if not scores:
        raise EmptyInput('no candidate keys to try')
    return max(scores, key=itemgetter(2))

def decrypt_single_byte_xor(cipher):
    """Brute-force decrypt English text encrypted with single-byte XOR"""
    _, plain, _ = best_xor_score(cipher)
    return plain

def detect_single_byte_xor(ciphers, max_workers=None):
    """Find which of many ciphertexts was encrypted with single-byte XOR, and
    return its plain-text. Each ciphertext is broken independently on a
    thread pool; the best score over all of them wins, earlier ciphertexts
    winning ties."""
    ciphers = list(ciphers)
    if not ciphers:
        raise EmptyInput('no ciphertexts to search')
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(best_xor_score, ciphers))
    index = max(range(len(results)), key=lambda x: results[x][2])
    key, plain, score = results[index]
    log.debug('detected single-byte XOR', index=index, key=key.hex(), score=score)
    return plain

def _normalized_hamming_distance(message, key_size):
    """Average Hamming distance between consecutive pairs of key-sized blocks
    (1st with 2nd, 3rd with 4th, ...), per byte of key"""
    blocks = chunk(message, key_size)
    pairs = zip(blocks[0::2], blocks[1::2])
    return average([hamming_distance(x, y) for x, y in pairs])/key_size

def guess_keysize(message, keysizes=DEFAULT_KEYSIZES):
    """Guess key size for repeating-key XOR as the candidate with the lowest
    normalized Hamming distance between blocks of the ciphertext. Raises
    KeysizeTooLarge if the message can't hold two blocks of every candidate."""
    keysizes = list(keysizes)
    if not keysizes:
        raise EmptyInput('no candidate key sizes to try')
    for size in keysizes:
        if len(message) < 2*size:
            raise KeysizeTooLarge('{} bytes is too short for key size {}'.format(
                len(message), size))
    return min(keysizes, key=partial(_normalized_hamming_distance, message))

def key_parts(message, key_size):
    """Split message into key-sized blocks and transpose, so that the n-th
    part holds every byte XORed with the n-th key byte.

    >>> key_parts(b'abcabcabc', 3)
    [b'aaa', b'bbb', b'ccc']
    """
    return transpose(chunk(message, key_size))

def _best_single_byte_key(part):
    key, _, _ = best_xor_score(part)
    return key

def break_repeating_key_xor(cipher, keysizes=DEFAULT_KEYSIZES, max_workers=None):
    """Recover the key of English text encrypted with repeating-key XOR.

    Args:
        cipher (bytes-like): Encrypted text.
        keysizes (iterable of int, optional): Key sizes to consider.
        max_workers (int, optional): Thread pool size for the per-byte search.
    Returns:
        key (bytes): Most likely key
    """
    key_size = guess_keysize(cipher, keysizes)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        key = b''.join(executor.map(_best_single_byte_key, key_parts(cipher, key_size)))
    log.debug('recovered repeating XOR key', key_size=key_size, key=key.hex())
    return key

def decrypt_repeating_key_xor(cipher, keysizes=DEFAULT_KEYSIZES, max_workers=None):
    """Decrypt text encoded with repeating-key XOR (Vigenere cipher).

    Returns:
        plain (bytes): Decrypted plain-text
        key (bytes): Decryption key
    """
    key = break_repeating_key_xor(cipher, keysizes=keysizes, max_workers=max_workers)
    return (repeating_xor(key, cipher), key)
