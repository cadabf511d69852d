import logging

from Crypto.Cipher import AES
import structlog

from .errors import (EcbPrimitiveFailure, EmptyInput, InvalidCiphertextLength,
                     InvalidIVLength, InvalidPadding)
from .utils import chunk, fixed_xor

"""Block cipher modes built on a single-block (ECB) primitive.

A block cipher is any object with a block_size attribute and methods
encrypt_block(block, key) and decrypt_block(block, key), each mapping one
block_size block to another. AESBlockCipher is the default."""

log = structlog.wrap_logger(
    logging.getLogger(__name__),
    processors=[structlog.processors.KeyValueRenderer(key_order=['event'])],
    wrapper_class=structlog.stdlib.BoundLogger,
)

class AESBlockCipher(object):
    """Single-block AES, using pycryptodome in ECB mode"""

    block_size = AES.block_size

    def encrypt_block(self, block, key):
        return AES.new(key, AES.MODE_ECB).encrypt(block)

    def decrypt_block(self, block, key):
        return AES.new(key, AES.MODE_ECB).decrypt(block)

AES_BLOCK_CIPHER = AESBlockCipher()

def pad_PKCS7(unpadded, block_size=AES.block_size):
    """Pad to given block size according to PKCS#7 standard. Always adds
    between 1 and block_size bytes, a full block if already aligned."""
    if block_size < 1 or block_size > 255:
        raise ValueError('PKCS#7 block size must be 1-255 bytes')
    num_bytes_needed = block_size-len(unpadded)%block_size
    padding = bytes([num_bytes_needed]*num_bytes_needed)
    return bytes(unpadded)+padding

def unpad_PKCS7(padded, block_size=None, strict=False):
    """Unpad according to PKCS#7 standard, dropping as many bytes as the value
    of the last byte.

    The padding is not checked unless strict is True, in which case every
    padding byte must match and the count must be 1-block_size (if given),
    otherwise InvalidPadding is raised. Unchecked, a last byte larger than
    the data unpads to b'' rather than raising."""
    if len(padded) == 0:
        raise EmptyInput('cannot unpad empty data')
    last_byte = padded[-1]
    if strict:
        max_pad = len(padded) if block_size is None else min(block_size, len(padded))
        if last_byte<1 or last_byte>max_pad or set(padded[-last_byte:])!={last_byte}:
            raise InvalidPadding('Invalid PKCS#7 padding detected')
    return bytes(padded[:max(0, len(padded)-last_byte)])

def _apply_block(func, block, key, block_size):
    """Run one call of the block primitive, checking what comes back"""
    try:
        out_block = func(block, key)
    except Exception as e:
        log.error('block primitive failed', primitive=getattr(func, '__name__', repr(func)), error=str(e))
        raise EcbPrimitiveFailure('block primitive failed: {}'.format(e)) from e
    if len(out_block) != block_size:
        raise EcbPrimitiveFailure('block primitive returned {} bytes, expected {}'.format(
            len(out_block), block_size))
    return bytes(out_block)

def _check_iv(iv, block_size):
    if len(iv) != block_size:
        raise InvalidIVLength('IV must be {} bytes, got {}'.format(block_size, len(iv)))

def _check_cipher_length(cipher, block_size):
    if len(cipher) == 0 or len(cipher)%block_size != 0:
        raise InvalidCiphertextLength(
            'ciphertext must be a non-zero multiple of {} bytes, got {}'.format(
                block_size, len(cipher)))

def encrypt_CBC(plain, key, iv, block_cipher=AES_BLOCK_CIPHER):
    """Encrypt in CBC mode: pad, then encrypt each block after XORing it with
    the previous cipher-text block (the IV for the first)."""
    block_size = block_cipher.block_size
    _check_iv(iv, block_size)

    cipher = bytearray([])
    for plain_block in chunk(pad_PKCS7(plain, block_size), block_size):
        cipher_block = _apply_block(block_cipher.encrypt_block,
                                    fixed_xor(plain_block, iv), key, block_size)
        cipher += cipher_block
        iv = cipher_block
    return bytes(cipher)

def decrypt_CBC(cipher, key, iv, block_cipher=AES_BLOCK_CIPHER):
    """Decrypt in CBC mode and remove the (unchecked) PKCS#7 padding"""
    block_size = block_cipher.block_size
    _check_iv(iv, block_size)
    _check_cipher_length(cipher, block_size)

    plain = bytearray([])
    for cipher_block in chunk(cipher, block_size):
        plain_block = _apply_block(block_cipher.decrypt_block, cipher_block, key, block_size)
        plain += fixed_xor(plain_block, iv)
        iv = cipher_block
    return unpad_PKCS7(plain)

def encrypt_AES_CBC(plain, key, iv=None):
    if iv is None:
        iv = bytes([0]*AES.block_size)
    return encrypt_CBC(plain, key, iv)

def decrypt_AES_CBC(cipher, key, iv=None):
    if iv is None:
        iv = bytes([0]*AES.block_size)
    return decrypt_CBC(cipher, key, iv)

def encrypt_ECB(plain, key, block_cipher=AES_BLOCK_CIPHER, pad=True):
    """Encrypt each block independently. With pad=False the plain-text must
    already be a whole number of blocks."""
    block_size = block_cipher.block_size
    if pad:
        plain = pad_PKCS7(plain, block_size)
    elif len(plain)%block_size != 0:
        raise ValueError('unpadded plain-text must be a multiple of {} bytes'.format(block_size))
    blocks = chunk(plain, block_size)
    return b''.join([_apply_block(block_cipher.encrypt_block, x, key, block_size) for x in blocks])

def decrypt_ECB(cipher, key, block_cipher=AES_BLOCK_CIPHER, unpad=True):
    """Decrypt each block independently, removing padding unless unpad=False"""
    block_size = block_cipher.block_size
    _check_cipher_length(cipher, block_size)
    blocks = chunk(cipher, block_size)
    plain = b''.join([_apply_block(block_cipher.decrypt_block, x, key, block_size) for x in blocks])
    return unpad_PKCS7(plain) if unpad else plain

def repeated_block(data, block_size=AES.block_size):
    """Whether any block_size block occurs more than once in data.

    >>> repeated_block(b'abcabc', 2)
    False
    >>> repeated_block(b'abcabc', 3)
    True
    """
    blocks = chunk(data, block_size)
    return len(blocks) != len(set(blocks))

def detect_ECB(ciphers, block_size=AES.block_size):
    """Return the first ciphertext with a repeated block, a strong sign of
    ECB mode, or None if there isn't one."""
    for cipher in ciphers:
        if repeated_block(cipher, block_size):
            return cipher
    return None
