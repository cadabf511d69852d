import base64
from itertools import cycle
from secrets import token_bytes

from Crypto.Cipher import AES

from .errors import EmptyInput, LengthMismatch

def fixed_xor(bytes_1, bytes_2):
    """XOR two byte-likes of equal length"""
    if len(bytes_1) != len(bytes_2):
        raise LengthMismatch('cannot XOR {} bytes with {} bytes'.format(
            len(bytes_1), len(bytes_2)))
    return bytes([x^y for x, y in zip(bytes_1, bytes_2)])

def repeating_xor(key, message):
    """XOR a message with a key cycled to the message length. Applying it
    twice with the same key gives back the message."""
    if len(key) == 0:
        raise EmptyInput('repeating XOR key must not be empty')
    return bytes([x^y for x, y in zip(message, cycle(key))])

def hamming_weight(value):
    """Number of set bits in a byte-like or a non-negative integer"""
    if isinstance(value, int):
        if value < 0:
            raise ValueError('Hamming weight is only defined for non-negative integers')
        return bin(value).count('1')
    return sum([bin(x).count('1') for x in value])

def hamming_distance(bytes_1, bytes_2):
    """Number of differing bits between two byte-likes of equal length"""
    return hamming_weight(fixed_xor(bytes_1, bytes_2))

def chunk(data, n):
    """Split byte-like into consecutive blocks of exactly n bytes. A trailing
    partial block is dropped, so len(result) == len(data)//n."""
    if n < 1:
        raise ValueError('chunk size must be at least 1')
    return [bytes(data[x*n:(x+1)*n]) for x in range(len(data)//n)]

def transpose(rows):
    """Columns of a list of equal-length rows, each column as bytes. The n-th
    column holds the n-th byte of every row."""
    if len({len(row) for row in rows}) > 1:
        raise LengthMismatch('cannot transpose rows of unequal length')
    return [bytes(column) for column in zip(*rows)]

def average(values):
    values = list(values)
    if not values:
        raise EmptyInput('cannot average an empty sequence')
    return sum(values)/len(values)

def hex_to_bytes(hex_string):
    return bytes.fromhex(hex_string)

def bytes_to_hex(in_bytes):
    return bytes.hex(in_bytes)

def base64_to_bytes(base64_string):
    return bytes(base64.b64decode(base64_string))

def bytes_to_base64(in_bytes):
    return base64.b64encode(in_bytes).decode('utf-8')

def hex_to_base64(hex_string):
    return bytes_to_base64(hex_to_bytes(hex_string))

def read_base64(file_path):
    """Read a whole base64 file, ignoring line breaks"""
    with open(file_path, 'r') as f:
        encoded = f.read().replace('\n', '')
    return base64_to_bytes(encoded)

def read_hex_lines(file_path):
    """Read a file of hex strings, one decoded byte string per non-empty line"""
    with open(file_path, 'r') as f:
        return [hex_to_bytes(line.strip()) for line in f if line.strip()]

def read_utf8(file_path):
    with open(file_path, 'r') as f:
        return bytes(f.read(), 'utf-8')

def random_bytes(count=AES.block_size):
    return token_bytes(count)
