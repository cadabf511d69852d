"""Exceptions raised for invalid input. All of them are ValueErrors, so code
catching ValueError for bad input keeps working."""

class MatasanoError(ValueError):
    pass

class LengthMismatch(MatasanoError):
    """Operands of a fixed-length operation differ in length"""

class EmptyInput(MatasanoError):
    pass

class KeysizeTooLarge(MatasanoError):
    """Message too short to hold two blocks of a candidate keysize"""

class InvalidIVLength(MatasanoError):
    pass

class InvalidCiphertextLength(MatasanoError):
    """Ciphertext is empty or not a whole number of blocks"""

class InvalidPadding(MatasanoError):
    pass

class EcbPrimitiveFailure(MatasanoError):
    """The injected block cipher raised, or returned a block of the wrong size"""
