class QRError(Exception):
    '''
    Base class of every error raised while generating a symbol
    '''


class FieldOperandError(QRError, ValueError):
    '''
    Logarithm of zero in GF(256)
    '''


class PolynomialError(QRError, ValueError):
    pass


class TableLookupError(QRError, LookupError):
    '''
    No table entry (RS blocks, alignment positions, count bits) for the
    requested version / error correction level
    '''


class CapacityOverflowError(QRError, OverflowError):
    '''
    Data does not fit the version / error correction level
    '''


class ModuleIndexError(QRError, IndexError):
    pass


class UnresolvedModuleError(QRError, RuntimeError):
    '''
    Module queried before the symbol was generated
    '''
