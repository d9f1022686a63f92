'''
Custom exception classes, for finer grained error handling
'''


class GolombException(Exception):
    '''Parent class for all our exceptions'''
    pass


class InvalidRulerError(GolombException, ValueError):
    '''Raised when ruler positions violate the ruler invariants (count, first/last mark, ordering)'''
    pass

class InvalidSearchError(GolombException, ValueError):
    '''Raised when the number of marks or the target length of a search is out of range'''
    pass

class NotSupportedError(GolombException):
    '''Raised when a solver backend is not installed or an option value is not supported'''
    pass
