class CrimeMapException(Exception):
    """Base Exception Class"""
    pass
class EmptyDomainError(CrimeMapException):
    """Error for when a colour scale is built over zero incident records"""
    pass
class InvalidRangeError(CrimeMapException):
    """Error for out-of-order or out-of-bounds slider percentages and time windows"""
    pass
class UnknownCategoryError(CrimeMapException):
    """Error for a filter selection outside the declared category list"""
    pass
class ConfigError(CrimeMapException):
    """Config Error"""
    pass
